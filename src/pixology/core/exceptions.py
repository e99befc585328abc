"""
业务异常定义

所有对外可见的错误都收敛为以下几类，消息保持通用，
上游的详细错误只写日志，不透传给调用方。
"""


class PixologyError(Exception):
    """业务异常基类"""

    status_code: int = 500
    default_message: str = "服务内部错误"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(PixologyError):
    """请求参数不合法（进入编排之前拒绝）"""

    status_code = 400
    default_message = "请求参数校验失败"


class QuotaExceeded(PixologyError):
    """当日生图配额已用完"""

    status_code = 429
    default_message = "今日生图次数已达上限，请明天再试"


class UpstreamGenerationFailure(PixologyError):
    """生图模型没有返回可用结果"""

    status_code = 502
    default_message = "图片生成失败，请稍后重试"


class StorageFailure(PixologyError):
    """图片文件无法持久化"""

    status_code = 502
    default_message = "图片保存失败，请稍后重试"


class OrchestrationFailure(PixologyError):
    """图片已生成并保存，但最终记录写入失败"""

    status_code = 500
    default_message = "图片生成失败，请稍后重试"


class PersistenceFailure(PixologyError):
    """记录读写失败"""

    status_code = 500
    default_message = "记录读写失败"


class RecordNotFound(PixologyError):
    status_code = 404
    default_message = "图片记录不存在"


class Forbidden(PixologyError):
    status_code = 403
    default_message = "无权访问该图片"
