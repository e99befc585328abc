"""
图片存储服务 - 基于 S3 兼容对象存储（MinIO 客户端）
"""
import base64
import binascii
import logging
import mimetypes
import re
import uuid
from datetime import datetime
from io import BytesIO
from pathlib import PurePosixPath
from typing import Optional, Union
from urllib.parse import quote

from minio import Minio

from pixology.core import get_settings
from pixology.core.exceptions import StorageFailure
from pixology.models.generation import ArtifactRef

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/png"

_DATA_URL_PATTERN = re.compile(r"^data:([^;]+);base64,(.+)$", re.DOTALL)


def decode_image_payload(
    payload: Union[bytes, str],
    mime_type: Optional[str] = None,
) -> tuple[bytes, str]:
    """
    解析图片数据

    - bytes：原样返回
    - "data:<mime>;base64,<data>"：按前缀取 MIME 类型并解码
    - 其他字符串：按裸 base64 解码，MIME 类型默认 image/png

    Raises:
        ValueError: base64 数据不合法
    """
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload), mime_type or DEFAULT_MIME_TYPE

    content = payload
    if payload.startswith("data:"):
        match = _DATA_URL_PATTERN.match(payload)
        if match:
            mime_type = match.group(1) or DEFAULT_MIME_TYPE
            content = match.group(2)

    # 换行或首尾空白不影响解码
    content = "".join(content.split())

    try:
        data = base64.b64decode(content, validate=True)
    except binascii.Error as e:
        raise ValueError("图片数据不是合法的 base64") from e
    return data, mime_type or DEFAULT_MIME_TYPE


def _extension_for(suggested_name: str, mime_type: str) -> str:
    suffix = PurePosixPath(suggested_name).suffix
    if suffix:
        return suffix
    return mimetypes.guess_extension(mime_type) or ".png"


class ArtifactStore:
    """
    图片文件存储

    路径格式: users/{user_id}/images/{uuid}{ext}，对象设为公开可读
    """

    def __init__(
        self,
        client: Optional[Minio] = None,
        bucket: Optional[str] = None,
        public_url_base: Optional[str] = None,
    ):
        settings = get_settings()
        self.client = client or Minio(
            settings.storage_endpoint,
            access_key=settings.storage_access_key,
            secret_key=settings.storage_secret_key,
            secure=settings.storage_secure,
        )
        self.bucket = bucket or settings.storage_bucket
        self.public_url_base = public_url_base or settings.storage_public_url_base

    def ensure_bucket(self) -> None:
        """存储桶不存在时创建"""
        try:
            if not self.client.bucket_exists(self.bucket):
                self.client.make_bucket(self.bucket)
                logger.info(f"已创建存储桶: {self.bucket}")
        except Exception as e:
            # 存储不可用时不阻止服务启动，上传时再报 StorageFailure
            logger.error(f"检查存储桶失败: {e}")

    def public_url(self, path: str) -> str:
        return f"{self.public_url_base}{path}"

    def put(
        self,
        payload: Union[bytes, str],
        user_id: str,
        suggested_name: str,
        metadata: Optional[dict[str, str]] = None,
        mime_type: Optional[str] = None,
    ) -> ArtifactRef:
        """
        保存图片

        Args:
            payload: 原始字节或 data URL / base64 字符串
            user_id: 所属用户ID
            suggested_name: 建议文件名（只取扩展名）
            metadata: 附加元数据
            mime_type: 已知的 MIME 类型

        Returns:
            ArtifactRef

        Raises:
            StorageFailure: 解码或上传失败
        """
        try:
            data, resolved_mime = decode_image_payload(payload, mime_type)
        except ValueError as e:
            logger.error(f"图片数据解码失败: user_id={user_id}, error={e}")
            raise StorageFailure() from e

        unique_name = f"{uuid.uuid4()}{_extension_for(suggested_name, resolved_mime)}"
        path = f"users/{user_id}/images/{unique_name}"

        # 元数据需要能放进 HTTP 头，非 ASCII 内容做 URL 编码
        object_metadata = {
            "x-amz-acl": "public-read",
            "user-id": quote(user_id),
            "uploaded-at": datetime.now().isoformat(),
        }
        for key, value in (metadata or {}).items():
            object_metadata[key] = quote(str(value))

        try:
            self.client.put_object(
                self.bucket,
                path,
                data=BytesIO(data),
                length=len(data),
                content_type=resolved_mime,
                metadata=object_metadata,
            )
            stat = self.client.stat_object(self.bucket, path)
        except Exception as e:
            logger.error(f"上传图片失败: user_id={user_id}, path={path}, error={e}", exc_info=True)
            raise StorageFailure() from e

        size = stat.size if stat.size is not None else len(data)
        logger.info(f"图片已上传: user_id={user_id}, path={path}, size={size}")

        return ArtifactRef(
            url=self.public_url(path),
            path=path,
            size_bytes=size,
            mime_type=resolved_mime,
        )

    def fetch(self, path: str) -> bytes:
        """
        读取已保存的图片

        Raises:
            StorageFailure: 读取失败
        """
        response = None
        try:
            response = self.client.get_object(self.bucket, path)
            return response.read()
        except Exception as e:
            logger.error(f"读取图片失败: path={path}, error={e}", exc_info=True)
            raise StorageFailure("图片读取失败") from e
        finally:
            if response is not None:
                response.close()
                response.release_conn()
