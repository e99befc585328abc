"""
生图编排服务

串联：配额检查 -> Prompt 拼接 -> 模型生图 -> 图片上传 -> 记录保存。
任一步失败都会尽力写一条 failed 记录，然后向调用方抛出通用错误。
"""
import asyncio
import logging
import uuid
from typing import Optional

from pixology.core import get_settings
from pixology.core.exceptions import (
    Forbidden,
    OrchestrationFailure,
    PersistenceFailure,
    QuotaExceeded,
    RecordNotFound,
    StorageFailure,
    UpstreamGenerationFailure,
)
from pixology.models.generation import GenerationResult
from pixology.models.generation_record import GenerationRecord, GenerationStatus
from pixology.models.style_parameters import Dimensions, StyleParameters
from pixology.services.generation_client import GeminiImageClient
from pixology.services.prompt_service import compose_prompt
from pixology.services.quota_service import QuotaGate
from pixology.services.record_service import MetadataRecorder
from pixology.services.storage_service import ArtifactStore

logger = logging.getLogger(__name__)

# 写入存储元数据的 Prompt 截断长度
PROMPT_METADATA_LENGTH = 100


class ImageGenerationService:
    """生图编排服务，对外唯一入口"""

    def __init__(
        self,
        quota_gate: QuotaGate,
        generation_client: GeminiImageClient,
        artifact_store: ArtifactStore,
        recorder: MetadataRecorder,
        default_dimensions: Dimensions,
    ):
        self.quota_gate = quota_gate
        self.generation_client = generation_client
        self.artifact_store = artifact_store
        self.recorder = recorder
        self.default_dimensions = default_dimensions

    def resolve_dimensions(self, style_parameters: Optional[StyleParameters]) -> Dimensions:
        """宽高分别取风格参数中的值，缺失的一边使用默认尺寸"""
        requested = style_parameters.dimensions if style_parameters else None
        if requested is None:
            return self.default_dimensions
        return Dimensions(
            width=requested.width or self.default_dimensions.width,
            height=requested.height or self.default_dimensions.height,
        )

    async def generate(
        self,
        user_id: str,
        prompt: str,
        style_parameters: Optional[StyleParameters] = None,
    ) -> GenerationResult:
        """
        生成一张图片

        Args:
            user_id: 已认证的用户ID
            prompt: 用户原始 Prompt
            style_parameters: 风格参数（可选）

        Returns:
            GenerationResult

        Raises:
            QuotaExceeded: 当日配额已用完（不写记录）
            UpstreamGenerationFailure: 模型没有返回可用图片
            StorageFailure: 图片保存失败
            OrchestrationFailure: 图片已保存但最终记录写入失败
        """
        # ID 在任何外部调用前生成，成功失败共用
        image_id = str(uuid.uuid4())

        if self.quota_gate.has_reached_daily_limit(user_id):
            logger.warning(f"用户已达每日生图上限: user_id={user_id}")
            raise QuotaExceeded()

        logger.info(f"开始生成图片: user_id={user_id}, image_id={image_id}")

        enhanced_prompt = compose_prompt(prompt, style_parameters)
        logger.debug(f"Prompt 已拼接，长度: {len(enhanced_prompt)} 字符")

        try:
            raw_image = await self.generation_client.generate(enhanced_prompt)
        except Exception as e:
            logger.error(f"图片生成失败: image_id={image_id}, error={e}", exc_info=True)
            self._record_failure(image_id, user_id, prompt, style_parameters, "生图模型未返回可用图片")
            raise UpstreamGenerationFailure() from e

        try:
            artifact = await asyncio.to_thread(
                self.artifact_store.put,
                raw_image.data,
                user_id,
                f"generated-{image_id}",
                {
                    "prompt": prompt[:PROMPT_METADATA_LENGTH],
                    "image-id": image_id,
                },
                raw_image.mime_type,
            )
        except Exception as e:
            logger.error(f"图片上传失败: image_id={image_id}, error={e}", exc_info=True)
            self._record_failure(image_id, user_id, prompt, style_parameters, "图片上传存储失败")
            raise StorageFailure() from e

        dimensions = self.resolve_dimensions(style_parameters)

        record = GenerationRecord(
            id=image_id,
            user_id=user_id,
            prompt=prompt,
            style_parameters=_dump_style(style_parameters),
            status=GenerationStatus.COMPLETED.value,
            artifact_url=artifact.url,
            artifact_path=artifact.path,
            artifact_size_bytes=artifact.size_bytes,
            mime_type=artifact.mime_type,
            dimensions=dimensions.model_dump(),
        )
        try:
            record = self.recorder.save(record)
        except PersistenceFailure as e:
            # 图片已上传但没有对应记录，保留文件，仅记录路径便于排查
            logger.error(
                f"图片已保存但记录写入失败，文件成为孤儿: image_id={image_id}, path={artifact.path}"
            )
            raise OrchestrationFailure() from e

        logger.info(f"图片生成完成: user_id={user_id}, image_id={image_id}, url={artifact.url}")

        return GenerationResult(
            id=image_id,
            artifact_url=artifact.url,
            dimensions=dimensions,
            artifact_size_bytes=artifact.size_bytes,
            prompt=prompt,
            style_parameters=style_parameters,
            created_at=record.created_at,
        )

    def _record_failure(
        self,
        image_id: str,
        user_id: str,
        prompt: str,
        style_parameters: Optional[StyleParameters],
        error_summary: str,
    ) -> None:
        """写入 failed 记录；自身失败只记日志，不影响原始错误"""
        try:
            self.recorder.save(
                GenerationRecord(
                    id=image_id,
                    user_id=user_id,
                    prompt=prompt,
                    style_parameters=_dump_style(style_parameters),
                    status=GenerationStatus.FAILED.value,
                    error_summary=error_summary,
                )
            )
        except Exception:
            logger.error(f"保存失败记录时发生异常: image_id={image_id}", exc_info=True)

    def get_user_history(self, user_id: str, limit: int = 50) -> list[GenerationRecord]:
        """获取用户的生图历史（最新在前）"""
        try:
            records = self.recorder.list_by_user(user_id, limit=limit)
        except Exception as e:
            logger.error(f"获取生图历史失败: user_id={user_id}, error={e}", exc_info=True)
            raise PersistenceFailure("获取生图历史失败") from e

        logger.info(f"获取生图历史: user_id={user_id}, count={len(records)}")
        return records

    def get_image(self, user_id: str, image_id: str) -> GenerationRecord:
        """获取单条记录，只允许所属用户访问"""
        try:
            record = self.recorder.get(image_id)
        except Exception as e:
            logger.error(f"获取图片记录失败: image_id={image_id}, error={e}", exc_info=True)
            raise PersistenceFailure("获取图片记录失败") from e

        if record is None:
            raise RecordNotFound()
        if record.user_id != user_id:
            logger.warning(f"越权访问图片记录: user_id={user_id}, image_id={image_id}")
            raise Forbidden()
        return record


def _dump_style(style_parameters: Optional[StyleParameters]) -> Optional[dict]:
    if style_parameters is None:
        return None
    return style_parameters.model_dump(exclude_none=True)


# 全局单例
_image_generation_service: Optional[ImageGenerationService] = None


def get_image_generation_service() -> ImageGenerationService:
    """获取生图编排服务单例"""
    global _image_generation_service
    if _image_generation_service is None:
        settings = get_settings()
        recorder = MetadataRecorder()
        _image_generation_service = ImageGenerationService(
            quota_gate=QuotaGate(recorder, settings.max_images_per_user_per_day),
            generation_client=GeminiImageClient(),
            artifact_store=ArtifactStore(),
            recorder=recorder,
            default_dimensions=Dimensions(
                width=settings.default_image_width,
                height=settings.default_image_height,
            ),
        )
    return _image_generation_service
