"""
生图模型客户端 - 调用 Gemini generateContent 接口
"""
import asyncio
import base64
import binascii
import logging
from typing import Optional

import requests

from pixology.core import get_settings
from pixology.core.exceptions import UpstreamGenerationFailure
from pixology.models.generation import RawImage

logger = logging.getLogger(__name__)


def extract_image(data: dict) -> Optional[RawImage]:
    """
    从 generateContent 响应中取出第一张内联图片

    Returns:
        RawImage；没有候选结果或候选中没有图片时返回 None
    """
    candidates = data.get("candidates") or []
    for candidate in candidates:
        parts = (candidate.get("content") or {}).get("parts") or []
        for part in parts:
            inline = part.get("inlineData") or part.get("inline_data")
            if not inline or not inline.get("data"):
                continue
            mime_type = inline.get("mimeType") or inline.get("mime_type") or "image/png"
            try:
                image_bytes = base64.b64decode(inline["data"], validate=True)
            except (binascii.Error, ValueError):
                logger.warning("候选图片数据不是合法的 base64，已跳过")
                continue
            return RawImage(data=image_bytes, mime_type=mime_type)
    return None


class GeminiImageClient:
    """
    Gemini 生图客户端

    每次尝试只调用一次，不做内部重试；不对模型输出做任何解释和清洗
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[int] = None,
        session: Optional[requests.Session] = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self.model = model or settings.gemini_image_model
        self.timeout = timeout or settings.gemini_api_timeout
        self.session = session or requests.Session()

    def generate_sync(self, prompt: str) -> RawImage:
        """
        同步调用生图接口

        Args:
            prompt: 拼接后的 Prompt

        Returns:
            RawImage

        Raises:
            UpstreamGenerationFailure: 调用失败或响应中没有可用图片
        """
        url = f"{self.base_url}/v1beta/models/{self.model}:generateContent"

        headers = {
            "Content-Type": "application/json",
            "x-goog-api-key": self.api_key,
        }

        payload = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"responseModalities": ["TEXT", "IMAGE"]},
        }

        logger.info(f"调用 Gemini 生图接口，model={self.model}")

        try:
            response = self.session.post(
                url,
                headers=headers,
                json=payload,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"Gemini 接口调用失败: {e}", exc_info=True)
            raise UpstreamGenerationFailure() from e

        if not isinstance(data, dict):
            logger.error(f"Gemini 响应格式异常: {type(data).__name__}")
            raise UpstreamGenerationFailure()

        if "error" in data:
            logger.error(f"Gemini 接口返回错误: {data['error']}")
            raise UpstreamGenerationFailure()

        image = extract_image(data)
        if image is None:
            logger.error(
                f"Gemini 未返回可用图片，候选数: {len(data.get('candidates') or [])}"
            )
            raise UpstreamGenerationFailure()

        logger.info(f"图片生成成功: mime_type={image.mime_type}, bytes={len(image.data)}")
        return image

    async def generate(self, prompt: str) -> RawImage:
        """异步调用生图接口（在线程中执行同步请求）"""
        return await asyncio.to_thread(self.generate_sync, prompt)
