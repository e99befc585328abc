"""
Gemini 生图客户端测试
"""
import asyncio
import base64
from unittest.mock import MagicMock

import pytest
import requests

from pixology.core.exceptions import UpstreamGenerationFailure
from pixology.services.generation_client import GeminiImageClient, extract_image

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


def _image_response(mime_type: str = "image/png") -> dict:
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "Here is your image"},
                        {
                            "inlineData": {
                                "mimeType": mime_type,
                                "data": base64.b64encode(PNG_BYTES).decode(),
                            }
                        },
                    ]
                }
            }
        ]
    }


def _client_with(response_data=None, error=None) -> tuple[GeminiImageClient, MagicMock]:
    session = MagicMock()
    if error is not None:
        session.post.side_effect = error
    else:
        response = MagicMock()
        response.json.return_value = response_data
        session.post.return_value = response
    client = GeminiImageClient(
        api_key="test-key",
        base_url="https://gemini.example.com/",
        model="image-model",
        timeout=5,
        session=session,
    )
    return client, session


class TestExtractImage:
    def test_first_inline_part_is_used(self):
        image = extract_image(_image_response("image/jpeg"))
        assert image.data == PNG_BYTES
        assert image.mime_type == "image/jpeg"

    def test_no_candidates(self):
        assert extract_image({"candidates": []}) is None
        assert extract_image({}) is None

    def test_text_only_candidate(self):
        data = {"candidates": [{"content": {"parts": [{"text": "sorry"}]}}]}
        assert extract_image(data) is None

    def test_missing_mime_defaults_to_png(self):
        data = {"candidates": [{"content": {"parts": [{"inline_data": {"data": "AAAA"}}]}}]}
        image = extract_image(data)
        assert image.mime_type == "image/png"
        assert image.data == b"\x00\x00\x00"


class TestGeminiImageClient:
    def test_generate_posts_prompt_once(self):
        client, session = _client_with(_image_response())

        image = asyncio.run(client.generate("a cat, in realistic style"))

        assert image.data == PNG_BYTES
        session.post.assert_called_once()
        args, kwargs = session.post.call_args
        assert args[0] == "https://gemini.example.com/v1beta/models/image-model:generateContent"
        assert kwargs["json"]["contents"][0]["parts"][0]["text"] == "a cat, in realistic style"
        assert kwargs["headers"]["x-goog-api-key"] == "test-key"
        assert kwargs["timeout"] == 5

    def test_empty_candidates_is_failure(self):
        client, _ = _client_with({"candidates": []})

        with pytest.raises(UpstreamGenerationFailure):
            client.generate_sync("a cat")

    def test_error_body_is_failure(self):
        client, _ = _client_with({"error": {"message": "quota exhausted for key"}})

        with pytest.raises(UpstreamGenerationFailure) as exc_info:
            client.generate_sync("a cat")
        assert "quota exhausted" not in str(exc_info.value)

    def test_network_error_is_failure_without_retry(self):
        client, session = _client_with(error=requests.ConnectionError("boom"))

        with pytest.raises(UpstreamGenerationFailure):
            client.generate_sync("a cat")
        assert session.post.call_count == 1

    def test_http_error_is_failure(self):
        client, session = _client_with(_image_response())
        session.post.return_value.raise_for_status.side_effect = requests.HTTPError("500")

        with pytest.raises(UpstreamGenerationFailure):
            client.generate_sync("a cat")
