"""
图片存储服务测试
"""
import base64
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from pixology.core.exceptions import StorageFailure
from pixology.services.storage_service import ArtifactStore, decode_image_payload

PUBLIC_BASE = "https://storage.example.com/test-bucket/"


@pytest.fixture
def minio_client():
    client = MagicMock()
    client.stat_object.return_value = SimpleNamespace(size=3)
    return client


@pytest.fixture
def store(minio_client):
    return ArtifactStore(client=minio_client, bucket="test-bucket", public_url_base=PUBLIC_BASE)


class TestDecodeImagePayload:
    """图片数据解析测试"""

    def test_data_url_uses_declared_mime(self):
        data, mime = decode_image_payload("data:image/jpeg;base64,AAAA")
        assert mime == "image/jpeg"
        assert data == base64.b64decode("AAAA")

    def test_plain_base64_defaults_to_png(self):
        data, mime = decode_image_payload("AAAA")
        assert mime == "image/png"
        assert data == b"\x00\x00\x00"

    def test_raw_bytes_passthrough(self):
        data, mime = decode_image_payload(b"\x89PNG", "image/webp")
        assert data == b"\x89PNG"
        assert mime == "image/webp"

    def test_wrapped_base64_is_accepted(self):
        data, mime = decode_image_payload(" AAAA\nAAAA\r\n")
        assert mime == "image/png"
        assert data == b"\x00" * 6

        data, mime = decode_image_payload("data:image/jpeg;base64,AAAA\nAAAA")
        assert mime == "image/jpeg"
        assert data == b"\x00" * 6

    def test_invalid_base64_raises_value_error(self):
        with pytest.raises(ValueError):
            decode_image_payload("not base64!!")


class TestArtifactStore:
    """ArtifactStore 测试"""

    def test_put_namespaces_by_user(self, store, minio_client):
        ref = store.put(b"abc", "user-1", "generated-1.png", {"prompt": "a cat"})

        assert ref.path.startswith("users/user-1/images/")
        assert ref.path.endswith(".png")
        assert ref.url == PUBLIC_BASE + ref.path
        assert ref.size_bytes == 3
        assert ref.mime_type == "image/png"

        args, kwargs = minio_client.put_object.call_args
        assert args == ("test-bucket", ref.path)
        assert kwargs["length"] == 3
        assert kwargs["content_type"] == "image/png"
        assert kwargs["metadata"]["x-amz-acl"] == "public-read"
        assert kwargs["metadata"]["user-id"] == "user-1"
        assert kwargs["metadata"]["prompt"] == "a%20cat"
        assert "uploaded-at" in kwargs["metadata"]

    def test_put_generates_unique_names(self, store):
        first = store.put(b"abc", "user-1", "same.png")
        second = store.put(b"abc", "user-1", "same.png")
        assert first.path != second.path

    def test_put_data_url(self, store, minio_client):
        ref = store.put("data:image/jpeg;base64,AAAA", "user-1", "generated-1")

        assert ref.mime_type == "image/jpeg"
        _, kwargs = minio_client.put_object.call_args
        assert kwargs["content_type"] == "image/jpeg"
        assert kwargs["data"].read() == b"\x00\x00\x00"

    def test_non_ascii_metadata_is_encoded(self, store, minio_client):
        store.put(b"abc", "user-1", "x.png", {"prompt": "一只猫"})

        _, kwargs = minio_client.put_object.call_args
        assert kwargs["metadata"]["prompt"].isascii()

    def test_upload_error_becomes_storage_failure(self, store, minio_client):
        minio_client.put_object.side_effect = RuntimeError("connection reset")

        with pytest.raises(StorageFailure):
            store.put(b"abc", "user-1", "x.png")

    def test_invalid_payload_is_not_uploaded(self, store, minio_client):
        with pytest.raises(StorageFailure):
            store.put("not base64!!", "user-1", "x.png")

        minio_client.put_object.assert_not_called()

    def test_fetch_reads_and_releases(self, store, minio_client):
        response = MagicMock()
        response.read.return_value = b"image-bytes"
        minio_client.get_object.return_value = response

        assert store.fetch("users/user-1/images/a.png") == b"image-bytes"
        minio_client.get_object.assert_called_once_with("test-bucket", "users/user-1/images/a.png")
        response.close.assert_called_once()
        response.release_conn.assert_called_once()

    def test_fetch_error_becomes_storage_failure(self, store, minio_client):
        minio_client.get_object.side_effect = RuntimeError("not found")

        with pytest.raises(StorageFailure):
            store.fetch("users/user-1/images/missing.png")

    def test_ensure_bucket_creates_missing(self, store, minio_client):
        minio_client.bucket_exists.return_value = False

        store.ensure_bucket()

        minio_client.make_bucket.assert_called_once_with("test-bucket")

    def test_ensure_bucket_unreachable_does_not_raise(self, store, minio_client):
        minio_client.bucket_exists.side_effect = ConnectionError("connection refused")

        store.ensure_bucket()

        minio_client.make_bucket.assert_not_called()
