"""
Tests for employee_service/services/image_storage_service.py - Cloudinary uploads.
"""
import hashlib
import json

import httpx
import pytest

from employee_service.services.image_storage_service import (
    CloudinaryImageStorage,
    ImageUploadError,
    ProfileImage,
    sign_upload_params,
)

IMAGE = ProfileImage(filename="jane.png", content_type="image/png", content=b"\x89PNG fake image bytes")


def _storage(handler, **overrides):
    options = dict(
        cloud_name="demo",
        api_key="api-key",
        api_secret="api-secret",
        folder="employees",
        transport=httpx.MockTransport(handler),
    )
    options.update(overrides)
    return CloudinaryImageStorage(**options)


class TestSignature:

    def test_signature_uses_sorted_params_and_secret(self):
        signature = sign_upload_params({"timestamp": "1700000000", "folder": "employees"}, "api-secret")

        expected = hashlib.sha1(b"folder=employees&timestamp=1700000000api-secret").hexdigest()
        assert signature == expected

    def test_empty_params_are_not_signed(self):
        signature = sign_upload_params({"timestamp": "1700000000", "folder": ""}, "api-secret")

        expected = hashlib.sha1(b"timestamp=1700000000api-secret").hexdigest()
        assert signature == expected


class TestUpload:

    @pytest.mark.asyncio
    async def test_upload_returns_secure_url(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = request.content
            return httpx.Response(
                200,
                json={"public_id": "employees/jane", "secure_url": "https://res.cloudinary.com/demo/jane.png"},
            )

        storage = _storage(handler)
        url = await storage.upload(IMAGE)
        await storage.close()

        assert url == "https://res.cloudinary.com/demo/jane.png"
        assert seen["url"] == "https://api.cloudinary.com/v1_1/demo/image/upload"
        assert b'name="api_key"' in seen["body"]
        assert b'name="signature"' in seen["body"]
        assert b"api-secret" not in seen["body"]
        assert IMAGE.content in seen["body"]

    @pytest.mark.asyncio
    async def test_falls_back_to_plain_url(self):
        storage = _storage(lambda request: httpx.Response(200, json={"url": "http://res.cloudinary.com/demo/jane.png"}))

        assert await storage.upload(IMAGE) == "http://res.cloudinary.com/demo/jane.png"

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        storage = _storage(lambda request: httpx.Response(200, json={}), api_key="", api_secret="")
        storage.api_key = None

        with pytest.raises(ImageUploadError):
            await storage.upload(IMAGE)

    @pytest.mark.asyncio
    async def test_rejected_upload(self):
        storage = _storage(lambda request: httpx.Response(401, json={"error": {"message": "Invalid Signature"}}))

        with pytest.raises(ImageUploadError) as exc_info:
            await storage.upload(IMAGE)

        assert "401" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_network_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        storage = _storage(handler)

        with pytest.raises(ImageUploadError):
            await storage.upload(IMAGE)

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        storage = _storage(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

        with pytest.raises(ImageUploadError):
            await storage.upload(IMAGE)

    @pytest.mark.asyncio
    async def test_response_without_url(self):
        storage = _storage(lambda request: httpx.Response(200, content=json.dumps({"public_id": "x"}).encode()))

        with pytest.raises(ImageUploadError):
            await storage.upload(IMAGE)
