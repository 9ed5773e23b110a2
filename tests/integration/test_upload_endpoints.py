"""Integration tests for image upload endpoints."""

import io

from httpx import AsyncClient
from PIL import Image


def _jpeg_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (120, 80), color=(240, 200, 40)).save(buffer, format="JPEG")
    return buffer.getvalue()


class TestUploadImage:

    async def test_upload_and_delete(self, admin_client: AsyncClient):
        response = await admin_client.post(
            "/api/upload/image",
            files={"image": ("dog.jpg", _jpeg_bytes(), "image/jpeg")},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["message"] == "Image uploaded successfully"
        assert data["url"] == f"/storage/{data['public_id']}"

        served = await admin_client.get(data["url"])
        assert served.status_code == 200

        response = await admin_client.request(
            "DELETE", "/api/upload/image", json={"public_id": data["public_id"]}
        )
        assert response.status_code == 200
        assert response.json() == {"message": "Image deleted successfully"}

    async def test_uploaded_url_is_a_valid_pet_image(self, admin_client: AsyncClient):
        upload = await admin_client.post(
            "/api/upload/image",
            files={"image": ("dog.jpg", _jpeg_bytes(), "image/jpeg")},
        )

        response = await admin_client.post("/api/pets/", json={
            "name": "Sunny",
            "species": "Dog",
            "breed": "Labrador",
            "age": 1,
            "description": "Energetic puppy, great with kids.",
            "image": upload.json()["url"],
        })

        assert response.status_code == 201
        assert response.json()["pet"]["image"] == upload.json()["url"]

    async def test_invalid_type(self, admin_client: AsyncClient):
        response = await admin_client.post(
            "/api/upload/image",
            files={"image": ("doc.pdf", b"%PDF-1.4", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json()["error_code"] == "BAD_REQUEST"

    async def test_delete_missing(self, admin_client: AsyncClient):
        response = await admin_client.request(
            "DELETE", "/api/upload/image", json={"public_id": "pet_missing.jpg"}
        )
        assert response.status_code == 404

    async def test_delete_rejects_paths(self, admin_client: AsyncClient):
        response = await admin_client.request(
            "DELETE", "/api/upload/image", json={"public_id": "../config.py"}
        )
        assert response.status_code == 400

    async def test_requires_admin(self, async_client: AsyncClient):
        response = await async_client.post(
            "/api/upload/image",
            files={"image": ("dog.jpg", _jpeg_bytes(), "image/jpeg")},
        )
        assert response.status_code == 403
