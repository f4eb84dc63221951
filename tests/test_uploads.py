import pytest
from fastapi import HTTPException

from skilli import config
from skilli.domain.uploads.service import photo_filename, validate_image_filename

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def test_photo_filename_keeps_extension():
    name = photo_filename("portrait.JPG")
    assert name.startswith("photo-")
    assert name.endswith(".JPG")


@pytest.mark.parametrize(
    "filename, detail",
    [
        ("", "No file uploaded"),
        ("../etc/passwd.png", "Invalid filename"),
        ("notes.pdf", "Only image files are allowed!"),
        ("x" * 300 + ".png", "Filename too long - maximum 255 characters"),
    ],
)
def test_rejected_filenames(filename, detail):
    with pytest.raises(HTTPException) as exc:
        validate_image_filename(filename)
    assert exc.value.status_code == 400
    assert exc.value.detail == detail


def test_upload_sets_provider_photo(client, provider):
    response = client.post(
        "/api/uploads/profile-photo",
        files={"photo": ("avatar.png", PNG_BYTES, "image/png")},
        headers=provider["headers"],
    )
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Photo uploaded successfully"
    assert body["url"].startswith("/uploads/profile-photos/photo-")

    profile = client.get("/api/provider-profiles/me", headers=provider["headers"]).json()
    assert profile["photo"] == body["url"]

    served = client.get(body["url"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_upload_rejections(client, learner, monkeypatch):
    wrong_type = client.post(
        "/api/uploads/profile-photo",
        files={"photo": ("cv.pdf", b"%PDF-1.4", "application/pdf")},
        headers=learner["headers"],
    )
    assert wrong_type.status_code == 400
    assert wrong_type.json()["detail"] == "Only image files are allowed!"

    missing = client.post("/api/uploads/profile-photo", headers=learner["headers"])
    assert missing.status_code == 400
    assert missing.json()["detail"] == "No file uploaded"

    monkeypatch.setattr(config, "MAX_UPLOAD_SIZE", 16)
    too_big = client.post(
        "/api/uploads/profile-photo",
        files={"photo": ("avatar.png", PNG_BYTES, "image/png")},
        headers=learner["headers"],
    )
    assert too_big.status_code == 400
    assert too_big.json()["detail"].startswith("File size exceeds")


def test_upload_requires_authentication(client):
    response = client.post(
        "/api/uploads/profile-photo", files={"photo": ("avatar.png", PNG_BYTES, "image/png")}
    )
    assert response.status_code == 401
