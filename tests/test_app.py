import io
import os

import pytest

import app as app_module


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def client(upload_dir, monkeypatch):
    monkeypatch.setitem(app_module.app.config, "TESTING", True)
    monkeypatch.setitem(app_module.app.config, "UPLOAD_FOLDER", str(upload_dir))
    with app_module.app.test_client() as client:
        yield client


def post_file(client, payload, filename="notes.txt"):
    return client.post(
        "/compress",
        data={"file": (io.BytesIO(payload), filename)},
        content_type="multipart/form-data",
    )


def test_home_page(client):
    response = client.get("/")
    assert response.status_code == 200
    assert b"File Compression tool" in response.data
    assert b'action="/compress"' in response.data


def test_compress_upload(client, upload_dir):
    response = post_file(client, b"aaaa")
    assert response.status_code == 200
    assert response.get_json() == {
        "originalSize": 4,
        "compressedSize": 1,
        "compressionPercentage": 75.0,
        "compressedData": [0],
    }
    assert os.listdir(upload_dir) == []


def test_compress_upload_text(client):
    response = post_file(client, b"aaaaabbcd")
    body = response.get_json()
    assert body["compressedData"] == [0xF8, 0x26]
    assert body["compressionPercentage"] == 77.78


def test_compress_without_file(client):
    response = client.post("/compress", data={}, content_type="multipart/form-data")
    assert response.status_code == 400
    assert response.get_json() == {"error": "No file uploaded"}


def test_compress_empty_file(client, upload_dir):
    response = post_file(client, b"", "empty.txt")
    assert response.status_code == 400
    assert response.get_json() == {"error": "File is empty"}
    assert os.listdir(upload_dir) == []


def test_compress_internal_error_cleans_up(client, upload_dir, monkeypatch):
    def boom(data):
        raise RuntimeError("boom")

    monkeypatch.setattr(app_module, "compress", boom)
    response = post_file(client, b"abc")
    assert response.status_code == 500
    assert response.get_json() == {"error": "Internal Server Error"}
    assert os.listdir(upload_dir) == []


def test_unsafe_filename_stays_in_upload_dir(client, upload_dir, monkeypatch):
    saved = []
    real_save = app_module.save_upload

    def save(file):
        path = real_save(file)
        saved.append(path)
        return path

    monkeypatch.setattr(app_module, "save_upload", save)
    response = post_file(client, b"xyz", "../../etc/passwd")
    assert response.status_code == 200
    assert response.get_json()["originalSize"] == 3
    assert os.path.dirname(saved[0]) == str(upload_dir)
    assert not os.path.exists(saved[0])


def test_compress_upload_too_large(client, monkeypatch):
    monkeypatch.setitem(app_module.app.config, "MAX_CONTENT_LENGTH", 10)
    response = post_file(client, b"a" * 100)
    assert response.status_code == 413
    assert response.is_json
    assert response.get_json() == {"error": "File too large"}
