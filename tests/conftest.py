"""
Shared fixtures: every test gets its own SQLite database, blob root and
upload-proxy temp directory.
"""

import hashlib
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from service.maven_registry.core import config, database
from service.maven_registry.core.security import (
    Role,
    UPLOAD_PROXY_API_REQUEST_HEADER,
    UPLOAD_PROXY_HEADER,
    create_jwt,
    create_proxy_jwt,
)
from service.maven_registry.domain import storage
from service.maven_registry.main import app


@pytest.fixture(autouse=True)
def registry_env(tmp_path, monkeypatch):
    """Point settings at throwaway storage and create the schema."""
    upload_dir = tmp_path / "proxy-uploads"
    upload_dir.mkdir()
    monkeypatch.setenv("DB_URL", f"sqlite:///{tmp_path / 'registry.db'}")
    monkeypatch.setenv("BLOB_ROOT", str(tmp_path / "blobs"))
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    monkeypatch.setenv("UPLOAD_TEMP_PATH", str(upload_dir))
    monkeypatch.setenv("JWT_SECRET", "test-secret")
    monkeypatch.setenv("UPLOAD_PROXY_SECRET", "test-proxy-secret")
    config.reset_settings()
    database.reset_engine()
    storage.reset_blob_store()
    database.init_db()
    yield config.get_settings()
    database.reset_engine()
    storage.reset_blob_store()
    config.reset_settings()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def auth_headers():
    """Build bearer headers for an actor with the given role."""

    def build(role: Role = Role.developer, username: str = "dev", projects=None):
        return {"Authorization": f"Bearer {create_jwt(username, role, projects)}"}

    return build


@pytest.fixture
def proxy_headers():
    """Headers the upload proxy attaches to forwarded requests."""
    return {
        UPLOAD_PROXY_HEADER: "true",
        UPLOAD_PROXY_API_REQUEST_HEADER: create_proxy_jwt(),
    }


@pytest.fixture
def staged_upload(registry_env):
    """
    Write a payload into the proxy temp directory and return the form
    fields the proxy would forward for it.
    """
    counter = {"n": 0}

    def stage(content: bytes, name: str = "upload.bin", content_type: str = "application/octet-stream",
              include_sha256: bool = True):
        counter["n"] += 1
        target = Path(registry_env.UPLOAD_TEMP_PATH) / f"{counter['n']}-{name}"
        target.write_bytes(content)
        fields = {
            "file.path": str(target),
            "file.name": name,
            "file.type": content_type,
            "file.size": str(len(content)),
            "file.md5": hashlib.md5(content).hexdigest(),
            "file.sha1": hashlib.sha1(content).hexdigest(),
        }
        if include_sha256:
            fields["file.sha256"] = hashlib.sha256(content).hexdigest()
        return fields

    return stage
