# service/maven_registry/domain/storage.py
import os
import shutil
import tempfile
import uuid
from dataclasses import dataclass

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from ..core.config import get_settings
from ..core.errors import StoreUnavailableError


class BlobStore:
    def put(self, key: str, file_path: str) -> str:
        """Store the file at file_path under key and return the key."""
        raise NotImplementedError

    def get_path(self, key: str) -> str:
        """Return a local path to the blob."""
        raise NotImplementedError


# ---------------------------------------------------------
# Local filesystem implementation
# ---------------------------------------------------------
@dataclass
class LocalBlobStore(BlobStore):
    root: str

    def put(self, key: str, file_path: str) -> str:
        dst = os.path.join(self.root, key)
        try:
            os.makedirs(os.path.dirname(dst), exist_ok=True)
            shutil.copyfile(file_path, dst)
        except OSError as e:
            logger.error("Local blob write failed for {}: {}", key, e)
            raise StoreUnavailableError("Blob storage unavailable") from e
        return key

    def get_path(self, key: str) -> str:
        return os.path.join(self.root, key)


# ---------------------------------------------------------
# AWS S3 implementation
# ---------------------------------------------------------
@dataclass
class S3BlobStore(BlobStore):
    bucket: str
    region: str | None = None
    cache_root: str = "/tmp/s3cache"
    timeout_s: float = 30.0

    def __post_init__(self):
        config = Config(
            connect_timeout=self.timeout_s,
            read_timeout=self.timeout_s,
            retries={"max_attempts": 3},
        )
        self.client = boto3.client("s3", region_name=self.region, config=config)
        os.makedirs(self.cache_root, exist_ok=True)

    def put(self, key: str, file_path: str) -> str:
        try:
            self.client.upload_file(file_path, self.bucket, key)
        except (BotoCoreError, ClientError) as e:
            logger.error("S3 upload failed for {}: {}", key, e)
            raise StoreUnavailableError("Blob storage unavailable") from e
        return key

    def get_path(self, key: str) -> str:
        # Download into a local cache if not already there
        local = os.path.join(self.cache_root, key.replace("/", "_"))
        if not os.path.exists(local):
            os.makedirs(os.path.dirname(local), exist_ok=True)
            # only complete downloads ever appear at the cache path
            tmp = tempfile.NamedTemporaryFile(dir=self.cache_root, prefix=".partial-", delete=False)
            try:
                with tmp:
                    self.client.download_fileobj(self.bucket, key, tmp)
                os.replace(tmp.name, local)
            except (BotoCoreError, ClientError) as e:
                if os.path.exists(tmp.name):
                    os.remove(tmp.name)
                logger.error("S3 download failed for {}: {}", key, e)
                raise StoreUnavailableError("Blob storage unavailable") from e
        return local


def blob_key(project_id: str, package_id: int, file_name: str) -> str:
    # one key per upload; a rejected duplicate leaves the stored blob intact
    return f"projects/{project_id}/packages/{package_id}/{uuid.uuid4().hex}/{file_name}"


# ---------------------------------------------------------
# Factory / global getter
# ---------------------------------------------------------
_blob_instance: BlobStore | None = None

def get_blob_store() -> BlobStore:
    """Return the active blob store instance (local or S3)."""
    global _blob_instance
    if _blob_instance:
        return _blob_instance

    s = get_settings()
    if s.STORAGE_BACKEND == "local":
        os.makedirs(s.BLOB_ROOT, exist_ok=True)
        _blob_instance = LocalBlobStore(s.BLOB_ROOT)
    elif s.STORAGE_BACKEND == "s3":
        if not s.S3_BUCKET:
            raise RuntimeError("S3 backend selected but S3_BUCKET is not set")
        _blob_instance = S3BlobStore(bucket=s.S3_BUCKET, region=s.AWS_REGION, timeout_s=s.STORE_TIMEOUT_S)
    else:
        raise NotImplementedError(f"Unknown STORAGE_BACKEND={s.STORAGE_BACKEND}")
    return _blob_instance

def reset_blob_store() -> None:
    global _blob_instance
    _blob_instance = None
