# service/maven_registry/domain/maven.py
"""
Maven repository layout rules.

Maven uploads several files during ``mvn deploy``, in this order::

    my-company/my-app/1.0-SNAPSHOT/my-app.jar
    my-company/my-app/1.0-SNAPSHOT/my-app.jar.sha1
    my-company/my-app/1.0-SNAPSHOT/my-app.pom
    my-company/my-app/1.0-SNAPSHOT/maven-metadata.xml
    my-company/my-app/maven-metadata.xml

The last file has no version in its path because it describes every version.
"""
import hashlib
from enum import Enum
from typing import Tuple

from loguru import logger

from .models import PackageFile
from .uploads import UploadedFile

MAVEN_METADATA_FILE = "maven-metadata.xml"


class ChecksumFormat(str, Enum):
    NONE = "none"
    MD5 = "md5"
    SHA1 = "sha1"


def extract_format(file_name: str) -> Tuple[str, ChecksumFormat]:
    """
    Split a requested file name into the artifact it refers to and the
    checksum format asked for.

    >>> extract_format("my-app-1.0.jar.sha1")
    ('my-app-1.0.jar', <ChecksumFormat.SHA1: 'sha1'>)
    >>> extract_format("my-app-1.0.jar")
    ('my-app-1.0.jar', <ChecksumFormat.NONE: 'none'>)
    """
    name, _, suffix = file_name.rpartition(".")
    if suffix == ChecksumFormat.MD5.value:
        return name, ChecksumFormat.MD5
    if suffix == ChecksumFormat.SHA1.value:
        return name, ChecksumFormat.SHA1
    return file_name, ChecksumFormat.NONE


def resolve_package_identity(path: str, file_name: str) -> Tuple[str, str | None]:
    """Return (name, version) for a package created by an upload to path."""
    if file_name == MAVEN_METADATA_FILE:
        return path, None

    name, sep, version = path.rpartition("/")
    if not sep:
        # no slash: same shape as a root metadata package
        return path, None
    return name, version


def sha256_hex(value: str) -> str:
    return hashlib.sha256(value.encode("utf-8")).hexdigest()


def verify_package_file(package_file: PackageFile, uploaded_file: UploadedFile) -> bool:
    """
    Check a ``.sha1`` side upload against the stored artifact.

    Both operands go through SHA-256: the stored SHA-1 hex string is hashed,
    and compared with the SHA-256 of the uploaded side-file payload.
    """
    stored = sha256_hex(package_file.file_sha1 or "")
    expected = (uploaded_file.sha256 or "").lower()
    matched = stored == expected
    logger.info(
        "Checksum verification for package_file={} file_name={}: {}",
        package_file.id, package_file.file_name, "match" if matched else "mismatch",
    )
    return matched
