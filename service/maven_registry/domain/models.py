# service/maven_registry/domain/models.py
from dataclasses import dataclass

@dataclass
class Package:
    id: int
    project_id: str
    name: str
    path: str
    version: str | None
    package_type: str = "maven"
    creator: str | None = None

@dataclass
class PackageFile:
    id: int
    package_id: int
    file_name: str
    size: int | None
    file_type: str | None
    file_sha1: str | None
    file_md5: str | None
    file_store: str
