# service/maven_registry/domain/schemas.py
from pydantic import BaseModel

from .models import PackageFile

class PackageFileOut(BaseModel):
    id: int
    package_id: int
    file_name: str
    size: int | None = None
    file_type: str | None = None
    file_sha1: str | None = None
    file_md5: str | None = None

    @classmethod
    def from_domain(cls, package_file: PackageFile) -> "PackageFileOut":
        return cls(
            id=package_file.id,
            package_id=package_file.package_id,
            file_name=package_file.file_name,
            size=package_file.size,
            file_type=package_file.file_type,
            file_sha1=package_file.file_sha1,
            file_md5=package_file.file_md5,
        )

class ErrorMessage(BaseModel):
    message: str
