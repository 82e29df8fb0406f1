# service/maven_registry/domain/repos.py
from typing import Optional

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from ..core.database import get_db
from ..core.errors import ConflictError, NotFoundError
from .db_models import PackageModel, PackageFileModel
from .models import Package, PackageFile
from .storage import BlobStore, blob_key
from .uploads import UploadedFile


def get_repo():
    return PackageRepo()

def get_file_repo():
    return PackageFileRepo()


class PackageRepo:
    """Packages keyed by (project_id, path)."""

    def find(self, project_id: str, path: str) -> Optional[Package]:
        with get_db() as session:
            row = session.execute(
                select(PackageModel).where(
                    PackageModel.project_id == project_id,
                    PackageModel.path == path,
                )
            ).scalar_one_or_none()
            return row.to_domain() if row else None

    def find_or_raise(self, project_id: str, path: str) -> Package:
        pkg = self.find(project_id, path)
        if pkg is None:
            raise NotFoundError("Package Not Found")
        return pkg

    def find_or_create(self, project_id: str, actor: str | None, path: str,
                       name: str, version: str | None) -> Package:
        """
        Return the package at (project_id, path), creating it if needed.

        Concurrent callers race on the unique constraint; the loser re-reads
        the winner's row.
        """
        existing = self.find(project_id, path)
        if existing:
            return existing

        try:
            with get_db() as session:
                row = PackageModel(
                    project_id=project_id,
                    name=name,
                    path=path,
                    version=version,
                    package_type="maven",
                    creator=actor,
                )
                session.add(row)
                session.flush()
                pkg = row.to_domain()
        except IntegrityError:
            logger.info("Package {}:{} created concurrently, re-fetching", project_id, path)
            return self.find_or_raise(project_id, path)

        logger.info("Created package id={} project={} name={} version={}", pkg.id, project_id, name, version)
        return pkg


class PackageFileRepo:
    """Files attached to a package, keyed by (package_id, file_name)."""

    def find_file(self, package: Package, file_name: str) -> Optional[PackageFile]:
        with get_db() as session:
            row = session.execute(
                select(PackageFileModel).where(
                    PackageFileModel.package_id == package.id,
                    PackageFileModel.file_name == file_name,
                )
            ).scalar_one_or_none()
            return row.to_domain() if row else None

    def find_file_or_raise(self, package: Package, file_name: str) -> PackageFile:
        package_file = self.find_file(package, file_name)
        if package_file is None:
            raise NotFoundError("Package file Not Found")
        return package_file

    def create_file(self, package: Package, uploaded_file: UploadedFile, file_name: str,
                    blobs: BlobStore) -> PackageFile:
        """Store the proxy's payload and record it with the checksums the proxy declared."""
        key = blobs.put(blob_key(package.project_id, package.id, file_name), uploaded_file.path)
        try:
            with get_db() as session:
                row = PackageFileModel(
                    package_id=package.id,
                    file_name=file_name,
                    size=uploaded_file.size,
                    file_type=uploaded_file.content_type,
                    file_sha1=uploaded_file.sha1,
                    file_md5=uploaded_file.md5,
                    file_store=key,
                )
                session.add(row)
                session.flush()
                package_file = row.to_domain()
        except IntegrityError as e:
            logger.warning("Duplicate package file {} for package id={}", file_name, package.id)
            raise ConflictError("Package file already exists") from e

        logger.info("Created package file id={} package={} file_name={} size={}",
                    package_file.id, package.id, file_name, package_file.size)
        return package_file
