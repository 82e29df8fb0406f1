# service/maven_registry/domain/db_models.py
from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, BigInteger, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PackageModel(Base):
    __tablename__ = "packages"
    __table_args__ = (
        UniqueConstraint("project_id", "path", name="uq_packages_project_id_path"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    path = Column(String, nullable=False)
    version = Column(String, nullable=True)
    package_type = Column(String, nullable=False, default="maven")
    creator = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    files = relationship("PackageFileModel", back_populates="package", cascade="all, delete-orphan")

    def to_domain(self):
        """Convert database model to domain Package"""
        from .models import Package
        return Package(
            id=self.id,
            project_id=self.project_id,
            name=self.name,
            path=self.path,
            version=self.version,
            package_type=self.package_type,
            creator=self.creator,
        )


class PackageFileModel(Base):
    __tablename__ = "package_files"
    __table_args__ = (
        UniqueConstraint("package_id", "file_name", name="uq_package_files_package_id_file_name"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    package_id = Column(Integer, ForeignKey("packages.id", ondelete="CASCADE"), nullable=False)
    file_name = Column(String, nullable=False)
    size = Column(BigInteger, nullable=True)
    file_type = Column(String, nullable=True)
    file_sha1 = Column(String, nullable=True)
    file_md5 = Column(String, nullable=True)
    file_store = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    package = relationship("PackageModel", back_populates="files")

    def to_domain(self):
        """Convert database model to domain PackageFile"""
        from .models import PackageFile
        return PackageFile(
            id=self.id,
            package_id=self.package_id,
            file_name=self.file_name,
            size=self.size,
            file_type=self.file_type,
            file_sha1=self.file_sha1,
            file_md5=self.file_md5,
            file_store=self.file_store,
        )
