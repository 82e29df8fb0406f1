# service/maven_registry/domain/uploads.py
"""
Descriptor for a file the upload proxy already wrote to temporary storage.

The proxy rewrites the request body and forwards only metadata as
``file.path``, ``file.type``, ``file.size``, ``file.md5``,
``file.sha1`` and ``file.sha256``.
"""
import hashlib
import os
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from ..core.errors import BadRequestError

_CHUNK = 64 * 1024


@dataclass
class UploadedFile:
    path: str
    content_type: str | None = None
    size: int | None = None
    md5: str | None = None
    sha1: str | None = None
    declared_sha256: str | None = None

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, Optional[str]],
        field: str,
        upload_paths: Iterable[str],
    ) -> Optional["UploadedFile"]:
        """
        Build the descriptor from proxy-injected params, or return None when
        the proxy did not send a file.

        Raises BadRequestError when the temporary path lies outside every
        allowed upload root.
        """
        path = params.get(f"{field}.path")
        if not path:
            return None

        real = os.path.realpath(path)
        roots = [os.path.realpath(p) for p in upload_paths if p]
        if not any(real == r or real.startswith(r + os.sep) for r in roots):
            raise BadRequestError("insecure path used")
        if not os.path.isfile(real):
            raise BadRequestError("uploaded file is missing")

        size = params.get(f"{field}.size")
        return cls(
            path=real,
            content_type=params.get(f"{field}.type"),
            size=int(size) if size not in (None, "") else os.path.getsize(real),
            md5=params.get(f"{field}.md5"),
            sha1=params.get(f"{field}.sha1"),
            declared_sha256=params.get(f"{field}.sha256"),
        )

    @property
    def sha256(self) -> str:
        """SHA-256 of the payload, as declared by the proxy or computed from disk."""
        if self.declared_sha256:
            return self.declared_sha256.lower()
        digest = hashlib.sha256()
        with open(self.path, "rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK), b""):
                digest.update(chunk)
        return digest.hexdigest()
