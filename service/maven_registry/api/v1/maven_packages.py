# service/maven_registry/api/v1/maven_packages.py
import os
import tempfile
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, Response
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from loguru import logger

from ...core.config import get_settings
from ...core.errors import (
    BadRequestError, ConflictError, ForbiddenError, NotFoundError, UnauthorizedError,
)
from ...core.policy import ADMIN_PACKAGE, READ_PACKAGE, Actor, PackagePolicy
from ...core.security import (
    INTERNAL_API_CONTENT_TYPE, ProxyVerificationError, is_proxy_request,
    upload_authorization, verify_proxy_request,
)
from ...domain import repos, schemas, storage
from ...domain.maven import ChecksumFormat, extract_format, resolve_package_identity, verify_package_file
from ...domain.uploads import UploadedFile
from ... import deps

router = APIRouter()

MAVEN_ROUTE = "/{id}/packages/maven/{path:path}/{file_name}"
BINARY_CONTENT_TYPE = "application/octet-stream"

_ERRORS = {
    code: {"model": schemas.ErrorMessage}
    for code in (400, 401, 403, 404, 409, 503)
}


def _require_packages_available(policy: PackagePolicy, project_id: str,
                                actor: Optional[Actor], method: str) -> None:
    if not policy.packages_enabled():
        raise NotFoundError()
    if method != "GET" and actor is None:
        raise UnauthorizedError()
    if not policy.feature_available(project_id):
        raise ForbiddenError()


def _authorize(policy: PackagePolicy, actor: Optional[Actor], ability: str, project_id: str) -> None:
    if policy.can(actor, ability, project_id):
        return
    if actor is None:
        raise UnauthorizedError()
    raise ForbiddenError()


def _require_upload_proxy(request: Request) -> None:
    if not is_proxy_request(request.headers):
        raise ForbiddenError("Request should be executed via the upload proxy")


def _upload_paths():
    return [get_settings().UPLOAD_TEMP_PATH, tempfile.gettempdir()]


@router.get(MAVEN_ROUTE, responses=_ERRORS)
def download_package_file(id: str, path: str, file_name: str,
                          actor: Optional[Actor] = Depends(deps.current_actor),
                          policy: PackagePolicy = Depends(deps.get_policy),
                          repo: repos.PackageRepo = Depends(deps.get_repo),
                          files: repos.PackageFileRepo = Depends(deps.get_file_repo),
                          blobs: storage.BlobStore = Depends(deps.get_blob_store)):
    """Download a Maven artifact, or its md5/sha1 checksum as plain text."""
    _require_packages_available(policy, id, actor, "GET")
    _authorize(policy, actor, READ_PACKAGE, id)

    base_name, fmt = extract_format(file_name)

    package = repo.find_or_raise(id, path)
    package_file = files.find_file_or_raise(package, base_name)

    if fmt is ChecksumFormat.MD5:
        return PlainTextResponse(package_file.file_md5 or "")
    if fmt is ChecksumFormat.SHA1:
        return PlainTextResponse(package_file.file_sha1 or "")

    local_path = blobs.get_path(package_file.file_store)
    if not os.path.isfile(local_path):
        logger.error("Blob {} missing for package file id={}", package_file.file_store, package_file.id)
        raise NotFoundError("Package file Not Found")
    return FileResponse(local_path, media_type=BINARY_CONTENT_TYPE, filename=package_file.file_name)


# Registered before the upload route: ".../{file_name}/authorize" would
# otherwise match it with file_name="authorize".
@router.put(MAVEN_ROUTE + "/authorize", responses=_ERRORS)
def authorize_upload(id: str, path: str, file_name: str, request: Request,
                     actor: Optional[Actor] = Depends(deps.current_actor),
                     policy: PackagePolicy = Depends(deps.get_policy)):
    """Tell the upload proxy where to stream the request body."""
    _require_packages_available(policy, id, actor, "PUT")
    _authorize(policy, actor, ADMIN_PACKAGE, id)
    _require_upload_proxy(request)

    try:
        verify_proxy_request(request.headers)
    except ProxyVerificationError as e:
        logger.warning("Rejected upload proxy request for project={} path={}: {}", id, path, e)
        raise UnauthorizedError("Upload proxy request could not be verified")

    return JSONResponse(upload_authorization(has_length=True), status_code=200,
                        media_type=INTERNAL_API_CONTENT_TYPE)


@router.put(MAVEN_ROUTE, responses=_ERRORS)
def upload_package_file(id: str, path: str, file_name: str, request: Request,
                        file_path: Optional[str] = Form(default=None, alias="file.path"),
                        file_type: Optional[str] = Form(default=None, alias="file.type"),
                        file_size: Optional[int] = Form(default=None, alias="file.size"),
                        file_md5: Optional[str] = Form(default=None, alias="file.md5"),
                        file_sha1: Optional[str] = Form(default=None, alias="file.sha1"),
                        file_sha256: Optional[str] = Form(default=None, alias="file.sha256"),
                        actor: Optional[Actor] = Depends(deps.current_actor),
                        policy: PackagePolicy = Depends(deps.get_policy),
                        repo: repos.PackageRepo = Depends(deps.get_repo),
                        files: repos.PackageFileRepo = Depends(deps.get_file_repo),
                        blobs: storage.BlobStore = Depends(deps.get_blob_store)):
    """
    Store a Maven artifact, or verify a ``.sha1`` side file against the
    artifact already stored under the same name.
    """
    _require_packages_available(policy, id, actor, "PUT")
    _authorize(policy, actor, ADMIN_PACKAGE, id)
    _require_upload_proxy(request)

    base_name, fmt = extract_format(file_name)

    params = {
        "file.path": file_path,
        "file.type": file_type,
        "file.size": file_size,
        "file.md5": file_md5,
        "file.sha1": file_sha1,
        "file.sha256": file_sha256,
    }
    uploaded_file = UploadedFile.from_params(params, "file", _upload_paths())
    if uploaded_file is None:
        raise BadRequestError("Missing package file!")

    package = repo.find(id, path)
    if package is None:
        name, version = resolve_package_identity(path, base_name)
        package = repo.find_or_create(id, actor.username, path, name, version)

    if fmt is ChecksumFormat.SHA1:
        # Maven follows every file with its .sha1 and .md5. Checksums are
        # already stored, so the sha1 upload is only checked against them.
        package_file = files.find_file_or_raise(package, base_name)
        if not verify_package_file(package_file, uploaded_file):
            raise ConflictError()
        return Response(status_code=204)

    if fmt is ChecksumFormat.MD5:
        return Response(status_code=200)

    package_file = files.create_file(package, uploaded_file, file_name=base_name, blobs=blobs)
    logger.info("Uploaded {} to project={} path={} by {}", base_name, id, path, actor.username)
    return schemas.PackageFileOut.from_domain(package_file)
