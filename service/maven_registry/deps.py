# service/maven_registry/deps.py
from __future__ import annotations
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, Header

from .core.policy import Actor, PackagePolicy
from .core.security import decode_jwt, Role
from .domain import repos, storage


def get_repo() -> repos.PackageRepo:
    return repos.get_repo()

def get_file_repo() -> repos.PackageFileRepo:
    return repos.get_file_repo()

def get_blob_store() -> storage.BlobStore:
    return storage.get_blob_store()

def get_policy() -> PackagePolicy:
    return PackagePolicy()

def bearer_token(authorization: str | None = Header(default=None)) -> Optional[str]:
    if not authorization:
        return None
    if not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Malformed authorization header")
    return authorization.split(" ", 1)[1]

def current_actor(token: Optional[str] = Depends(bearer_token)) -> Optional[Actor]:
    """Actor behind the bearer token, or None for anonymous requests."""
    if token is None:
        return None
    try:
        payload = decode_jwt(token)
    except jwt.PyJWTError:
        raise HTTPException(status_code=401, detail="Invalid token")
    if not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        role = Role(payload.get("role"))
    except ValueError:
        raise HTTPException(status_code=403, detail="Unauthorized role")
    projects = payload.get("projects")
    return Actor(
        username=str(payload["sub"]),
        role=role,
        projects=[str(p) for p in projects] if projects is not None else None,
    )
