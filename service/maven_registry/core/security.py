# service/maven_registry/core/security.py
from __future__ import annotations
from enum import Enum
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Mapping

import jwt  # PyJWT

from .config import get_settings

# ---- Roles ----
class Role(str, Enum):
    viewer = "viewer"
    developer = "developer"
    maintainer = "maintainer"

# ---- Actor JWT helpers ----
def create_jwt(sub: str, role: Role, projects: List[str] | None = None) -> str:
    s = get_settings()
    now = datetime.now(timezone.utc)
    exp = now + timedelta(hours=int(s.JWT_EXPIRE_HOURS))
    claims: Dict[str, Any] = {
        "sub": sub,
        "role": role.value,
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "iss": s.JWT_ISSUER,
        "aud": s.JWT_AUDIENCE,
    }
    if projects is not None:
        claims["projects"] = list(projects)
    return jwt.encode(claims, s.JWT_SECRET, algorithm="HS256")


def decode_jwt(token: str) -> Dict[str, Any]:
    s = get_settings()
    return jwt.decode(
        token,
        s.JWT_SECRET,
        algorithms=["HS256"],
        audience=s.JWT_AUDIENCE,
        issuer=s.JWT_ISSUER,
    )

# ---- Upload proxy ----
# The proxy marks every request it forwards with UPLOAD_PROXY_HEADER and signs
# API requests with a short-lived JWT in UPLOAD_PROXY_API_REQUEST_HEADER.
UPLOAD_PROXY_HEADER = "Upload-Proxy"
UPLOAD_PROXY_API_REQUEST_HEADER = "Upload-Proxy-Api-Request"
UPLOAD_PROXY_ISSUER = "upload-proxy"
INTERNAL_API_CONTENT_TYPE = "application/vnd.upload-proxy-internal-api-request+json"


class ProxyVerificationError(Exception):
    pass


def is_proxy_request(headers: Mapping[str, str]) -> bool:
    return bool(headers.get(UPLOAD_PROXY_HEADER))


def create_proxy_jwt(ttl_s: int = 60) -> str:
    s = get_settings()
    now = datetime.now(timezone.utc)
    claims = {
        "iss": UPLOAD_PROXY_ISSUER,
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=ttl_s)).timestamp()),
    }
    return jwt.encode(claims, s.UPLOAD_PROXY_SECRET, algorithm="HS256")


def verify_proxy_request(headers: Mapping[str, str]) -> Dict[str, Any]:
    token = headers.get(UPLOAD_PROXY_API_REQUEST_HEADER)
    if not token:
        raise ProxyVerificationError(f"{UPLOAD_PROXY_API_REQUEST_HEADER} header missing")
    s = get_settings()
    try:
        return jwt.decode(
            token,
            s.UPLOAD_PROXY_SECRET,
            algorithms=["HS256"],
            issuer=UPLOAD_PROXY_ISSUER,
        )
    except jwt.PyJWTError as e:
        raise ProxyVerificationError(str(e)) from e


def upload_authorization(has_length: bool) -> Dict[str, Any]:
    """Descriptor the proxy needs to stream a body into temporary storage."""
    s = get_settings()
    body: Dict[str, Any] = {"TempPath": s.UPLOAD_TEMP_PATH, "LengthRequired": has_length}
    if s.MAX_UPLOAD_SIZE:
        body["MaximumSize"] = s.MAX_UPLOAD_SIZE
    return body
