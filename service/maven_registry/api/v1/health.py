# service/maven_registry/api/v1/health.py
import time
from fastapi import APIRouter, Response
from pydantic import BaseModel

from ...core import database

router = APIRouter()
_started = time.time()

class Health(BaseModel):
    uptime_s: float
    database: bool

@router.get("", response_model=Health)
def health(response: Response):
    db_ok = database.ping()
    if not db_ok:
        response.status_code = 503
    return Health(uptime_s=time.time() - _started, database=db_ok)
