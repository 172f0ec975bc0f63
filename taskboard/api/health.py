"""Health check endpoints for liveness and readiness checks."""

from fastapi import APIRouter, Depends

from ..dependencies.services import get_storage
from ..storage import Storage

router = APIRouter()


@router.get("/health")
def health_check():
    """
    Liveness check. Returns 200 OK if the process is serving requests.
    """
    return {"status": "healthy", "service": "taskboard"}


@router.get("/ready")
def readiness_check(storage: Storage = Depends(get_storage)):
    """
    Readiness check. The service is ready once a storage backend has been
    selected; ``storage`` tells whether it is the database or memory.
    """
    return {"status": "ready", "service": "taskboard", "storage": storage.mode}
