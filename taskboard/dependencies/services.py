"""Providers that hand the active storage and services to route handlers."""

from fastapi import Depends, Request

from ..errors import InternalError
from ..services.tasks import TaskService
from ..services.users import UserService
from ..storage import Storage


def get_storage(request: Request) -> Storage:
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise InternalError("Storage is not initialised")
    return storage


def get_user_service(storage: Storage = Depends(get_storage)) -> UserService:
    return UserService(storage)


def get_task_service(storage: Storage = Depends(get_storage)) -> TaskService:
    return TaskService(storage)
