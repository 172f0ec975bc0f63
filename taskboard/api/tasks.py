from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query, status

from ..dependencies.auth import get_current_user
from ..dependencies.services import get_task_service
from ..models import User
from ..schemas.task import TaskRead
from ..services.tasks import TaskService

router = APIRouter()


@router.get("", response_model=List[TaskRead])
def get_tasks(
    sort: Optional[str] = Query(None, description="created (default), due or priority"),
    user: User = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return tasks.list_tasks(user.id, sort)


@router.get("/{task_id}", response_model=TaskRead)
def get_task(
    task_id: int,
    user: User = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return tasks.get_task(user.id, task_id)


@router.post("", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
def create_task(
    payload: Any = Body(None),
    user: User = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return tasks.create_task(user.id, payload)


@router.put("/{task_id}", response_model=TaskRead)
def update_task(
    task_id: int,
    payload: Any = Body(None),
    user: User = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return tasks.update_task(user.id, task_id, payload)


@router.delete("/{task_id}")
def delete_task(
    task_id: int,
    user: User = Depends(get_current_user),
    tasks: TaskService = Depends(get_task_service),
):
    return tasks.delete_task(user.id, task_id)
