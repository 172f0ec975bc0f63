"""Relational storage backed by SQLModel sessions.

Each public method opens its own session from the shared engine pool and
closes it on exit, so a connection is held only for one logical operation.
No multi-statement transactions are used across methods.
"""

import logging
from typing import Any, Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from ..errors import ConflictError
from ..models import Task, User, utcnow
from .base import DATABASE_MODE, TASK_MUTABLE_FIELDS, Storage

logger = logging.getLogger(__name__)


class SQLStorage(Storage):
    mode = DATABASE_MODE

    def __init__(self, engine: Engine):
        self.engine = engine

    def close(self) -> None:
        self.engine.dispose()

    # ---- users ----

    def add_user(self, email: str, hashed_password: str, phone: Optional[str] = "") -> User:
        with Session(self.engine) as session:
            existing = session.exec(select(User.id).where(User.email == email)).first()
            if existing is not None:
                raise ConflictError("Email already registered")

            user = User(email=email, phone=phone or "", hashed_password=hashed_password)
            session.add(user)
            try:
                session.commit()
            except IntegrityError:
                # Lost a race with a concurrent registration of the same email
                session.rollback()
                raise ConflictError("Email already registered")
            session.refresh(user)
            logger.debug("User added id=%s", user.id)
            return user

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with Session(self.engine) as session:
            return session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        with Session(self.engine) as session:
            return session.exec(select(User).where(User.email == email)).first()

    def get_user_by_token(self, token: str) -> Optional[User]:
        if not token:
            return None
        with Session(self.engine) as session:
            return session.exec(select(User).where(User.token == token)).first()

    def set_user_token(self, user_id: int, token: str) -> Optional[User]:
        with Session(self.engine) as session:
            user = session.get(User, user_id)
            if user is None:
                return None
            user.token = token
            user.updated_at = utcnow()
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    # ---- tasks ----

    def list_tasks(self, user_id: int) -> list[Task]:
        with Session(self.engine) as session:
            statement = select(Task).where(Task.user_id == user_id).order_by(col(Task.id).desc())
            return list(session.exec(statement).all())

    def get_task(self, task_id: int) -> Optional[Task]:
        with Session(self.engine) as session:
            return session.get(Task, task_id)

    def get_task_owner(self, task_id: int) -> Optional[int]:
        with Session(self.engine) as session:
            return session.exec(select(Task.user_id).where(Task.id == task_id)).first()

    def add_task(self, user_id: int, fields: dict[str, Any]) -> Task:
        values = {k: v for k, v in fields.items() if k in TASK_MUTABLE_FIELDS}
        with Session(self.engine) as session:
            task = Task(user_id=user_id, **values)
            session.add(task)
            session.commit()
            session.refresh(task)
            logger.debug("Task added id=%s user=%s", task.id, user_id)
            return task

    def update_task(self, task_id: int, changes: dict[str, Any]) -> Optional[Task]:
        with Session(self.engine) as session:
            task = session.get(Task, task_id)
            if task is None:
                return None
            for key, value in changes.items():
                if key in TASK_MUTABLE_FIELDS:
                    setattr(task, key, value)
            task.updated_at = utcnow()
            session.add(task)
            session.commit()
            session.refresh(task)
            return task

    def delete_task(self, task_id: int) -> bool:
        with Session(self.engine) as session:
            task = session.get(Task, task_id)
            if task is None:
                return False
            session.delete(task)
            session.commit()
            return True

    # ---- introspection ----

    def info(self) -> dict[str, Any]:
        inspector = inspect(self.engine)
        return {
            "databases": inspector.get_schema_names(),
            "tables": inspector.get_table_names(),
            "status": f"{self.engine.dialect.name} connected",
        }

    def describe_table(self, table: str) -> Optional[list[dict[str, Any]]]:
        inspector = inspect(self.engine)
        if table not in inspector.get_table_names():
            return None
        primary = set(inspector.get_pk_constraint(table).get("constrained_columns") or [])
        return [
            {
                "name": column["name"],
                "type": str(column["type"]),
                "nullable": bool(column.get("nullable", True)),
                "primary_key": column["name"] in primary,
                "default": column.get("default"),
            }
            for column in inspector.get_columns(table)
        ]
