"""
Relational storage via SQLAlchemy.

Works with any SQLAlchemy URL (sqlite:///tasks.db, postgresql://...,
mysql+pymysql://...). Sessions are synchronous; each store call runs its
session work in a worker thread so the event loop is never blocked.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date, datetime, timezone
from typing import Any

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    Enum as SAEnum,
    Index,
    Integer,
    String,
    Text,
    create_engine,
    delete,
    func,
    or_,
    select,
)
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker

from tasklist.core.errors import ConflictError
from tasklist.core.models import Priority, Task, TaskFilters, User
from tasklist.storage.base import StorageProvider, TaskStore, UserStore

logger = logging.getLogger(__name__)


# =============================================================================
# Tables
# =============================================================================


class Base(DeclarativeBase):
    pass


# MySQL DATETIME defaults to whole seconds
Timestamp = DateTime(timezone=True).with_variant(mysql.DATETIME(fsp=6), "mysql")


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    created_at: Mapped[datetime] = mapped_column(Timestamp, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(Timestamp, nullable=False)


class TaskRow(Base):
    __tablename__ = "tasks"

    # Insertion order, breaks created_at ties when listing
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    # No foreign key: ownership is the token subject, the users table is not consulted
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    priority: Mapped[Priority] = mapped_column(
        SAEnum(Priority, name="task_priority", values_callable=lambda e: [p.value for p in e]),
        nullable=False,
        default=Priority.MEDIUM,
    )
    created_at: Mapped[datetime] = mapped_column(Timestamp, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(Timestamp, nullable=False)


# Owner-scoped listing is the hot path
Index("ix_tasks_user_created", TaskRow.user_id, TaskRow.created_at)


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo on the way back
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _to_user(row: UserRow) -> User:
    return User(
        id=row.id,
        email=row.email,
        password_hash=row.password_hash,
        first_name=row.first_name,
        last_name=row.last_name,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


def _to_task(row: TaskRow) -> Task:
    return Task(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        description=row.description,
        is_completed=row.is_completed,
        due_date=row.due_date,
        priority=row.priority,
        created_at=_aware(row.created_at),
        updated_at=_aware(row.updated_at),
    )


# =============================================================================
# SQL User Storage
# =============================================================================


class SqlUserStore(UserStore):
    """Users table."""

    def __init__(self, sessions: sessionmaker[Session]):
        self._sessions = sessions

    async def create(self, user: User) -> User:
        return await asyncio.to_thread(self._create, user)

    def _create(self, user: User) -> User:
        with self._sessions() as session:
            session.add(UserRow(**user.model_dump()))
            try:
                session.commit()
            except IntegrityError as e:
                session.rollback()
                raise ConflictError() from e
        return user

    async def get_by_id(self, user_id: str) -> User | None:
        return await asyncio.to_thread(self._get_by_id, user_id)

    def _get_by_id(self, user_id: str) -> User | None:
        with self._sessions() as session:
            row = session.get(UserRow, user_id)
            return _to_user(row) if row else None

    async def get_by_email(self, email: str) -> User | None:
        return await asyncio.to_thread(self._get_by_email, email)

    def _get_by_email(self, email: str) -> User | None:
        with self._sessions() as session:
            row = session.scalars(select(UserRow).where(UserRow.email == email)).first()
            return _to_user(row) if row else None

    async def update(self, user_id: str, changes: dict[str, Any]) -> User | None:
        return await asyncio.to_thread(self._update, user_id, changes)

    def _update(self, user_id: str, changes: dict[str, Any]) -> User | None:
        with self._sessions() as session:
            row = session.get(UserRow, user_id)
            if row is None:
                return None
            for field, value in changes.items():
                setattr(row, field, value)
            session.commit()
            return _to_user(row)


# =============================================================================
# SQL Task Storage
# =============================================================================


class SqlTaskStore(TaskStore):
    """Tasks table. Every statement filters on (id, user_id)."""

    def __init__(self, sessions: sessionmaker[Session]):
        self._sessions = sessions

    @staticmethod
    def _owned(session: Session, owner_id: str, task_id: str) -> TaskRow | None:
        return session.scalars(
            select(TaskRow).where(TaskRow.id == task_id, TaskRow.user_id == owner_id)
        ).first()

    async def create(self, task: Task) -> Task:
        return await asyncio.to_thread(self._create, task)

    def _create(self, task: Task) -> Task:
        with self._sessions() as session:
            session.add(TaskRow(**task.model_dump()))
            session.commit()
        return task

    async def get(self, owner_id: str, task_id: str) -> Task | None:
        return await asyncio.to_thread(self._get, owner_id, task_id)

    def _get(self, owner_id: str, task_id: str) -> Task | None:
        with self._sessions() as session:
            row = self._owned(session, owner_id, task_id)
            return _to_task(row) if row else None

    async def list(self, owner_id: str, filters: TaskFilters | None = None) -> list[Task]:
        return await asyncio.to_thread(self._list, owner_id, filters or TaskFilters())

    def _list(self, owner_id: str, filters: TaskFilters) -> list[Task]:
        query = select(TaskRow).where(TaskRow.user_id == owner_id)

        if filters.is_completed is not None:
            query = query.where(TaskRow.is_completed == filters.is_completed)
        if filters.priority is not None:
            query = query.where(TaskRow.priority == filters.priority)
        if filters.due_date is not None:
            query = query.where(TaskRow.due_date == filters.due_date)
        if filters.search:
            needle = filters.search.lower()
            query = query.where(
                or_(
                    func.lower(TaskRow.title, type_=String).contains(needle, autoescape=True),
                    func.lower(TaskRow.description, type_=String).contains(needle, autoescape=True),
                )
            )

        query = query.order_by(TaskRow.created_at.desc(), TaskRow.seq.desc())

        with self._sessions() as session:
            return [_to_task(row) for row in session.scalars(query)]

    async def update(self, owner_id: str, task_id: str, changes: dict[str, Any]) -> Task | None:
        return await asyncio.to_thread(self._update, owner_id, task_id, changes)

    def _update(self, owner_id: str, task_id: str, changes: dict[str, Any]) -> Task | None:
        with self._sessions() as session:
            row = self._owned(session, owner_id, task_id)
            if row is None:
                return None
            for field, value in changes.items():
                setattr(row, field, value)
            session.commit()
            return _to_task(row)

    async def toggle(self, owner_id: str, task_id: str, changes: dict[str, Any]) -> Task | None:
        return await asyncio.to_thread(self._toggle, owner_id, task_id, changes)

    def _toggle(self, owner_id: str, task_id: str, changes: dict[str, Any]) -> Task | None:
        with self._sessions() as session:
            row = self._owned(session, owner_id, task_id)
            if row is None:
                return None
            row.is_completed = not row.is_completed
            for field, value in changes.items():
                setattr(row, field, value)
            session.commit()
            return _to_task(row)

    async def delete(self, owner_id: str, task_id: str) -> bool:
        return await asyncio.to_thread(self._delete, owner_id, task_id)

    def _delete(self, owner_id: str, task_id: str) -> bool:
        with self._sessions() as session:
            result = session.execute(
                delete(TaskRow).where(TaskRow.id == task_id, TaskRow.user_id == owner_id)
            )
            session.commit()
            return result.rowcount > 0


# =============================================================================
# Backend lifecycle
# =============================================================================


class SqlBackend:
    """Owns the engine and session factory shared by the SQL stores."""

    def __init__(self, database_url: str, echo: bool = False):
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(
            database_url,
            echo=echo,
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        self.sessions = sessionmaker(self.engine, expire_on_commit=False)

    async def initialize(self) -> None:
        await asyncio.to_thread(Base.metadata.create_all, self.engine)
        logger.info(f"Database ready at {self.engine.url.render_as_string(hide_password=True)}")

    async def close(self) -> None:
        await asyncio.to_thread(self.engine.dispose)


# =============================================================================
# Factory
# =============================================================================


def create_sql_storage(database_url: str, echo: bool = False) -> StorageProvider:
    """Create a StorageProvider backed by a relational database."""
    backend = SqlBackend(database_url, echo=echo)
    return StorageProvider(
        users=SqlUserStore(backend.sessions),
        tasks=SqlTaskStore(backend.sessions),
        backend=backend,
    )
