from __future__ import annotations

from datetime import datetime
from typing import List, Optional

import sqlalchemy as sa
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from ..model import JobKind


class Base(DeclarativeBase):
    pass


class NodeRow(Base):
    __tablename__ = "nodes"
    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False)


class JobRow(Base):
    __tablename__ = "jobs"
    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(sa.Text, nullable=False)
    kind: Mapped[JobKind] = mapped_column(sa.Enum(JobKind, name="job_kind"), nullable=False)
    schedule: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    route_path: Mapped[Optional[str]] = mapped_column(sa.Text, nullable=True)
    slug: Mapped[Optional[str]] = mapped_column(sa.Text, unique=True, nullable=True)
    is_online: Mapped[bool] = mapped_column(sa.Boolean, nullable=False, default=False)
    node_id: Mapped[Optional[int]] = mapped_column(sa.Integer, sa.ForeignKey("nodes.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False)

    tasks: Mapped[List["TaskRow"]] = relationship(
        back_populates="job", cascade="all, delete-orphan", order_by="TaskRow.id"
    )


class TaskRow(Base):
    __tablename__ = "tasks"
    __table_args__ = (sa.UniqueConstraint("job_id", "name", name="uq_tasks_job_name"),)

    id: Mapped[int] = mapped_column(sa.Integer, primary_key=True, autoincrement=True)
    job_id: Mapped[int] = mapped_column(sa.Integer, sa.ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False)
    name: Mapped[str] = mapped_column(sa.Text, nullable=False)
    command: Mapped[str] = mapped_column(sa.Text, nullable=False)
    next_tasks: Mapped[str] = mapped_column(sa.Text, nullable=False, default="")  # "b,c"
    created_at: Mapped[datetime] = mapped_column(sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False)

    job: Mapped[JobRow] = relationship(back_populates="tasks")
