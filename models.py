from typing import Optional
import datetime as dt
from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint, func


class Resource(SQLModel, table=True):
    __tablename__ = "resources"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: str


class Reservation(SQLModel, table=True):
    __tablename__ = "reservations"
    __table_args__ = (
        # Database-level protection against double booking
        UniqueConstraint(
            "resource_id", "reservation_date", "reservation_time_slot",
            name="unique_reservation_slot",
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    professor: str
    class_group: str
    reservation_date: dt.date = Field(index=True)
    reservation_time_slot: str  # free-form token, e.g. "09:00" or "09:00-10:00"
    # RESTRICT: a resource cannot be deleted while reservations point at it
    resource_id: int = Field(
        sa_column=Column(
            Integer,
            ForeignKey("resources.id", ondelete="RESTRICT"),
            nullable=False,
            index=True,
        )
    )
    created_at: dt.datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    )


class Blackout(SQLModel, table=True):
    __tablename__ = "blackouts"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    date: dt.date = Field(index=True)
    kind: str
    applies_to_all: bool
    created_at: dt.datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    )
