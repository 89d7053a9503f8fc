import datetime as dt
from typing import Optional

from sqlalchemy import insert

from database import Store, StoreFailure
from errors import require, translate
from models import Reservation

SLOT_TAKEN_MESSAGE = "Conflict: a reservation already exists for this resource at this date and time slot."
UNKNOWN_RESOURCE_MESSAGE = "The specified resource (resource_id) does not exist."


class ReservationManager:
    """Books a resource for one date and time slot.

    Double booking and dangling resource ids are rejected by the store's
    constraints; this class only names the conflict.
    """

    def __init__(self, store: Store):
        self.store = store

    async def create(
        self,
        professor: Optional[str],
        class_group: Optional[str],
        reservation_date: Optional[dt.date],
        reservation_time_slot: Optional[str],
        resource_id: Optional[int],
        created_at: Optional[dt.datetime] = None,
    ) -> Reservation:
        require(
            "All fields are required.",
            professor=professor,
            class_group=class_group,
            reservation_date=reservation_date,
            reservation_time_slot=reservation_time_slot,
            resource_id=resource_id,
        )
        if created_at is None:
            created_at = dt.datetime.now(dt.timezone.utc)

        statement = (
            insert(Reservation)
            .values(
                professor=professor,
                class_group=class_group,
                reservation_date=reservation_date,
                reservation_time_slot=reservation_time_slot,
                resource_id=resource_id,
                created_at=created_at,
            )
            .returning(Reservation)
        )
        try:
            return await self.store.fetch_one(statement)
        except StoreFailure as exc:
            raise translate(
                exc,
                "POST /agendamentos",
                "Error creating reservation.",
                on_unique=SLOT_TAKEN_MESSAGE,
                on_foreign_key=UNKNOWN_RESOURCE_MESSAGE,
            ) from exc
