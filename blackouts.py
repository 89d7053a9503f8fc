import datetime as dt
from typing import Optional

from sqlalchemy import insert

from database import Store, StoreFailure
from errors import require, translate
from models import Blackout


class BlackoutManager:
    # Blackouts are informational: reservation creation does not consult them.

    def __init__(self, store: Store):
        self.store = store

    async def create(
        self,
        name: Optional[str],
        date: Optional[dt.date],
        kind: Optional[str],
        applies_to_all: Optional[bool],
        created_at: Optional[dt.datetime] = None,
    ) -> Blackout:
        require(
            "Name, date, kind and applies_to_all are required.",
            name=name,
            date=date,
            kind=kind,
            applies_to_all=applies_to_all,
        )
        if created_at is None:
            created_at = dt.datetime.now(dt.timezone.utc)

        statement = (
            insert(Blackout)
            .values(
                name=name,
                date=date,
                kind=kind,
                applies_to_all=applies_to_all,
                created_at=created_at,
            )
            .returning(Blackout)
        )
        try:
            return await self.store.fetch_one(statement)
        except StoreFailure as exc:
            raise translate(exc, "POST /bloqueios", "Error creating blackout.") from exc
