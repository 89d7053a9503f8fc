"""Resource catalog: create, list, read, update and delete bookable resources."""

from typing import List, Optional

from sqlalchemy import delete, insert, update
from sqlmodel import select

from database import Store, StoreFailure
from errors import NotFoundError, require, translate
from models import Resource

REQUIRED_FIELDS_MESSAGE = "Name and description are required."


class ResourceCatalog:
    def __init__(self, store: Store):
        self.store = store

    async def create(self, name: Optional[str], description: Optional[str]) -> Resource:
        require(REQUIRED_FIELDS_MESSAGE, name=name, description=description)

        statement = (
            insert(Resource)
            .values(name=name, description=description)
            .returning(Resource)
        )
        try:
            return await self.store.fetch_one(statement)
        except StoreFailure as exc:
            raise translate(exc, "POST /recursos", "Error creating resource.") from exc

    async def list(self) -> List[Resource]:
        statement = select(Resource).order_by(Resource.name.asc())
        try:
            return await self.store.fetch_all(statement)
        except StoreFailure as exc:
            raise translate(exc, "GET /recursos", "Error fetching resources.") from exc

    async def get(self, resource_id: int) -> Resource:
        statement = select(Resource).where(Resource.id == resource_id)
        try:
            resource = await self.store.fetch_one(statement)
        except StoreFailure as exc:
            raise translate(exc, "GET /recursos/:id", "Error fetching resource.") from exc

        if resource is None:
            raise NotFoundError("Resource not found.")
        return resource

    async def update(
        self, resource_id: int, name: Optional[str], description: Optional[str]
    ) -> Resource:
        require(REQUIRED_FIELDS_MESSAGE, name=name, description=description)

        statement = (
            update(Resource)
            .where(Resource.id == resource_id)
            .values(name=name, description=description)
            .returning(Resource)
        )
        try:
            resource = await self.store.fetch_one(statement)
        except StoreFailure as exc:
            raise translate(exc, "PUT /recursos/:id", "Error updating resource.") from exc

        if resource is None:
            raise NotFoundError("Resource not found for update.")
        return resource

    async def delete(self, resource_id: int) -> None:
        statement = delete(Resource).where(Resource.id == resource_id).returning(Resource.id)
        try:
            deleted = await self.store.fetch_one(statement)
        except StoreFailure as exc:
            raise translate(
                exc,
                "DELETE /recursos/:id",
                "Error deleting resource.",
                on_foreign_key="Cannot delete. Resource is in use by reservations.",
            ) from exc

        if deleted is None:
            raise NotFoundError("Resource not found for deletion.")
