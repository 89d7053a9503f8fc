"""Request and response bodies.

Request fields are all optional at the parsing layer so that a missing
field reaches the managers and is reported as a 400 with our own message.
Portuguese field names used by the existing front-end are accepted as
aliases.
"""

import datetime as dt
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ResourceIn(BaseModel):
    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "nome"))
    description: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("description", "descricao")
    )


class ResourceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str


class ReservationIn(BaseModel):
    professor: Optional[str] = None
    class_group: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("class_group", "turma")
    )
    reservation_date: Optional[dt.date] = Field(
        default=None, validation_alias=AliasChoices("reservation_date", "data_reserva")
    )
    reservation_time_slot: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("reservation_time_slot", "horario", "horario_reserva"),
    )
    resource_id: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("resource_id", "id_recurso")
    )


class ReservationOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    professor: str
    class_group: str
    reservation_date: dt.date
    reservation_time_slot: str
    resource_id: int
    created_at: dt.datetime


class BlackoutIn(BaseModel):
    name: Optional[str] = Field(default=None, validation_alias=AliasChoices("name", "nome"))
    date: Optional[dt.date] = Field(default=None, validation_alias=AliasChoices("date", "data"))
    kind: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("kind", "type", "tipo")
    )
    applies_to_all: Optional[bool] = Field(
        default=None, validation_alias=AliasChoices("applies_to_all", "valido_para_todos")
    )


class BlackoutOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    date: dt.date
    kind: str
    applies_to_all: bool
    created_at: dt.datetime
