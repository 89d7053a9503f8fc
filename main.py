import logging
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from blackouts import BlackoutManager
from catalog import ResourceCatalog
from config import Settings
from database import Store
from errors import BookingError
from logging_config import setup_logging
from reservations import ReservationManager
from schemas import (
    BlackoutIn,
    BlackoutOut,
    ReservationIn,
    ReservationOut,
    ResourceIn,
    ResourceOut,
)

logger = logging.getLogger(__name__)


# --- Dependencies ---
def get_store(request: Request) -> Store:
    return request.app.state.store


def get_catalog(store: Store = Depends(get_store)) -> ResourceCatalog:
    return ResourceCatalog(store)


def get_reservations(store: Store = Depends(get_store)) -> ReservationManager:
    return ReservationManager(store)


def get_blackouts(store: Store = Depends(get_store)) -> BlackoutManager:
    return BlackoutManager(store)


# --- Error responses: always {"error": "..."} ---
async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if exc.status_code < 500:
        logger.info(
            "%s %s - %s: %s",
            request.method,
            request.url.path,
            exc.status_code,
            exc.message,
            extra={"http_method": request.method, "http_path": request.url.path,
                   "http_status": exc.status_code},
        )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(
        "%s %s - malformed request",
        request.method,
        request.url.path,
        extra={"http_method": request.method, "http_path": request.url.path,
               "errors": exc.errors()},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Malformed request."},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "%s %s - unhandled error",
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"http_method": request.method, "http_path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error."},
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level, json_output=settings.log_json)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = Store(
            settings.database_url,
            echo=settings.db_echo,
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_pool_max_overflow,
        )
        await store.init(create_tables=settings.create_tables)
        app.state.store = store
        logger.info("Booking API starting up")
        try:
            yield
        finally:
            logger.info("Booking API shutting down")
            await store.dispose()

    app = FastAPI(title="Resource Booking API", lifespan=lifespan)

    app.add_exception_handler(BookingError, booking_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Server is running!"

    # --- Resources ---
    @app.post("/recursos", response_model=ResourceOut, status_code=status.HTTP_201_CREATED)
    async def create_resource(
        body: ResourceIn, catalog: ResourceCatalog = Depends(get_catalog)
    ):
        return await catalog.create(body.name, body.description)

    @app.get("/recursos", response_model=List[ResourceOut])
    async def list_resources(catalog: ResourceCatalog = Depends(get_catalog)):
        return await catalog.list()

    @app.get("/recursos/{resource_id}", response_model=ResourceOut)
    async def get_resource(resource_id: int, catalog: ResourceCatalog = Depends(get_catalog)):
        return await catalog.get(resource_id)

    @app.put("/recursos/{resource_id}", response_model=ResourceOut)
    async def update_resource(
        resource_id: int, body: ResourceIn, catalog: ResourceCatalog = Depends(get_catalog)
    ):
        return await catalog.update(resource_id, body.name, body.description)

    @app.delete("/recursos/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
    async def delete_resource(resource_id: int, catalog: ResourceCatalog = Depends(get_catalog)):
        await catalog.delete(resource_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    # --- Reservations ---
    @app.post("/agendamentos", response_model=ReservationOut, status_code=status.HTTP_201_CREATED)
    async def create_reservation(
        body: ReservationIn, reservations: ReservationManager = Depends(get_reservations)
    ):
        return await reservations.create(
            professor=body.professor,
            class_group=body.class_group,
            reservation_date=body.reservation_date,
            reservation_time_slot=body.reservation_time_slot,
            resource_id=body.resource_id,
        )

    # --- Blackouts ---
    @app.post("/bloqueios", response_model=BlackoutOut, status_code=status.HTTP_201_CREATED)
    async def create_blackout(
        body: BlackoutIn, blackouts: BlackoutManager = Depends(get_blackouts)
    ):
        return await blackouts.create(
            name=body.name,
            date=body.date,
            kind=body.kind,
            applies_to_all=body.applies_to_all,
        )

    return app


if __name__ == "__main__":
    settings = Settings.from_env()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
