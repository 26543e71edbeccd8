"""FastAPI application factory."""

from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from farepay.api import fare
from farepay.api.responses import encode
from farepay.database.base import Database
from farepay.database.factories import create_database
from farepay.domain.errors import FareError, InvalidAmount, MissingFields, invalid_fields

API_TITLE = "Farepay"
API_VERSION = "1.0.0"

# Body fields that must be present on every tap
REQUIRED_FIELDS = ["card_uid", "vehicle_id", "fare_amount"]

# Fare error code -> HTTP status
ERROR_STATUS = {
    "missing_fields": status.HTTP_400_BAD_REQUEST,
    "invalid_amount": status.HTTP_400_BAD_REQUEST,
    "vehicle_not_found": status.HTTP_404_NOT_FOUND,
    "card_not_found": status.HTTP_404_NOT_FOUND,
    "card_not_active": status.HTTP_400_BAD_REQUEST,
    "insufficient_balance": status.HTTP_400_BAD_REQUEST,
    "persistence_failure": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


async def fare_error_handler(request: Request, exc: FareError) -> JSONResponse:
    return JSONResponse(
        status_code=ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST),
        content=encode(exc.as_dict()),
        headers={"X-Error": type(exc).__name__},
    )


def validation_error_as_fare_error(exc: RequestValidationError) -> FareError:
    """Map a body that failed form parsing onto the fare error taxonomy.

    A malformed fare amount is an invalid amount. Any other bad field, or a
    body that is not a JSON object, is reported as missing fields.
    """
    fields = []
    for error in exc.errors():
        loc = error.get("loc", ())
        if len(loc) > 1 and loc[0] == "body" and isinstance(loc[1], str):
            if loc[1] == "fare_amount":
                return InvalidAmount(f"Invalid fare_amount: {error.get('input')!r}")
            if loc[1] not in fields:
                fields.append(loc[1])
    if not fields:
        return MissingFields(REQUIRED_FIELDS)
    return MissingFields(fields, invalid_fields(fields))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return await fare_error_handler(request, validation_error_as_fare_error(exc))


def create_app(db: Optional[Database] = None) -> FastAPI:
    """Build the API around a database.

    Args:
        db: Database instance; created from the environment when omitted
    """
    if db is None:
        db = create_database()
        db.connect()
        db.initialize_schema()

    app = FastAPI(title=API_TITLE, version=API_VERSION)
    app.state.db = db
    app.add_exception_handler(FareError, fare_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(fare.router, prefix="/payments", tags=["Payments"])

    @app.get("/health", tags=["Health Check"])
    def health_check():
        return {"status": "OK", "version": API_VERSION}

    return app
