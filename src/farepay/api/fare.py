"""Fare tap endpoint."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from farepay.api.responses import encode
from farepay.domain.fare import FareRequest, FareService

router = APIRouter()


## Input Forms
class FareForm(BaseModel):
    """Tap as posted by a validator.

    Required fields are optional here; their absence is reported as a
    missing_fields rejection with the usual failure body.
    """

    card_uid: Optional[str] = None
    vehicle_id: Optional[int] = None
    fare_amount: Optional[Decimal] = None
    device_timestamp: Optional[datetime] = None
    latitude: Optional[Decimal] = None
    longitude: Optional[Decimal] = None
    location_accuracy: Optional[Decimal] = None

    def to_request(self) -> FareRequest:
        return FareRequest(**self.model_dump())


@router.post("/fare")
def process_fare(form: FareForm, request: Request):
    """Charge a fare for one NFC tap."""
    service = FareService(request.app.state.db)
    result = service.process_fare(form.to_request())
    return encode(result.as_dict())
