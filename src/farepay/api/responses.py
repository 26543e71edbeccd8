"""Response encoding."""

from decimal import Decimal
from typing import Any

from fastapi.encoders import jsonable_encoder


def encode(body: dict[str, Any]) -> Any:
    """JSON-encode a response body, keeping decimals exact as strings."""
    return jsonable_encoder(body, custom_encoder={Decimal: str})
