"""Subscription package models."""

import json
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from agentmart.exceptions import InvalidPriceError
from agentmart.models.agent import Money

CUSTOM_PRICE = "Custom"

PackagePrice = Money | Literal["Custom"]


def normalize_features(value: Any) -> list[str]:
    """Coerce a stored ``features`` value into an ordered list of strings.

    The column has held JSON arrays, JSON-encoded strings and JSON objects
    over time. Objects contribute their values in insertion order.
    """
    if value is None:
        return []
    if isinstance(value, list | tuple):
        return [str(item) for item in value]
    if isinstance(value, dict):
        return [str(item) for item in value.values()]
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return []
        try:
            decoded = json.loads(text)
        except json.JSONDecodeError:
            return [value]
        if isinstance(decoded, list | dict):
            return normalize_features(decoded)
        return [str(decoded)]
    return [str(value)]


def parse_package_price(value: Any) -> Decimal | str:
    """Accept 'Custom' or a non-negative number."""
    if isinstance(value, str) and value.strip().lower() == CUSTOM_PRICE.lower():
        return CUSTOM_PRICE
    if isinstance(value, bool):
        raise InvalidPriceError(value)
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidPriceError(value) from e
    if not price.is_finite() or price < 0:
        raise InvalidPriceError(value)
    return price


class Package(BaseModel):
    """A subscription tier from the ``packages`` table."""

    model_config = ConfigDict(from_attributes=True, coerce_numbers_to_str=True)

    id: str
    name: str
    description: str = ""
    price: PackagePrice
    features: list[str] = []
    is_popular: bool = False
    created_at: datetime | None = None

    @field_validator("features", mode="before")
    @classmethod
    def _normalize_features(cls, v: Any) -> list[str]:
        return normalize_features(v)

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, v: Any) -> Decimal | str:
        return parse_package_price(v)

    @field_validator("is_popular", mode="before")
    @classmethod
    def _null_is_false(cls, v: Any) -> Any:
        return False if v is None else v

    @property
    def is_custom_priced(self) -> bool:
        return self.price == CUSTOM_PRICE


class PackageCreate(BaseModel):
    """Insert payload for a new package."""

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    price: PackagePrice
    features: list[str] = []
    is_popular: bool = False

    @field_validator("price", mode="before")
    @classmethod
    def _parse_price(cls, v: Any) -> Decimal | str:
        return parse_package_price(v)

    @field_validator("features", mode="before")
    @classmethod
    def _normalize_features(cls, v: Any) -> list[str]:
        return normalize_features(v)
