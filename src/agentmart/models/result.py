"""Tagged success/failure results."""

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a value or a human-readable failure reason."""

    ok: bool
    value: T | None = None
    error: str | None = None

    @classmethod
    def success(cls, value: T | None = None) -> "Result[T]":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: str) -> "Result[T]":
        return cls(ok=False, error=error)


# File validation yields no value, only a verdict
FileCheck = Result[None]
# Upload yields the stored object key
UploadResult = Result[str]


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ())) or "row"
        parts.append(f"{location}: {err.get('msg', 'invalid')}")
    return "; ".join(parts)


def validate_row(model: type[M], row: Any) -> Result[M]:
    """Validate one backend row against a model."""
    try:
        return Result.success(model.model_validate(row))
    except PydanticValidationError as e:
        return Result.failure(_describe(e))


def validate_rows(model: type[M], rows: Iterable[Any]) -> Result[list[M]]:
    """Validate a batch of rows, failing on the first malformed one."""
    items: list[M] = []
    for index, row in enumerate(rows):
        result = validate_row(model, row)
        if not result.ok:
            return Result.failure(f"row {index}: {result.error}")
        items.append(result.value)  # type: ignore[arg-type]
    return Result.success(items)
