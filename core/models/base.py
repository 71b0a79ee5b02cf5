# =============================================================================
# core/models/base.py - Shared Request Schema Pieces
# =============================================================================
# Every admin request body is validated once, at the boundary, against a
# per-resource schema. Unknown fields are rejected instead of being passed
# through to the database.
#
# Update schemas rely on pydantic's "fields set" tracking:
# - omitted field      -> not in changes(), stored value left alone
# - explicit null      -> in changes() as None, stored value cleared
# =============================================================================

from typing import Annotated, Any, ClassVar, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    model_validator,
)

from lib.utils import blank_to_none, to_number


def default_if_blank(default: Any) -> BeforeValidator:
    """Validator that replaces None or a blank string with `default`."""

    def _apply(value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return default
        return value

    return BeforeValidator(_apply)


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _positive(value: Any) -> Any:
    if value is not None and value <= 0:
        raise ValueError("must be greater than 0")
    return value


# Non-empty text, surrounding whitespace removed
RequiredText = Annotated[str, BeforeValidator(_strip), Field(min_length=1)]

# Optional text; blank strings are stored as null
OptionalText = Annotated[Optional[str], BeforeValidator(blank_to_none)]

# Loosely-typed numbers ("12", 12, 12.0) coerced before storage
RequiredNumber = Annotated[float, BeforeValidator(to_number)]
OptionalNumber = Annotated[Optional[float], BeforeValidator(to_number)]
RequiredInt = Annotated[int, BeforeValidator(to_number)]
OptionalInt = Annotated[Optional[int], BeforeValidator(to_number)]

# Quantities that must be above zero, such as bodyweight
RequiredPositiveNumber = Annotated[float, BeforeValidator(to_number), AfterValidator(_positive)]
OptionalPositiveNumber = Annotated[
    Optional[float], BeforeValidator(to_number), AfterValidator(_positive)
]


class AdminRequest(BaseModel):
    """Base class for admin request bodies."""

    model_config = ConfigDict(extra="forbid")

    # Fields that may be omitted on update but never explicitly cleared
    NOT_NULL_FIELDS: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="after")
    def reject_cleared_required_fields(self):
        for name in self.NOT_NULL_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self

    def values(self) -> dict[str, Any]:
        """All fields, defaults included, as JSON-ready values."""
        return self.model_dump(mode="json")

    def changes(self) -> dict[str, Any]:
        """Only the fields present in the request, as JSON-ready values."""
        return self.model_dump(mode="json", exclude_unset=True)
