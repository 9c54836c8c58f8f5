"""Models, constants and validation helpers shared by every service.

Each validation helper raises :class:`~sonarcli.exceptions.ValidationError`
on failure and returns ``None`` otherwise, so service ``validate_*`` methods
read as a flat list of checks.
"""

from __future__ import annotations

from typing import Annotated, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

from sonarcli.exceptions import ValidationError
from sonarcli.sonar.query import UrlTag

MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 500
DEFAULT_PAGE_SIZE = 100

MAX_PROJECT_KEY_LENGTH = 400
MAX_PROJECT_NAME_LENGTH = 500
MAX_HOTSPOT_COMMENT_LENGTH = 1000

# Reasons appended to validation messages.
INVALID_VALUE = "invalid value"
MISSING_REQUIRED = "missing required parameter"
INVALID_FORMAT = "invalid format"
OUT_OF_RANGE = "value out of range"

ALLOWED_IMPACT_SEVERITIES = frozenset({"BLOCKER", "HIGH", "MEDIUM", "LOW", "INFO"})
ALLOWED_IMPACT_SOFTWARE_QUALITIES = frozenset({"MAINTAINABILITY", "RELIABILITY", "SECURITY"})
ALLOWED_SEVERITIES = frozenset({"INFO", "MINOR", "MAJOR", "CRITICAL", "BLOCKER"})
ALLOWED_OWASP_CATEGORIES = frozenset(f"a{n}" for n in range(1, 11))
ALLOWED_SANS_TOP25_CATEGORIES = frozenset({"insecure-interaction", "risky-resource", "porous-defenses"})


class SonarModel(BaseModel):
    """Base for response models: accepts wire names and ignores unknown keys."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class PaginationArgs(BaseModel):
    """Page number and page size shared by every paginated endpoint."""

    page: Annotated[int, UrlTag("p,omitempty")] = Field(default=0, description="1-based page number")
    page_size: Annotated[int, UrlTag("ps,omitempty")] = Field(
        default=0, description=f"Page size, between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}"
    )

    def validate_pagination(self) -> None:
        validate_pagination(self.page, self.page_size)


class Paging(SonarModel):
    """Paging block returned alongside paginated collections."""

    page_index: int = Field(default=0, alias="pageIndex")
    page_size: int = Field(default=0, alias="pageSize")
    total: int = 0


# --------------------------------------------------------------------------- #
# Validation helpers
# --------------------------------------------------------------------------- #


def authorized_values_list(allowed: Iterable[str]) -> str:
    """Comma-separated, sorted rendering of an allowed-value set."""
    return ", ".join(sorted(allowed))


def validate_required(value: Optional[str], field: str) -> None:
    if not value:
        raise ValidationError(field, "is required", MISSING_REQUIRED)


def validate_max_length(value: str, max_length: int, field: str) -> None:
    if len(value) > max_length:
        raise ValidationError(
            field, f"exceeds maximum length of {max_length} characters", OUT_OF_RANGE
        )


def validate_min_length(value: str, min_length: int, field: str) -> None:
    if len(value) < min_length:
        raise ValidationError(field, f"must be at least {min_length} characters", OUT_OF_RANGE)


def validate_range(value: int, minimum: int, maximum: int, field: str) -> None:
    if value < minimum or value > maximum:
        raise ValidationError(field, f"must be between {minimum} and {maximum}", OUT_OF_RANGE)


def validate_pagination(page: int, page_size: int) -> None:
    """Check page and page size; zero means "not set" and is always accepted."""
    if page != 0 and page < MIN_PAGE_SIZE:
        raise ValidationError("Page", "must be greater than 0", OUT_OF_RANGE)
    if page_size != 0 and not MIN_PAGE_SIZE <= page_size <= MAX_PAGE_SIZE:
        raise ValidationError(
            "PageSize", f"must be between {MIN_PAGE_SIZE} and {MAX_PAGE_SIZE}", OUT_OF_RANGE
        )


def is_value_authorized(value: Optional[str], allowed: Iterable[str], field: str) -> None:
    """Accept an empty value or one member of *allowed*."""
    allowed = frozenset(allowed)
    if value and value not in allowed:
        raise ValidationError(
            field, f"must be one of: {authorized_values_list(allowed)}", INVALID_VALUE
        )


def are_values_authorized(values: Iterable[str], allowed: Iterable[str], field: str) -> None:
    allowed = frozenset(allowed)
    for value in values:
        if value not in allowed:
            raise ValidationError(
                field,
                f'value "{value}" is not allowed. Must be one of: {authorized_values_list(allowed)}',
                INVALID_VALUE,
            )


def validate_map_keys(values: dict[str, str], allowed: Iterable[str], field: str) -> None:
    allowed = frozenset(allowed)
    for key in values:
        if key not in allowed:
            raise ValidationError(
                field,
                f'key "{key}" is not allowed. Must be one of: {authorized_values_list(allowed)}',
                INVALID_VALUE,
            )


def validate_map_values(values: dict[str, str], allowed: Iterable[str], field: str) -> None:
    allowed = frozenset(allowed)
    for key, value in values.items():
        if value not in allowed:
            raise ValidationError(
                field,
                f'value "{value}" for key "{key}" is not allowed. '
                f"Must be one of: {authorized_values_list(allowed)}",
                INVALID_VALUE,
            )
