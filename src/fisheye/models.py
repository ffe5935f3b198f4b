"""Payload models for the FishEye admin REST API.

Only the fields needed for pagination bookkeeping are declared; any other
field the server returns on a repository is preserved as an extra attribute.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class Repository(BaseModel):
    """One repository as returned by /rest-service-fecru/admin/repositories."""

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    name: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")
    type: str | None = None
    enabled: bool | None = None
    description: str | None = None


class Page(BaseModel, Generic[T]):
    """One slice of a start/limit paged listing.

    Covers the half-open range ``[start, start + size)`` of the full result.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    values: list[T] = Field(default_factory=list)
    start: int = Field(ge=0)
    size: int = Field(ge=0)
    is_last_page: bool = Field(alias="isLastPage")

    @property
    def next_start(self) -> int:
        """Offset of the page following this one."""
        return self.start + self.size
