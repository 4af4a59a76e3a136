"""
Bookmark Saver Backend — Pydantic Request/Response Schemas
===========================================================

What:  Pydantic models defining the bookmark entity and the API contract.
Why:   Explicit shape for documents that the store itself does not enforce.
How:   FastAPI uses these models to parse request bodies, serialize responses,
       and generate OpenAPI documentation.

Naming:
    Python attributes are snake_case; the wire format and the stored
    documents use camelCase (collectionId, createdAt, updatedAt). The store's
    `_id` is exposed as `id`.
"""

from datetime import datetime
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel


# ══════════════════════════════════════════════════════════════════════════
# Field Helpers
# ══════════════════════════════════════════════════════════════════════════


class UrlParseResult(NamedTuple):
    """Outcome of parse_url: exactly one of `url` or `error` is set."""

    url: Optional[AnyUrl]
    error: Optional[str]

    @property
    def ok(self) -> bool:
        return self.url is not None


_url_adapter = TypeAdapter(AnyUrl)


def parse_url(value: str) -> UrlParseResult:
    """
    Parse `value` as an absolute URL.

    Uses WHATWG-style parsing: relative references ("not-a-valid-url") and
    special schemes without a host ("http://") are rejected.
    """
    try:
        return UrlParseResult(url=_url_adapter.validate_python(value), error=None)
    except PydanticValidationError as e:
        return UrlParseResult(url=None, error=e.errors()[0]["msg"])


def normalize_tags(tags: Optional[Iterable[str]]) -> List[str]:
    """Trim, drop empty entries, and de-duplicate keeping first occurrence."""
    seen = set()
    result = []
    for tag in tags or ():
        tag = tag.strip()
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class BookmarkCreate(BaseModel):
    """
    What:  Body of POST /bookmarks.
    Why optional url/title: Presence is a business rule checked by the
           service so the client gets "URL and title are required" (400)
           rather than a generic schema error.
    """

    url: Optional[str] = Field(default=None, description="Absolute URL to save")
    title: Optional[str] = Field(default=None, description="Display title")
    description: Optional[str] = Field(default=None, description="Free-text notes")
    tags: Optional[List[str]] = Field(default=None, description="Tag names")
    collection_id: Optional[str] = Field(
        default=None, description="Optional grouping reference"
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


# ══════════════════════════════════════════════════════════════════════════
# Entity / Response Models
# ══════════════════════════════════════════════════════════════════════════


class Bookmark(BaseModel):
    """
    What:  A stored bookmark as returned by every bookmark endpoint.
    Who:   Built from raw store documents with `from_document`.
    """

    id: str = Field(description="Store-assigned identifier (ObjectId hex)")
    url: str
    title: str
    description: str = ""
    tags: List[str] = Field(default_factory=list)
    collection_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Bookmark":
        data = dict(document)
        data["id"] = str(data.pop("_id"))
        return cls.model_validate(data)


class TagCount(BaseModel):
    """A tag with the number of bookmarks carrying it."""

    tag: str
    count: int


# ══════════════════════════════════════════════════════════════════════════
# Error / Health Models
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Error body shared by all endpoints.

    Example:
        {"error": "URL and title are required", "request_id": "a1b2c3d4"}
    """

    error: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Always 'ok' when the process is serving")
    timestamp: datetime = Field(description="Server time (UTC)")
    version: str = Field(description="Application version")
    database: str = Field(description="Store connectivity: connected, disconnected")
