"""Domain models for object store listings and credentials."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Credentials(BaseModel):
    """A resolved credential set and the provider that produced it."""

    model_config = ConfigDict(frozen=True)

    access_key_id: str
    secret_access_key: str = Field(repr=False)
    session_token: Optional[str] = Field(default=None, repr=False)
    source: str = Field(..., description="Name of the provider that resolved these")
    expiration: Optional[datetime] = Field(
        default=None, description="UTC expiry of temporary credentials"
    )

    def expires_within(self, seconds: float) -> bool:
        """Return True if the credentials expire within ``seconds`` from now."""
        if self.expiration is None:
            return False
        expiration = self.expiration
        if expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        return expiration - timedelta(seconds=seconds) <= datetime.now(timezone.utc)


class StorageObject(BaseModel):
    """A single object (file) in a listing page."""

    model_config = ConfigDict(frozen=True)

    key: str
    size: int = Field(default=0, ge=0)
    last_modified: datetime
    etag: str = ""
    content_type: Optional[str] = None

    @property
    def name(self) -> str:
        """Last path segment of the key."""
        return self.key.rstrip("/").rsplit("/", 1)[-1]


class ListingPage(BaseModel):
    """One page of a delimiter-aware listing."""

    model_config = ConfigDict(frozen=True)

    objects: list[StorageObject] = Field(default_factory=list)
    prefixes: list[str] = Field(default_factory=list)
    truncated: bool = False
    next_continuation_token: Optional[str] = None

    @model_validator(mode="after")
    def _check_pagination(self) -> "ListingPage":
        if self.truncated and not self.next_continuation_token:
            raise ValueError("truncated page must carry a continuation token")
        if not self.truncated and self.next_continuation_token:
            raise ValueError("complete page must not carry a continuation token")
        return self


class ListQuery(BaseModel):
    """Parameters for fetching one listing page."""

    model_config = ConfigDict(frozen=True)

    prefix: str = ""
    delimiter: str = "/"
    max_keys: int = Field(default=1000, ge=1, le=1000)
    continuation_token: Optional[str] = None


class SearchQuery(ListQuery):
    """A listing query narrowed by a key substring.

    Searches default to no delimiter so that keys nested below the prefix
    are matched too.
    """

    delimiter: str = ""
    query: str = ""


class Breadcrumb(BaseModel):
    """One navigable segment of a prefix."""

    model_config = ConfigDict(frozen=True)

    name: str
    prefix: str
