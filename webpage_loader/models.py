"""Pydantic models shared across the loader."""

from __future__ import annotations

import codecs
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class Document(BaseModel):
    """A unit of extracted text paired with its source metadata.

    Both fields are read-only: ``metadata`` is stored as a read-only mapping
    and dumps back to a plain dict.
    """

    model_config = ConfigDict(frozen=True)

    page_content: str
    metadata: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("metadata", mode="after")
    @classmethod
    def _freeze_metadata(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(value))

    @field_serializer("metadata")
    def _dump_metadata(self, value: Mapping[str, Any]) -> Dict[str, Any]:
        return dict(value)

    @property
    def source(self) -> Optional[str]:
        return self.metadata.get("source")


class FetchedPage(BaseModel):
    """Represents the result of fetching a single URL."""

    source_url: str
    final_url: str
    fetched_at: datetime
    status: int
    headers: Dict[str, Any] = Field(default_factory=dict)
    content_hash: str
    text: str

    @property
    def is_success(self) -> bool:
        """Return True when the fetch was successful (2xx or 3xx)."""
        return self.status < 400


class LoaderOptions(BaseModel):
    """Per-loader overrides of the global settings.

    Unset fields fall back to :class:`~webpage_loader.config.Settings`.
    """

    timeout: Optional[float] = Field(default=None, gt=0)
    max_attempts: Optional[int] = Field(default=None, ge=1)
    encoding: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)

    @field_validator("encoding")
    @classmethod
    def _known_encoding(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            codecs.lookup(value)
        except LookupError as exc:
            raise ValueError(f"Unknown encoding: {value!r}") from exc
        return value
