"""Navigation descriptors and guard decisions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class NavigationTarget(BaseModel):
    """Destination of an in-flight navigation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str
    full_path: str = Field(alias="fullPath")
    query: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _default_full_path(cls, data: Any) -> Any:
        if isinstance(data, dict) and not (data.get("full_path") or data.get("fullPath")):
            data = dict(data)
            full_path = data.get("path") or ""
            query = data.get("query") or {}
            if query:
                full_path = f"{full_path}?{urlencode(query)}"
            data["full_path"] = full_path
        return data

    @field_validator("path")
    @classmethod
    def _path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("path must start with '/'")
        return value


class NavigationOrigin(NavigationTarget):
    """Route active before the transition. Guards accept it but never read it."""


@dataclass(frozen=True)
class Proceed:
    def __str__(self) -> str:
        return "proceed"


@dataclass(frozen=True)
class RedirectTo:
    path: str
    query: dict[str, str] = field(default_factory=dict)
    replace: bool = False

    @property
    def location(self) -> str:
        if not self.query:
            return self.path
        return f"{self.path}?{urlencode(self.query)}"

    def __str__(self) -> str:
        return f"redirect {self.location}"


GuardDecision = Union[Proceed, RedirectTo]

PROCEED = Proceed()
