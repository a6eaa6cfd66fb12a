"""Mandoline data models.

Attributes are snake_case; aliases are the camelCase keys the client works with
after the response has been converted from the API's snake_case.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict[str, Any]:
        """camelCase dict of the fields the caller actually set."""
        return self.model_dump(by_alias=True, exclude_unset=True)


class _Record(_Model):
    """Identity and timestamp fields shared by stored records."""

    id: str
    created_at: str
    updated_at: str


class MetricCreate(_Model):
    name: str
    description: str
    tags: list[str] | None = None


class MetricUpdate(_Model):
    name: str | None = None
    description: str | None = None
    tags: list[str] | None = None


class Metric(_Record):
    """A named, described dimension that responses are scored against."""

    name: str
    description: str
    tags: list[str] | None = None


class EvaluationCreate(_Model):
    metric_id: str
    prompt: str
    response: str
    properties: dict[str, Any] | None = None


class EvaluationUpdate(_Model):
    properties: dict[str, Any] | None = None


class Evaluation(_Record):
    """A prompt/response pair scored against one metric."""

    metric_id: str
    prompt: str
    response: str
    properties: dict[str, Any] | None = None
    score: float
