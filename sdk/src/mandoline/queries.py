"""Query-parameter builders for the list endpoints."""

from __future__ import annotations

from typing import Any

from mandoline.config import DEFAULT_GET_LIMIT
from mandoline.utils import to_json_value


class _UnsetType:
    """Sentinel for an option the caller did not pass (distinct from None)."""

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Any = _UnsetType()

# Wire value for "filter for records that have no tags / no properties".
NULL = "null"


def _pagination(skip: int | None, limit: int | None) -> dict[str, Any]:
    return {
        "skip": 0 if skip is None else skip,
        "limit": DEFAULT_GET_LIMIT if limit is None else limit,
    }


def process_metric_get_options(
    skip: int | None = None,
    limit: int | None = None,
    tags: list[str] | None = UNSET,
) -> dict[str, Any]:
    """Build the ``metrics/`` query. ``tags=None`` and ``tags=[]`` both mean "no tags"."""
    params = _pagination(skip, limit)
    if tags is not UNSET:
        params["tags"] = list(tags) if tags else NULL
    return params


def process_evaluation_get_options(
    skip: int | None = None,
    limit: int | None = None,
    metric_id: str | None = UNSET,
    properties: dict | None = UNSET,
    filters: dict | None = UNSET,
) -> dict[str, Any]:
    """Build the ``evaluations/`` query.

    ``properties`` and the aggregated ``filters`` (``metric_id`` plus caller
    filters) travel as JSON strings in a single parameter each.
    """
    params = _pagination(skip, limit)

    if properties is not UNSET:
        params["properties"] = to_json_value(properties or None)

    aggregated: dict[str, Any] = {}
    if metric_id is not UNSET:
        aggregated["metric_id"] = metric_id
    if filters is not UNSET:
        if filters:
            aggregated.update(filters)
        else:
            aggregated["no_filters"] = True

    if aggregated:
        params["filters"] = to_json_value(aggregated)

    return params
