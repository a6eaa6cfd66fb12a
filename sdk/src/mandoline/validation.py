"""Pre-flight checks on caller input. Every failure raises ValidationError before any request."""

from __future__ import annotations

import math
import re
import uuid
from collections.abc import Mapping
from typing import Any

from mandoline.exceptions import ValidationError

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def is_valid_uuid(value: Any) -> bool:
    """True for a hyphenated, RFC 4122 variant, version 4 UUID string."""
    if not isinstance(value, str) or not _UUID_RE.match(value):
        return False
    parsed = uuid.UUID(value)
    return parsed.version == 4 and parsed.variant == uuid.RFC_4122


def is_serializable(value: Any) -> bool:
    if isinstance(value, float):
        return math.isfinite(value)
    if value is None or isinstance(value, (str, bool, int)):
        return True
    if isinstance(value, (list, tuple)):
        return all(is_serializable(item) for item in value)
    if isinstance(value, dict):
        return all(isinstance(k, str) and is_serializable(v) for k, v in value.items())
    return False


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


# ── Primitive validators ──

def validate_id(value: Any, label: str) -> None:
    if not is_valid_uuid(value):
        raise ValidationError(f"{label} must be a valid UUID v4.")


def validate_string(value: Any, label: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{label} must be a non-empty string.")


def validate_nullable_string_list(value: Any, label: str) -> None:
    """None means "explicitly no items"; anything else must be a list of strings."""
    if value is None:
        return
    if not isinstance(value, (list, tuple)) or not all(isinstance(item, str) for item in value):
        raise ValidationError(f"{label} must be an array of strings or null.")


def validate_nullable_serializable_dict(value: Any, label: str) -> None:
    if value is None:
        return
    if not isinstance(value, dict):
        raise ValidationError(f"{label} must be an object or null.")
    for key, item in value.items():
        if not isinstance(key, str) or not is_serializable(item):
            raise ValidationError(f"{label}.{key} must be a serializable value.")


def validate_pagination(skip: Any = None, limit: Any = None) -> None:
    if skip is not None and (not _is_integer(skip) or skip < 0):
        raise ValidationError("Skip must be a non-negative integer.")
    if limit is not None and (not _is_integer(limit) or limit <= 0):
        raise ValidationError("Limit must be a positive integer.")


def check_at_least_one_field(payload: Mapping[str, Any]) -> None:
    if not payload:
        raise ValidationError("At least one field must be provided.")


# ── Entity validators ──
# Payloads are local-case mappings holding only the fields the caller set.

def validate_metric_create(metric: Mapping[str, Any]) -> None:
    validate_string(metric.get("name"), "Metric name")
    validate_string(metric.get("description"), "Metric description")
    if "tags" in metric:
        validate_nullable_string_list(metric["tags"], "Metric tags")


def validate_metric_update(update: Mapping[str, Any]) -> None:
    if "name" in update:
        validate_string(update["name"], "Metric name")
    if "description" in update:
        validate_string(update["description"], "Metric description")
    if "tags" in update:
        validate_nullable_string_list(update["tags"], "Metric tags")
    check_at_least_one_field(update)


def validate_metrics_get(options: Mapping[str, Any]) -> None:
    validate_pagination(options.get("skip"), options.get("limit"))
    if "tags" in options:
        validate_nullable_string_list(options["tags"], "Tags")


def validate_evaluation_create(evaluation: Mapping[str, Any]) -> None:
    validate_id(evaluation.get("metricId"), "Evaluation metricId")
    validate_string(evaluation.get("prompt"), "Evaluation prompt")
    validate_string(evaluation.get("response"), "Evaluation response")
    if "properties" in evaluation:
        validate_nullable_serializable_dict(evaluation["properties"], "Evaluation properties")


def validate_evaluation_update(update: Mapping[str, Any]) -> None:
    if "properties" in update:
        validate_nullable_serializable_dict(update["properties"], "Evaluation properties")
    check_at_least_one_field(update)


def validate_evaluations_get(options: Mapping[str, Any]) -> None:
    validate_pagination(options.get("skip"), options.get("limit"))
    if "metricId" in options:
        validate_id(options["metricId"], "Evaluation metricId")
    if "properties" in options:
        validate_nullable_serializable_dict(options["properties"], "Evaluation properties")
    if "filters" in options:
        filters = options["filters"]
        if filters is None:
            return
        if not isinstance(filters, dict):
            raise ValidationError("Filters must be an object.")
        for key, value in filters.items():
            if not is_serializable(value):
                raise ValidationError(f"Filter '{key}' must be a serializable value.")
