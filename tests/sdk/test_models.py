"""Tests for SDK data models."""

from __future__ import annotations

from mandoline.models import (
    Evaluation,
    EvaluationUpdate,
    Metric,
    MetricCreate,
    MetricUpdate,
)
from mandoline.utils import to_local_case


def test_metric_from_api_response(metric_data):
    metric = Metric.model_validate(to_local_case(metric_data))
    assert metric.id == metric_data["id"]
    assert metric.name == "Obsequiousness"
    assert metric.tags == ["personality"]
    assert metric.created_at == "2024-01-01T00:00:00Z"


def test_metric_ignores_unknown_fields(metric_data):
    metric = Metric.model_validate(to_local_case({**metric_data, "owner_id": "someone"}))
    assert not hasattr(metric, "owner_id")


def test_evaluation_from_api_response(evaluation_data):
    evaluation = Evaluation.model_validate(to_local_case(evaluation_data))
    assert evaluation.metric_id == evaluation_data["metric_id"]
    assert evaluation.score == 0.42
    assert evaluation.properties == {"modelName": "my-llm-v1", "temperature": 0.7}


def test_accepts_python_field_names():
    create = MetricCreate(name="M", description="D", tags=["a"])
    assert create.to_payload() == {"name": "M", "description": "D", "tags": ["a"]}


def test_payload_omits_unset_fields():
    assert MetricUpdate().to_payload() == {}
    assert MetricUpdate(name="New").to_payload() == {"name": "New"}


def test_payload_keeps_explicit_none():
    assert MetricUpdate(tags=None).to_payload() == {"tags": None}
    assert EvaluationUpdate(properties=None).to_payload() == {"properties": None}


def test_payload_uses_camel_case_aliases(evaluation_data):
    evaluation = Evaluation.model_validate(to_local_case(evaluation_data))
    payload = evaluation.to_payload()
    assert payload["metricId"] == evaluation_data["metric_id"]
    assert payload["createdAt"] == evaluation_data["created_at"]
