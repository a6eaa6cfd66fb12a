"""Mandoline Python SDK — define metrics and score LLM responses against them."""

from mandoline.client import Mandoline
from mandoline.config import MandolineSettings, RequestConfig
from mandoline.models import (
    Evaluation,
    EvaluationCreate,
    EvaluationUpdate,
    Metric,
    MetricCreate,
    MetricUpdate,
)
from mandoline.exceptions import (
    ConfigurationError,
    GenericErrorDetails,
    HTTPErrorDetails,
    MandolineError,
    MandolineErrorDetails,
    MandolineErrorType,
    RateLimitExceededErrorDetails,
    RequestErrorDetails,
    TimeoutErrorDetails,
    ValidationError,
    ValidationErrorDetails,
)

__all__ = [
    "Mandoline",
    "MandolineSettings",
    "RequestConfig",
    "Metric",
    "MetricCreate",
    "MetricUpdate",
    "Evaluation",
    "EvaluationCreate",
    "EvaluationUpdate",
    "ConfigurationError",
    "MandolineError",
    "MandolineErrorDetails",
    "MandolineErrorType",
    "ValidationError",
    "ValidationErrorDetails",
    "RateLimitExceededErrorDetails",
    "TimeoutErrorDetails",
    "HTTPErrorDetails",
    "RequestErrorDetails",
    "GenericErrorDetails",
]
