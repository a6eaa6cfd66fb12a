"""Asynchronous Mandoline client."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

import httpx
import pydantic
from pydantic.alias_generators import to_camel

from mandoline.config import MAX_GET_LIMIT, RequestConfig, resolve_config
from mandoline.connection import make_request, process_url
from mandoline.exceptions import (
    ConfigurationError,
    MandolineError,
    RequestErrorDetails,
    ValidationError,
    handle_error,
)
from mandoline.models import (
    Evaluation,
    EvaluationCreate,
    EvaluationUpdate,
    Metric,
    MetricCreate,
    MetricUpdate,
    _Model,
)
from mandoline.queries import (
    UNSET,
    process_evaluation_get_options,
    process_metric_get_options,
)
from mandoline.utils import to_local_case
from mandoline.validation import (
    validate_evaluation_create,
    validate_evaluation_update,
    validate_evaluations_get,
    validate_id,
    validate_metric_create,
    validate_metric_update,
    validate_metrics_get,
)

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)


def _payload(data: Any, model: type[_Model]) -> dict[str, Any]:
    """Normalize a model instance or mapping to a camelCase dict of set fields."""
    if isinstance(data, model):
        return data.to_payload()
    if not isinstance(data, Mapping):
        raise ValidationError(f"{model.__name__} must be a {model.__name__} or a mapping.")

    payload = to_local_case(dict(data))
    unknown = set(payload) - {to_camel(name) for name in model.model_fields}
    if unknown:
        raise ValidationError(
            f"Unknown {model.__name__} field(s): {', '.join(sorted(unknown))}."
        )
    return payload


def _parse(model: type[ModelT], data: Any) -> ModelT:
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise handle_error(e) from e


def _parse_list(model: type[ModelT], data: Any) -> list[ModelT]:
    if not isinstance(data, list):
        raise handle_error(TypeError(f"Expected a list of {model.__name__}, got {type(data).__name__}"))
    return [_parse(model, item) for item in data]


class Mandoline:
    """Client for the Mandoline evaluation API.

    Configuration is resolved once, here: explicit arguments win over the
    ``MANDOLINE_*`` environment variables, which win over the defaults.
    Timeouts are in milliseconds.

    Usage:
        client = Mandoline(api_key="sk_...")
        metric = await client.create_metric(
            MetricCreate(name="Obsequiousness", description="Excessive agreeableness.")
        )
        evaluations = await client.evaluate([metric], prompt="...", response="...")
    """

    def __init__(
        self,
        api_key: str | None = None,
        api_base_url: str | None = None,
        connect_timeout: int | None = None,
        rwp_timeout: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._api_key, self._request_config = resolve_config(
            api_key=api_key,
            api_base_url=api_base_url,
            connect_timeout=connect_timeout,
            rwp_timeout=rwp_timeout,
        )
        self._transport = transport

    @property
    def request_config(self) -> RequestConfig:
        return self._request_config

    def _get_auth_header(self) -> dict[str, str]:
        if not self._api_key:
            raise ConfigurationError(
                "API key not provided and MANDOLINE_API_KEY environment variable is not set."
            )
        return {"X-API-KEY": self._api_key}

    async def _request(
        self,
        method: str,
        endpoint: str,
        params: dict | None = None,
        data: dict | None = None,
    ) -> Any:
        return await make_request(
            self._request_config,
            method,
            endpoint,
            self._get_auth_header(),
            params=params,
            data=data,
            transport=self._transport,
        )

    async def _get(self, endpoint: str, params: dict | None = None) -> Any:
        limit = (params or {}).get("limit")
        if limit is not None and limit > MAX_GET_LIMIT:
            raise MandolineError(
                RequestErrorDetails(
                    message=(
                        f"Limit exceeds maximum allowed value of {MAX_GET_LIMIT}. "
                        "Please reduce the limit."
                    ),
                    request={
                        "url": process_url(self._request_config.api_base_url, endpoint, params),
                        "method": "GET",
                    },
                )
            )
        return await self._request("GET", endpoint, params=params)

    async def _post(self, endpoint: str, data: dict) -> Any:
        return await self._request("POST", endpoint, data=data)

    async def _put(self, endpoint: str, data: dict) -> Any:
        return await self._request("PUT", endpoint, data=data)

    async def _delete(self, endpoint: str) -> Any:
        return await self._request("DELETE", endpoint)

    # ── Metrics ──

    async def create_metric(self, metric: MetricCreate | Mapping[str, Any]) -> Metric:
        """Create a new evaluation metric."""
        payload = _payload(metric, MetricCreate)
        validate_metric_create(payload)
        return _parse(Metric, await self._post("metrics/", payload))

    async def get_metric(self, metric_id: str) -> Metric:
        validate_id(metric_id, "Metric ID")
        return _parse(Metric, await self._get(f"metrics/{metric_id}"))

    async def get_metrics(
        self,
        *,
        skip: int | None = None,
        limit: int | None = None,
        tags: list[str] | None = UNSET,
    ) -> list[Metric]:
        """List metrics.

        ``tags=None`` or ``tags=[]`` selects metrics without tags; leaving
        ``tags`` out applies no tag filter at all.
        """
        options: dict[str, Any] = {"skip": skip, "limit": limit}
        if tags is not UNSET:
            options["tags"] = tags
        validate_metrics_get(options)
        params = process_metric_get_options(skip, limit, tags)
        return _parse_list(Metric, await self._get("metrics/", params))

    async def update_metric(
        self, metric_id: str, update: MetricUpdate | Mapping[str, Any]
    ) -> Metric:
        validate_id(metric_id, "Metric ID")
        payload = _payload(update, MetricUpdate)
        validate_metric_update(payload)
        return _parse(Metric, await self._put(f"metrics/{metric_id}", payload))

    async def delete_metric(self, metric_id: str) -> None:
        validate_id(metric_id, "Metric ID")
        await self._delete(f"metrics/{metric_id}")

    # ── Evaluations ──

    async def evaluate(
        self,
        metrics: Sequence[Metric | Mapping[str, Any]],
        prompt: str,
        response: str,
        properties: dict[str, Any] | None = UNSET,
    ) -> list[Evaluation]:
        """Score one prompt/response pair against several metrics concurrently.

        Returns evaluations in the order of ``metrics``. If any request fails,
        that error is raised; requests still in flight are left to finish.
        """
        payloads = []
        for metric in metrics:
            metric_id = metric.id if isinstance(metric, Metric) else metric.get("id")
            payload: dict[str, Any] = {"metricId": metric_id, "prompt": prompt, "response": response}
            if properties is not UNSET:
                payload["properties"] = properties
            validate_evaluation_create(payload)
            payloads.append(payload)

        logger.debug("Evaluating response against %d metrics", len(payloads))
        return list(await asyncio.gather(*(self.create_evaluation(p) for p in payloads)))

    async def create_evaluation(
        self, evaluation: EvaluationCreate | Mapping[str, Any]
    ) -> Evaluation:
        """Score a single prompt/response pair against one metric."""
        payload = _payload(evaluation, EvaluationCreate)
        validate_evaluation_create(payload)
        return _parse(Evaluation, await self._post("evaluations/", payload))

    async def get_evaluation(self, evaluation_id: str) -> Evaluation:
        validate_id(evaluation_id, "Evaluation ID")
        return _parse(Evaluation, await self._get(f"evaluations/{evaluation_id}"))

    async def get_evaluations(
        self,
        *,
        skip: int | None = None,
        limit: int | None = None,
        metric_id: str = UNSET,
        properties: dict[str, Any] | None = UNSET,
        filters: dict[str, Any] | None = UNSET,
    ) -> list[Evaluation]:
        """List evaluations.

        ``properties`` matches evaluations by their properties (``None`` or
        ``{}`` selects those without any). ``filters`` is a free-form mapping
        forwarded to the API together with ``metric_id``.
        """
        options: dict[str, Any] = {"skip": skip, "limit": limit}
        if metric_id is not UNSET:
            options["metricId"] = metric_id
        if properties is not UNSET:
            options["properties"] = properties
        if filters is not UNSET:
            options["filters"] = filters
        validate_evaluations_get(options)
        params = process_evaluation_get_options(skip, limit, metric_id, properties, filters)
        return _parse_list(Evaluation, await self._get("evaluations/", params))

    async def update_evaluation(
        self, evaluation_id: str, update: EvaluationUpdate | Mapping[str, Any]
    ) -> Evaluation:
        validate_id(evaluation_id, "Evaluation ID")
        payload = _payload(update, EvaluationUpdate)
        validate_evaluation_update(payload)
        return _parse(Evaluation, await self._put(f"evaluations/{evaluation_id}", payload))

    async def delete_evaluation(self, evaluation_id: str) -> None:
        validate_id(evaluation_id, "Evaluation ID")
        await self._delete(f"evaluations/{evaluation_id}")
