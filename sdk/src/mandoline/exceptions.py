"""Mandoline SDK exceptions and failure classification.

Every failure leaving the request pipeline is a ``MandolineError``. The error
carries one of six detail records, tagged by ``MandolineErrorType``:

- ``ValidationError``: a local pre-flight check (or the server) rejected the input
- ``RateLimitExceeded``: the server is throttling this key
- ``TimeoutError``: the connect or read/write/process deadline elapsed
- ``HTTPError``: a non-2xx response without a recognised error body
- ``RequestError``: the server reported a malformed request
- ``GenericError``: anything else
"""

from __future__ import annotations

import json
import logging
import traceback
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

import httpx

from mandoline.utils import safe_json_loads

logger = logging.getLogger(__name__)

TIMEOUT_MESSAGE = (
    "The request timed out. The API might be slow or unresponsive. Please try again later."
)


class MandolineErrorType(str, Enum):
    VALIDATION_ERROR = "ValidationError"
    RATE_LIMIT_EXCEEDED = "RateLimitExceeded"
    TIMEOUT_ERROR = "TimeoutError"
    HTTP_ERROR = "HTTPError"
    REQUEST_ERROR = "RequestError"
    GENERIC_ERROR = "GenericError"


@dataclass(frozen=True)
class ValidationErrorDetails:
    message: str
    errors: str = "Unknown validation error"
    type: MandolineErrorType = field(default=MandolineErrorType.VALIDATION_ERROR, init=False)


@dataclass(frozen=True)
class RateLimitExceededErrorDetails:
    message: str
    type: MandolineErrorType = field(default=MandolineErrorType.RATE_LIMIT_EXCEEDED, init=False)


@dataclass(frozen=True)
class TimeoutErrorDetails:
    message: str = TIMEOUT_MESSAGE
    type: MandolineErrorType = field(default=MandolineErrorType.TIMEOUT_ERROR, init=False)


@dataclass(frozen=True)
class HTTPErrorDetails:
    message: str
    status_code: int
    status_text: str
    response_text: str
    response_json: Any = None
    # The server may report a detail type this client does not know about.
    type: MandolineErrorType | str = MandolineErrorType.HTTP_ERROR


@dataclass(frozen=True)
class RequestErrorDetails:
    message: str
    request: dict[str, str] = field(default_factory=dict)
    type: MandolineErrorType = field(default=MandolineErrorType.REQUEST_ERROR, init=False)


@dataclass(frozen=True)
class GenericErrorDetails:
    message: str
    status_code: int | None = None
    errors: str | None = None
    stack: str | None = None
    type: MandolineErrorType = field(default=MandolineErrorType.GENERIC_ERROR, init=False)


MandolineErrorDetails = Union[
    ValidationErrorDetails,
    RateLimitExceededErrorDetails,
    TimeoutErrorDetails,
    HTTPErrorDetails,
    RequestErrorDetails,
    GenericErrorDetails,
]


class MandolineError(Exception):
    """Base exception for the Mandoline SDK, wrapping a tagged detail record."""

    def __init__(self, details: MandolineErrorDetails):
        super().__init__(details.message)
        self.details = details

    @property
    def type(self) -> MandolineErrorType | str:
        return self.details.type

    @property
    def message(self) -> str:
        return self.details.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.details!r})"


class ValidationError(MandolineError):
    """Input rejected before (or by) the API."""

    def __init__(self, message: str, errors: str = "Unknown validation error"):
        super().__init__(ValidationErrorDetails(message=message, errors=errors))


class ConfigurationError(RuntimeError):
    """The client is missing configuration it needs to talk to the API."""


def handle_error(err: object) -> MandolineError:
    """Classify any failure into a MandolineError.

    Accepts an exception raised anywhere in the pipeline, or the
    ``httpx.Response`` of a non-2xx reply. Already-classified errors are
    returned unchanged.
    """
    if isinstance(err, MandolineError):
        return err

    if isinstance(err, httpx.Response):
        error = _from_response(err)
    elif isinstance(err, BaseException):
        error = MandolineError(_from_exception(err))
    else:
        error = MandolineError(GenericErrorDetails(message=_describe(err)))

    if error.message:
        logger.error("Error: %s", error.message)
    return error


def _from_response(response: httpx.Response) -> MandolineError:
    response_text = response.text
    response_json = safe_json_loads(response_text)
    detail = response_json.get("detail") if isinstance(response_json, dict) else None
    if not isinstance(detail, dict):
        detail = {}
    error_type = detail.get("type")
    message = detail.get("message")
    additional_info = detail.get("additional_info")
    if not isinstance(additional_info, dict):
        additional_info = {}

    if error_type == MandolineErrorType.VALIDATION_ERROR.value:
        return ValidationError(
            message or "Validation error",
            additional_info.get("errors") or "Unknown validation error",
        )

    if error_type == MandolineErrorType.RATE_LIMIT_EXCEEDED.value or (
        error_type is None and response.status_code == 429
    ):
        return MandolineError(
            RateLimitExceededErrorDetails(message=message or "Rate limit exceeded")
        )

    if error_type == MandolineErrorType.REQUEST_ERROR.value:
        request_info = additional_info.get("request")
        if not isinstance(request_info, dict):
            request_info = {}
        return MandolineError(
            RequestErrorDetails(
                message=message or "Request error occurred",
                request={
                    "url": request_info.get("url") or _request_url(response),
                    "method": request_info.get("method") or _request_method(response),
                },
            )
        )

    status_text = response.reason_phrase
    return MandolineError(
        HTTPErrorDetails(
            type=_known_type(error_type),
            message=message or f"HTTP Error: {response.status_code} {status_text}",
            status_code=response.status_code,
            status_text=status_text,
            response_text=response_text,
            response_json=response_json,
        )
    )


def _from_exception(exc: BaseException) -> MandolineErrorDetails:
    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return TimeoutErrorDetails()
    stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return GenericErrorDetails(message=str(exc) or type(exc).__name__, stack=stack)


def _known_type(error_type: Any) -> MandolineErrorType | str:
    if not error_type or not isinstance(error_type, str):
        return MandolineErrorType.HTTP_ERROR
    try:
        return MandolineErrorType(error_type)
    except ValueError:
        return error_type


def _request_url(response: httpx.Response) -> str:
    try:
        return str(response.request.url)
    except RuntimeError:
        return ""


def _request_method(response: httpx.Response) -> str:
    try:
        return response.request.method
    except RuntimeError:
        return ""


def _describe(obj: object) -> str:
    try:
        return json.dumps(obj)
    except (TypeError, ValueError):
        return repr(obj)
