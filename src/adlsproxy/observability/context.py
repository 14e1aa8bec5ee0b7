"""Shared observability context utilities."""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Mapping, Optional

from opentelemetry.trace import Status, StatusCode
from pydantic import ConfigDict, Field

from adlsproxy.logging.filters import clear_request_context, set_request_context
from adlsproxy.telemetry import get_tracer
from adlsproxy.types.base import ProxyBaseModel


class ExecutionRequestContext(ProxyBaseModel):
    """Observability context carried through one proxy request."""
    model_config = ConfigDict(frozen=False)

    request_id: str
    correlation_id: Optional[str] = None
    attributes: Dict[str, Any] = Field(default_factory=dict)
    telemetry_base: Dict[str, str] = Field(default_factory=dict, exclude=True)

    @classmethod
    def generate(cls, **kwargs: Any) -> "ExecutionRequestContext":
        """Generate a new context with a unique request id."""
        ctx = cls(request_id=str(uuid.uuid4()), **kwargs)
        ctx.telemetry_base = ctx.to_telemetry_dict()
        return ctx

    @staticmethod
    def _stringify(value: Any) -> Optional[str]:
        if value is None:
            return None
        return str(value)

    def to_telemetry_dict(self) -> Dict[str, str]:
        payload: Dict[str, str] = {"request_id": self.request_id}
        if self.correlation_id:
            payload["correlation_id"] = self.correlation_id
        for key, value in (self.attributes or {}).items():
            sanitized = self._stringify(value)
            if sanitized is not None:
                payload[f"ctx.{key}"] = sanitized
        return payload


@contextmanager
def execution_request_scope(
    ctx: ExecutionRequestContext,
    *,
    operation: Optional[str] = None,
) -> Iterator[None]:
    """Apply logging + tracing scope for a request."""
    ctx.telemetry_base = ctx.to_telemetry_dict()

    set_request_context(request_id=ctx.request_id, operation=operation)

    tracer = get_tracer("adlsproxy")
    span_name = operation or "adlsproxy.request"
    span_attributes = {f"adlsproxy.{key}": value for key, value in ctx.telemetry_base.items()}
    if operation:
        span_attributes["adlsproxy.operation.name"] = operation

    with tracer.start_as_current_span(span_name) as span:
        for key, value in span_attributes.items():
            span.set_attribute(key, value)

        try:
            yield
        except Exception as exc:
            span.record_exception(exc)
            span.set_status(Status(StatusCode.ERROR))
            raise
        finally:
            clear_request_context()


def resolve_request_context(ctx: Optional[Any]) -> ExecutionRequestContext:
    """Normalize inbound context data into an ExecutionRequestContext.

    Accepts an existing context, None, a bare request id, a mapping, or an
    object such as ``azure.functions.Context`` exposing ``invocation_id``.
    """
    if isinstance(ctx, ExecutionRequestContext):
        if not ctx.telemetry_base:
            ctx.telemetry_base = ctx.to_telemetry_dict()
        return ctx

    if ctx is None:
        return ExecutionRequestContext.generate()

    if isinstance(ctx, str):
        return ExecutionRequestContext(request_id=ctx)

    data: Dict[str, Any] = {}

    if isinstance(ctx, Mapping):
        data = dict(ctx)
    else:
        for key in ("request_id", "invocation_id", "id"):
            if getattr(ctx, key, None):
                data["request_id"] = getattr(ctx, key)
                break
        for key in ("correlation_id", "traceparent", "attributes"):
            if hasattr(ctx, key):
                data[key] = getattr(ctx, key)

    request_id = data.get("request_id") or data.get("invocation_id") or data.get("id")
    if not request_id:
        request_id = str(uuid.uuid4())
    else:
        request_id = str(request_id)

    attributes = data.get("attributes") or {}
    if not isinstance(attributes, dict):
        attributes = {"value": str(attributes)}

    correlation_id = data.get("correlation_id") or data.get("traceparent")
    ctx_obj = ExecutionRequestContext(
        request_id=request_id,
        correlation_id=str(correlation_id) if correlation_id else None,
        attributes=attributes,
    )
    ctx_obj.telemetry_base = ctx_obj.to_telemetry_dict()
    return ctx_obj


def merge_telemetry(
    ctx: ExecutionRequestContext,
    *,
    extra: Optional[Dict[str, Any]] = None,
) -> Dict[str, str]:
    """Merge request context telemetry with additional key/value pairs."""
    if not ctx.telemetry_base:
        ctx.telemetry_base = ctx.to_telemetry_dict()

    payload = dict(ctx.telemetry_base)
    for key, value in (extra or {}).items():
        sanitized = ExecutionRequestContext._stringify(value)
        if sanitized is not None:
            payload[str(key)] = sanitized
    return payload
