"""Span decorator for API and state-container operations."""

import asyncio
import functools
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from opentelemetry import trace

F = TypeVar("F", bound=Callable[..., Any])


@contextmanager
def _operation_span(tracer: trace.Tracer, name: str, func: Callable[..., Any]) -> Iterator[trace.Span]:
    with tracer.start_as_current_span(name) as span:
        span.set_attribute("code.function", func.__qualname__)
        try:
            yield span
        except Exception as e:
            span.set_attribute("success", False)
            span.set_attribute("error.type", type(e).__name__)
            span.record_exception(e)
            raise


def _mark_result(span: trace.Span, result: Any) -> None:
    # ApiResult, AuthResult and friends report failure as a value; so does a bare bool
    if isinstance(result, bool):
        span.set_attribute("success", result)
        return
    span.set_attribute("success", bool(getattr(result, "success", True)))
    error_kind = getattr(result, "error_kind", None)
    if error_kind is not None:
        span.set_attribute("error.kind", getattr(error_kind, "value", str(error_kind)))


def traced(span_name: str | None = None, service_name: str = "storefront") -> Callable[[F], F]:
    """Wrap a function in an OpenTelemetry span.

    Failures returned as values (a ``False`` return, or a result object
    with ``success`` and ``error_kind``) are recorded on the span the same
    way raised exceptions are, so a refused login shows up as a failed span.

    Args:
        span_name: Span name (defaults to the function name)
        service_name: Instrumentation scope for the tracer

    Returns:
        Decorator for sync or async callables

    Example:
        @traced("restaurant_api.get_menu")
        async def get_menu(self) -> ApiResult:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)

        if asyncio.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with _operation_span(tracer, name, func) as span:
                    result = await func(*args, **kwargs)
                    _mark_result(span, result)
                    return result

            return async_wrapper  # type: ignore

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _operation_span(tracer, name, func) as span:
                result = func(*args, **kwargs)
                _mark_result(span, result)
                return result

        return sync_wrapper  # type: ignore

    return decorator
