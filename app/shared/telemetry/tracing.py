"""@traced: one span per application-service call."""

from collections.abc import Awaitable, Callable
from functools import wraps
from inspect import signature
from typing import Any, ParamSpec, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from app.domain.exceptions import IdentityException

P = ParamSpec("P")
R = TypeVar("R")

# Only these arguments become span attributes. Codes, PINs, passwords,
# phone numbers and tokens are never recorded.
_RECORDED_ARGS = frozenset({
    "owner_id", "issuer_id", "actor_id", "member_id", "recipient_id", "invite_id", "role", "status",
})

_tracer = trace.get_tracer("app.services")


def _record_args(span: trace.Span, bound: dict[str, Any]) -> None:
    for name, value in bound.items():
        if name in _RECORDED_ARGS and value is not None:
            span.set_attribute(f"identity.{name}", getattr(value, "value", str(value)))


def traced(name: str) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Wrap an async service method in a span named name.

    Domain errors are expected outcomes (wrong PIN, expired code): the span
    keeps an OK status and carries the error code. Anything else marks the
    span as failed and records the exception.
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        sig = signature(func)

        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with _tracer.start_as_current_span(
                name, record_exception=False, set_status_on_exception=False
            ) as span:
                if span.is_recording():
                    _record_args(span, sig.bind_partial(*args, **kwargs).arguments)
                try:
                    return await func(*args, **kwargs)
                except IdentityException as e:
                    span.set_attribute("identity.error_code", e.error_code)
                    raise
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, type(e).__name__))
                    span.record_exception(e)
                    raise

        return wrapper

    return decorator
