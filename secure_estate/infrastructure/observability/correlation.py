"""Correlation IDs for request and sweep tracing.

An HTTP request carries its ID in the X-Correlation-ID header. A
scheduler sweep opens a ``correlation_scope`` of its own, so every
per-user tick logged during that sweep shares one ID and the previous
ID comes back once the sweep ends.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any
from uuid import uuid4

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def generate_correlation_id() -> str:
    return str(uuid4())


def get_correlation_id() -> str:
    """The ID for the current context, or "" outside any request/sweep."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str) -> None:
    _correlation_id.set(correlation_id)


@contextmanager
def correlation_scope(correlation_id: str | None = None) -> Iterator[str]:
    """Use ``correlation_id`` (or a fresh one) for the body of the block.

    Yields:
        The ID in effect inside the block.
    """
    scoped_id = correlation_id or generate_correlation_id()
    token = _correlation_id.set(scoped_id)
    try:
        yield scoped_id
    finally:
        _correlation_id.reset(token)


def correlation_id_processor(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Structlog processor: stamp ``correlation_id`` unless the event set one."""
    correlation_id = get_correlation_id()
    if correlation_id:
        event_dict.setdefault("correlation_id", correlation_id)
    return event_dict
