"""Metrics hook protocol and no-op default implementation.

skycompose emits a handful of counters at the points where a post touches
the network.  By default a :class:`NoopMetricsHook` is used; pass any
object satisfying :class:`MetricsHook` as ``ComposerConfig.metrics`` to
route them to StatsD, Prometheus or similar.

Emitted metric names:

* ``skycompose.images_resolved_total``   -- counter
* ``skycompose.upload_success_total``    -- counter
* ``skycompose.upload_failure_total``    -- counter
* ``skycompose.preview_fetch_total``     -- counter, tagged ``status``
* ``skycompose.posts_published_total``   -- counter, tagged ``status``
* ``skycompose.resolve_duration_ms``     -- timing
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy.

    *tags* is an optional mapping of string keys to string values.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Metrics implementation that discards all data points."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass


def resolve_metrics(hook: MetricsHook | None) -> MetricsHook:
    """Return *hook*, or a :class:`NoopMetricsHook` when it is ``None``."""
    return hook if hook is not None else NoopMetricsHook()
