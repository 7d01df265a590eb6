"""
Composable query-string modifiers.

Endpoint methods accept any number of these so callers can tune a request
without the method signature growing a parameter per option.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from multidict import MultiDict

LATENCY_OPTIMIZATIONS = "optimize_streaming_latency"
WITH_SETTINGS = "with_settings"
PAGE_SIZE = "page_size"
START_AFTER = "start_after_history_item_id"


@dataclass(frozen=True)
class QueryParam:
    """
    Adds one ``key=value`` entry to a query string.

    Applying a parameter whose key is already present appends a second entry
    instead of replacing the first.

    Examples:
        >>> params = MultiDict()
        >>> QueryParam("page_size", "10")(params)
        <MultiDict('page_size': '10')>
    """

    key: str
    value: str

    def __call__(self, params: MultiDict[str]) -> MultiDict[str]:
        params.add(self.key, self.value)
        return params


def build_query(queries: Iterable[QueryParam]) -> MultiDict[str]:
    """Apply query modifiers left to right to a fresh parameter collection."""
    params: MultiDict[str] = MultiDict()
    for query in queries:
        params = query(params)
    return params


def latency_optimizations(value: int) -> QueryParam:
    """
    Set ``optimize_streaming_latency`` for text to speech requests.

    Possible values:
        0 - default mode (no latency optimizations).
        1 - normal latency optimizations.
        2 - strong latency optimizations.
        3 - max latency optimizations.
        4 - max latency optimizations, with text normalizer turned off (best
            latency, but can mispronounce things like numbers or dates).
    """
    if not 0 <= value <= 4:
        raise ValueError(f"latency optimization must be between 0 and 4, got {value}")
    return QueryParam(LATENCY_OPTIMIZATIONS, str(value))


def with_settings() -> QueryParam:
    """Include the voice settings when fetching a voice."""
    return QueryParam(WITH_SETTINGS, "true")


def page_size(n: int) -> QueryParam:
    """Number of items per history page."""
    return QueryParam(PAGE_SIZE, str(n))


def start_after(item_id: str) -> QueryParam:
    """Start a history page after the given history item."""
    return QueryParam(START_AFTER, item_id)
