"""Filter protocols and the read-only config view handed to ``Filter.init``."""

from __future__ import annotations

from typing import Any, Dict, Iterator, Optional, Protocol, runtime_checkable

# ── Type protocols ───────────────────────────────────────────────────────


class FilterChain(Protocol):
    """Remaining filters (and the final handler) for the current request."""

    def do_filter(self, request: Any, response: Any) -> None: ...


@runtime_checkable
class Filter(Protocol):
    """Request filter supplied by the application.

    Only :meth:`init` is called by this package; ``do_filter`` and
    ``destroy`` belong to the gateway's dispatcher.
    """

    def init(self, config: FilterConfig) -> None: ...

    def do_filter(self, request: Any, response: Any, chain: FilterChain) -> None: ...

    def destroy(self) -> None: ...


# ── Config view ──────────────────────────────────────────────────────────


class FilterConfig:
    """Read-only view of a filter's name, context and init parameters.

    The parameter dict is held by reference, so parameters set through
    the registration after this view was created are visible here.
    """

    __slots__ = ("_filter_name", "_context", "_init_parameters")

    def __init__(self, filter_name: str, context: Any, init_parameters: Dict[str, str]) -> None:
        self._filter_name = filter_name
        self._context = context
        self._init_parameters = init_parameters

    @property
    def filter_name(self) -> str:
        return self._filter_name

    @property
    def context(self) -> Any:
        return self._context

    def get_init_parameter(self, name: str) -> Optional[str]:
        return self._init_parameters.get(name)

    def get_init_parameter_names(self) -> Iterator[str]:
        return iter(list(self._init_parameters))

    def __repr__(self) -> str:
        return f"FilterConfig(filter_name={self._filter_name!r})"
