"""Filter holder and its registration record.

A :class:`FilterHolder` wraps one named filter instance together with its
init parameters, its config view and a :class:`FilterRegistration` that
records which URL patterns and dispatcher types the filter is mapped to.
Holders are created by :class:`~gateway_filters.context.FilterContext` and
read by the gateway's dispatcher when it builds the chain for a request.

The holder, its registration and its config view all share one
init-parameter dict. Parameters are write-once: a key that already holds a
value is reported as a conflict instead of being overwritten.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from gateway_filters.constants import PATH_PART_SEPARATOR, PATH_WILDCARD
from gateway_filters.errors import InvalidMappingError, UnsupportedMappingError
from gateway_filters.filters.base import Filter, FilterConfig
from gateway_filters.filters.dispatcher import DispatcherType

logger = logging.getLogger(__name__)


def validate_mapping_path(mapping: str) -> bool:
    """Return True if no path part follows a ``*`` part in *mapping*.

    Trailing empty parts (``/api/*/``) are ignored, so a trailing slash
    after the wildcard is still valid.
    """
    parts = mapping.split(PATH_PART_SEPARATOR)
    while parts and parts[-1] == "":
        parts.pop()

    wildcard_position = -1
    for i, part in enumerate(parts):
        if wildcard_position > -1 and i > wildcard_position:
            return False
        if part.strip() == PATH_WILDCARD:
            wildcard_position = i
    return True


def _normalize_dispatcher_types(
    types: Optional[Iterable[Any]],
) -> List[DispatcherType]:
    if types is None:
        return [DispatcherType.REQUEST]
    if isinstance(types, str):
        # One tag, either a DispatcherType or its name.
        return [DispatcherType(types)]
    if isinstance(types, (set, frozenset)):
        # Unordered input: use declaration order, like an EnumSet.
        order = list(DispatcherType)
        return sorted((DispatcherType(t) for t in types), key=order.index)
    return [DispatcherType(t) for t in types]


class FilterRegistration:
    """URL pattern mappings, dispatcher types and init parameters for a filter.

    Only :class:`FilterHolder` creates registrations. The registration keeps
    copies of the holder's name and filter class name rather than a
    reference back to the holder.
    """

    def __init__(self, name: str, class_name: str, init_parameters: Dict[str, str]) -> None:
        self._name = name
        self._class_name = class_name
        self._init_parameters = init_parameters
        self._url_patterns: List[str] = []
        self._dispatcher_types: List[DispatcherType] = []
        self._async_supported = False

    # ── Mappings ─────────────────────────────────────────────────────────

    def add_mapping_for_url_patterns(
        self,
        dispatcher_types: Optional[Iterable[Any]],
        is_match_after: bool,
        *url_patterns: str,
    ) -> None:
        """Map the filter to *url_patterns* for the given dispatcher types.

        Args:
            dispatcher_types: Dispatcher types to add, or ``None`` for
                ``REQUEST`` only. Duplicates of types added by earlier
                calls are kept.
            is_match_after: If True the patterns go after the existing
                ones; otherwise they are inserted, in the given order,
                ahead of them.
            *url_patterns: Path patterns; a ``*`` part must be the last one.

        Raises:
            InvalidMappingError: A pattern has parts after a wildcard. No
                pattern or dispatcher type from this call is recorded.
        """
        for pattern in url_patterns:
            if not validate_mapping_path(pattern):
                raise InvalidMappingError(pattern, filter_name=self._name)
        new_types = _normalize_dispatcher_types(dispatcher_types)

        self._dispatcher_types.extend(new_types)
        if is_match_after:
            self._url_patterns.extend(url_patterns)
        else:
            self._url_patterns[0:0] = url_patterns

        logger.debug(
            "Filter '%s' mapped to %s for %s (match_after=%s).",
            self._name,
            list(url_patterns),
            [t.value for t in new_types],
            is_match_after,
        )

    def add_mapping_for_servlet_names(
        self,
        dispatcher_types: Optional[Iterable[Any]],
        is_match_after: bool,
        *servlet_names: str,
    ) -> None:
        """Always raises :class:`UnsupportedMappingError`."""
        raise UnsupportedMappingError(filter_name=self._name)

    @property
    def servlet_name_mappings(self) -> List[str]:
        return []

    @property
    def url_pattern_mappings(self) -> List[str]:
        return self._url_patterns

    @property
    def dispatcher_types(self) -> List[DispatcherType]:
        return self._dispatcher_types

    # ── Flags & identity ─────────────────────────────────────────────────

    def set_async_supported(self, is_async_supported: bool) -> None:
        self._async_supported = is_async_supported

    @property
    def async_supported(self) -> bool:
        return self._async_supported

    @property
    def name(self) -> str:
        return self._name

    @property
    def class_name(self) -> str:
        return self._class_name

    # ── Init parameters ──────────────────────────────────────────────────

    def set_init_parameter(self, name: str, value: str) -> bool:
        """Set *name* unless it already has a value; return whether it was set."""
        if self._init_parameters.get(name) is not None:
            return False
        self._init_parameters[name] = value
        return True

    def get_init_parameter(self, name: str) -> Optional[str]:
        return self._init_parameters.get(name)

    def set_init_parameters(self, init_parameters: Dict[str, str]) -> List[str]:
        """Set every parameter in *init_parameters* that is not already set.

        Returns the conflicting names in input order. Non-conflicting names
        are applied even when others conflict.
        """
        conflicts: List[str] = []
        for name, value in init_parameters.items():
            if self._init_parameters.get(name) is not None:
                conflicts.append(name)
            else:
                self._init_parameters[name] = value
        return conflicts

    @property
    def init_parameters(self) -> Dict[str, str]:
        return self._init_parameters

    def __repr__(self) -> str:
        return (
            f"FilterRegistration(name={self._name!r}, "
            f"url_patterns={self._url_patterns!r}, "
            f"dispatcher_types={[t.value for t in self._dispatcher_types]!r})"
        )


class FilterHolder:
    """One named filter with its config view, init parameters and registration.

    Lifecycle is a single flag: a holder starts uninitialized and becomes
    initialized after the first :meth:`init` that returns normally. The
    dispatcher checks :attr:`is_initialized` before each use and calls
    :meth:`init` when it is False; the holder itself does not guard
    against concurrent or repeated ``init`` calls.
    """

    def __init__(self, name: str, filter: Filter, context: Any) -> None:
        if name is None:
            raise ValueError("Filter name must not be None.")
        if filter is None:
            raise ValueError(f"Filter instance for '{name}' must not be None.")

        self._name = name
        self._filter = filter
        self._context = context
        self._init_parameters: Dict[str, str] = {}
        self._filter_config = FilterConfig(name, context, self._init_parameters)
        filter_type = type(filter)
        self._registration = FilterRegistration(
            name,
            f"{filter_type.__module__}.{filter_type.__qualname__}",
            self._init_parameters,
        )
        self._initialized = False

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def init(self) -> None:
        """Call the filter's ``init`` with the config view, then mark initialized.

        Whatever the filter raises propagates unchanged and leaves the
        holder uninitialized, so a later call retries the setup.
        """
        self._filter.init(self._filter_config)
        self._initialized = True
        logger.debug("Filter '%s' (%s) initialized.", self._name, self._registration.class_name)

    @property
    def filter(self) -> Filter:
        return self._filter

    @property
    def filter_config(self) -> FilterConfig:
        return self._filter_config

    @property
    def registration(self) -> FilterRegistration:
        return self._registration

    @property
    def name(self) -> str:
        return self._name

    @property
    def init_parameters(self) -> Dict[str, str]:
        return self._init_parameters

    @property
    def context(self) -> Any:
        return self._context

    def __repr__(self) -> str:
        state = "initialized" if self._initialized else "uninitialized"
        return f"FilterHolder(name={self._name!r}, {state})"
