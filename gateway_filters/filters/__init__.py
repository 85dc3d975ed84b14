"""Filter registration records for the gateway filter chain.

Public API
----------
- :class:`FilterHolder` — One named filter, its lifecycle flag and config view
- :class:`FilterRegistration` — URL pattern mappings, dispatcher types, init params
- :class:`FilterConfig` — Read-only view passed to ``Filter.init``
- :class:`Filter` / :class:`FilterChain` — Protocols implemented by applications
- :class:`DispatcherType` — Dispatch circumstances a mapping applies to
- :func:`validate_mapping_path` — Wildcard-position check for URL patterns
"""

from gateway_filters.filters.base import Filter, FilterChain, FilterConfig
from gateway_filters.filters.dispatcher import DispatcherType
from gateway_filters.filters.holder import (
    FilterHolder,
    FilterRegistration,
    validate_mapping_path,
)

__all__ = [
    "DispatcherType",
    "Filter",
    "FilterChain",
    "FilterConfig",
    "FilterHolder",
    "FilterRegistration",
    "validate_mapping_path",
]
