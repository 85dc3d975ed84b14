"""Configuration loading and validation for Gateway Filters."""

from gateway_filters.config.loader import (
    apply_filters_config,
    expand_init_params,
    load_filter_context,
    load_filters_config,
)
from gateway_filters.config.schema import (
    ContextSettings,
    FilterEntryConfig,
    FilterMappingConfig,
    FiltersFileConfig,
)

__all__ = [
    "ContextSettings",
    "FilterEntryConfig",
    "FilterMappingConfig",
    "FiltersFileConfig",
    "apply_filters_config",
    "expand_init_params",
    "load_filter_context",
    "load_filters_config",
]
