"""Pydantic configuration models for Gateway Filters.

Defines the validated structure of a filters config file (version ``"1"``).
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from gateway_filters.constants import CONFIG_VERSION
from gateway_filters.filters.dispatcher import DispatcherType
from gateway_filters.filters.holder import validate_mapping_path

# "package.module:Attr" or "package.module:Outer.Inner"
_CLASS_PATH_RE = re.compile(r"^[A-Za-z_][\w.]*:[A-Za-z_][\w.]*$")


def _stringify_params(v: Any) -> Any:
    """Turn YAML scalars (``600``, ``true``) into the strings init params hold.

    Booleans become ``"true"``/``"false"``. ``None``, lists and mappings are
    left for the ``Dict[str, str]`` type to reject.
    """
    if not isinstance(v, dict):
        return v
    out: Dict[Any, Any] = {}
    for key, value in v.items():
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, (int, float)):
            value = str(value)
        out[key] = value
    return out


class FilterMappingConfig(BaseModel):
    """One ``add_mapping_for_url_patterns`` call."""

    url_patterns: List[str] = Field(
        ...,
        min_length=1,
        description="Path patterns; a '*' part must be the last part.",
    )
    dispatcher_types: Optional[List[DispatcherType]] = Field(
        default=None,
        description="Dispatcher types for the mapping. Omitted means REQUEST only.",
    )
    match_after: bool = Field(
        default=True,
        description="Append after existing patterns (true) or insert before them (false).",
    )

    @field_validator("url_patterns")
    @classmethod
    def _validate_patterns(cls, v: List[str]) -> List[str]:
        for pattern in v:
            if not validate_mapping_path(pattern):
                raise ValueError(
                    f"Invalid path mapping, wildcards should be the last part of a path: {pattern}"
                )
        return v


class FilterEntryConfig(BaseModel):
    """Configuration for a single named filter."""

    model_config = ConfigDict(populate_by_name=True)

    class_path: str = Field(
        ...,
        alias="class",
        description="Import path of the filter class as 'module:ClassName'.",
    )
    async_supported: bool = Field(default=False)
    init_params: Dict[str, str] = Field(
        default_factory=dict,
        description="Init parameters (values support ${ENV_VAR} and ${ENV_VAR:-default}).",
    )
    mappings: List[FilterMappingConfig] = Field(default_factory=list)

    @field_validator("init_params", mode="before")
    @classmethod
    def _coerce_init_params(cls, v: Any) -> Any:
        return _stringify_params(v)

    @field_validator("class_path")
    @classmethod
    def _validate_class_path(cls, v: str) -> str:
        v = v.strip()
        if not _CLASS_PATH_RE.match(v):
            raise ValueError(f"Filter class must look like 'module:ClassName', got '{v}'")
        return v


class ContextSettings(BaseModel):
    """Settings for the owning filter context."""

    name: str = Field(default="default", min_length=1)
    init_params: Dict[str, str] = Field(default_factory=dict)

    @field_validator("init_params", mode="before")
    @classmethod
    def _coerce_init_params(cls, v: Any) -> Any:
        return _stringify_params(v)


class FiltersFileConfig(BaseModel):
    """Top-level validated configuration for Gateway Filters.

    Supports version ``"1"`` format::

        {
            "version": "1",
            "context": { "name": "api", "init_params": { ... } },
            "filters": {
                "cors": { "class": "myapp.filters:CorsFilter", ... }
            }
        }

    Filters are registered in the order they appear in the file.
    """

    version: str = CONFIG_VERSION
    context: ContextSettings = Field(default_factory=ContextSettings)
    filters: Dict[str, FilterEntryConfig] = Field(default_factory=dict)

    @field_validator("version")
    @classmethod
    def _validate_version(cls, v: str) -> str:
        if v != CONFIG_VERSION:
            raise ValueError(f"Unsupported config version '{v}' (expected '{CONFIG_VERSION}')")
        return v

    @field_validator("filters")
    @classmethod
    def _validate_filter_names(
        cls, v: Dict[str, FilterEntryConfig]
    ) -> Dict[str, FilterEntryConfig]:
        for name in v:
            stripped = name.strip()
            if not stripped:
                raise ValueError("Filter name must be a non-empty string")
            if stripped != name:
                raise ValueError(f"Filter name '{name}' has leading/trailing whitespace")
        return v
