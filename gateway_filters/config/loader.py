"""Configuration file loading, validation and application.

Loads a YAML filters file, expands ``${ENV_VAR}`` placeholders in init
parameter values, validates it against the Pydantic models in
:mod:`schema`, and registers the configured filters on a
:class:`~gateway_filters.context.FilterContext`.

The public API is :func:`load_filters_config` (file → model) and
:func:`apply_filters_config` (model → populated context).
"""

import importlib
import logging
import os
import re
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from gateway_filters.config.schema import FilterEntryConfig, FiltersFileConfig
from gateway_filters.context import FilterContext
from gateway_filters.errors import ConfigurationError, DuplicateFilterError

logger = logging.getLogger(__name__)

# Recognised config file extensions.
_YAML_EXTS = frozenset({".yaml", ".yml"})

# ${VAR} or ${VAR:-default}
_ENV_VAR_RE = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def _read_config_file(cfg_fpath: str) -> Dict[str, Any]:
    """Read and parse a YAML config file from *cfg_fpath*.

    Raises :class:`ConfigurationError` on I/O or parse errors.
    """
    ext = os.path.splitext(cfg_fpath)[1].lower()
    if ext not in _YAML_EXTS:
        raise ConfigurationError(
            f"Unsupported config file extension '{ext}'. "
            "Only YAML files (.yaml, .yml) are supported."
        )

    try:
        with open(cfg_fpath, "r", encoding="utf-8") as f:
            raw_data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Error reading configuration file: {cfg_fpath}\n  {exc}") from exc

    if not isinstance(raw_data, dict):
        raise ConfigurationError(
            "Top-level configuration content must be a YAML mapping (dictionary)."
        )
    return raw_data


def _format_validation_errors(exc: ValidationError) -> str:
    """Format Pydantic validation errors into a readable multi-line string."""
    lines: List[str] = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        lines.append(f"  • {loc}: {err['msg']}")
    return "\n".join(lines)


# ── Init parameter expansion ─────────────────────────────────────────────


def _expand_params(params: Any, owner: str, unresolved: List[str]) -> Any:
    """Return a copy of *params* with placeholders in string values expanded.

    Anything that is not a mapping is returned untouched for the schema
    to reject. Unset variables without a default are appended to
    *unresolved* as ``"<owner> → <param>: ${VAR}"``.
    """
    if not isinstance(params, dict):
        return params

    expanded: Dict[Any, Any] = {}
    for key, value in params.items():
        if isinstance(value, str):

            def _sub(m: "re.Match[str]", _key: Any = key) -> str:
                var, default = m.group(1), m.group(2)
                if var in os.environ:
                    return os.environ[var]
                if default is not None:
                    return default
                unresolved.append(f"{owner} → {_key}: ${{{var}}}")
                return m.group(0)

            value = _ENV_VAR_RE.sub(_sub, value)
        expanded[key] = value
    return expanded


def expand_init_params(raw_data: Dict[str, Any]) -> Dict[str, Any]:
    """Expand ``${VAR}`` / ``${VAR:-default}`` in init parameter values.

    Only ``context.init_params`` and ``filters.<name>.init_params`` are
    expanded; class paths, names and URL patterns are taken literally.
    *raw_data* is not modified.

    Raises:
        ConfigurationError: One or more placeholders name an unset
            variable and carry no default. All of them are listed.
    """
    unresolved: List[str] = []
    data = dict(raw_data)

    context = data.get("context")
    if isinstance(context, dict) and "init_params" in context:
        context = dict(context)
        owner = f"context '{context.get('name', 'default')}'"
        context["init_params"] = _expand_params(context["init_params"], owner, unresolved)
        data["context"] = context

    filters = data.get("filters")
    if isinstance(filters, dict):
        new_filters: Dict[Any, Any] = {}
        for name, entry in filters.items():
            if isinstance(entry, dict) and "init_params" in entry:
                entry = dict(entry)
                entry["init_params"] = _expand_params(
                    entry["init_params"], f"filter '{name}'", unresolved
                )
            new_filters[name] = entry
        data["filters"] = new_filters

    if unresolved:
        raise ConfigurationError(
            f"Unresolved environment variable(s) in init parameters ({len(unresolved)}):\n"
            + "\n".join(f"  • {item}" for item in unresolved)
        )
    return data


# ── Filter class resolution ──────────────────────────────────────────────


def _import_filter_class(class_path: str) -> Any:
    """Resolve ``module:Attr`` (``Attr`` may be dotted) to the object it names."""
    module_name, _, attr_path = class_path.partition(":")
    try:
        obj: Any = importlib.import_module(module_name)
    except Exception as exc:
        raise ConfigurationError(
            f"Cannot import module '{module_name}' for filter class '{class_path}': "
            f"{type(exc).__name__}: {exc}"
        ) from exc

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as exc:
            raise ConfigurationError(
                f"Module '{module_name}' has no attribute '{attr_path}'."
            ) from exc

    if not callable(obj):
        raise ConfigurationError(f"Filter class '{class_path}' is not callable.")
    return obj


def _instantiate_filter(name: str, entry: FilterEntryConfig) -> Any:
    filter_cls = _import_filter_class(entry.class_path)
    try:
        return filter_cls()
    except Exception as exc:
        raise ConfigurationError(
            f"Cannot instantiate filter '{name}' from '{entry.class_path}': {exc}"
        ) from exc


# ── Public API ───────────────────────────────────────────────────────────


def load_filters_config(cfg_fpath: str) -> FiltersFileConfig:
    """Load, expand and validate a filters config file.

    Steps:
        1. Read YAML file
        2. Expand ``${VAR}`` references in init parameter values
        3. Validate against :class:`FiltersFileConfig` (Pydantic)

    Raises:
        ConfigurationError: On file I/O errors, parse errors, unresolved
            variables, or validation failures (all errors reported at once).
    """
    logger.debug("Loading filters configuration file: %s", cfg_fpath)

    if not os.path.exists(cfg_fpath):
        raise ConfigurationError(f"Configuration file does not exist: {cfg_fpath}")

    raw_data = _read_config_file(cfg_fpath)
    raw_data = expand_init_params(raw_data)

    try:
        config = FiltersFileConfig.model_validate(raw_data)
    except ValidationError as exc:
        error_summary = _format_validation_errors(exc)
        raise ConfigurationError(
            f"Configuration validation failed ({len(exc.errors())} error(s)):\n" f"{error_summary}"
        ) from exc

    logger.info(
        "Configuration '%s' loaded (v%s). %d filter(s) validated.",
        cfg_fpath,
        config.version,
        len(config.filters),
    )
    return config


def apply_filters_config(
    config: FiltersFileConfig,
    context: Optional[FilterContext] = None,
    *,
    strict: bool = False,
) -> FilterContext:
    """Register every filter in *config* on *context* and return the context.

    A new context is created from ``config.context`` when none is given.
    Filters are registered in file order. For each filter the init params
    are set first, then the async flag, then each mapping in order.

    Every filter class is imported and instantiated, and every name is
    checked against *context*, before the first filter is registered: if
    any of that fails, *context* is left exactly as it was.

    A filter whose name is already registered is skipped with a warning,
    or raises :class:`DuplicateFilterError` when *strict* is True. Init
    parameter conflicts never fail; they are logged as warnings.
    """
    pending: List[Tuple[str, FilterEntryConfig, Any]] = []
    for name, entry in config.filters.items():
        if context is not None and name in context:
            if strict:
                raise DuplicateFilterError(name)
            logger.warning("Filter '%s' is already registered; skipping config entry.", name)
            continue
        pending.append((name, entry, _instantiate_filter(name, entry)))

    if context is None:
        context = FilterContext(config.context.name, config.context.init_params)
    else:
        for key, value in config.context.init_params.items():
            if not context.set_init_parameter(key, value):
                logger.warning(
                    "Context '%s': init parameter '%s' already set; keeping existing value.",
                    context.name,
                    key,
                )

    for name, entry, filter_obj in pending:
        registration = context.add_filter(name, filter_obj)
        if registration is None:
            # add_filter only refuses known names, checked above.
            raise DuplicateFilterError(name)

        conflicts = registration.set_init_parameters(entry.init_params)
        if conflicts:
            logger.warning(
                "Filter '%s': init parameter(s) already set, not overwritten: %s",
                name,
                ", ".join(conflicts),
            )
        registration.set_async_supported(entry.async_supported)

        for mapping in entry.mappings:
            registration.add_mapping_for_url_patterns(
                mapping.dispatcher_types,
                mapping.match_after,
                *mapping.url_patterns,
            )
        logger.debug(
            "Filter '%s' configured: patterns=%s, dispatcher_types=%s.",
            name,
            registration.url_pattern_mappings,
            [t.value for t in registration.dispatcher_types],
        )

    logger.info("Context '%s': %d filter(s) registered.", context.name, len(context))
    return context


def load_filter_context(cfg_fpath: str, *, strict: bool = False) -> FilterContext:
    """Shortcut for :func:`load_filters_config` followed by :func:`apply_filters_config`."""
    return apply_filters_config(load_filters_config(cfg_fpath), strict=strict)
