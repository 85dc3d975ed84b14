"""Custom exception classes for Gateway Filters."""

from typing import Optional


class FilterRegistryError(Exception):
    """Base class for all custom exceptions in Gateway Filters."""

    pass


class ConfigurationError(FilterRegistryError):
    """Raised when loading, validating or applying a filters config fails."""

    pass


class InvalidMappingError(FilterRegistryError, ValueError):
    """Raised when a URL pattern has path parts after a wildcard part."""

    def __init__(self, pattern: str, filter_name: Optional[str] = None):
        self.pattern = pattern
        self.filter_name = filter_name

        full_msg = "Invalid path mapping, wildcards should be the last part of a path"
        if filter_name:
            full_msg += f" (filter: {filter_name})"
        full_msg += f": {pattern}"
        super().__init__(full_msg)


class UnsupportedMappingError(FilterRegistryError, NotImplementedError):
    """Raised for servlet-name mappings, which filters here never support."""

    def __init__(self, filter_name: Optional[str] = None):
        self.filter_name = filter_name

        full_msg = "Servlet name mappings are not supported"
        if filter_name:
            full_msg += f" (filter: {filter_name})"
        super().__init__(full_msg)


class DuplicateFilterError(FilterRegistryError):
    """Raised by strict config loading when a filter name is registered twice."""

    def __init__(self, filter_name: str):
        self.filter_name = filter_name
        super().__init__(f"A filter named '{filter_name}' is already registered.")


class FilterInitError(FilterRegistryError):
    """
    Raised by a filter's ``init`` when it cannot set itself up.

    The holder never wraps or catches it; it reaches the caller of
    :meth:`FilterHolder.init` unchanged.
    """

    def __init__(
        self,
        message: str,
        filter_name: Optional[str] = None,
        orig_exc: Optional[Exception] = None,
    ):
        self.filter_name = filter_name
        self.orig_exc = orig_exc

        full_msg = "Filter initialization failed"
        if filter_name:
            full_msg += f" (filter: {filter_name})"
        full_msg += f": {message}"
        if orig_exc:
            full_msg += f" (original error: {type(orig_exc).__name__})"
        super().__init__(full_msg)
