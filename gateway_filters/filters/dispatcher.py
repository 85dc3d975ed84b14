"""Dispatcher types a filter mapping can apply to."""

from enum import Enum


class DispatcherType(str, Enum):
    """Circumstance under which a request reaches the filter chain."""

    FORWARD = "FORWARD"
    INCLUDE = "INCLUDE"
    REQUEST = "REQUEST"
    ASYNC = "ASYNC"
    ERROR = "ERROR"
