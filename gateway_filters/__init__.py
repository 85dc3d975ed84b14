"""
Gateway Filters - servlet-style filter registration for event-driven gateways.

Holds the registration record for each request filter (name, instance,
init parameters, URL pattern mappings, dispatcher types) that a gateway's
dispatcher consults when walking the filter chain for a request.
"""

from gateway_filters.constants import PACKAGE_NAME, PACKAGE_VERSION

__version__ = PACKAGE_VERSION
__app_name__ = PACKAGE_NAME

__all__ = [
    "PACKAGE_NAME",
    "PACKAGE_VERSION",
    "__version__",
    "__app_name__",
]
