"""Shared constants for Gateway Filters."""

PACKAGE_NAME = "Gateway Filters"
PACKAGE_VERSION = "0.1.0"

# URL pattern parsing
PATH_PART_SEPARATOR = "/"
PATH_WILDCARD = "*"

# Logging defaults
LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"

# Config file format version understood by the loader
CONFIG_VERSION = "1"
