"""Allow ``python -m gateway_filters``."""

from gateway_filters.cli import main

if __name__ == "__main__":
    main()
