"""Filter context — the owner of every registered filter holder.

The context plays the part of the servlet context for filters: it creates
one :class:`FilterHolder` per name, hands back the registration for
bootstrap code to configure, and exposes the holders, in registration
order, to the gateway's dispatcher.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from gateway_filters.filters.base import Filter
from gateway_filters.filters.holder import FilterHolder, FilterRegistration

logger = logging.getLogger(__name__)


class FilterContext:
    """Registry of named filters plus context-wide init parameters.

    Parameters
    ----------
    name:
        Display name for the context (used in log messages).
    init_parameters:
        Optional context-level parameters, copied on construction.
    """

    def __init__(
        self,
        name: str = "default",
        init_parameters: Optional[Dict[str, str]] = None,
    ) -> None:
        self.name = name
        self._init_parameters: Dict[str, str] = dict(init_parameters or {})
        self._holders: Dict[str, FilterHolder] = {}

    # ── Registration ─────────────────────────────────────────────────────

    def add_filter(self, filter_name: str, filter: Filter) -> Optional[FilterRegistration]:
        """Register *filter* under *filter_name* and return its registration.

        Returns ``None`` if a filter with that name is already registered;
        the existing holder is left untouched.
        """
        if not filter_name:
            raise ValueError("Filter name must be a non-empty string.")
        if filter is None:
            raise ValueError(f"Filter instance for '{filter_name}' must not be None.")

        if filter_name in self._holders:
            logger.debug(
                "Context '%s': filter '%s' already registered; ignoring.",
                self.name,
                filter_name,
            )
            return None

        holder = FilterHolder(filter_name, filter, self)
        self._holders[filter_name] = holder
        logger.debug(
            "Context '%s': registered filter '%s' (%s).",
            self.name,
            filter_name,
            holder.registration.class_name,
        )
        return holder.registration

    def get_filter_registration(self, filter_name: str) -> Optional[FilterRegistration]:
        holder = self._holders.get(filter_name)
        return holder.registration if holder is not None else None

    def get_filter_registrations(self) -> Dict[str, FilterRegistration]:
        """Return name → registration for every filter, in registration order."""
        return {name: holder.registration for name, holder in self._holders.items()}

    def get_filter_holder(self, filter_name: str) -> Optional[FilterHolder]:
        return self._holders.get(filter_name)

    @property
    def filter_holders(self) -> List[FilterHolder]:
        return list(self._holders.values())

    # ── Context parameters ───────────────────────────────────────────────

    @property
    def init_parameters(self) -> Dict[str, str]:
        return self._init_parameters

    def get_init_parameter(self, name: str) -> Optional[str]:
        return self._init_parameters.get(name)

    def set_init_parameter(self, name: str, value: str) -> bool:
        """Set a context parameter unless already set; return whether it was set."""
        if self._init_parameters.get(name) is not None:
            return False
        self._init_parameters[name] = value
        return True

    # ── Shutdown ─────────────────────────────────────────────────────────

    def destroy(self) -> None:
        """Call ``destroy()`` on every initialized filter, in registration order.

        Filters that were never initialized are skipped. An exception from
        a filter's ``destroy`` propagates and stops the walk.
        """
        for holder in self._holders.values():
            if not holder.is_initialized:
                continue
            holder.filter.destroy()
            logger.debug("Context '%s': destroyed filter '%s'.", self.name, holder.name)

    def __len__(self) -> int:
        return len(self._holders)

    def __contains__(self, filter_name: object) -> bool:
        return filter_name in self._holders

    def __repr__(self) -> str:
        return f"FilterContext(name={self.name!r}, filters={list(self._holders)!r})"
