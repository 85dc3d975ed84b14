"""Tests for FilterContext — the owner of filter holders."""

from __future__ import annotations

import pytest
from conftest import RecordingFilter

from gateway_filters.context import FilterContext
from gateway_filters.filters import DispatcherType, FilterRegistration


class TestAddFilter:
    def test_returns_registration(self):
        ctx = FilterContext("api")
        reg = ctx.add_filter("cors", RecordingFilter())

        assert isinstance(reg, FilterRegistration)
        assert reg.name == "cors"
        assert "cors" in ctx
        assert len(ctx) == 1

    def test_holder_points_back_to_context(self):
        ctx = FilterContext()
        ctx.add_filter("cors", RecordingFilter())
        holder = ctx.get_filter_holder("cors")

        assert holder.context is ctx
        assert holder.filter_config.context is ctx

    def test_duplicate_name_returns_none(self):
        ctx = FilterContext()
        first = RecordingFilter()
        ctx.add_filter("cors", first)

        assert ctx.add_filter("cors", RecordingFilter()) is None
        assert ctx.get_filter_holder("cors").filter is first

    @pytest.mark.parametrize("name", ["", None])
    def test_empty_name_rejected(self, name):
        with pytest.raises(ValueError):
            FilterContext().add_filter(name, RecordingFilter())

    def test_none_filter_rejected(self):
        with pytest.raises(ValueError):
            FilterContext().add_filter("cors", None)


class TestLookups:
    def test_registrations_in_order(self):
        ctx = FilterContext()
        for name in ("gzip", "auth", "cors"):
            ctx.add_filter(name, RecordingFilter())

        regs = ctx.get_filter_registrations()
        assert list(regs) == ["gzip", "auth", "cors"]
        assert [h.name for h in ctx.filter_holders] == ["gzip", "auth", "cors"]

    def test_registration_is_live(self):
        ctx = FilterContext()
        ctx.add_filter("cors", RecordingFilter()).add_mapping_for_url_patterns(
            None, True, "/api/*"
        )
        reg = ctx.get_filter_registration("cors")
        assert reg.url_pattern_mappings == ["/api/*"]
        assert reg.dispatcher_types == [DispatcherType.REQUEST]

    def test_missing(self):
        ctx = FilterContext()
        assert ctx.get_filter_registration("nope") is None
        assert ctx.get_filter_holder("nope") is None


class TestContextParameters:
    def test_initial_params_are_copied(self):
        params = {"encoding": "utf-8"}
        ctx = FilterContext(init_parameters=params)
        params["other"] = "x"
        assert ctx.init_parameters == {"encoding": "utf-8"}

    def test_set_is_write_once(self):
        ctx = FilterContext()
        assert ctx.set_init_parameter("encoding", "utf-8") is True
        assert ctx.set_init_parameter("encoding", "latin-1") is False
        assert ctx.get_init_parameter("encoding") == "utf-8"


class TestDestroy:
    def test_only_initialized_filters_destroyed(self):
        ctx = FilterContext()
        inited, idle = RecordingFilter(), RecordingFilter()
        ctx.add_filter("inited", inited)
        ctx.add_filter("idle", idle)
        ctx.get_filter_holder("inited").init()

        ctx.destroy()

        assert inited.destroyed == 1
        assert idle.destroyed == 0

    def test_destroy_error_propagates(self):
        class BadDestroy(RecordingFilter):
            def destroy(self):
                raise RuntimeError("stuck")

        ctx = FilterContext()
        ctx.add_filter("bad", BadDestroy())
        ctx.get_filter_holder("bad").init()

        with pytest.raises(RuntimeError, match="stuck"):
            ctx.destroy()
