"""Shared fixtures: simple filters and an importable filter module for config tests."""

from __future__ import annotations

import textwrap
from typing import Any, List

import pytest

from gateway_filters.errors import FilterInitError


class RecordingFilter:
    """Filter that records the configs it was initialized with."""

    def __init__(self) -> None:
        self.configs: List[Any] = []
        self.destroyed = 0

    def init(self, config: Any) -> None:
        self.configs.append(config)

    def do_filter(self, request: Any, response: Any, chain: Any) -> None:
        chain.do_filter(request, response)

    def destroy(self) -> None:
        self.destroyed += 1


class FlakyFilter(RecordingFilter):
    """Filter whose first ``failures`` init calls raise."""

    def __init__(self, failures: int = 1) -> None:
        super().__init__()
        self.failures = failures
        self.attempts = 0

    def init(self, config: Any) -> None:
        self.attempts += 1
        if self.attempts <= self.failures:
            raise FilterInitError("backend not ready", filter_name=config.filter_name)
        super().init(config)


@pytest.fixture
def recording_filter() -> RecordingFilter:
    return RecordingFilter()


SAMPLE_FILTERS_SRC = textwrap.dedent(
    '''
    class CorsFilter:
        def init(self, config):
            self.config = config

        def do_filter(self, request, response, chain):
            chain.do_filter(request, response)

        def destroy(self):
            pass


    class Outer:
        class AuthFilter(CorsFilter):
            pass


    class NeedsArgs(CorsFilter):
        def __init__(self, required):
            self.required = required


    NOT_CALLABLE = "just a string"
    '''
)


@pytest.fixture
def sample_filters_module(tmp_path, monkeypatch) -> str:
    """Write ``gf_sample_filters.py`` to *tmp_path*, put it on sys.path, return its name."""
    (tmp_path / "gf_sample_filters.py").write_text(SAMPLE_FILTERS_SRC, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))
    return "gf_sample_filters"


@pytest.fixture
def write_config(tmp_path):
    """Return a helper writing YAML text to ``tmp_path/<name>`` and returning the path."""

    def _write(text: str, name: str = "filters.yaml") -> str:
        path = tmp_path / name
        path.write_text(textwrap.dedent(text), encoding="utf-8")
        return str(path)

    return _write


@pytest.fixture
def broken_filters_module(tmp_path, monkeypatch) -> str:
    """Write ``gf_broken_filters.py``, which raises while being imported."""
    (tmp_path / "gf_broken_filters.py").write_text(
        'raise RuntimeError("boom at import")\n', encoding="utf-8"
    )
    monkeypatch.syspath_prepend(str(tmp_path))
    return "gf_broken_filters"
