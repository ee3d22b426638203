"""Tests for telemetry primitives: Span, trace_span, @traced."""

from __future__ import annotations

import time
from collections.abc import Generator

import pytest

from mqtopo.services.result import ServiceResult
from mqtopo.services.telemetry import (
    Span,
    _current_span,
    disable_telemetry,
    enable_telemetry,
    trace_span,
    traced,
)


@pytest.fixture(autouse=True)
def _reset_telemetry_state() -> Generator[None]:
    """Ensure clean telemetry state for every test."""
    yield
    disable_telemetry()
    _current_span.set(None)


class TestSpan:
    def test_duration_before_end_is_zero(self) -> None:
        assert Span(name="test").duration_ms == 0.0

    def test_duration_after_end(self) -> None:
        span = Span(name="test")
        time.sleep(0.005)
        span.end()
        assert span.duration_ms > 0

    def test_to_dict_minimal(self) -> None:
        span = Span(name="root")
        span.end()
        d = span.to_dict()
        assert d["name"] == "root"
        assert "children" not in d
        assert "annotations" not in d

    def test_annotations(self) -> None:
        span = Span(name="layer_2")
        span.annotate("frontier", 3)
        assert span.to_dict()["annotations"] == {"frontier": 3}


class TestTraceSpan:
    def test_disabled_yields_none(self) -> None:
        with trace_span("x") as span:
            assert span is None

    def test_no_parent_yields_none(self) -> None:
        enable_telemetry()
        with trace_span("x") as span:
            assert span is None

    def test_child_attached_to_parent(self) -> None:
        enable_telemetry()
        parent = Span(name="root")
        token = _current_span.set(parent)
        try:
            with trace_span("child") as span:
                assert span is not None
                assert _current_span.get() is span
        finally:
            _current_span.reset(token)
        assert [c.name for c in parent.children] == ["child"]


class TestTraced:
    @traced
    def _op(self) -> ServiceResult:
        with trace_span("inner"):
            pass
        return ServiceResult(ok=True, op="op", meta={"layers": 2})

    def test_disabled_leaves_meta(self) -> None:
        result = self._op()
        assert result.meta == {"layers": 2}

    def test_enabled_merges_telemetry(self) -> None:
        enable_telemetry()
        result = self._op()
        assert result.meta is not None
        assert result.meta["layers"] == 2
        assert result.meta["telemetry"]["children"][0]["name"] == "inner"

    def test_exception_propagates(self) -> None:
        enable_telemetry()

        @traced
        def boom() -> ServiceResult:
            raise RuntimeError("x")

        with pytest.raises(RuntimeError):
            boom()
        assert _current_span.get() is None
