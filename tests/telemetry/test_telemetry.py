"""Telemetry helper and instrumentation tests."""

from __future__ import annotations

import logging
import random
from unittest.mock import MagicMock

import pytest

from broadside.engine import board as board_module
from broadside.engine import game as game_module
from broadside.engine.config import PlannerConfig
from broadside.engine.contestant import Contestant
from broadside.engine.game import Match
from broadside.telemetry import config as telemetry_config_module
from broadside.telemetry import logger as logger_module
from broadside.telemetry import metrics as metrics_module
from broadside.telemetry import tracer as tracer_module
from broadside.telemetry.config import TelemetryConfig


class DummySpan:
    def __init__(self, names: list[str], span_name: str) -> None:
        self._names = names
        self._names.append(span_name)
        self.attributes: dict[str, object] = {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return False

    def set_attribute(self, key, value):
        self.attributes[key] = value


class DummyTracer:
    def __init__(self) -> None:
        self.span_names: list[str] = []

    def start_as_current_span(self, name: str):
        return DummySpan(self.span_names, name)


def reset_singletons() -> None:
    metrics_module._INSTRUMENTS = {}
    logger_module._LOGGER = None


def test_init_tracing_and_metrics_install_providers(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_singletons()

    provider_instance = MagicMock()
    provider_instance.get_tracer.return_value = MagicMock()
    monkeypatch.setattr(tracer_module, "TracerProvider", MagicMock(return_value=provider_instance))
    monkeypatch.setattr(tracer_module, "OTLPSpanExporter", MagicMock(return_value=MagicMock()))
    monkeypatch.setattr(tracer_module, "BatchSpanProcessor", MagicMock())
    monkeypatch.setattr(tracer_module.trace, "set_tracer_provider", MagicMock())
    tracer = tracer_module.init_tracing(
        TelemetryConfig(enable_tracing=True, otlp_traces_endpoint="http://example")
    )
    assert tracer is provider_instance.get_tracer.return_value

    meter_provider = MagicMock()
    meter_provider.get_meter.return_value = MagicMock()
    monkeypatch.setattr(metrics_module, "MeterProvider", MagicMock(return_value=meter_provider))
    monkeypatch.setattr(metrics_module, "OTLPMetricExporter", MagicMock(return_value=MagicMock()))
    monkeypatch.setattr(
        metrics_module, "PeriodicExportingMetricReader", MagicMock(return_value=MagicMock())
    )
    monkeypatch.setattr(metrics_module.otel_metrics, "set_meter_provider", MagicMock())
    meter = metrics_module.init_metrics(
        TelemetryConfig(enable_metrics=True, otlp_metrics_endpoint="http://example")
    )
    assert meter is meter_provider.get_meter.return_value
    reset_singletons()


def test_record_match_metric_reuses_counter(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_singletons()
    meter = MagicMock()
    counter = MagicMock()
    meter.create_counter.return_value = counter
    monkeypatch.setattr(metrics_module, "get_meter", lambda name="broadside": meter)

    metrics_module.record_match_metric("broadside_test_total", 1, {"winner": "Red"})
    metrics_module.record_match_metric("broadside_test_total", 2)

    meter.create_counter.assert_called_once_with("broadside_test_total")
    assert counter.add.call_count == 2
    counter.add.assert_called_with(2, attributes={})
    reset_singletons()


def test_init_logging_installs_handler_once(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_singletons()
    installed: list[object] = []
    monkeypatch.setattr(logger_module, "set_logger_provider", MagicMock())
    monkeypatch.setattr(logger_module, "_install_root_handler", installed.append)

    logger = logger_module.get_logger("test")
    assert logger_module.init_logging(TelemetryConfig()) is logger
    assert len(installed) == 1
    reset_singletons()


def test_init_logging_keeps_configured_root_level(monkeypatch: pytest.MonkeyPatch) -> None:
    reset_singletons()
    root_logger = logging.getLogger()
    original_level = root_logger.level
    monkeypatch.setattr(root_logger, "handlers", [logging.NullHandler()])
    monkeypatch.setattr(root_logger, "filters", [])
    monkeypatch.setattr(logger_module, "_HANDLER_INSTALLED", False)
    monkeypatch.setattr(logger_module, "_FILTER_INSTALLED", False)
    monkeypatch.setattr(logger_module, "set_logger_provider", MagicMock())
    monkeypatch.setattr(logger_module, "LoggingHandler", lambda **kwargs: logging.NullHandler())
    root_logger.setLevel(logging.WARNING)
    try:
        logger_module.init_logging(TelemetryConfig(enable_logging=True))
        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 2
    finally:
        root_logger.setLevel(original_level)
        reset_singletons()


def test_tracers_and_meters_keep_their_scope_name(monkeypatch: pytest.MonkeyPatch) -> None:
    tracer_names: list[str] = []
    meter_names: list[str] = []
    monkeypatch.setattr(tracer_module.trace, "get_tracer", lambda name: tracer_names.append(name))
    monkeypatch.setattr(
        metrics_module.otel_metrics, "get_meter", lambda name: meter_names.append(name)
    )

    tracer_module.get_tracer("broadside.engine.board")
    tracer_module.get_tracer("broadside.engine.contestant")
    metrics_module.get_meter("broadside.engine.board")
    metrics_module.get_meter("broadside.engine.game")

    assert tracer_names == ["broadside.engine.board", "broadside.engine.contestant"]
    assert meter_names == ["broadside.engine.board", "broadside.engine.game"]


def test_init_telemetry_noop(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    monkeypatch.setattr("broadside.telemetry.tracer.init_tracing", lambda cfg: calls.append("tr"))
    monkeypatch.setattr("broadside.telemetry.metrics.init_metrics", lambda cfg: calls.append("me"))
    monkeypatch.setattr("broadside.telemetry.logger.init_logging", lambda cfg: calls.append("lo"))

    telemetry_config_module.init_telemetry(TelemetryConfig())
    assert calls == []


def test_init_telemetry_respects_flags(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []

    monkeypatch.setattr("broadside.telemetry.tracer.init_tracing", lambda cfg: calls.append("tr"))
    monkeypatch.setattr("broadside.telemetry.metrics.init_metrics", lambda cfg: calls.append("me"))
    monkeypatch.setattr("broadside.telemetry.logger.init_logging", lambda cfg: calls.append("lo"))

    config = TelemetryConfig(enable_tracing=True, enable_logging=True)
    telemetry_config_module.init_telemetry(config)
    assert calls == ["tr", "lo"]


def test_config_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "BROADSIDE_ENABLE_TRACING",
        "BROADSIDE_ENABLE_METRICS",
        "BROADSIDE_ENABLE_LOGGING",
        "OTEL_TRACES_ENABLED",
        "OTEL_METRICS_ENABLED",
        "OTEL_LOGS_ENABLED",
        "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT",
        "OTEL_EXPORTER_OTLP_METRICS_ENDPOINT",
        "OTEL_EXPORTER_OTLP_LOGS_ENDPOINT",
        "OTEL_SERVICE_NAMESPACE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("OTEL_EXPORTER_OTLP_ENDPOINT", "http://collector:4317/")
    monkeypatch.setenv("OTEL_SERVICE_NAME", "broadside-test")
    monkeypatch.setenv("OTEL_RESOURCE_ATTRIBUTES", "deployment.environment=ci,broken")
    monkeypatch.setenv("BROADSIDE_ENABLE_METRICS", "no")

    config = TelemetryConfig.from_env()

    assert config.otlp_traces_endpoint == "http://collector:4317/v1/traces"
    assert config.otlp_metrics_endpoint == "http://collector:4317/v1/metrics"
    assert config.enable_tracing and config.enable_metrics and config.enable_logging
    assert config.service_name == "broadside-test"
    assert config.resource["deployment.environment"] == "ci"
    assert config.resource["service.name"] == "broadside-test"


def test_load_telemetry_config_cached(monkeypatch: pytest.MonkeyPatch) -> None:
    telemetry_config_module.load_telemetry_config.cache_clear()
    calls = {"count": 0}

    def fake_from_env(cls, **overrides):
        calls["count"] += 1
        return TelemetryConfig(enable_tracing=True)

    monkeypatch.setattr(TelemetryConfig, "from_env", classmethod(fake_from_env))

    first = telemetry_config_module.load_telemetry_config()
    second = telemetry_config_module.load_telemetry_config()
    assert first is second
    assert calls["count"] == 1
    telemetry_config_module.load_telemetry_config.cache_clear()


def test_board_and_match_emit_spans(monkeypatch: pytest.MonkeyPatch) -> None:
    tracer = DummyTracer()
    completed: list[tuple[str, float, dict | None]] = []
    monkeypatch.setattr(board_module, "tracer", tracer)
    monkeypatch.setattr(game_module, "tracer", tracer)
    monkeypatch.setattr(
        game_module,
        "record_match_metric",
        lambda name, value, attrs=None: completed.append((name, value, attrs)),
    )

    rng = random.Random(8)
    match = Match(
        Contestant.automated("Red", 5, "hunt", rng),
        Contestant.automated("Blue", 5, "random", rng),
        rng_seed=8,
        config=PlannerConfig(),
    )
    match.start()
    assert "match.start" in tracer.span_names
    assert "board.place_ship" in tracer.span_names

    tracer.span_names.clear()
    match.play_out()
    assert "match.play_turn" in tracer.span_names
    assert "board.receive_attack" in tracer.span_names
    assert completed == [
        (
            "broadside_match_completed_total",
            1,
            {"winner": match.winner.name, "turns": len(match.history)},
        )
    ]
