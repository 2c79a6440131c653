"""Unit test environment helpers."""

import os

import pytest

_RUNNER_ENV_VARS = (
    "ATHENA_DATABASE",
    "ATHENA_CATALOG",
    "ATHENA_WORKGROUP",
    "ATHENA_OUTPUT_LOCATION",
    "ATHENA_MAX_ROWS",
    "ATHENA_WAIT_TIMEOUT_SECONDS",
    "ATHENA_POLL_INTERVAL_SECONDS",
    "ATHENA_TRACE_QUERIES",
    "AWS_REGION",
    "AWS_DEFAULT_REGION",
    "OTEL_EXPORTER_OTLP_ENDPOINT",
    "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Clear runner settings so unit tests never see the developer's environment."""
    for name in _RUNNER_ENV_VARS:
        if os.getenv(name) is not None:
            monkeypatch.delenv(name, raising=False)
    yield
