import hashlib
import logging
import os
from contextvars import ContextVar
from typing import Awaitable, Optional

from athena_runner.env import get_env_bool
from athena_runner.errors import RunnerConfigError

logger = logging.getLogger(__name__)

run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


def _otel_exporter_configured() -> bool:
    if get_env_bool("OTEL_SDK_DISABLED", False):
        return False
    if (os.getenv("OTEL_TRACES_EXPORTER") or "").strip().lower() == "none":
        return False
    endpoint = (os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT") or "").strip()
    traces_endpoint = (os.getenv("OTEL_EXPORTER_OTLP_TRACES_ENDPOINT") or "").strip()
    return bool(endpoint or traces_endpoint)


def trace_enabled() -> bool:
    """Return True when query tracing is enabled or OTEL exporter defaults apply."""
    raw = os.getenv("ATHENA_TRACE_QUERIES")
    if raw is not None:
        try:
            return get_env_bool("ATHENA_TRACE_QUERIES", False) is True
        except RunnerConfigError:
            logger.warning("Invalid ATHENA_TRACE_QUERIES value '%s'; tracing disabled.", raw)
            return False
    return _otel_exporter_configured()


def hash_sql(sql: str) -> str:
    """Return the SHA-256 hex digest recorded in place of raw SQL."""
    return hashlib.sha256(sql.encode("utf-8")).hexdigest()


async def trace_query_operation(
    name: str,
    operation: Awaitable,
    *,
    sql: Optional[str] = None,
    execution_id: Optional[str] = None,
):
    """Trace an Athena service call with OTEL when enabled."""
    if not trace_enabled():
        return await operation

    from opentelemetry import trace

    tracer = trace.get_tracer("athena_runner")
    with tracer.start_as_current_span(name) as span:
        run_id = run_id_var.get()
        if run_id:
            span.set_attribute("run_id", run_id)
        span.set_attribute("db.provider", "athena")
        span.set_attribute("db.execution_model", "async")
        if sql:
            span.set_attribute("db.statement_hash", hash_sql(sql))
        if execution_id:
            span.set_attribute("db.execution_id", execution_id)
        try:
            result = await operation
            span.set_attribute("db.status", "ok")
            return result
        except Exception:
            span.set_attribute("db.status", "error")
            raise
