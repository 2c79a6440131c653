"""Run SQL on Amazon Athena with a row ceiling and bounded result retrieval."""

from .config import RunnerConfig
from .errors import (
    QueryExecutionFailedError,
    QueryRunnerError,
    QuerySubmissionError,
    QueryTransportError,
    QueryWaitTimeoutError,
    RunnerConfigError,
)
from .limit_enforcer import LimitAction, LimitEnforcement, apply_row_limit, enforce_limit
from .materializer import materialize_results
from .models import QueryRunResult
from .runner import QueryRunner
from .service import ExecutionSnapshot, ExecutionState, QueryExecutionService, ResultPage
from .waiter import wait_for_completion

__all__ = [
    "ExecutionSnapshot",
    "ExecutionState",
    "LimitAction",
    "LimitEnforcement",
    "QueryExecutionFailedError",
    "QueryExecutionService",
    "QueryRunResult",
    "QueryRunner",
    "QueryRunnerError",
    "QuerySubmissionError",
    "QueryTransportError",
    "QueryWaitTimeoutError",
    "ResultPage",
    "RunnerConfig",
    "RunnerConfigError",
    "apply_row_limit",
    "enforce_limit",
    "materialize_results",
    "wait_for_completion",
]
