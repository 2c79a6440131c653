import asyncio
import logging
import time
from typing import Awaitable, Callable

from athena_runner.errors import QueryExecutionFailedError, QueryWaitTimeoutError
from athena_runner.service import ExecutionSnapshot, ExecutionState, QueryExecutionService

logger = logging.getLogger(__name__)


async def wait_for_completion(
    service: QueryExecutionService,
    execution_id: str,
    timeout_seconds: float,
    poll_interval_seconds: float = 1.0,
    *,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> ExecutionSnapshot:
    """Poll an execution until it succeeds, fails, or the deadline passes.

    The deadline is measured on ``clock`` from loop entry, so slow status
    calls count against it. On timeout the remote execution is left running.
    """
    started_at = clock()
    while True:
        snapshot = await service.get_status(execution_id)
        logger.info("Query state: %s", snapshot.state.value)

        if snapshot.state == ExecutionState.SUCCEEDED:
            return snapshot
        if snapshot.state in (ExecutionState.FAILED, ExecutionState.CANCELLED):
            raise QueryExecutionFailedError(
                execution_id, snapshot.state.value, snapshot.state_change_reason
            )

        if clock() - started_at > timeout_seconds:
            raise QueryWaitTimeoutError(
                execution_id, timeout_seconds, last_state=snapshot.state.value
            )
        await sleep(poll_interval_seconds)
