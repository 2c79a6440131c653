import logging
import uuid
from typing import Optional

from athena_runner.config import RunnerConfig
from athena_runner.limit_enforcer import enforce_limit
from athena_runner.materializer import materialize_results
from athena_runner.models import QueryRunResult
from athena_runner.service import ATHENA_MAX_PAGE_SIZE, QueryExecutionService
from athena_runner.tracing import run_id_var
from athena_runner.waiter import wait_for_completion

logger = logging.getLogger(__name__)


class QueryRunner:
    """Run one statement end to end: enforce, submit, wait, materialize.

    Instances hold no state shared across runs; create one per run when
    running queries concurrently.
    """

    def __init__(
        self,
        service: QueryExecutionService,
        config: RunnerConfig,
        max_page_size: int = ATHENA_MAX_PAGE_SIZE,
    ) -> None:
        """Bind the runner to a query service and validated settings."""
        config.validate()
        self._service = service
        self._config = config
        self._max_page_size = max_page_size

    @property
    def config(self) -> RunnerConfig:
        """Return the settings this runner was created with."""
        return self._config

    async def run(self, sql: str, run_id: Optional[str] = None) -> QueryRunResult:
        """Execute ``sql`` and return the bounded result set."""
        token = run_id_var.set(run_id or uuid.uuid4().hex)
        try:
            return await self._run(sql)
        finally:
            run_id_var.reset(token)

    async def _run(self, sql: str) -> QueryRunResult:
        config = self._config
        logger.info("Executing Athena query in database: %s", config.database)
        logger.info("Workgroup: %s", config.workgroup)
        logger.info("Max rows: %s", config.max_rows)

        safe_sql = enforce_limit(sql, config.max_rows)

        execution_id = await self._service.submit(
            safe_sql,
            database=config.database,
            catalog=config.catalog,
            workgroup=config.workgroup,
            output_location=config.output_location,
        )
        logger.info("Query execution started: %s", execution_id)

        logger.info("Waiting for query to complete...")
        snapshot = await wait_for_completion(
            self._service,
            execution_id,
            timeout_seconds=config.wait_timeout_seconds,
            poll_interval_seconds=config.poll_interval_seconds,
        )
        logger.info("Query completed: %s", snapshot.state.value)
        logger.info(
            "Data scanned: %s bytes (%.2f MB)",
            snapshot.data_scanned_bytes,
            snapshot.data_scanned_bytes / 1024 / 1024,
        )
        logger.info("Execution time: %s ms", snapshot.engine_execution_time_ms)

        logger.info("Fetching query results...")
        rows = await materialize_results(
            self._service, execution_id, config.max_rows, max_page_size=self._max_page_size
        )
        logger.info("Retrieved %s rows", len(rows))

        return QueryRunResult(
            query_execution_id=execution_id,
            state=snapshot.state.value,
            data_scanned_bytes=snapshot.data_scanned_bytes,
            execution_time_ms=snapshot.engine_execution_time_ms,
            results=rows,
            result_count=len(rows),
        )
