import asyncio
import logging
from typing import Any, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from athena_runner.errors import QuerySubmissionError, QueryTransportError
from athena_runner.service import (
    ATHENA_MAX_PAGE_SIZE,
    ExecutionSnapshot,
    ExecutionState,
    RawRow,
    ResultPage,
)
from athena_runner.tracing import trace_query_operation

logger = logging.getLogger(__name__)

_SUBMISSION_ERROR_CODES = {"InvalidRequestException", "ResourceNotFoundException"}


class AthenaQueryExecutionService:
    """QueryExecutionService backed by the boto3 Athena client."""

    def __init__(self, region: Optional[str] = None, client: Any = None) -> None:
        """Use the given client, or build a boto3 Athena client for ``region``."""
        if client is None:
            import boto3

            client = boto3.client("athena", region_name=region)
        self._client = client

    async def submit(
        self,
        sql: str,
        *,
        database: str,
        catalog: str,
        workgroup: str,
        output_location: Optional[str] = None,
    ) -> str:
        """Start a query execution and return its QueryExecutionId."""
        return await trace_query_operation(
            "athena.query.submit",
            asyncio.to_thread(
                _start_query_execution,
                self._client,
                sql,
                database,
                catalog,
                workgroup,
                output_location,
            ),
            sql=sql,
        )

    async def get_status(self, execution_id: str) -> ExecutionSnapshot:
        """Return the current state and statistics of an execution."""
        return await trace_query_operation(
            "athena.query.poll",
            asyncio.to_thread(_get_query_execution, self._client, execution_id),
            execution_id=execution_id,
        )

    async def fetch_page(
        self, execution_id: str, max_results: int, next_token: Optional[str] = None
    ) -> ResultPage:
        """Fetch one GetQueryResults page."""
        return await trace_query_operation(
            "athena.query.fetch",
            asyncio.to_thread(
                _get_query_results, self._client, execution_id, max_results, next_token
            ),
            execution_id=execution_id,
        )


def _start_query_execution(
    client,
    sql: str,
    database: str,
    catalog: str,
    workgroup: str,
    output_location: Optional[str],
) -> str:
    kwargs: Dict[str, Any] = {
        "QueryString": sql,
        "QueryExecutionContext": {"Database": database, "Catalog": catalog},
        "WorkGroup": workgroup,
    }
    if output_location:
        kwargs["ResultConfiguration"] = {"OutputLocation": output_location}
    try:
        response = client.start_query_execution(**kwargs)
    except ClientError as exc:
        code, message = _client_error_fields(exc)
        if code in _SUBMISSION_ERROR_CODES:
            raise QuerySubmissionError(message, error_code=code) from exc
        raise _transport_error("StartQueryExecution", exc) from exc
    except BotoCoreError as exc:
        raise _transport_error("StartQueryExecution", exc) from exc
    return response["QueryExecutionId"]


def _get_query_execution(client, execution_id: str) -> ExecutionSnapshot:
    try:
        response = client.get_query_execution(QueryExecutionId=execution_id)
    except (ClientError, BotoCoreError) as exc:
        raise _transport_error("GetQueryExecution", exc) from exc
    execution = response.get("QueryExecution") or {}
    status = execution.get("Status") or {}
    statistics = execution.get("Statistics") or {}
    raw_state = status.get("State") or ExecutionState.QUEUED.value
    try:
        state = ExecutionState(raw_state)
    except ValueError:
        logger.warning(
            "Unknown Athena state %r for %s; treating as RUNNING.", raw_state, execution_id
        )
        state = ExecutionState.RUNNING
    return ExecutionSnapshot(
        execution_id=execution_id,
        state=state,
        state_change_reason=status.get("StateChangeReason"),
        data_scanned_bytes=int(statistics.get("DataScannedInBytes") or 0),
        engine_execution_time_ms=int(statistics.get("EngineExecutionTimeInMillis") or 0),
    )


def _get_query_results(
    client, execution_id: str, max_results: int, next_token: Optional[str]
) -> ResultPage:
    kwargs: Dict[str, Any] = {
        "QueryExecutionId": execution_id,
        "MaxResults": min(max_results, ATHENA_MAX_PAGE_SIZE),
    }
    if next_token:
        kwargs["NextToken"] = next_token
    try:
        response = client.get_query_results(**kwargs)
    except (ClientError, BotoCoreError) as exc:
        raise _transport_error("GetQueryResults", exc) from exc
    result_set = response.get("ResultSet") or {}
    rows: List[RawRow] = [
        [datum.get("VarCharValue") for datum in row.get("Data") or []]
        for row in result_set.get("Rows") or []
    ]
    return ResultPage(rows=rows, next_token=response.get("NextToken"))


def _client_error_fields(exc: ClientError) -> tuple:
    error = exc.response.get("Error") or {}
    return error.get("Code"), error.get("Message") or str(exc)


def _transport_error(operation: str, exc: Exception) -> QueryTransportError:
    if isinstance(exc, ClientError):
        code, message = _client_error_fields(exc)
        metadata = exc.response.get("ResponseMetadata") or {}
        return QueryTransportError(
            operation,
            message,
            error_code=code,
            http_status=metadata.get("HTTPStatusCode"),
            request_id=metadata.get("RequestId"),
        )
    return QueryTransportError(operation, str(exc), error_code=exc.__class__.__name__)
