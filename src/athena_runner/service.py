from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Protocol, runtime_checkable

Cell = Optional[str]
RawRow = List[Cell]

# GetQueryResults rejects MaxResults above this.
ATHENA_MAX_PAGE_SIZE = 1000


class ExecutionState(str, Enum):
    """Athena query execution lifecycle states."""

    QUEUED = "QUEUED"
    RUNNING = "RUNNING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        """Return True for states the service never leaves."""
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset(
    {ExecutionState.SUCCEEDED, ExecutionState.FAILED, ExecutionState.CANCELLED}
)


@dataclass(frozen=True)
class ExecutionSnapshot:
    """One observation of a query execution's status."""

    execution_id: str
    state: ExecutionState
    state_change_reason: Optional[str] = None
    data_scanned_bytes: int = 0
    engine_execution_time_ms: int = 0


@dataclass(frozen=True)
class ResultPage:
    """A page of raw result rows; the first page starts with the header row."""

    rows: List[RawRow] = field(default_factory=list)
    next_token: Optional[str] = None


@runtime_checkable
class QueryExecutionService(Protocol):
    """Protocol for the remote submit/poll/fetch query service."""

    async def submit(
        self,
        sql: str,
        *,
        database: str,
        catalog: str,
        workgroup: str,
        output_location: Optional[str] = None,
    ) -> str:
        """Submit a statement and return its execution id."""
        ...

    async def get_status(self, execution_id: str) -> ExecutionSnapshot:
        """Return the current status of an execution."""
        ...

    async def fetch_page(
        self, execution_id: str, max_results: int, next_token: Optional[str] = None
    ) -> ResultPage:
        """Fetch one page of results for a completed execution."""
        ...
