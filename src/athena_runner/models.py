"""Caller-facing result models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QueryRunResult(BaseModel):
    """Outputs of one completed query run.

    Serialized with kebab-case aliases (``query-execution-id`` and so on) so
    the JSON matches the names callers already consume.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    query_execution_id: str = Field(..., alias="query-execution-id")
    state: str = Field(..., description="Terminal execution state")
    data_scanned_bytes: int = Field(0, ge=0, alias="data-scanned-bytes")
    execution_time_ms: int = Field(0, ge=0, alias="execution-time-ms")
    results: list[dict[str, Optional[str]]] = Field(default_factory=list)
    result_count: int = Field(0, ge=0, alias="result-count")

    @model_validator(mode="after")
    def _check_result_count(self) -> "QueryRunResult":
        if self.result_count != len(self.results):
            raise ValueError(
                f"result_count {self.result_count} does not match {len(self.results)} results"
            )
        return self

    @property
    def data_scanned_mb(self) -> float:
        """Return data scanned in mebibytes."""
        return self.data_scanned_bytes / 1024 / 1024

    def to_output_json(self, indent: Optional[int] = None) -> str:
        """Serialize with the public kebab-case field names."""
        return self.model_dump_json(by_alias=True, indent=indent)
