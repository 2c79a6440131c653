"""Athena-backed query execution service."""

from .service import ATHENA_MAX_PAGE_SIZE, AthenaQueryExecutionService

__all__ = [
    "ATHENA_MAX_PAGE_SIZE",
    "AthenaQueryExecutionService",
]
