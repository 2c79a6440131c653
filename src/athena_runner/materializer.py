import logging
from typing import Dict, List, Optional, Sequence

from athena_runner.service import ATHENA_MAX_PAGE_SIZE, Cell, QueryExecutionService

logger = logging.getLogger(__name__)

RowObject = Dict[str, Optional[str]]


def build_column_schema(header: Sequence[Cell]) -> List[str]:
    """Return column names from the header row of the first result page."""
    return [name or "" for name in header]


def row_to_object(columns: Sequence[str], row: Sequence[Cell]) -> RowObject:
    """Zip a raw row against the column schema.

    Every column gets a key. Missing or empty cells map to None and cells
    beyond the schema are dropped.
    """
    return {
        name: (row[index] or None) if index < len(row) else None
        for index, name in enumerate(columns)
    }


async def materialize_results(
    service: QueryExecutionService,
    execution_id: str,
    max_rows: int,
    max_page_size: int = ATHENA_MAX_PAGE_SIZE,
) -> List[RowObject]:
    """Collect at most ``max_rows`` row objects across result pages.

    The header row occupies one slot of the first page only, so the first
    request asks for ``max_rows + 1`` rows.
    """
    if max_rows <= 0:
        raise ValueError(f"max_rows must be > 0, got {max_rows}.")

    first_page = await service.fetch_page(execution_id, min(max_rows + 1, max_page_size))
    if not first_page.rows:
        return []

    columns = build_column_schema(first_page.rows[0])
    results: List[RowObject] = []
    _append_rows(results, columns, first_page.rows[1:], max_rows)

    next_token = first_page.next_token
    pages = 1
    while next_token and len(results) < max_rows:
        page = await service.fetch_page(
            execution_id, min(max_rows - len(results), max_page_size), next_token
        )
        pages += 1
        _append_rows(results, columns, page.rows, max_rows)
        next_token = page.next_token

    logger.debug("Materialized %s rows from %s page(s) for %s", len(results), pages, execution_id)
    if next_token:
        logger.warning(
            "Query %s hit max rows cap (%s); remaining pages not fetched.", execution_id, max_rows
        )
    return results


def _append_rows(
    results: List[RowObject],
    columns: Sequence[str],
    rows: Sequence[Sequence[Cell]],
    max_rows: int,
) -> None:
    for row in rows:
        if len(results) >= max_rows:
            return
        results.append(row_to_object(columns, row))
