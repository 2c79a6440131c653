"""Row-ceiling enforcement for SELECT statements before submission.

Matching is lexical. Only the trailing ``LIMIT n`` of the whole statement is
recognized; limits inside subqueries, UNION branches or statements that lead
with ``WITH`` are not inspected.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

_SELECT_PREFIX_RE = re.compile(r"^\s*SELECT\s+", flags=re.IGNORECASE)
_TRAILING_LIMIT_RE = re.compile(r"\bLIMIT\s+(\d+)\s*;?\s*$", flags=re.IGNORECASE)


class LimitAction(str, Enum):
    """What the enforcer did to a statement."""

    NOT_SELECT = "not_select"
    APPENDED = "appended"
    DOWNGRADED = "downgraded"
    UNCHANGED = "unchanged"


@dataclass(frozen=True)
class LimitEnforcement:
    """Outcome of applying a row ceiling to a statement."""

    sql: str
    action: LimitAction
    max_rows: int
    original_limit: Optional[int] = None

    @property
    def rewritten(self) -> bool:
        """Return True when the submitted text differs from the trimmed input."""
        return self.action in (LimitAction.APPENDED, LimitAction.DOWNGRADED)


def is_select_statement(sql: str) -> bool:
    """Return True when the statement leads with a SELECT keyword."""
    return bool(_SELECT_PREFIX_RE.match(sql))


def apply_row_limit(sql: str, max_rows: int) -> LimitEnforcement:
    """Bound a SELECT statement to at most ``max_rows`` rows.

    Rewrites drop a trailing ``;``; statements that need no rewrite are
    returned trimmed but otherwise untouched.
    """
    if isinstance(max_rows, bool) or not isinstance(max_rows, int) or max_rows <= 0:
        raise ValueError(f"max_rows must be a positive integer, got {max_rows!r}.")

    trimmed = sql.strip()
    if not is_select_statement(trimmed):
        return LimitEnforcement(sql=trimmed, action=LimitAction.NOT_SELECT, max_rows=max_rows)

    match = _TRAILING_LIMIT_RE.search(trimmed)
    if match is None:
        base = trimmed[:-1].rstrip() if trimmed.endswith(";") else trimmed
        return LimitEnforcement(
            sql=f"{base} LIMIT {max_rows}",
            action=LimitAction.APPENDED,
            max_rows=max_rows,
        )

    existing = int(match.group(1))
    if existing > max_rows:
        return LimitEnforcement(
            sql=f"{trimmed[: match.start()]}LIMIT {max_rows}",
            action=LimitAction.DOWNGRADED,
            max_rows=max_rows,
            original_limit=existing,
        )
    return LimitEnforcement(
        sql=trimmed,
        action=LimitAction.UNCHANGED,
        max_rows=max_rows,
        original_limit=existing,
    )


def enforce_limit(sql: str, max_rows: int) -> str:
    """Return the statement to submit, logging when a ceiling was imposed."""
    result = apply_row_limit(sql, max_rows)
    if result.action == LimitAction.APPENDED:
        logger.info("Enforcing LIMIT %s on SELECT query", max_rows)
    elif result.action == LimitAction.DOWNGRADED:
        logger.warning(
            "Query LIMIT %s exceeds max-rows %s, enforcing LIMIT %s",
            result.original_limit,
            max_rows,
            max_rows,
        )
    return result.sql
