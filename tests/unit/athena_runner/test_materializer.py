import pytest

from athena_runner.materializer import build_column_schema, materialize_results, row_to_object
from tests._support.fake_service import ScriptedQueryService, page

HEADER = ("id", "name")


@pytest.mark.asyncio
async def test_two_pages_stop_at_budget_without_third_fetch():
    """Header + 3 rows, then 2 rows with budget 4 uses one row of page 2 and stops."""
    service = ScriptedQueryService(
        pages=[
            page(HEADER, ("1", "a"), ("2", "b"), ("3", "c"), next_token="t2"),
            page(("4", "d"), ("5", "e"), next_token="t3"),
        ]
    )

    rows = await materialize_results(service, "exec-1", max_rows=4)

    assert rows == [
        {"id": "1", "name": "a"},
        {"id": "2", "name": "b"},
        {"id": "3", "name": "c"},
        {"id": "4", "name": "d"},
    ]
    assert service.fetch_calls == [("exec-1", 5, None), ("exec-1", 1, "t2")]


@pytest.mark.asyncio
async def test_empty_first_page_returns_no_rows():
    """An empty first page is a valid terminal case."""
    service = ScriptedQueryService(pages=[page(next_token="ignored")])

    assert await materialize_results(service, "exec-1", max_rows=10) == []
    assert len(service.fetch_calls) == 1


@pytest.mark.asyncio
async def test_header_only_result_returns_no_rows():
    """A result with columns but no data rows yields an empty list."""
    service = ScriptedQueryService(pages=[page(HEADER)])

    assert await materialize_results(service, "exec-1", max_rows=10) == []


@pytest.mark.asyncio
async def test_first_request_reserves_a_slot_for_the_header():
    """The first page asks for max_rows + 1, capped at the service page size."""
    small = ScriptedQueryService(pages=[page(HEADER)])
    await materialize_results(small, "exec-1", max_rows=10)

    large = ScriptedQueryService(pages=[page(HEADER)])
    await materialize_results(large, "exec-1", max_rows=5000)

    capped = ScriptedQueryService(pages=[page(HEADER)])
    await materialize_results(capped, "exec-1", max_rows=999)

    assert small.fetch_calls[0][1] == 11
    assert large.fetch_calls[0][1] == 1000
    assert capped.fetch_calls[0][1] == 1000


@pytest.mark.asyncio
async def test_later_pages_request_remaining_budget_capped_at_page_size():
    """Follow-up requests ask only for what the budget still allows."""
    first = page(HEADER, *[(str(i), "x") for i in range(4)], next_token="t2")
    second = page(*[(str(i), "y") for i in range(4, 7)], next_token="t3")
    third = page(("7", "z"))
    service = ScriptedQueryService(pages=[first, second, third])

    rows = await materialize_results(service, "exec-1", max_rows=20, max_page_size=5)

    assert [row["id"] for row in rows] == [str(i) for i in range(8)]
    assert service.fetch_calls == [
        ("exec-1", 5, None),
        ("exec-1", 5, "t2"),
        ("exec-1", 5, "t3"),
    ]


@pytest.mark.asyncio
async def test_oversized_page_is_truncated_to_budget():
    """Pages larger than requested never push the result past the budget."""
    service = ScriptedQueryService(
        pages=[page(HEADER, *[(str(i), "x") for i in range(10)], next_token="t2")]
    )

    rows = await materialize_results(service, "exec-1", max_rows=3)

    assert [row["id"] for row in rows] == ["0", "1", "2"]
    assert len(service.fetch_calls) == 1


@pytest.mark.asyncio
async def test_undersized_pages_are_followed_until_token_runs_out():
    """Short pages keep the loop going while a continuation token is present."""
    service = ScriptedQueryService(
        pages=[
            page(HEADER, ("1", "a"), next_token="t2"),
            page(next_token="t3"),
            page(("2", "b")),
        ]
    )

    rows = await materialize_results(service, "exec-1", max_rows=100)

    assert rows == [{"id": "1", "name": "a"}, {"id": "2", "name": "b"}]
    assert [call[2] for call in service.fetch_calls] == [None, "t2", "t3"]


@pytest.mark.asyncio
async def test_budget_met_on_first_page_ignores_continuation_token():
    """No further page is requested once the budget is exactly met."""
    service = ScriptedQueryService(
        pages=[page(HEADER, ("1", "a"), ("2", "b"), next_token="t2")]
    )

    rows = await materialize_results(service, "exec-1", max_rows=2)

    assert len(rows) == 2
    assert len(service.fetch_calls) == 1


@pytest.mark.asyncio
async def test_later_pages_never_reread_a_header():
    """Rows equal to the column names on later pages are data, not headers."""
    service = ScriptedQueryService(
        pages=[page(HEADER, next_token="t2"), page(HEADER, ("1", "a"))]
    )

    rows = await materialize_results(service, "exec-1", max_rows=10)

    assert rows == [{"id": "id", "name": "name"}, {"id": "1", "name": "a"}]


@pytest.mark.asyncio
async def test_null_cells_map_to_none():
    """Cells without a text value become explicit None values."""
    service = ScriptedQueryService(pages=[page(HEADER, (None, "a"), ("2", ""), ("3",))])

    rows = await materialize_results(service, "exec-1", max_rows=10)

    assert rows == [
        {"id": None, "name": "a"},
        {"id": "2", "name": None},
        {"id": "3", "name": None},
    ]


@pytest.mark.asyncio
async def test_invalid_budget_is_rejected_before_fetching():
    """A non-positive budget raises without contacting the service."""
    service = ScriptedQueryService()

    with pytest.raises(ValueError):
        await materialize_results(service, "exec-1", max_rows=0)
    assert service.fetch_calls == []


def test_column_schema_replaces_missing_names_with_empty_string():
    """Header cells without a value still hold their position."""
    assert build_column_schema(["a", None, "c"]) == ["a", "", "c"]


def test_row_to_object_drops_cells_beyond_schema():
    """Only schema positions produce keys."""
    assert row_to_object(["a"], ["1", "extra"]) == {"a": "1"}
