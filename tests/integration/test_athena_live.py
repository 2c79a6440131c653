"""Live Athena checks; need AWS credentials and ATHENA_DATABASE."""

import pytest

from athena_runner.athena import AthenaQueryExecutionService
from athena_runner.config import RunnerConfig
from athena_runner.errors import QueryExecutionFailedError, QuerySubmissionError
from athena_runner.runner import QueryRunner

pytestmark = pytest.mark.integration


@pytest.fixture
def live_config():
    """Load runner settings from the environment, skipping when unset."""
    config = RunnerConfig.from_env(validate=False)
    if not config.database:
        pytest.skip("ATHENA_DATABASE is not set")
    return config.with_overrides(max_rows=3, wait_timeout_seconds=120)


@pytest.mark.asyncio
async def test_select_is_bounded_by_max_rows(live_config):
    """A constant query larger than the budget returns exactly the budget."""
    service = AthenaQueryExecutionService(region=live_config.region)
    sql = "SELECT n FROM UNNEST(sequence(1, 10)) AS t(n) ORDER BY n"

    result = await QueryRunner(service, live_config).run(sql)

    assert result.state == "SUCCEEDED"
    assert result.result_count == 3
    assert [row["n"] for row in result.results] == ["1", "2", "3"]


@pytest.mark.asyncio
async def test_malformed_statement_is_rejected(live_config):
    """Syntax errors surface as submission errors or failed executions."""
    service = AthenaQueryExecutionService(region=live_config.region)

    with pytest.raises((QuerySubmissionError, QueryExecutionFailedError)):
        await QueryRunner(service, live_config).run("SELECT FROM WHERE")
