import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from athena_runner.athena import AthenaQueryExecutionService
from athena_runner.config import RunnerConfig
from athena_runner.errors import QueryRunnerError, RunnerConfigError, describe_error
from athena_runner.runner import QueryRunner

logger = logging.getLogger("athena_runner.cli")

EXIT_OK = 0
EXIT_RUN_FAILED = 1
EXIT_CONFIG_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the query runner CLI."""
    parser = argparse.ArgumentParser(
        prog="athena-query-runner",
        description="Run a SQL statement on Amazon Athena with a row ceiling.",
    )
    parser.add_argument("query", help="SQL statement to run, or '-' to read it from stdin")
    parser.add_argument("--database", help="Target database (env: ATHENA_DATABASE)")
    parser.add_argument("--catalog", help="Data catalog (default: AwsDataCatalog)")
    parser.add_argument("--workgroup", help="Athena workgroup (default: primary)")
    parser.add_argument("--output-location", help="S3 location override for query results")
    parser.add_argument(
        "--max-rows",
        type=int,
        help="Maximum rows to return; enforced as a LIMIT on SELECT queries (default: 1000)",
    )
    parser.add_argument(
        "--wait-timeout-seconds",
        type=float,
        help="Seconds to wait for the query to finish (default: 300)",
    )
    parser.add_argument("--region", help="AWS region (env: AWS_REGION)")
    parser.add_argument("--output", type=Path, help="Write the result JSON to this file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def _read_query(value: str) -> str:
    if value == "-":
        return sys.stdin.read()
    return value


def resolve_config(args: argparse.Namespace) -> RunnerConfig:
    """Layer CLI flags over environment settings."""
    return RunnerConfig.from_env(validate=False).with_overrides(
        database=args.database,
        catalog=args.catalog,
        workgroup=args.workgroup,
        output_location=args.output_location,
        max_rows=args.max_rows,
        wait_timeout_seconds=args.wait_timeout_seconds,
        region=args.region,
    )


async def run_cli(sql: str, config: RunnerConfig) -> str:
    """Run the query against Athena and return the result JSON."""
    service = AthenaQueryExecutionService(region=config.region)
    result = await QueryRunner(service, config).run(sql)
    return result.to_output_json()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the Athena query runner CLI."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        config = resolve_config(args)
    except RunnerConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG_ERROR

    try:
        payload = asyncio.run(run_cli(_read_query(args.query), config))
    except QueryRunnerError as exc:
        logger.error("Query run failed with error:")
        for key, value in describe_error(exc).items():
            logger.error("  %s: %s", key, value)
        logger.error("Query run failed: %s", exc)
        return EXIT_RUN_FAILED
    except Exception as exc:
        logger.error("Query run failed: %s", exc, exc_info=True)
        return EXIT_RUN_FAILED

    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote results to %s", args.output)
    else:
        sys.stdout.write(payload + "\n")
    logger.info("Query run completed successfully")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
