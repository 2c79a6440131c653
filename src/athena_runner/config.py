from dataclasses import dataclass, replace
from typing import Any, Optional

from athena_runner.env import get_env_float, get_env_int, get_env_str
from athena_runner.errors import RunnerConfigError

DEFAULT_CATALOG = "AwsDataCatalog"
DEFAULT_WORKGROUP = "primary"
DEFAULT_MAX_ROWS = 1000
DEFAULT_WAIT_TIMEOUT_SECONDS = 300
DEFAULT_POLL_INTERVAL_SECONDS = 1.0


@dataclass(frozen=True)
class RunnerConfig:
    """Settings for a single Athena query run."""

    database: str
    catalog: str = DEFAULT_CATALOG
    workgroup: str = DEFAULT_WORKGROUP
    output_location: Optional[str] = None
    max_rows: int = DEFAULT_MAX_ROWS
    wait_timeout_seconds: float = DEFAULT_WAIT_TIMEOUT_SECONDS
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    region: Optional[str] = None

    @classmethod
    def from_env(cls, validate: bool = True) -> "RunnerConfig":
        """Load runner config from environment variables."""
        config = cls(
            database=get_env_str("ATHENA_DATABASE", "") or "",
            catalog=get_env_str("ATHENA_CATALOG", DEFAULT_CATALOG),
            workgroup=get_env_str("ATHENA_WORKGROUP", DEFAULT_WORKGROUP),
            output_location=get_env_str("ATHENA_OUTPUT_LOCATION"),
            max_rows=get_env_int("ATHENA_MAX_ROWS", DEFAULT_MAX_ROWS),
            wait_timeout_seconds=get_env_float(
                "ATHENA_WAIT_TIMEOUT_SECONDS", DEFAULT_WAIT_TIMEOUT_SECONDS
            ),
            poll_interval_seconds=get_env_float(
                "ATHENA_POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS
            ),
            region=get_env_str("AWS_REGION") or get_env_str("AWS_DEFAULT_REGION"),
        )
        if validate:
            config.validate()
        return config

    def with_overrides(self, **overrides: Any) -> "RunnerConfig":
        """Return a validated copy with non-None overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        updated = replace(self, **changes)
        updated.validate()
        return updated

    def validate(self) -> None:
        """Fail closed on missing or unsafe settings."""
        if not self.database:
            raise RunnerConfigError(
                "Athena query runner missing required config: database. "
                "Set ATHENA_DATABASE or pass --database."
            )
        if not self.catalog:
            raise RunnerConfigError("Athena catalog must not be empty.")
        if not self.workgroup:
            raise RunnerConfigError("Athena workgroup must not be empty.")
        if isinstance(self.max_rows, bool) or not isinstance(self.max_rows, int):
            raise RunnerConfigError(f"max_rows must be an integer, got {self.max_rows!r}.")
        if self.max_rows <= 0:
            raise RunnerConfigError(f"max_rows must be > 0, got {self.max_rows}.")
        if self.wait_timeout_seconds <= 0:
            raise RunnerConfigError(
                f"wait_timeout_seconds must be > 0, got {self.wait_timeout_seconds}."
            )
        if self.poll_interval_seconds <= 0:
            raise RunnerConfigError(
                f"poll_interval_seconds must be > 0, got {self.poll_interval_seconds}."
            )
