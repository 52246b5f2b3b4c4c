"""Runtime configuration: env-driven, oracle-aware.

Centralized config using pydantic-settings for environment variable
support. Reads from .env file and IDEMDEPLOY_* environment variables.

The deployer address bound into address derivation lives here, not in the
core: the orchestrator only ever sees an injected oracle.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class DeployerConfig(BaseSettings):
    """Deployment configuration with environment variable overrides.

    All settings can be overridden via IDEMDEPLOY_* environment variables
    or a .env file in the project root.

    Examples
    --------
    Override via environment::

        export IDEMDEPLOY_ENVIRONMENT=staging
        export IDEMDEPLOY_LOG_LEVEL=DEBUG
        export IDEMDEPLOY_ORACLE_DB_PATH=/data/oracle.db

    Or via .env file::

        IDEMDEPLOY_ENVIRONMENT=production
        IDEMDEPLOY_ORACLE_BACKEND=sqlite
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="IDEMDEPLOY_",
        env_file_encoding="utf-8",
    )

    # Runtime environment
    environment: str = "development"
    log_level: str = "INFO"
    debug: bool = False

    # Oracle binding
    oracle_backend: Literal["memory", "sqlite"] = "sqlite"
    oracle_db_path: Path = Path(".idemdeploy/oracle.db")
    deployer_address: str = "0x4e59b44847b379578588920ca78fbf26c0b4956c"

    # Driver defaults
    broadcast: bool = False

    @property
    def is_production(self) -> bool:
        """Whether running in production mode."""
        return self.environment == "production"

