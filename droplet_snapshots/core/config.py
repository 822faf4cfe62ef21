"""Configuration management for Droplet Snapshots."""

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from droplet_snapshots.core.exceptions import ConfigurationError


DEFAULT_API_URL = "https://api.digitalocean.com/v2"

# Environment variable backing each Config field
ENV_VARS = {
    'api_token': 'DO_TOKEN',
    'droplet_name': 'DROPLET_NAME',
    'api_base_url': 'DO_API_URL',
    'wait_interval': 'WAIT_INTERVAL',
    'max_wait': 'MAX_WAIT',
    'snapshot_validity_days': 'SNAPSHOT_VALIDITY_DAYS',
    'request_timeout': 'REQUEST_TIMEOUT',
    'halt_on_failure': 'HALT_ON_FAILURE',
}


class Config(BaseModel):
    """Configuration model for a snapshot run."""

    api_token: str = Field(..., description="DigitalOcean API bearer token")
    droplet_name: str = Field(..., description="Name of the droplet to snapshot")
    api_base_url: str = Field(default=DEFAULT_API_URL, description="DigitalOcean API base URL")
    wait_interval: int = Field(default=10, gt=0, description="Seconds between action status checks")
    max_wait: int = Field(default=600, gt=0, description="Seconds to wait for an action before giving up")
    snapshot_validity_days: int = Field(default=7, gt=0, description="Snapshots older than this are deleted")
    request_timeout: float = Field(default=30.0, gt=0, description="Per-request timeout in seconds")
    halt_on_failure: bool = Field(default=False, description="Stop the cycle when a step does not complete")

    @field_validator('api_token', 'droplet_name')
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        """Reject empty or whitespace-only values."""
        if not v or not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator('api_base_url')
    @classmethod
    def validate_api_base_url(cls, v: str) -> str:
        """Validate API URL scheme and drop any trailing slash."""
        if not v.startswith(('https://', 'http://')):
            raise ValueError(
                f"Invalid API URL: {v}. "
                "Expected format: https://api.digitalocean.com/v2"
            )
        return v.rstrip('/')

    @model_validator(mode='after')
    def validate_wait_budget(self) -> 'Config':
        """The wait budget must allow at least one status check."""
        if self.max_wait < self.wait_interval:
            raise ValueError(
                f"max_wait ({self.max_wait}) must be at least wait_interval ({self.wait_interval})"
            )
        return self

    @property
    def max_trials(self) -> int:
        """Number of status checks allowed per action."""
        return self.max_wait // self.wait_interval


class ConfigManager:
    """Builds the run configuration from the environment and an optional .env file."""

    def __init__(self, env_file: Optional[Path] = None):
        """Initialize configuration manager.

        Args:
            env_file: Optional dotenv file to load. Defaults to a .env file
                      found from the current working directory.
        """
        self.env_file = env_file

    def load_config(
        self,
        environ: Optional[Mapping[str, str]] = None,
        **overrides: Any
    ) -> Config:
        """Load configuration from environment variables.

        Variables already present in the environment win over the dotenv
        file. Keyword overrides (from CLI options) win over both; None values
        are ignored.

        Args:
            environ: Environment mapping to read. Defaults to os.environ
                     after loading the dotenv file.
            **overrides: Config field values that take precedence

        Returns:
            Validated Config object.

        Raises:
            ConfigurationError: If required values are missing or invalid.
        """
        if environ is None:
            self._load_env_file()
            environ = os.environ

        config_data: Dict[str, Any] = {}
        for field_name, env_var in ENV_VARS.items():
            value = environ.get(env_var)
            if value is not None and value != '':
                config_data[field_name] = value

        for field_name, value in overrides.items():
            if value is not None:
                config_data[field_name] = value

        missing = [
            ENV_VARS[name] for name in ('api_token', 'droplet_name')
            if name not in config_data
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required configuration: {', '.join(missing)}",
                details="Set them in the environment or in a .env file"
            )

        try:
            return Config(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}", details=str(e))

    def _load_env_file(self) -> None:
        """Load the dotenv file without overriding the process environment."""
        if self.env_file is not None:
            if not self.env_file.exists():
                raise ConfigurationError(f"Environment file not found: {self.env_file}")
            load_dotenv(self.env_file, override=False)
        else:
            load_dotenv(find_dotenv(usecwd=True), override=False)
