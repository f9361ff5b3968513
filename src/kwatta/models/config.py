"""Pydantic configuration models for kwatta."""

import os
import re
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

from ..logging_config import LogLevel

DEFAULT_HEADERS: dict[str, str] = {"Content-Type": "application/json"}


def _expand_env_var(value: Optional[str]) -> Optional[str]:
    """Expand environment variable references in a string.

    Supports $VAR and ${VAR} syntax. Returns original value if
    the env var is not set.
    """
    if value is None:
        return None

    # Match $VAR or ${VAR}
    pattern = r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)"

    def replace(match: re.Match) -> str:
        var_name = match.group(1) or match.group(2)
        return os.environ.get(var_name, match.group(0))

    return re.sub(pattern, replace, value)


class AuthConfig(BaseModel):
    """Credentials attached to every request unless a call opts out.

    The token supports environment variable expansion using $VAR or
    ${VAR} syntax, e.g. ``token: "$API_TOKEN"`` in a YAML file.
    """

    token: Optional[str] = Field(None, description="Auth token (None = no auth header)")
    header_name: str = Field("Authorization", description="Header that carries the token")
    use_bearer_prefix: bool = Field(True, description="Send the token as 'Bearer <token>'")

    model_config = {"extra": "forbid"}

    def model_post_init(self, __context: object) -> None:
        """Expand environment variables in the token after init."""
        if self.token:
            object.__setattr__(self, "token", _expand_env_var(self.token))


class KwattaConfig(BaseModel):
    """
    Root configuration model for a kwatta client.

    Example:
        config = KwattaConfig(
            base_url="https://api.example.com",
            rate_limit_delay=0.25,
            auth=AuthConfig(token="$API_TOKEN"),
        )
        client = Kwatta.from_config(config)

    YAML format:
        base_url: https://api.example.com
        rate_limit_delay: 0.25
        cache_lifetime: 30
        auth:
          token: $API_TOKEN
          header_name: X-Token
          use_bearer_prefix: false
    """

    base_url: str = Field(..., description="Prefix prepended to every request path")
    default_headers: dict[str, str] = Field(
        default_factory=dict,
        description="Extra headers merged over Content-Type: application/json (caller headers override)",
    )
    rate_limit_delay: float = Field(1.0, ge=0, description="Minimum seconds between dispatches")
    cache_lifetime: float = Field(60.0, ge=0, description="Seconds before a cached response goes stale")
    auth: AuthConfig = Field(default_factory=AuthConfig)

    # Logging
    log_level: LogLevel = Field(
        "INFO",
        description="Logging level",
    )
    log_file: Optional[Path] = Field(None, description="Log file path")

    model_config = {"extra": "forbid"}

    def to_yaml(self) -> str:
        """Serialize config to YAML string."""
        import yaml

        return yaml.dump(self.model_dump(mode="json", exclude_none=True), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "KwattaConfig":
        """Load config from YAML string."""
        import yaml

        data = yaml.safe_load(yaml_str)
        return cls.model_validate(data)

    @classmethod
    def from_yaml_file(cls, path: Path) -> "KwattaConfig":
        """Load config from YAML file."""
        return cls.from_yaml(Path(path).read_text())
