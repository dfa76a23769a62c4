"""Settings resolution: CHANGETHOR_* env vars and .env over an optional TOML file."""

import os
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

import tomlkit
import typer
from pydantic import SecretStr, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict
from tomlkit.exceptions import ParseError

CONFIG_PATH = Path("changethor.toml")


class ChangeThorSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CHANGETHOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # SolarWinds Service Desk
    solarwinds_url: str = "https://api.samanage.com"
    solarwinds_token: SecretStr | None = None
    requester_email: str = ""
    category: str = ""
    subcategory: str = ""
    priority: str = ""

    # Jira (optional)
    jira_base_url: str | None = None
    jira_username: str = ""
    jira_api_token: SecretStr | None = None
    enable_description_enhancement: bool = True
    jira_timeout_seconds: int = 30

    @property
    def jira_enabled(self) -> bool:
        return bool(self.jira_base_url and self.jira_api_token)


def config_path() -> Path:
    override = os.environ.get("CHANGETHOR_CONFIG")
    return Path(override) if override else CONFIG_PATH


@lru_cache(maxsize=1)
def _load_toml(path: Path) -> tomlkit.TOMLDocument:
    """Load the TOML config file, returning an empty document if missing."""
    if not path.exists():
        return tomlkit.document()
    with path.open() as fh:
        return tomlkit.load(fh)


def _flatten(config: Mapping) -> dict:
    """Map [solarwinds] / [jira] tables onto flat settings field names.

    [jira] base_url = "..." becomes jira_base_url; keys that are already field
    names (enable_description_enhancement) are kept. Top-level scalars pass through.
    """
    flat: dict = {}
    for key, value in config.items():
        if not isinstance(value, Mapping):
            flat[key] = value
            continue
        for sub_key, sub_value in value.items():
            name = sub_key if sub_key in ChangeThorSettings.model_fields else f"{key}_{sub_key}"
            flat[name] = sub_value
    return flat


def get_settings(path: Path | None = None) -> ChangeThorSettings:
    """Resolve settings and validate that the ticket system is reachable.

    Precedence (highest to lowest):
    1. CHANGETHOR_* environment variables
    2. .env in the working directory
    3. the TOML config file (--config, CHANGETHOR_CONFIG, or ./changethor.toml)
    4. field defaults
    """
    source = path or config_path()
    try:
        file_defaults = _flatten(_load_toml(source).unwrap())
    except ParseError as exc:
        typer.echo(f"Invalid config file {source}: {exc}")
        raise typer.Exit(1)

    try:
        # Init kwargs outrank env in pydantic-settings, so drop any key the environment already sets.
        explicit = ChangeThorSettings().model_fields_set
        settings = ChangeThorSettings(**{k: v for k, v in file_defaults.items() if k not in explicit})
    except ValidationError as exc:
        typer.echo(f"Invalid changethor settings:\n{exc}")
        raise typer.Exit(1)

    if not settings.solarwinds_token:
        typer.echo(
            "Missing SolarWinds credentials. Set CHANGETHOR_SOLARWINDS_TOKEN or "
            f"token in the [solarwinds] section of {source}"
        )
        raise typer.Exit(1)
    if not settings.solarwinds_url:
        typer.echo("Missing SolarWinds service URL. Set CHANGETHOR_SOLARWINDS_URL.")
        raise typer.Exit(1)

    return settings
