"""Configuration loader for linkscout.

This module provides functions to load and validate YAML configuration files
for the crawl server connection and for discover-links defaults.
"""

import os
from pathlib import Path
from typing import Any

import yaml

from linkscout.core.constants import AuthType, DEFAULTS
from linkscout.core.exceptions import ConfigError, InvalidServerConfigError, OptionsFileError
from linkscout.core.models import ServerConfig


ENV_SERVER_URL = "CRAWL4AI_URL"
ENV_API_TOKEN = "CRAWL4AI_API_TOKEN"

OPTION_SECTIONS = ("filters", "browser", "output")

SERVER_CONFIG_NAME = "server.yaml"
DISCOVER_OPTIONS_NAME = "discover.yaml"


# ============================================================================
# Configuration Paths
# ============================================================================

def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to configs directory (./configs relative to project root)
    """
    # Project root is 3 levels up: core/ -> linkscout/ -> src/ -> root
    project_root = Path(__file__).parent.parent.parent.parent
    return project_root / "configs"


def _read_yaml(path: Path, error_cls: type[ConfigError]) -> Any:
    if not path.exists():
        raise error_cls(f"Config file not found: {path}")

    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise error_cls(f"Failed to parse YAML in {path}: {e}") from e
    except OSError as e:
        raise error_cls(f"Failed to read {path}: {e}") from e


# ============================================================================
# Server Configuration Loader
# ============================================================================

def load_server_config(config_file: Path | str | None = None) -> ServerConfig:
    """Load crawl server settings.

    Without a file, ``configs/server.yaml`` is read when present and the
    built-in defaults are used otherwise. ``CRAWL4AI_URL`` and
    ``CRAWL4AI_API_TOKEN`` override the URL and token in both cases
    (a token from the environment implies token authentication).

    Args:
        config_file: Path to a server YAML file (``server:`` section). If None,
            falls back to ``server.yaml`` in the config directory

    Returns:
        ServerConfig with validated settings

    Raises:
        ConfigError: If the file is missing or not valid YAML
        InvalidServerConfigError: If the settings are invalid
    """
    server_data: dict[str, Any] = {}

    if config_file is None:
        local_config = get_config_dir() / SERVER_CONFIG_NAME
        if local_config.exists():
            config_file = local_config

    if config_file is not None:
        data = _read_yaml(Path(config_file), ConfigError)
        if not data or "server" not in data:
            raise InvalidServerConfigError("Missing 'server' section in server config")
        server_data = data["server"] or {}
        if not isinstance(server_data, dict):
            raise InvalidServerConfigError("'server' must be a mapping")

    auth_data = server_data.get("auth") or {}
    if not isinstance(auth_data, dict):
        raise InvalidServerConfigError("'server.auth' must be a mapping")

    try:
        auth_type = AuthType(str(auth_data.get("type", AuthType.NONE.value)).lower())
    except ValueError:
        raise InvalidServerConfigError(
            f"Invalid auth type '{auth_data.get('type')}'. Must be one of: none, token, basic"
        ) from None

    try:
        timeout = float(server_data.get("timeout", DEFAULTS["request_timeout"]))
    except (TypeError, ValueError):
        raise InvalidServerConfigError("'server.timeout' must be a number of seconds") from None
    if timeout <= 0:
        raise InvalidServerConfigError("'server.timeout' must be positive")

    config = ServerConfig(
        url=str(server_data.get("url") or DEFAULTS["server_url"]),
        auth_type=auth_type,
        api_token=str(auth_data.get("token") or ""),
        username=str(auth_data.get("username") or ""),
        password=str(auth_data.get("password") or ""),
        timeout=timeout,
    )

    env_url = os.environ.get(ENV_SERVER_URL)
    if env_url:
        config.url = env_url
    env_token = os.environ.get(ENV_API_TOKEN)
    if env_token:
        config.api_token = env_token
        config.auth_type = AuthType.TOKEN

    if not config.url.startswith(("http://", "https://")):
        raise InvalidServerConfigError(f"Server URL must start with http:// or https://: {config.url}")
    if config.auth_type == AuthType.TOKEN and not config.api_token:
        raise InvalidServerConfigError("Token authentication requires 'server.auth.token'")
    if config.auth_type == AuthType.BASIC and not (config.username and config.password):
        raise InvalidServerConfigError("Basic authentication requires username and password")

    return config


# ============================================================================
# Discover Options Loader
# ============================================================================

def load_discover_options(options_file: Path | str | None = None) -> dict[str, Any]:
    """Load discover-links defaults from YAML.

    The file may contain ``link_types`` (list) and the ``filters``,
    ``browser`` and ``output`` sections (mappings).

    Args:
        options_file: Path to options YAML file. If None, reads
            ``discover.yaml`` from the config directory when present and
            returns the defaults otherwise

    Returns:
        Dictionary with ``link_types`` and one dict per section

    Raises:
        OptionsFileError: If the file is missing, unparsable or malformed
    """
    if options_file is None:
        local_options = get_config_dir() / DISCOVER_OPTIONS_NAME
        data = _read_yaml(local_options, OptionsFileError) if local_options.exists() else {}
    else:
        data = _read_yaml(Path(options_file), OptionsFileError)
    data = data or {}
    if not isinstance(data, dict):
        raise OptionsFileError("Options file must contain a mapping")

    unknown = set(data) - {"link_types", *OPTION_SECTIONS}
    if unknown:
        raise OptionsFileError(f"Unknown option sections: {', '.join(sorted(unknown))}")

    link_types = data.get("link_types", list(DEFAULTS["link_types"]))
    if not isinstance(link_types, list):
        raise OptionsFileError("'link_types' must be a list")

    options: dict[str, Any] = {"link_types": link_types}
    for section in OPTION_SECTIONS:
        value = data.get(section) or {}
        if not isinstance(value, dict):
            raise OptionsFileError(f"'{section}' must be a mapping")
        options[section] = value

    return options
