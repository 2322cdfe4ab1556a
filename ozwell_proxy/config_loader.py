"""Configuration loading from YAML files with environment variable support."""

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from dotenv import dotenv_values

from .core.exceptions import ConfigurationError

logger = logging.getLogger("ozwell-proxy")

# Default path to the config file (relative to project root)
DEFAULT_CONFIG_PATH = "configs/config_default.yaml"

_ENV_PATTERN = re.compile(r"\$\{([^}]+)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


@dataclass(frozen=True)
class GatewaySettings:
    host: str = "0.0.0.0"
    port: int = 3001
    backend_url: str = "https://ai.bluehive.com"
    completion_path: str = "/api/v1/completion"
    backend_timeout: float = 30.0
    default_model: str = "Ozwell"
    model_owner: str = "ozwell"
    stream_chunk_delay: float = 0.05
    log_level: str = "INFO"
    log_payloads: bool = False


def resolve_config_path(path: str) -> Path:
    """Resolve config path relative to project root if needed."""
    if Path(path).is_absolute():
        return Path(path)
    project_root = Path(__file__).parent.parent
    return project_root / path


def resolve_env_path(config_path: Path) -> Path:
    """Return the .env file that sits next to ``config_path``.

    ``configs/config_default.yaml`` pairs with ``configs/.env_default``;
    any other file pairs with a plain ``.env``.
    """
    stem = config_path.stem
    if stem.startswith("config_"):
        return config_path.with_name(f".env_{stem[len('config_'):]}")
    return config_path.with_name(".env")


def load_env_values(env_path: Path) -> dict[str, str]:
    """Load environment values from a .env file without mutating os.environ."""
    if not env_path.exists():
        return {}
    raw_values = dotenv_values(env_path)
    return {key: value for key, value in raw_values.items() if value is not None}


def load_config(path: Optional[str] = None, substitute_env: bool = True) -> dict:
    """Load the raw configuration mapping from a YAML file.

    Args:
        path: Path to the config file. Defaults to ``OZWELL_PROXY_CONFIG`` or
            configs/config_default.yaml in the project root.
        substitute_env: Whether to substitute ``${VAR}``/``$VAR`` placeholders.

    Returns:
        Parsed configuration dictionary. Empty when the default file is
        absent, so built-in defaults apply.

    Raises:
        ConfigurationError: if an explicitly requested file does not exist
            or does not hold a mapping.
    """
    explicit = path or os.getenv("OZWELL_PROXY_CONFIG")
    config_path = resolve_config_path(explicit or DEFAULT_CONFIG_PATH)

    if not config_path.exists():
        if explicit:
            logger.error(f"Config file not found: {config_path}")
            raise ConfigurationError(f"Config file not found: {config_path}")
        logger.info(f"No config file at {config_path}; using built-in defaults")
        return {}

    logger.info(f"Loading configuration from {config_path}")
    with config_path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")

    if substitute_env:
        env_file = resolve_env_path(config_path)
        env_values = load_env_values(env_file)
        if env_values:
            logger.info(f"Loaded environment variables from {env_file}")
        data = _substitute_env_vars(data, env_values)

    return data


def _substitute_env_vars(obj: Any, env_values: Mapping[str, str]) -> Any:
    """Recursively replace ``${VAR}`` and ``$VAR`` in string values.

    Unset variables are left as the literal placeholder and logged.
    """
    if isinstance(obj, dict):
        return {k: _substitute_env_vars(v, env_values) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_substitute_env_vars(item, env_values) for item in obj]
    if not isinstance(obj, str):
        return obj

    def replace_var(match):
        var_name = match.group(1) or match.group(2)
        value = env_values.get(var_name)
        if value is None:
            value = os.getenv(var_name)
        if value is None:
            logger.warning(f"Environment variable '{var_name}' is not set; keeping placeholder")
            return match.group(0)
        return value

    return _ENV_PATTERN.sub(replace_var, obj)


def _get(cfg: Mapping[str, Any], *keys: str):
    cur: Any = cfg
    for key in keys:
        if not isinstance(cur, Mapping):
            return None
        cur = cur.get(key)
    return cur


def _to_int(value) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_float(value) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_str(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_bool(value) -> Optional[bool]:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    value_str = str(value).strip().lower()
    if value_str in {"1", "true", "yes", "on"}:
        return True
    if value_str in {"0", "false", "no", "off"}:
        return False
    return None


def settings_from_config(
    cfg: Mapping[str, Any], environ: Optional[Mapping[str, str]] = None
) -> GatewaySettings:
    """Build ``GatewaySettings`` from a config mapping plus env overrides.

    Environment variables take priority over the config file.
    """
    env = os.environ if environ is None else environ
    defaults = GatewaySettings()

    host = _to_str(_get(cfg, "server", "host")) or defaults.host
    port = _to_int(_get(cfg, "server", "port")) or defaults.port
    backend_url = _to_str(_get(cfg, "backend", "base_url")) or defaults.backend_url
    completion_path = (
        _to_str(_get(cfg, "backend", "completion_path")) or defaults.completion_path
    )
    timeout = _to_float(_get(cfg, "backend", "timeout_seconds"))
    default_model = _to_str(_get(cfg, "model", "default_label")) or defaults.default_model
    model_owner = _to_str(_get(cfg, "model", "owned_by")) or defaults.model_owner
    chunk_delay = _to_float(_get(cfg, "stream", "chunk_delay_seconds"))
    log_level = _to_str(_get(cfg, "logging", "level")) or defaults.log_level
    log_payloads = _to_bool(_get(cfg, "logging", "log_payloads"))

    # Env overrides
    host = env.get("OZWELL_PROXY_HOST", host)
    port = _to_int(env.get("PORT")) or port
    backend_url = env.get("OZWELL_BACKEND_URL", backend_url)

    timeout_env = env.get("OZWELL_BACKEND_TIMEOUT")
    if timeout_env is not None:
        parsed_timeout = _to_float(timeout_env)
        if parsed_timeout is None:
            logger.warning("Invalid OZWELL_BACKEND_TIMEOUT=%s", timeout_env)
        else:
            timeout = parsed_timeout

    delay_env = env.get("OZWELL_STREAM_DELAY")
    if delay_env is not None:
        parsed_delay = _to_float(delay_env)
        if parsed_delay is None:
            logger.warning("Invalid OZWELL_STREAM_DELAY=%s", delay_env)
        else:
            chunk_delay = parsed_delay

    log_level = env.get("OZWELL_PROXY_LOG_LEVEL", log_level)

    if timeout is None or timeout <= 0:
        timeout = defaults.backend_timeout
    if chunk_delay is None or chunk_delay < 0:
        chunk_delay = defaults.stream_chunk_delay

    return GatewaySettings(
        host=host,
        port=port,
        backend_url=backend_url,
        completion_path=completion_path,
        backend_timeout=timeout,
        default_model=default_model,
        model_owner=model_owner,
        stream_chunk_delay=chunk_delay,
        log_level=log_level,
        log_payloads=bool(log_payloads),
    )


def load_settings(path: Optional[str] = None) -> GatewaySettings:
    """Load the config file and resolve it into ``GatewaySettings``."""
    return settings_from_config(load_config(path))
