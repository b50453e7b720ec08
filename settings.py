"""
Echo server settings, read from the environment.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class SettingsError(ValueError):
    """Raised when an environment variable holds an unusable value"""


def _parse_port(raw):
    try:
        port = int(raw)
    except ValueError:
        raise SettingsError(f"ECHO_PORT must be an integer, got {raw!r}") from None
    if not 0 <= port <= 65535:
        raise SettingsError(f"ECHO_PORT out of range: {port}")
    return port


def _parse_bool(name, raw):
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise SettingsError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class Settings:
    host: str = "127.0.0.1"
    port: int = 3000
    static_dir: Path = Path("static")
    index_file: Optional[Path] = None
    ws_path: str = "/ws"
    log_level: str = "info"
    log_headers: bool = True

    @classmethod
    def from_env(cls, environ=None):
        """Build settings from ECHO_* variables (and LOG_LEVEL)"""
        env = os.environ if environ is None else environ
        defaults = cls()

        ws_path = env.get("ECHO_WS_PATH", defaults.ws_path)
        if not ws_path.startswith("/"):
            raise SettingsError(f"ECHO_WS_PATH must start with '/', got {ws_path!r}")

        index_file = env.get("ECHO_INDEX_FILE")

        return cls(
            host=env.get("ECHO_HOST", defaults.host),
            port=_parse_port(env["ECHO_PORT"]) if "ECHO_PORT" in env else defaults.port,
            static_dir=Path(env.get("ECHO_STATIC_DIR", str(defaults.static_dir))),
            index_file=Path(index_file) if index_file else None,
            ws_path=ws_path,
            log_level=env.get("LOG_LEVEL", defaults.log_level),
            log_headers=(
                _parse_bool("ECHO_LOG_HEADERS", env["ECHO_LOG_HEADERS"])
                if "ECHO_LOG_HEADERS" in env
                else defaults.log_headers
            ),
        )
