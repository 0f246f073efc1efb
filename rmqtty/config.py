"""Connection profiles stored in the user's configuration file."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


class SessionNotFoundError(LookupError):
    """Raised when a named session is missing from the configuration."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Session '{name}' not found")
        self.name = name


@dataclass(frozen=True)
class Session:
    """A named broker profile."""

    host: str
    port: int | None = None
    tls: bool | None = None
    ca_cert: Path | None = None
    client_cert: Path | None = None
    client_key: Path | None = None
    user: str | None = None
    password: str | None = None
    topics: list[str] | None = None

    @classmethod
    def _from_mapping(cls, data: Any) -> Session:
        if not isinstance(data, dict):
            raise ValueError("session must be a table")
        host = data.get("host")
        if not isinstance(host, str):
            raise ValueError("session requires a string 'host'")
        port = data.get("port")
        if port is not None:
            if not isinstance(port, int) or isinstance(port, bool) or not 0 <= port <= 0xFFFF:
                raise ValueError("'port' must be an integer between 0 and 65535")
        topics = data.get("topics")
        if topics is not None:
            if not isinstance(topics, list) or not all(isinstance(t, str) for t in topics):
                raise ValueError("'topics' must be a list of strings")
            topics = list(topics)
        return cls(
            host=host,
            port=port,
            tls=_optional(data, "tls", bool),
            ca_cert=_optional_path(data, "ca_cert"),
            client_cert=_optional_path(data, "client_cert"),
            client_key=_optional_path(data, "client_key"),
            user=_optional(data, "user", str),
            password=_optional(data, "password", str),
            topics=topics,
        )


def _optional(data: dict, key: str, kind: type) -> Any:
    value = data.get(key)
    if value is not None and not isinstance(value, kind):
        raise ValueError(f"'{key}' must be of type {kind.__name__}")
    return value


def _optional_path(data: dict, key: str) -> Path | None:
    value = _optional(data, key, str)
    return Path(value) if value is not None else None


@dataclass
class Config:
    """All sessions read from the configuration file."""

    sessions: dict[str, Session] = field(default_factory=dict)

    def get_session(self, name: str) -> Session:
        """Return the session called ``name`` or raise SessionNotFoundError."""
        try:
            return self.sessions[name]
        except KeyError:
            raise SessionNotFoundError(name) from None


def config_path() -> Path:
    """Location of the configuration file: ~/.config/rmqtty/config.toml."""
    try:
        home = Path.home()
    except RuntimeError:
        home = Path(".")
    return home / ".config" / "rmqtty" / "config.toml"


def load_config(path: str | Path | None = None) -> Config | None:
    """Read the configuration file.

    An unreadable or missing file yields an empty configuration; a file that
    cannot be parsed yields None.
    """
    target = Path(path) if path is not None else config_path()
    try:
        text = target.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return Config()
    try:
        document = tomllib.loads(text)
        raw_sessions = document["sessions"]
        if not isinstance(raw_sessions, dict):
            return None
        sessions = {name: Session._from_mapping(data) for name, data in raw_sessions.items()}
    except (tomllib.TOMLDecodeError, KeyError, ValueError):
        return None
    return Config(sessions=sessions)