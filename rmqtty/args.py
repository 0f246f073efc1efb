"""Command-line arguments, with environment-variable fallbacks."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Sequence

VERSION = "0.1.0"

# Environment variable -> option it fills in when the option is not given.
ENV_SOURCES = {
    "RMQTTY_HOST": "hostname",
    "RMQTTY_PORT": "port",
    "RMQTTY_CLIENT": "client_id",
    "RMQTTY_TOPIC": "topic",
    "RMQTTY_USER": "user",
    "RMQTTY_PW": "password",
    "RMQTTY_PROFILE": "profile",
}

_ENV_FOR = {option: variable for variable, option in ENV_SOURCES.items()}


@dataclass(frozen=True)
class Args:
    """Options given on the command line or through the environment."""

    hostname: str | None = None
    port: int | None = None
    client_id: str | None = None
    topic: str | None = None
    user: str | None = None
    password: str | None = None
    profile: str | None = None


def _port(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {text!r}") from None
    if not 0 <= value <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"port out of range: {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(prog="rmqtty", description="Terminal based mqtt explorer")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument(
        "-H", "--hostname", help=f"Hostname of the mqtt broker [env: {_ENV_FOR['hostname']}]"
    )
    parser.add_argument(
        "-P", "--port", type=_port, help=f"Port of the broker [env: {_ENV_FOR['port']}]"
    )
    parser.add_argument(
        "-c", "--client-id", help=f"ClientID of the connection [env: {_ENV_FOR['client_id']}]"
    )
    parser.add_argument(
        "-t", "--topic", help=f"Topics to subscribe to [env: {_ENV_FOR['topic']}]"
    )
    parser.add_argument("-u", "--user", help=f"Username of the broker [env: {_ENV_FOR['user']}]")
    parser.add_argument(
        "-p", "--password", help=f"Password of the broker [env: {_ENV_FOR['password']}]"
    )
    parser.add_argument(
        "--profile", help=f"Selected profile from config.toml [env: {_ENV_FOR['profile']}]"
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> Args:
    """Parse ``argv``, filling unset options from the environment."""
    parser = build_parser()
    values = vars(parser.parse_args(argv))
    for variable, name in ENV_SOURCES.items():
        if values[name] is not None:
            continue
        raw = os.environ.get(variable)
        if not raw:
            continue
        if name == "port":
            try:
                values[name] = _port(raw)
            except argparse.ArgumentTypeError as exc:
                parser.error(f"invalid value for {variable}: {exc}")
        else:
            values[name] = raw
    return Args(**values)