"""Entry point: connect to the broker and run the terminal interface."""

from __future__ import annotations

import contextlib
import curses
import queue
from typing import Iterator, Sequence

from .app import App
from .args import Args, parse_args
from .config import Config, SessionNotFoundError, load_config
from .mqtt import Client, ClientConfig, EventKind, MqttEvent
from .ui import draw

_POLL_MILLISECONDS = 100
_ENTER_KEYS = {"\n", "\r", curses.KEY_ENTER}


def resolve_config(args: Args, config: Config | None = None) -> ClientConfig:
    """Connection settings from the selected profile, overridden by the arguments."""
    if args.profile and config is not None:
        try:
            session = config.get_session(args.profile)
        except SessionNotFoundError:
            return ClientConfig.from_args(args)
        client_config = ClientConfig.from_session(session)
        client_config.apply_cli_overrides(args)
        return client_config
    return ClientConfig.from_args(args)


def handle_key(key: str | int, app: App) -> bool:
    """Apply a key press to ``app``; True means quit."""
    if isinstance(key, int) and 0 <= key < 256:
        key = chr(key)
    item_count = app.topic_tree.visible_count()
    if key == "q":
        return True
    if key in (curses.KEY_UP, "k"):
        app.on_up()
    elif key in (curses.KEY_DOWN, "j"):
        app.on_down(item_count)
    elif key in _ENTER_KEYS:
        app.on_enter()
    return False


def handle_mqtt_event(event: MqttEvent, app: App) -> None:
    """Apply a connection event to ``app``."""
    match event.kind:
        case EventKind.CONNECTED:
            app.on_connected()
        case EventKind.DISCONNECTED:
            app.on_disconnected()
        case EventKind.PUBLISH:
            if event.message is not None:
                app.on_message(event.message)


def _drain(events: queue.SimpleQueue) -> Iterator[MqttEvent]:
    while True:
        try:
            yield events.get_nowait()
        except queue.Empty:
            return


def _run(screen, app: App, events: queue.SimpleQueue) -> None:
    with contextlib.suppress(curses.error):
        curses.curs_set(0)
    screen.timeout(_POLL_MILLISECONDS)
    while True:
        draw(screen, app)
        try:
            key = screen.get_wch()
        except curses.error:
            key = None
        if key is not None and handle_key(key, app):
            return
        for event in _drain(events):
            handle_mqtt_event(event, app)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the explorer until the user presses q."""
    args = parse_args(argv)
    config = resolve_config(args, load_config() if args.profile else None)
    client = Client(config)
    client.subscribe(config.topic)
    events: queue.SimpleQueue = queue.SimpleQueue()
    client.start(events.put)
    app = App()
    try:
        curses.wrapper(_run, app, events)
    finally:
        client.stop()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())