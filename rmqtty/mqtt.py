"""Broker connection settings, received messages and the MQTT client."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum, auto
from typing import Any, Callable

import paho.mqtt.client as paho

from .args import Args
from .config import Session

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 1883
DEFAULT_CLIENT_ID = "rmqtty-client"
DEFAULT_TOPIC = "#"
KEEP_ALIVE_SECONDS = 5
RECONNECT_DELAY_SECONDS = 1


@dataclass
class ClientConfig:
    """Everything needed to connect to a broker and subscribe."""

    hostname: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    client_id: str = DEFAULT_CLIENT_ID
    user: str | None = None
    password: str | None = None
    topic: str = DEFAULT_TOPIC

    @classmethod
    def from_args(cls, args: Args) -> ClientConfig:
        """Build a configuration from command-line arguments alone."""
        return cls(
            hostname=args.hostname if args.hostname is not None else DEFAULT_HOST,
            port=args.port if args.port is not None else DEFAULT_PORT,
            client_id=args.client_id if args.client_id is not None else DEFAULT_CLIENT_ID,
            user=args.user,
            password=args.password,
            topic=args.topic if args.topic is not None else DEFAULT_TOPIC,
        )

    @classmethod
    def from_session(cls, session: Session) -> ClientConfig:
        """Build a configuration from a stored session; its first topic is used."""
        return cls(
            hostname=session.host,
            port=session.port if session.port is not None else DEFAULT_PORT,
            client_id=DEFAULT_CLIENT_ID,
            user=session.user,
            password=session.password,
            topic=session.topics[0] if session.topics else DEFAULT_TOPIC,
        )

    def apply_cli_overrides(self, args: Args) -> None:
        """Replace settings with those given on the command line."""
        if args.hostname is not None:
            self.hostname = args.hostname
        if args.port is not None:
            self.port = args.port
        if args.topic is not None:
            self.topic = args.topic
        if args.user is not None:
            self.user = args.user
        if args.password is not None:
            self.password = args.password


@dataclass(frozen=True)
class Message:
    """A published message as received."""

    topic: str
    ts: datetime
    qos: int
    retain: bool
    payload: str


class EventKind(Enum):
    CONNECTED = auto()
    PUBLISH = auto()
    DISCONNECTED = auto()


@dataclass(frozen=True)
class MqttEvent:
    """Something that happened on the connection."""

    kind: EventKind
    message: Message | None = None


EventSink = Callable[[MqttEvent], Any]


class Client:
    """MQTT client that reports connection changes and messages to a sink."""

    def __init__(self, config: ClientConfig) -> None:
        self._config = config
        self._topics: list[str] = []
        self._lock = threading.Lock()
        self._connected = False
        self._sink: EventSink | None = None
        self._mqtt = paho.Client(
            callback_api_version=paho.CallbackAPIVersion.VERSION2,
            client_id=config.client_id,
        )
        if config.user is not None and config.password is not None:
            self._mqtt.username_pw_set(config.user, config.password)
        self._mqtt.reconnect_delay_set(RECONNECT_DELAY_SECONDS, RECONNECT_DELAY_SECONDS)
        self._mqtt.on_connect = self._on_connect
        self._mqtt.on_connect_fail = self._on_connect_fail
        self._mqtt.on_disconnect = self._on_disconnect
        self._mqtt.on_message = self._on_message

    def subscribe(self, topic: str) -> None:
        """Subscribe to ``topic`` now if connected, and on every (re)connect."""
        with self._lock:
            self._topics.append(topic)
            connected = self._connected
        if connected:
            self._mqtt.subscribe(topic, qos=0)

    def start(self, events: EventSink) -> None:
        """Connect in the background and pass every event to ``events``."""
        self._sink = events
        self._mqtt.connect_async(
            self._config.hostname, self._config.port, keepalive=KEEP_ALIVE_SECONDS
        )
        self._mqtt.loop_start()

    def stop(self) -> None:
        """Disconnect and stop the background network loop."""
        self._mqtt.disconnect()
        self._mqtt.loop_stop()
        with self._lock:
            self._connected = False

    def _emit(self, event: MqttEvent) -> None:
        if self._sink is not None:
            self._sink(event)

    def _on_connect(self, mqttc, userdata, flags, reason_code, properties=None) -> None:
        if getattr(reason_code, "is_failure", False):
            self._emit(MqttEvent(EventKind.DISCONNECTED))
            return
        with self._lock:
            self._connected = True
            topics = list(self._topics)
        for topic in topics:
            mqttc.subscribe(topic, qos=0)
        self._emit(MqttEvent(EventKind.CONNECTED))

    def _on_connect_fail(self, mqttc, userdata) -> None:
        self._emit(MqttEvent(EventKind.DISCONNECTED))

    def _on_disconnect(self, mqttc, userdata, flags, reason_code, properties=None) -> None:
        with self._lock:
            self._connected = False
        self._emit(MqttEvent(EventKind.DISCONNECTED))

    def _on_message(self, mqttc, userdata, packet) -> None:
        message = Message(
            topic=packet.topic,
            ts=datetime.now().astimezone(),
            qos=int(packet.qos),
            retain=bool(packet.retain),
            payload=bytes(packet.payload).decode("utf-8", errors="replace"),
        )
        self._emit(MqttEvent(EventKind.PUBLISH, message))