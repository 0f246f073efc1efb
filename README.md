# rmqtty

A terminal based MQTT explorer. It connects to a broker, subscribes to one
topic filter and sorts every incoming message into a collapsible topic tree.
The latest payload of the selected topic is shown beside the tree; payloads
that parse as JSON are pretty-printed with keys sorted and values coloured by
type, anything else is shown as plain text.

The interface is drawn with `curses`, so it needs a terminal on a system
where Python's `curses` module is available.

## Installation

```
pip install .
```

This installs the `rmqtty` command.

## Usage

```
rmqtty --hostname broker.example.com --port 1883 --topic 'sensors/#'
```

With no options it connects to `localhost:1883` as client `rmqtty-client`
and subscribes to `#`.

| Option              | Environment variable | Meaning                         |
|---------------------|----------------------|---------------------------------|
| `-H`, `--hostname`  | `RMQTTY_HOST`        | Hostname of the broker          |
| `-P`, `--port`      | `RMQTTY_PORT`        | Port of the broker (0–65535)    |
| `-c`, `--client-id` | `RMQTTY_CLIENT`      | Client ID of the connection     |
| `-t`, `--topic`     | `RMQTTY_TOPIC`       | Topic filter to subscribe to    |
| `-u`, `--user`      | `RMQTTY_USER`        | Username for the broker         |
| `-p`, `--password`  | `RMQTTY_PW`          | Password for the broker         |
| `--profile`         | `RMQTTY_PROFILE`     | Profile from the config file    |
| `-V`, `--version`   |                      | Print the version and exit      |

An option given on the command line wins over its environment variable; an
empty environment variable is ignored. Credentials are only sent when both a
user and a password are given. The connection uses a keep-alive of 5 seconds
and is retried every second after it drops; the topic is subscribed to again
on every reconnect.

### Screen

- The top bar shows `Connected` (green) or `Disconnected` (red) and the
  number of messages received.
- The left pane lists topic levels. `▶` marks a collapsed level with
  sub-topics, `▼` an expanded one and `·` a level without sub-topics. Each row
  shows how many messages arrived at or below that level and how many
  sub-topics lie below it.
- The right pane shows the time (`HH:MM:SS`) and payload of the latest
  message stored on the selected level. Up to 200 messages are kept per
  topic; payloads are decoded as UTF-8, with undecodable bytes replaced.

### Keys

| Key            | Action                                  |
|----------------|-----------------------------------------|
| `Up` / `k`     | Move the selection up                   |
| `Down` / `j`   | Move the selection down                 |
| `Enter`        | Expand or collapse the selected topic   |
| `q`            | Quit                                    |

## Profiles

Connection profiles live in `~/.config/rmqtty/config.toml`, as tables under
`sessions`:

```toml
[sessions.home]
host = "broker.example.com"
port = 1883
user = "user"
password = "password"
topics = ["home/#"]
```

Start with a profile:

```
rmqtty --profile home
```

`host` is required. Only the first entry of `topics` is subscribed to; with
no topics, `#` is used. The client ID of a profile connection is always
`rmqtty-client`. Options given on the command line or through the
environment override the profile's hostname, port, topic, user and password.

If the file does not exist, if it cannot be parsed, or if the profile is not
found in it, the command-line options and defaults are used instead.

## What it does not do

- It does not connect over TLS. The `tls`, `ca_cert`, `client_cert` and
  `client_key` keys of a profile are read and checked but not used.
- It only subscribes to one topic filter and never publishes.
- It shows only the latest message of a topic; older stored messages are
  not browsable from the screen.

## Using it as a library

- `rmqtty.config.load_config(path=None)` reads the profile file and returns a
  `Config`; `Config.get_session(name)` raises `SessionNotFoundError` for an
  unknown name.
- `rmqtty.mqtt.ClientConfig` builds connection settings with `from_args`,
  `from_session` and `apply_cli_overrides`; `rmqtty.mqtt.Client` connects in
  the background and passes `MqttEvent` values to a callable given to
  `start`, until `stop` is called.
- `rmqtty.app.App` holds the topic tree (`TopicNode`) and selection state.
- `rmqtty.ui.format_payload(payload)` and `highlight_json(value, indent)`
  return the coloured lines shown in the message pane.

## Development

```
pip install -e '.[test]'
pytest
```