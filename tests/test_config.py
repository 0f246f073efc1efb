from pathlib import Path

import pytest

from rmqtty.config import (
    Config,
    Session,
    SessionNotFoundError,
    config_path,
    load_config,
)


def write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_file_gives_empty_config(tmp_path):
    config = load_config(tmp_path / "absent.toml")
    assert config == Config(sessions={})


def test_full_session_is_read(tmp_path):
    path = write(
        tmp_path,
        """
[sessions.home]
host = "broker.example.com"
port = 8883
tls = true
ca_cert = "/etc/ca.pem"
user = "alice"
password = "password"
topics = ["home/#", "garden/#"]
""",
    )
    config = load_config(path)
    session = config.get_session("home")
    assert session.host == "broker.example.com"
    assert session.port == 8883
    assert session.tls is True
    assert session.ca_cert == Path("/etc/ca.pem")
    assert session.client_cert is None
    assert session.user == "alice"
    assert session.password == "password"
    assert session.topics == ["home/#", "garden/#"]


def test_minimal_session_has_optional_fields_unset(tmp_path):
    path = write(tmp_path, '[sessions.lab]\nhost = "lab.example.com"\n')
    session = load_config(path).get_session("lab")
    assert session == Session(host="lab.example.com")


def test_invalid_toml_gives_none(tmp_path):
    path = write(tmp_path, "[sessions\nhost = ")
    assert load_config(path) is None


def test_session_without_host_gives_none(tmp_path):
    path = write(tmp_path, "[sessions.broken]\nport = 1883\n")
    assert load_config(path) is None


def test_missing_sessions_table_gives_none(tmp_path):
    path = write(tmp_path, 'title = "nothing"\n')
    assert load_config(path) is None


def test_out_of_range_port_gives_none(tmp_path):
    path = write(tmp_path, '[sessions.x]\nhost = "h"\nport = 70000\n')
    assert load_config(path) is None


def test_unknown_session_raises():
    config = Config(sessions={"a": Session(host="h")})
    with pytest.raises(SessionNotFoundError, match="Session 'b' not found"):
        config.get_session("b")


def test_session_not_found_is_lookup_error():
    with pytest.raises(LookupError):
        Config().get_session("missing")


def test_config_path_is_under_home(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    assert config_path() == tmp_path / ".config" / "rmqtty" / "config.toml"


def test_default_path_is_used(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    target = tmp_path / ".config" / "rmqtty"
    target.mkdir(parents=True)
    (target / "config.toml").write_text('[sessions.dev]\nhost = "dev.example.com"\n')
    assert load_config().get_session("dev").host == "dev.example.com"