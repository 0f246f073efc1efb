import pytest

from rmqtty.args import Args, build_parser, parse_args

_ENVIRONMENT_VARIABLES = (
    "RMQTTY_HOST",
    "RMQTTY_PORT",
    "RMQTTY_CLIENT",
    "RMQTTY_TOPIC",
    "RMQTTY_USER",
    "RMQTTY_PW",
    "RMQTTY_PROFILE",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for variable in _ENVIRONMENT_VARIABLES:
        monkeypatch.delenv(variable, raising=False)


def test_no_arguments_gives_all_unset():
    assert parse_args([]) == Args()


def test_short_options():
    password = "password"
    args = parse_args(
        ["-H", "broker", "-P", "1884", "-c", "me", "-t", "a/#", "-u", "bob", "-p", password]
    )
    assert args == Args(
        hostname="broker",
        port=1884,
        client_id="me",
        topic="a/#",
        user="bob",
        password=password,
    )


def test_long_options():
    args = parse_args(["--hostname", "h", "--port", "1", "--client-id", "cid", "--profile", "home"])
    assert args.hostname == "h"
    assert args.port == 1
    assert args.client_id == "cid"
    assert args.profile == "home"


@pytest.mark.parametrize("value", ["70000", "-1", "abc"])
def test_invalid_port_is_rejected(value):
    with pytest.raises(SystemExit):
        parse_args(["-P", value])


def test_environment_fills_unset_options(monkeypatch):
    monkeypatch.setenv("RMQTTY_HOST", "envhost")
    monkeypatch.setenv("RMQTTY_PORT", "2000")
    monkeypatch.setenv("RMQTTY_PROFILE", "lab")
    args = parse_args([])
    assert args.hostname == "envhost"
    assert args.port == 2000
    assert args.profile == "lab"


def test_command_line_beats_environment(monkeypatch):
    monkeypatch.setenv("RMQTTY_HOST", "envhost")
    assert parse_args(["-H", "clihost"]).hostname == "clihost"


def test_invalid_port_in_environment(monkeypatch):
    monkeypatch.setenv("RMQTTY_PORT", "notaport")
    with pytest.raises(SystemExit):
        parse_args([])


def test_parser_version_exits(capsys):
    with pytest.raises(SystemExit) as info:
        build_parser().parse_args(["--version"])
    assert info.value.code == 0
    assert "rmqtty" in capsys.readouterr().out