import json
from datetime import datetime

import pytest

from rmqtty.app import App
from rmqtty.mqtt import Message
from rmqtty.ui import (
    Color,
    Line,
    Span,
    format_payload,
    highlight_json,
    message_lines,
    scalar_span,
    status_text,
    topic_lines,
)


def _message(topic, payload, ts=None):
    return Message(
        topic=topic,
        ts=ts or datetime(2024, 5, 1, 12, 30, 45),
        qos=0,
        retain=False,
        payload=payload,
    )


def _texts(lines):
    return [line.text for line in lines]


def test_scalar_span_string_is_quoted_green():
    assert scalar_span("hi") == Span('"hi"', Color.GREEN)


def test_scalar_span_null_is_dark_gray():
    assert scalar_span(None) == Span("null", Color.DARK_GRAY)


def test_scalar_span_bool_is_magenta_not_number():
    span = scalar_span(True)
    assert span.color is Color.MAGENTA
    assert span.text == "true"


def test_scalar_span_integer_is_cyan():
    span = scalar_span(42)
    assert span.color is Color.CYAN
    assert int(span.text) == 42


def test_scalar_span_container_is_empty():
    assert scalar_span([1]).text == ""
    assert scalar_span({"a": 1}).color is None


def test_empty_containers_are_single_lines():
    assert _texts(highlight_json({}, 0)) == ["{}"]
    assert _texts(highlight_json([], 0)) == ["[]"]


def test_worked_nested_example():
    lines = highlight_json({"b": [1, {}], "a": "x"}, 0)
    assert _texts(lines) == [
        "{",
        '  "a": "x",',
        '  "b": [',
        "    1,",
        "    {}",
        "  ]",
        "}",
    ]


def test_keys_are_sorted():
    value = {"zeta": 1, "alpha": 2, "mid": 3}
    texts = _texts(highlight_json(value, 0))
    keys = [json.loads(text.split(":")[0]) for text in texts[1:-1]]
    assert keys == sorted(value)


@pytest.mark.parametrize(
    "value",
    [
        {"a": 1, "b": [True, False, None], "c": {"d": "e", "f": []}},
        [[1, 2], {"x": {}}, "y"],
        {"nested": {"deeper": {"deepest": [0.5]}}},
        7,
        "plain",
    ],
)
def test_output_parses_back_to_the_value(value):
    lines = highlight_json(value, 0)
    assert json.loads("\n".join(_texts(lines))) == value


def test_member_lines_carry_commas_except_last():
    texts = _texts(highlight_json({"a": 1, "b": 2, "c": 3}, 0))
    members = texts[1:-1]
    assert all(text.endswith(",") for text in members[:-1])
    assert not members[-1].endswith(",")


def test_key_colour_is_yellow():
    lines = highlight_json({"k": 1}, 0)
    assert lines[1].spans[0].color is Color.YELLOW


def test_indentation_grows_with_depth():
    texts = _texts(highlight_json({"a": {"b": 1}}, 0))
    inner = next(text for text in texts if '"b"' in text)
    outer = next(text for text in texts if '"a"' in text)
    assert len(inner) - len(inner.lstrip()) == len(outer) - len(outer.lstrip()) + 2


def test_format_payload_non_json_is_raw():
    assert format_payload("not json") == [Line([Span("not json")])]


def test_format_payload_rejects_nan():
    assert _texts(format_payload("NaN")) == ["NaN"]


def test_format_payload_json_matches_highlight():
    payload = '{"temp": 21, "ok": true}'
    assert format_payload(payload) == highlight_json(json.loads(payload), 0)


def test_status_text_disconnected():
    span = status_text(App())
    assert span.text == " Status: Disconnected  |  Messages: 0"
    assert span.color is Color.RED


def test_status_text_connected_counts_messages():
    app = App()
    app.on_connected()
    app.on_message(_message("a", "1"))
    span = status_text(app)
    assert span.color is Color.GREEN
    assert "Connected" in span.text and "Disconnected" not in span.text
    assert span.text.endswith(str(app.message_count))


def test_topic_lines_follow_visible_rows():
    app = App()
    app.on_message(_message("a/b", "1"))
    app.on_message(_message("c", "2"))
    rows = topic_lines(app)
    assert len(rows) == app.topic_tree.visible_count()
    assert rows[0].startswith(" ▶ a")
    assert rows[1].startswith(" · c")

    app.on_enter()
    rows = topic_lines(app)
    assert len(rows) == app.topic_tree.visible_count()
    assert rows[0].startswith(" ▼ a")
    assert " b " in rows[1]


def test_topic_lines_report_message_counts():
    app = App()
    for _ in range(3):
        app.on_message(_message("room", "x"))
    node = app.selected_node()
    assert f"({node.total_count} msgs" in topic_lines(app)[0]


def test_message_lines_empty_without_messages():
    app = App()
    assert message_lines(app) == []
    app.on_message(_message("a/b", "1"))
    assert message_lines(app) == []


def test_message_lines_show_latest_message():
    app = App()
    ts = datetime(2024, 1, 2, 3, 4, 5)
    app.on_message(_message("sensor", "old"))
    app.on_message(_message("sensor", '{"t": 1}', ts=ts))
    lines = message_lines(app)
    assert lines[0].text == f" {ts:%H:%M:%S}"
    assert lines[0].spans[0].color is Color.DARK_GRAY
    assert lines[1].text == ""
    assert lines[2:] == format_payload('{"t": 1}')