import pytest

from nodebridge.errors import EvaluationError, ProtocolViolation
from nodebridge.result import Outcome, decode_output, parse_tag, tag_line


def test_tag_line_is_second_to_last():
    assert tag_line('noise\nmore noise\n\n["ok",1]\n') == '["ok",1]'


def test_tag_line_strips_carriage_returns():
    assert tag_line('\r\n["ok",1]\r\n') == '["ok",1]'


def test_tag_line_missing():
    with pytest.raises(ProtocolViolation):
        tag_line("")


@pytest.mark.parametrize(
    "line,expected",
    [
        ('["ok",1]', 1),
        ('["ok",true]', True),
        ('["ok","hello"]', "hello"),
        ('["ok",[1,2]]', [1, 2]),
        ('["ok",{"a":1}]', {"a": 1}),
        ('["ok",null]', None),
        ('["ok"]', None),
    ],
)
def test_parse_tag_success(line, expected):
    outcome = parse_tag(line)
    assert outcome.ok
    assert outcome.unwrap() == expected


def test_undefined_and_null_decode_identically():
    assert parse_tag('["ok"]') == parse_tag('["ok",null]')


def test_parse_tag_error_carries_message():
    outcome = parse_tag('["err","Error: boom"]')
    assert not outcome.ok
    with pytest.raises(EvaluationError) as exc:
        outcome.unwrap()
    assert exc.value.detail == "Error: boom"
    assert exc.value.value == "Error: boom"


def test_empty_array_defaults_to_error():
    outcome = parse_tag("[]")
    assert outcome == Outcome("err", None)
    with pytest.raises(EvaluationError) as exc:
        outcome.unwrap()
    assert exc.value.detail == "null"


def test_unknown_status_is_failure():
    with pytest.raises(EvaluationError) as exc:
        parse_tag('["maybe",{"x":1}]').unwrap()
    assert exc.value.detail == '{"x": 1}'


@pytest.mark.parametrize("line", ["", "not json", "[1,", "undefined"])
def test_unparsable_payload_is_protocol_violation(line):
    with pytest.raises(ProtocolViolation) as exc:
        parse_tag(line)
    assert exc.value.line == line
    assert line in exc.value.detail


def test_non_array_payload_is_protocol_violation():
    with pytest.raises(ProtocolViolation):
        parse_tag('{"ok": 1}')


def test_decode_output_ignores_incidental_output():
    out = 'hello\n["ok", "not the tag"]\n\n["ok",{"a":[1,2]}]\n'
    assert decode_output(out).unwrap() == {"a": [1, 2]}


def test_protocol_violation_names_the_raw_line():
    with pytest.raises(ProtocolViolation) as exc:
        parse_tag("ReferenceError: x")
    assert exc.value.detail.startswith("invalid tag line 'ReferenceError: x': ")
