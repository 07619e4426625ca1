import json
import warnings

import pydantic
import pytest

from octoscreen.client import commands
from octoscreen.client.exceptions import OctoPrintEncodingError


def _body(request: commands.Request) -> dict:
    assert request.body is not None
    return json.loads(request.body)


def test_tool_state_encodes_query_string():
    request = commands.encode(commands.ToolStateCommand(history=True, limit=5))

    assert request.method == "GET"
    assert request.uri == "/api/printer/tool?history=true&limit=5"
    assert request.body is None


def test_tool_state_defaults():
    request = commands.ToolStateCommand().encode()
    assert request.uri == "/api/printer/tool?history=false&limit=0"


@pytest.mark.parametrize(
    "command,expected",
    [
        (
            commands.TargetCommand(target={"tool0": 220, "bed": 60}),
            {"command": "target", "target": {"tool0": 220, "bed": 60}},
        ),
        (commands.OffsetCommand(offsets={"tool0": -5}), {"command": "offset", "offsets": {"tool0": -5}}),
        (commands.ExtrudeCommand(amount=-10), {"command": "extrude", "amount": -10}),
        (commands.SelectCommand(tool="tool1"), {"command": "select", "tool": "tool1"}),
        (commands.FlowrateCommand(factor="95"), {"command": "flowrate", "factor": "95"}),
    ],
)
def test_write_commands_encode_discriminator_and_fields_only(command, expected):
    request = commands.encode(command)

    assert request.method == "POST"
    assert request.uri == "/api/printer/tool"
    assert _body(request) == expected


def test_discriminator_comes_first():
    request = commands.SelectCommand(tool="tool1").encode()
    assert request.body == b'{"command":"select","tool":"tool1"}'


def test_flowrate_accepts_integer_percentage():
    cmd = commands.FlowrateCommand(factor=110)
    assert cmd.factor == "110"
    assert _body(cmd.encode()) == {"command": "flowrate", "factor": "110"}


def test_flowrate_rejects_bool():
    with pytest.raises(pydantic.ValidationError):
        commands.FlowrateCommand(factor=True)


def test_discriminator_cannot_be_overridden():
    with pytest.raises(pydantic.ValidationError):
        commands.SelectCommand(command="extrude", tool="tool0")


def test_unknown_fields_rejected():
    with pytest.raises(pydantic.ValidationError):
        commands.ExtrudeCommand(amount=5, speed=100)


def test_encode_rejects_foreign_objects():
    with pytest.raises(TypeError, match="Unsupported tool command"):
        commands.encode({"command": "select", "tool": "tool0"})


def test_unserializable_payload_raises_encoding_error():
    broken = commands.ExtrudeCommand.model_construct(amount=object())

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        with pytest.raises(OctoPrintEncodingError, match="extrude"):
            broken.encode()


@pytest.mark.parametrize(
    "body,expected_type",
    [
        ('{"command": "target", "target": {"tool0": 200}}', commands.TargetCommand),
        ('{"command": "offset", "offsets": {"tool0": 2}}', commands.OffsetCommand),
        ('{"command": "extrude", "amount": 3}', commands.ExtrudeCommand),
        (b'{"command": "select", "tool": "tool0"}', commands.SelectCommand),
        ({"command": "flowrate", "factor": "100"}, commands.FlowrateCommand),
    ],
)
def test_parse_command_picks_variant_by_discriminator(body, expected_type):
    assert isinstance(commands.parse_command(body), expected_type)


def test_parse_command_round_trips_encoded_body():
    original = commands.OffsetCommand(offsets={"tool0": 3, "tool1": -2})
    assert commands.parse_command(original.encode().body) == original


@pytest.mark.parametrize(
    "body",
    [
        '{"command": "home"}',
        '{"tool": "tool0"}',
        '{"command": "select", "tool": "tool0", "extra": 1}',
        "not json",
    ],
)
def test_parse_command_rejects_invalid_bodies(body):
    with pytest.raises(ValueError):
        commands.parse_command(body)
