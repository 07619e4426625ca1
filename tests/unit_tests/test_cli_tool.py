import contextlib
import json
from unittest.mock import MagicMock, patch

import pytest

from octoscreen.client import commands, exceptions, models
from octoscreen.client.cli import app, common, main

SAMPLE_STATE = {
    "tool0": {"actual": 214.8821, "target": 220.0, "offset": 0},
    "bed": {"actual": 50.221, "target": 70.0, "offset": 5},
    "history": [
        {"time": 1395651928, "tool0": {"actual": 214.8821, "target": 220.0}},
        {"time": 1395651926, "actual": 199, "target": 210},
    ],
}


@pytest.fixture
def mock_client():
    with patch("octoscreen.client.cli.commands.tool.common.get_client") as mock:
        client = MagicMock()
        client.tools.state.return_value = models.ToolStateResponse.from_wire(json.dumps(SAMPLE_STATE))
        mock.return_value = client
        yield client


def test_tool_state(mock_client, capsys):
    with contextlib.suppress(SystemExit):
        app(["tool", "state"], exit_on_error=False)

    mock_client.tools.state.assert_called_with(history=False, limit=10)
    out = capsys.readouterr().out
    assert "# Tool Temperatures" in out
    assert "tool0\t214.9\t220.0\t0.0" in out
    assert "Temperature History" not in out


def test_tool_state_with_history(mock_client, capsys):
    with contextlib.suppress(SystemExit):
        app(["tool", "state", "--history", "--limit", "5"], exit_on_error=False)

    mock_client.tools.state.assert_called_with(history=True, limit=5)
    out = capsys.readouterr().out
    assert "# Temperature History" in out
    assert "\ttool0\t214.9\t220.0" in out
    assert "\t-\t199.0\t210.0" in out


def test_tool_state_json_output(mock_client, capsys):
    common.set_output_format("json")
    with contextlib.suppress(SystemExit):
        app(["tool", "state"], exit_on_error=False)

    rows = json.loads(capsys.readouterr().out)
    assert {"tool": "bed", "actual": 50.221, "target": 70.0, "offset": 5.0} in rows


def test_tool_state_history_json_output(mock_client, capsys):
    common.set_output_format("json")
    with contextlib.suppress(SystemExit):
        app(["tool", "state", "--history"], exit_on_error=False)

    current, history = (json.loads(line) for line in capsys.readouterr().out.splitlines())
    assert [row["tool"] for row in current] == ["bed", "tool0"]
    assert history == [
        {"time": "2014-03-24T09:05:28+00:00", "tool": "tool0", "actual": 214.8821, "target": 220.0},
        {"time": "2014-03-24T09:05:26+00:00", "tool": "-", "actual": 199.0, "target": 210.0},
    ]


def test_tool_target(mock_client):
    with contextlib.suppress(SystemExit):
        app(["tool", "target", "tool0=210", "bed=60"], exit_on_error=False)

    mock_client.tools.set_target.assert_called_once_with({"tool0": 210, "bed": 60})


def test_tool_target_rejects_malformed_assignment(mock_client):
    with pytest.raises(SystemExit):
        app(["tool", "target", "tool0"], exit_on_error=False)

    mock_client.tools.set_target.assert_not_called()


def test_tool_offset(mock_client):
    with contextlib.suppress(SystemExit):
        app(["tool", "offset", "tool0=-5"], exit_on_error=False)

    mock_client.tools.set_offsets.assert_called_once_with({"tool0": -5})


def test_tool_extrude_and_retract(mock_client):
    with contextlib.suppress(SystemExit):
        app(["tool", "extrude", "10"], exit_on_error=False)
    mock_client.tools.extrude.assert_called_with(10)

    with contextlib.suppress(SystemExit):
        app(["tool", "extrude", "-5"], exit_on_error=False)
    mock_client.tools.extrude.assert_called_with(-5)


def test_tool_select(mock_client):
    with contextlib.suppress(SystemExit):
        app(["tool", "select", "tool1"], exit_on_error=False)

    mock_client.tools.select.assert_called_once_with("tool1")


def test_tool_flowrate(mock_client):
    with contextlib.suppress(SystemExit):
        app(["tool", "flowrate", "110"], exit_on_error=False)

    mock_client.tools.set_flow_rate.assert_called_once_with(110)


def test_tool_send(mock_client):
    with contextlib.suppress(SystemExit):
        app(["tool", "send", '{"command": "select", "tool": "tool0"}'], exit_on_error=False)

    mock_client.tools.do.assert_called_once_with(commands.SelectCommand(tool="tool0"))


def test_tool_send_rejects_unknown_command(mock_client):
    with pytest.raises(SystemExit):
        app(["tool", "send", '{"command": "home"}'], exit_on_error=False)

    mock_client.tools.do.assert_not_called()


def test_main_reports_network_errors(mock_client, capsys):
    mock_client.tools.select.side_effect = exceptions.OctoPrintNetworkError("Failed to connect to OctoPrint: refused")

    with pytest.raises(SystemExit) as exc:
        main(["tool", "select", "tool1"])

    assert exc.value.code == 1
    assert "Network Error: Failed to connect" in capsys.readouterr().err


def test_main_reports_api_errors(mock_client, capsys):
    mock_client.tools.extrude.side_effect = exceptions.OctoPrintApiError(
        "Request failed: CONFLICT", status_code=409, response_body="Printer is not operational"
    )

    with pytest.raises(SystemExit):
        main(["tool", "extrude", "5"])

    err = capsys.readouterr().err
    assert "API Error: [409]" in err
    assert "Details: Printer is not operational" in err


def test_get_client_requires_api_key():
    with pytest.raises(SystemExit):
        common.get_client()


def test_get_client_uses_settings(monkeypatch):
    monkeypatch.setenv("OCTOPRINT_API_KEY", "ENVKEY")
    monkeypatch.setenv("OCTOPRINT_URL", "http://printer.lan/")

    client = common.get_client()

    assert client.base_url == "http://printer.lan"
