import contextlib
import json

from octoscreen.client.cli import app, common, config


def test_config_set_persists_values():
    with contextlib.suppress(SystemExit):
        app(
            ["config", "set", "--url", "http://octopi.lan", "--timeout", "5", "--history-limit", "20"],
            exit_on_error=False,
        )

    saved = json.loads(config.get_config_file().read_text())
    assert saved == {"octoprint_url": "http://octopi.lan", "timeout": 5.0, "default_history_limit": 20}

    config.reset_settings()
    assert config.settings.octoprint_url == "http://octopi.lan"


def test_config_show(capsys, monkeypatch):
    monkeypatch.setenv("OCTOPRINT_API_KEY", "SECRET")
    with contextlib.suppress(SystemExit):
        app(["config", "show"], exit_on_error=False)

    out = capsys.readouterr().out
    assert "octoprint_api_key\tset" in out
    assert "SECRET" not in out


def test_config_show_json_has_no_markup(capsys):
    common.set_output_format("json")
    with contextlib.suppress(SystemExit):
        app(["config", "show"], exit_on_error=False)

    rows = json.loads(capsys.readouterr().out)
    assert {"setting": "octoprint_api_key", "value": "not set"} in rows
