import logging
import os

import pytest
import structlog

from octoscreen.client.cli import common, config


def pytest_load_initial_conftests(early_config, parser, args):
    """Conditionally append coverage report to GITHUB_STEP_SUMMARY.

    Only applies when running in GitHub Actions.
    """
    summary_file = os.getenv("GITHUB_STEP_SUMMARY")
    if (
        os.getenv("GITHUB_ACTIONS") == "true"
        and summary_file
        and not any(arg.startswith("--cov-report=markdown-append:") for arg in args)
    ):
        args.append(f"--cov-report=markdown-append:{summary_file}")


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep every test away from the user's config.json, .env and environment."""
    for var in ("OCTOPRINT_API_KEY", "OCTOPRINT_URL", "TIMEOUT", "DEFAULT_HISTORY_LIMIT", "OUTPUT_FORMAT"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config, "get_config_file", lambda: tmp_path / "config" / "config.json")
    monkeypatch.setattr(common, "_output_format", None)
    config.reset_settings()
    yield
    config.reset_settings()


@pytest.fixture(autouse=True)
def reset_structlog(monkeypatch):
    """Undo CLI logging configuration, which binds the (captured) stderr of the running test."""
    monkeypatch.setattr(common, "_LOGGING_INITIALIZED", False)
    yield
    structlog.reset_defaults()
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING))


class FakeTransport:
    """Records every round trip and answers with a canned body or error."""

    def __init__(self, response: bytes = b"", error: Exception | None = None):
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str, bytes | None]] = []

    def do_request(self, method: str, uri: str, body: bytes | None = None) -> bytes:
        self.calls.append((method, uri, body))
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_transport():
    return FakeTransport()
