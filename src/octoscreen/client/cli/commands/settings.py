"""Commands for viewing and persisting CLI configuration."""

import typing

import cyclopts

from octoscreen.client.cli import common, config

config_app = cyclopts.App(name="config", help="Show or change the CLI configuration")


@config_app.command(name="show")
def config_show():
    """Show the effective configuration."""
    settings = config.settings
    rows = [
        ["octoprint_url", settings.octoprint_url],
        ["octoprint_api_key", "set" if settings.octoprint_api_key else "[red]not set[/red]"],
        ["timeout", str(settings.timeout)],
        ["default_history_limit", str(settings.default_history_limit)],
        ["output_format", str(settings.output_format) if settings.output_format else "auto"],
        ["config_file", str(config.get_config_file())],
    ]
    common.output_table("Configuration", ["Setting", "Value"], rows, column_styles=["cyan", "magenta"])


@config_app.command(name="set")
def config_set(
    url: typing.Annotated[str | None, cyclopts.Parameter(help="OctoPrint server URL")] = None,
    timeout: typing.Annotated[float | None, cyclopts.Parameter(help="Request timeout in seconds")] = None,
    history_limit: typing.Annotated[
        int | None, cyclopts.Parameter(help="Default number of history points for 'tool state'")
    ] = None,
    output_format: typing.Annotated[
        config.OutputFormat | None, cyclopts.Parameter(name="--output-format", help="Default output format")
    ] = None,
):
    """Persist settings to config.json. The API key is read from the environment only."""
    settings = config.settings
    if url is not None:
        settings.octoprint_url = url
    if timeout is not None:
        settings.timeout = timeout
    if history_limit is not None:
        settings.default_history_limit = history_limit
    if output_format is not None:
        settings.output_format = output_format

    config.save_json_config(settings)
    common.output_message(f"[green]Configuration saved to {config.get_config_file()}[/green]")
