"""CLI entry point for grantchain"""

import typer
import logging
from pathlib import Path

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.FileHandler("grantchain.log"),
        logging.StreamHandler(),
    ]
)

app = typer.Typer(
    name="grantchain",
    help="Batched permission requests with explain and settings escalation",
    add_completion=False,
)


def _load(config_path: Path | None):
    from grantchain.config import Config
    from grantchain.permission.errors import ConfigError

    try:
        return Config.load(config_path)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2)


def _parse_answers(values: list[str]) -> dict[str, list[str]]:
    answers: dict[str, list[str]] = {}
    for value in values:
        if "=" not in value:
            raise typer.BadParameter(f"expected PERMISSION=ANSWER[,ANSWER...], got '{value}'")
        permission, script = value.split("=", 1)
        answers[permission.strip()] = [a.strip() for a in script.split(",") if a.strip()]
    return answers


@app.command()
def simulate(
    permissions: list[str] = typer.Argument(None, help="Permissions to request (overrides config)"),
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to a grantchain.json"),
    granted: list[str] = typer.Option(None, "--granted", "-g", help="Permission already granted"),
    answer: list[str] = typer.Option(None, "--answer", "-a", help="Prompt answers, e.g. camera=deny,grant"),
    settings_grant: list[str] = typer.Option(None, "--settings-grant", "-s", help="Permission turned on in settings"),
    dialog: str = typer.Option(None, "--dialog", "-d", help="How dialogs are answered: accept, decline or cancel"),
    explain_first: bool = typer.Option(False, "--explain-first", help="Explain before the first prompt"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
):
    """Run a permission request against a scripted device"""
    import asyncio
    import json
    from rich.console import Console
    from rich.table import Table
    from pydantic import ValidationError
    from grantchain.permission.kinds import as_special
    from grantchain.runner import simulate as run_simulation

    config = _load(config_path)
    try:
        if permissions:
            config.request.normal_permissions = [p for p in permissions if as_special(p) is None]
            config.request.special_permissions = [as_special(p) for p in permissions if as_special(p) is not None]
        if explain_first:
            config.request.explain_reason_before_request = True
        scenario = config.scenario.model_dump()
        if granted:
            scenario["granted"] = list(granted)
        if answer:
            scenario["answers"] = _parse_answers(answer)
        if settings_grant:
            scenario["settings_grants"] = list(settings_grant)
        if dialog:
            scenario["dialog_answer"] = dialog
        config.scenario = type(config.scenario)(**scenario)
    except ValidationError as e:
        raise typer.BadParameter(str(e))

    report = asyncio.run(run_simulation(config))

    if as_json:
        typer.echo(json.dumps({
            **report.result.to_dict(),
            "dialogs": report.dialogs,
            "prompts": report.prompts,
            "settings_visits": report.settings_visits,
        }, indent=2))
    else:
        console = Console()
        table = Table(title="Permission result")
        table.add_column("Permission")
        table.add_column("Status")
        for permission in report.result.granted:
            table.add_row(str(permission), "[green]granted[/]")
        for permission in report.result.denied:
            table.add_row(str(permission), "[red]denied[/]")
        console.print(table)
        console.print(f"Prompts: {len(report.prompts)}  Dialogs: {len(report.dialogs)}  "
                      f"Settings visits: {len(report.settings_visits)}")
        console.print("[bold green]All granted[/]" if report.result.all_granted else "[bold red]Not all granted[/]")

    if not report.result.all_granted:
        raise typer.Exit(code=1)


@app.command()
def run(
    config_path: Path = typer.Option(None, "--config", "-c", help="Path to a grantchain.json"),
):
    """Start the interactive TUI demo"""
    from grantchain.tui.app import GrantChainApp

    config = _load(config_path)
    GrantChainApp(config).run()


@app.command()
def init(
    path: Path = typer.Argument(Path("grantchain.json"), help="Where to write the config"),
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite an existing file"),
):
    """Write a starter configuration file"""
    from grantchain.config import Config

    if path.exists() and not force:
        typer.echo(f"{path} already exists, use --force to overwrite", err=True)
        raise typer.Exit(code=1)
    Config().save(path)
    typer.echo(f"Wrote {path}")


def main():
    app()


if __name__ == "__main__":
    main()
