"""CLI entry point for fraud-records.

Commands:
1. check     — verify configuration and OpenRouter access
2. tools     — list registered tools
3. call      — invoke a tool with key=value or JSON arguments
4. stats     — show record statistics
5. verify    — set the verification flag of a record
6. high-risk — list unverified HIGH risk records
7. presets   — list narrative model presets
8. serve     — run the HTTP transport
"""

import json
import logging
import sys
from uuid import UUID

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .config import Config, list_presets
from .errors import NotFoundError
from .narrative import OPENROUTER_BASE
from .records import format_timestamp
from .server import create_app, create_registry, create_store
from .service import RecordService
from .store import InMemoryRecordStore

console = Console()
err_console = Console(stderr=True)


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


def _load_config(preset: str | None = None) -> Config:
    config = Config()
    if preset:
        chosen = config.apply_preset(preset)
        err_console.print(f"[blue]Preset: {preset} — {chosen['description']}")
    if not config.persistent:
        err_console.print(
            "[yellow]FRAUD_STORE_PATH is not set — records live in memory "
            "for this invocation only."
        )
    return config


def _parse_arg_pairs(pairs: tuple[str, ...]) -> dict[str, str]:
    arguments: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--arg")
        arguments[key.strip()] = value
    return arguments


@click.group()
def cli():
    """🛡️ fraud-records — fraud incident records with AI-assisted insights."""
    _configure_logging(Config().log_level)


@cli.command()
def check():
    """Verify configuration and API access."""
    config = Config()
    issues = config.validate()

    if issues:
        console.print("[bold red]Configuration issues found:\n")
        for issue in issues:
            console.print(f"  [red]✗ {issue}")
        console.print(
            "\n[yellow]Copy .env.example to .env and fill in your API keys."
        )
        return

    console.print("[bold green]✓ Configuration looks good!")
    console.print(f"  Narrative model: {config.narrative_model}")
    console.print(f"  Store: {config.store_path or '(in memory)'}")
    console.print(f"  Generator timeout: {config.generator_timeout}s")

    try:
        import httpx

        resp = httpx.get(
            f"{OPENROUTER_BASE}/models",
            headers={"Authorization": f"Bearer {config.openrouter_api_key}"},
            timeout=10,
        )
        resp.raise_for_status()
        models = resp.json().get("data", [])
        console.print(f"  [green]✓ OpenRouter access verified — {len(models)} models available")
    except Exception as e:
        console.print(f"  [red]✗ OpenRouter access failed: {e}")


@cli.command()
def tools():
    """List registered tools and their arguments."""
    # Describing tools never touches the configured store
    registry = create_registry(Config(), store=InMemoryRecordStore())
    table = Table(title="Tools", border_style="cyan")
    table.add_column("Tool", style="bold")
    table.add_column("Arguments")
    table.add_column("Description")

    for info in registry.describe():
        schema = info["input_schema"]
        required = set(schema["required"])
        args = ", ".join(
            name if name in required else f"[dim]{name}?[/dim]"
            for name in schema["properties"]
        )
        table.add_row(info["name"], args or "-", info["description"])

    console.print(table)


@cli.command()
@click.argument("tool_name")
@click.option("--arg", "arg_pairs", multiple=True, help="Tool argument as key=value (repeatable)")
@click.option("--json", "json_body", default=None, help="Tool arguments as a JSON object")
@click.option(
    "--preset",
    type=click.Choice(sorted(list_presets())),
    default=None,
    help="Narrative model preset (overrides NARRATIVE_MODEL)",
)
def call(tool_name, arg_pairs, json_body, preset):
    """Invoke a tool and print its JSON response."""
    arguments: dict = {}
    if json_body:
        try:
            arguments = json.loads(json_body)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"Invalid JSON: {e}", param_hint="--json")
        if not isinstance(arguments, dict):
            raise click.BadParameter("Must be a JSON object", param_hint="--json")
    arguments.update(_parse_arg_pairs(arg_pairs))

    registry = create_registry(_load_config(preset))
    result = registry.dispatch(tool_name, arguments)
    console.print_json(json.dumps(result, default=str))
    if not result.get("success"):
        sys.exit(1)


@cli.command()
def stats():
    """Show fraud record statistics."""
    records = RecordService(create_store(_load_config()))
    statistics = records.get_statistics()

    table = Table(title="Fraud Statistics", border_style="cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Total records", str(statistics.total_records))
    table.add_row("[red]High risk", str(statistics.high_risk_records))
    table.add_row("[yellow]Medium risk", str(statistics.medium_risk_records))
    table.add_row("[green]Low risk", str(statistics.low_risk_records))
    table.add_row("Verified", str(statistics.verified_records))
    table.add_row("Unverified", str(statistics.unverified_records))

    console.print(table)


@cli.command()
@click.argument("record_id")
@click.option("--verified/--unverified", default=True, help="New verification status")
def verify(record_id, verified):
    """Set the verification status of a fraud record."""
    try:
        parsed = UUID(record_id)
    except ValueError:
        raise click.BadParameter(f"Not a valid record id: {record_id}", param_hint="RECORD_ID")

    records = RecordService(create_store(_load_config()))
    try:
        records.update_verification(parsed, verified)
    except NotFoundError as e:
        console.print(f"[red]✗ {e}")
        sys.exit(1)

    status = "verified" if verified else "unverified"
    console.print(f"[bold green]✓ Record {parsed} marked {status}")


@cli.command("high-risk")
def high_risk():
    """List unverified HIGH risk records, newest first."""
    records = RecordService(create_store(_load_config()))
    pending = records.get_high_risk_unverified()

    if not pending:
        console.print("[green]No unverified high-risk records.")
        return

    table = Table(title="High-Risk Unverified Records", border_style="red")
    table.add_column("ID", style="bold")
    table.add_column("User")
    table.add_column("Transaction")
    table.add_column("Amount", justify="right")
    table.add_column("Merchant")
    table.add_column("Type")
    table.add_column("Created")

    for record in pending:
        table.add_row(
            str(record.id),
            record.user_id,
            record.transaction_id,
            f"{record.amount:.2f} {record.currency}",
            record.merchant_name,
            record.fraud_type,
            format_timestamp(record.created_at),
        )

    console.print(table)


@cli.command()
def presets():
    """List narrative presets usable with --preset."""
    table = Table(title="Narrative Presets", border_style="cyan")
    table.add_column("Preset", style="bold")
    table.add_column("Model")
    table.add_column("Max tokens", justify="right")
    table.add_column("Description")

    for name, info in list_presets().items():
        table.add_row(name, info["model"], str(info["max_tokens"]), info["description"])

    console.print(table)


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8000, type=int, help="Bind port")
@click.option(
    "--preset",
    type=click.Choice(sorted(list_presets())),
    default=None,
    help="Narrative model preset (overrides NARRATIVE_MODEL)",
)
def serve(host, port, preset):
    """Serve the tools over HTTP."""
    import uvicorn

    config = _load_config(preset)
    console.print(
        Panel(
            f"[bold cyan]🛡️ fraud-records[/bold cyan]\n"
            f"Serving tools on http://{host}:{port}",
            border_style="cyan",
        )
    )
    uvicorn.run(create_app(create_registry(config)), host=host, port=port)


if __name__ == "__main__":
    cli()
