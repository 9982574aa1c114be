"""Developer CLI for the assistant brain.

Runs the same router -> engine -> coach path and the same execution wrapper
the HTTP API uses, without a server.
"""

import asyncio
import json
from pathlib import Path

import typer
import uvicorn
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from brain.actions.bootstrap import init_executors
from brain.actions.dispatch import ActionDispatcher
from brain.actions.execute import execute_action
from brain.actions.registry import get_registry
from brain.actions.trust import decide_trust
from brain.actions.types import ExecutionContext, parse_action
from brain.assistant.memory import get_memory_store
from brain.assistant.orchestrator import AssistantRequest, run_assistant
from brain.assistant.router import route_user_message
from brain.config.settings import settings
from brain.core.logger import setup_logger
from brain.engines.generators import run_engine
from brain.engines.types import ENGINE_NAMES, MODES

# Initialize Rich console for output
console = Console()

# Initialize Typer app
app = typer.Typer(
    name="brain",
    help="Assistant brain CLI - route, coach and execute actions locally",
    add_completion=False,
)

DEFAULT_HOST = "127.0.0.1"


def _emit(payload: dict, raw: bool) -> None:
    text = json.dumps(payload, ensure_ascii=False)
    if raw:
        typer.echo(text)
    else:
        console.print(JSON(text))


def _load_action_json(source: str) -> dict:
    """Read an action from inline JSON or from a file given as @path."""
    if source.startswith("@"):
        source = Path(source[1:]).read_text(encoding="utf-8")
    data = json.loads(source)
    if not isinstance(data, dict):
        raise typer.BadParameter("Action must be a JSON object")
    return data


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")) -> None:
    setup_logger(
        level="DEBUG" if debug else settings.log_level,
        log_file=settings.log_file,
        app_name=settings.app_name,
    )
    init_executors()


@app.command()
def ask(
    message: str = typer.Argument(..., help="What you want done"),
    mode: str = typer.Option(settings.default_mode, "--mode", "-m", help=f"One of {', '.join(MODES)}"),
    auto_run: bool = typer.Option(False, "--auto-run", help="Execute actions the trust policy allows"),
    raw: bool = typer.Option(False, "--raw", help="Print compact JSON without formatting"),
) -> None:
    """Run the full assistant pipeline for one message."""
    response = asyncio.run(run_assistant(AssistantRequest(message=message, mode=mode), memory=get_memory_store()))
    _emit(response.model_dump(mode="json", by_alias=True, exclude_none=True), raw)

    if not raw:
        for action in response.actions:
            decision = decide_trust(action)
            style = "green" if decision.should_auto_run else "yellow"
            console.print(Text(f"{action.label} [{action.kind}] -> {decision.reason}", style=style))

    if auto_run:
        dispatcher = ActionDispatcher(session_id="cli")
        results = asyncio.run(dispatcher.auto_run(response.actions))
        for result in results:
            _emit(result.model_dump(mode="json", by_alias=True, exclude_none=True), raw)


@app.command()
def route(
    message: str = typer.Argument(..., help="Message to classify"),
    raw: bool = typer.Option(False, "--raw", help="Print compact JSON without formatting"),
) -> None:
    """Show the route decision for a message."""
    decision = route_user_message(message)
    _emit(decision.model_dump(mode="json", by_alias=True, exclude_none=True), raw)


@app.command()
def engine(
    name: str = typer.Argument(..., help=f"One of {', '.join(ENGINE_NAMES)}"),
    mode: str = typer.Option(settings.default_mode, "--mode", "-m", help=f"One of {', '.join(MODES)}"),
    goal: str = typer.Option("", "--goal", "-g", help="Free-text goal"),
    raw: bool = typer.Option(False, "--raw", help="Print compact JSON without formatting"),
) -> None:
    """Run one engine directly."""
    if name not in ENGINE_NAMES:
        raise typer.BadParameter(f"Unknown engine '{name}'. Choose one of {', '.join(ENGINE_NAMES)}")
    output = run_engine(name, mode, goal)
    _emit(output.model_dump(mode="json", by_alias=True, exclude_none=True), raw)


@app.command()
def execute(
    action_json: str = typer.Argument(..., help="Action as JSON, or @path to a JSON file"),
    user_id: str | None = typer.Option(None, "--user-id", help="User id passed to the executor"),
    raw: bool = typer.Option(False, "--raw", help="Print compact JSON without formatting"),
) -> None:
    """Execute one action through the safe execution wrapper."""
    try:
        action = parse_action(_load_action_json(action_json))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        console.print(Panel(Text("Invalid action", style="bold red"), subtitle=str(e).splitlines()[0], border_style="red"))
        raise typer.Exit(code=2) from e

    result = asyncio.run(execute_action(action, ExecutionContext(user_id=user_id)))
    _emit(result.model_dump(mode="json", by_alias=True, exclude_none=True), raw)
    if not result.ok:
        raise typer.Exit(code=1)


@app.command()
def executors() -> None:
    """List registered action executors."""
    table = Table(title="Action executors")
    table.add_column("kind")
    for kind in get_registry().list_registered():
        table.add_row(kind)
    console.print(table)


@app.command()
def server(
    host: str = typer.Option(DEFAULT_HOST, "--host", "-h", help="Host to bind to"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to bind to"),
    reload: bool = typer.Option(False, "--reload", help="Enable auto-reload"),
) -> None:
    """Run the FastAPI server."""
    logger.info(f"Starting FastAPI server on {host}:{port} (reload={reload})")
    uvicorn.run("brain.main:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
