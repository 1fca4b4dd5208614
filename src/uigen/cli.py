"""Typer CLI — ``uigen generate``, ``validate``, ``components``, ``serve`` and ``check-config``."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from uigen.config import load_config
from uigen.schemas.config import AppConfig

# Load .env file from the working directory (if it exists)
load_dotenv()

app = typer.Typer(
    name="uigen",
    help="UI Generator — turn a plain-language description into React code built from a fixed component library.",
    no_args_is_help=True,
)
console = Console()


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )
    # httpx logs every HTTP request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load(config: Path | None, backend: str | None = None) -> AppConfig:
    try:
        cfg = load_config(config)
        if backend:
            cfg = AppConfig(**{**cfg.model_dump(), "backend": backend})
    except Exception as exc:
        console.print(f"[red]Config validation failed:[/] {exc}")
        raise typer.Exit(code=1)
    return cfg


@app.command()
def generate(
    prompt: str = typer.Option(..., "--prompt", "-p", help="What the UI should look like."),
    current_code: Path = typer.Option(None, "--current-code", help="Existing component file to modify."),
    config: Path = typer.Option(None, "--config", "-c", help="Path to uigen.yml"),
    backend: str = typer.Option(None, "--backend", help="Override the configured backend (agent, rule_based, remote)."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Run the agent pipeline with canned responses (no API calls)."),
    output: Path = typer.Option(None, "--output", "-o", help="Write the generated component to this file."),
    report: Path = typer.Option(None, "--report", help="Write a Markdown report of the run to this file."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Generate (or modify) a UI from a prompt.

    Examples:

        uigen generate -p "dashboard with a sidebar and a sales chart" -o GeneratedUI.jsx

        uigen generate -p "add a login form" --current-code GeneratedUI.jsx -o GeneratedUI.jsx
    """
    _setup_logging(verbose)
    cfg = _load(config, backend)

    existing = None
    if current_code is not None:
        if not current_code.exists():
            console.print(f"[red]File not found:[/] {current_code}")
            raise typer.Exit(code=1)
        existing = current_code.read_text()

    if dry_run:
        console.print("[yellow]DRY-RUN mode — no API calls will be made.[/]\n")

    result = asyncio.run(_run_generate(cfg, prompt, existing, dry_run=dry_run))
    if result is None:
        raise typer.Exit(code=1)

    console.print(f"\n[bold]Layout:[/] {result.plan.layout_structure or '(none)'}")
    console.print(f"[bold]Components:[/] {', '.join(result.component_usage) or '(none)'}")
    if result.usage.input_tokens or result.usage.output_tokens:
        console.print(f"[bold]Tokens:[/] {result.usage.input_tokens} in / {result.usage.output_tokens} out")
    for warning in result.validation.warnings:
        console.print(f"[yellow]Warning:[/] {warning}")
    if result.explanation:
        console.print(f"\n{result.explanation}\n", markup=False)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(result.code)
        console.print(f"[green]Component written to:[/] {output}")
    else:
        console.print(Syntax(result.code, "jsx", word_wrap=True))

    if report:
        from uigen.output.markdown import render_generation_report

        report.parent.mkdir(parents=True, exist_ok=True)
        report.write_text(render_generation_report(prompt, result))
        console.print(f"[green]Markdown report written to:[/] {report}")


async def _run_generate(
    cfg: AppConfig,
    prompt: str,
    existing: str | None,
    *,
    dry_run: bool = False,
) -> "GenerationResult | None":  # noqa: F821
    """Run one generation behind a progress display; None on failure."""
    from uigen.backends.base import build_generator
    from uigen.shared.progress import GenerationProgress

    generator = build_generator(cfg, dry_run=dry_run)
    with GenerationProgress(console) as progress:
        try:
            result = await generator.generate(prompt, existing, on_progress=progress.step)
            progress.finish()
        except Exception as exc:
            progress.fail(str(exc))
            errors = getattr(exc, "errors", None)
            console.print(f"[red]Generation failed:[/] {exc}")
            if isinstance(errors, list):
                for error in errors:
                    console.print(f"  - {error}", markup=False)
            return None
    return result


@app.command()
def validate(
    file: Path = typer.Argument(..., help="Component file to check."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Check a component file against the component library rules."""
    from uigen.library.validator import extract_component_usage, validate_component_usage

    _setup_logging(verbose)
    if not file.exists():
        console.print(f"[red]File not found:[/] {file}")
        raise typer.Exit(code=1)

    code = file.read_text()
    result = validate_component_usage(code)
    for warning in result.warnings:
        console.print(f"[yellow]Warning:[/] {warning}")

    if not result.valid:
        console.print(f"[red]Invalid component ({len(result.errors)} error(s)):[/]")
        for error in result.errors:
            console.print(f"  - {error}", markup=False)
        raise typer.Exit(code=1)

    console.print("[green]Component is valid![/]")
    console.print(f"  Components used: {', '.join(extract_component_usage(code)) or '(none)'}")


@app.command()
def components() -> None:
    """List the component library."""
    from uigen.library.components import COMPONENT_LIBRARY

    table = Table(title="Component library")
    table.add_column("Component", style="cyan", no_wrap=True)
    table.add_column("Description")
    table.add_column("Props")
    for definition in COMPONENT_LIBRARY.values():
        props = []
        for prop in definition.allowed_props:
            values = definition.props.get(prop)
            props.append(f"{prop} ({' | '.join(values)})" if values else prop)
        table.add_row(definition.name, definition.description, ", ".join(props))
    console.print(table)


@app.command()
def serve(
    config: Path = typer.Option(None, "--config", "-c", help="Path to uigen.yml"),
    host: str = typer.Option(None, "--host", help="Bind address (default from config)."),
    port: int = typer.Option(None, "--port", help="Port (default from config)."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Serve canned agent responses (no API calls)."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    from uigen.server.app import create_app

    _setup_logging(verbose)
    cfg = _load(config)
    if dry_run:
        console.print("[yellow]DRY-RUN mode — no API calls will be made.[/]")

    uvicorn.run(
        create_app(cfg, dry_run=dry_run),
        host=host or cfg.host,
        port=port or cfg.port,
        log_level="debug" if verbose else "info",
    )


@app.command("check-config")
def check_config(
    config: Path = typer.Option(..., "--config", "-c", help="Path to uigen.yml"),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
) -> None:
    """Validate a configuration file without starting anything."""
    _setup_logging(verbose)
    cfg = _load(config)

    console.print("[green]Config is valid![/]\n")
    console.print(f"  Backend:         {cfg.backend}")
    if cfg.backend == "remote":
        console.print(f"  Backend URL:     {cfg.backend_url}")
    console.print(f"  Model:           {cfg.llm.model}")
    console.print(f"  Repair attempts: {cfg.max_repair_attempts}")
    console.print(f"  Prompt limit:    {cfg.max_prompt_chars} chars")
    console.print(f"  History:         {cfg.max_versions} versions x {cfg.max_sessions} sessions")
    console.print(f"  Listen:          {cfg.host}:{cfg.port}")
