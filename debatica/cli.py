"""
Debatica - Command Line Interface
"""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from debatica.core.exceptions import DebaticaException

app = typer.Typer(
    name="debatica",
    help="Debatica CLI",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def _build_runner():
    from config import get_settings
    from debatica.core.logging import configure_logging
    from debatica.features.prompts import PromptStore
    from debatica.features.runner import FeatureRunner
    from debatica.llm.router import build_router

    settings = get_settings()
    configure_logging(settings)
    router = build_router(settings)
    store = PromptStore(settings.prompts.dir)
    return FeatureRunner(router, store, default_tier=settings.llm.default_tier)


def _read_file(path: Path):
    """Load a local file as a connected file"""
    from debatica.features.extractor import extract_pdf_text
    from debatica.features.inputs import ConnectedFile

    if path.suffix.lower() == ".pdf":
        content = extract_pdf_text(path.read_bytes())
    else:
        content = path.read_text(encoding="utf-8", errors="replace")
    return ConnectedFile(name=path.name, content=content, type="file")


@app.command()
def start(
    host: Optional[str] = typer.Option(None, help="Host to bind to [default: API_HOST]"),
    port: Optional[int] = typer.Option(None, help="Port to bind to [default: API_PORT]"),
    workers: Optional[int] = typer.Option(None, help="Number of workers [default: API_WORKERS]"),
    reload: bool = typer.Option(False, help="Enable auto-reload"),
):
    """Start the API server"""
    import uvicorn
    from config import get_settings

    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    workers = workers or settings.api_workers

    console.print(f"[green]Starting Debatica on {host}:{port}[/green]")

    uvicorn.run(
        "debatica.api.main:app",
        host=host,
        port=port,
        workers=workers if not reload else 1,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


@app.command()
def features():
    """List available features"""
    from config import get_settings
    from debatica.features.prompts import PromptStore

    store = PromptStore(get_settings().prompts.dir)
    names = store.list_features()
    if not names:
        console.print(f"[yellow]No prompt templates found in {store.directory}[/yellow]")
        return
    for name in names:
        console.print(name)


@app.command()
def tiers():
    """Show tiers and whether their credentials are configured"""
    from config import get_settings
    from debatica.llm.router import build_router

    router = build_router(get_settings())

    table = Table(title="Tiers")
    table.add_column("Tier")
    table.add_column("Provider")
    table.add_column("Model")
    table.add_column("Temperature")
    table.add_column("Available")

    for tier, route in router.routes.items():
        available = router.is_available(tier)
        table.add_row(
            tier.value,
            route.provider.value,
            route.model,
            f"{route.temperature:.1f}",
            "[green]yes[/green]" if available else f"[red]no[/red] (set {route.credential})",
        )

    console.print(table)


@app.command()
def ask(
    feature: str = typer.Argument(..., help="Feature identifier, e.g. rebuttal"),
    user_input: str = typer.Option("", "--input", "-i", help="Instructions or context"),
    tier: Optional[str] = typer.Option(None, help="precise, balanced or fast"),
    file: Optional[list[Path]] = typer.Option(
        None, "--file", "-f", exists=True, dir_okay=False, help="File to attach (repeatable)"
    ),
    temperature: Optional[float] = typer.Option(None, help="Override the tier temperature"),
    stream: bool = typer.Option(True, help="Print output as it arrives"),
):
    """Run a feature and print the model output"""
    runner = _build_runner()
    files = [_read_file(p) for p in file or []]
    options = {
        "user_input": user_input,
        "tier": tier,
        "files": files,
        "temperature": temperature,
    }

    async def run():
        if stream:
            fragments = runner.stream(feature, **options)
            try:
                async for fragment in fragments:
                    console.print(fragment, end="", markup=False, highlight=False)
            finally:
                await fragments.aclose()
            console.print()
        else:
            response = await runner.run(feature, **options)
            console.print(response.content, markup=False, highlight=False)
            tokens = response.token_count if response.token_count is not None else "n/a"
            err_console.print(
                f"[dim]{response.model} | {response.latency_ms} ms | tokens: {tokens}[/dim]"
            )

    try:
        asyncio.run(run())
    except DebaticaException as e:
        err_console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
