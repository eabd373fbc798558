"""CLI entry point for pkgquality."""

import asyncio
import json
import logging
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pkgquality.adapters.base import locate_repo
from pkgquality.analyzers.pipeline import QualityPipeline
from pkgquality.config import EstimationContext, Settings
from pkgquality.errors import ConfigError
from pkgquality.models.schemas import PackageEntry, RepoDescriptor

app = typer.Typer(help="Package quality estimation tool.")

console = Console()


def _build_context(verbose: bool) -> EstimationContext:
    """Read settings from the environment and configure logging."""
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)

    level = logging.DEBUG if verbose else settings.log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    return EstimationContext(settings=settings, logger=logging.getLogger("pkgquality"))


def _score_color(quality: float) -> str:
    return "green" if quality >= 0.8 else "yellow" if quality >= 0.5 else "red"


@app.command()
def estimate(
    package: str = typer.Argument(..., help="Package name to estimate"),
    entry_file: Path | None = typer.Option(
        None, "--entry", "-e", help="JSON file with the package entry instead of the registry document"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request and stage"),
) -> None:
    """Estimate the quality of a single package."""
    context = _build_context(verbose)
    asyncio.run(_estimate_package(package, entry_file, output, context))


async def _estimate_package(
    package: str,
    entry_file: Path | None,
    output: Path | None,
    context: EstimationContext,
) -> None:
    """Async implementation of estimate."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Reading package entry...", total=None)

        async with QualityPipeline(context) as pipeline:
            try:
                if entry_file:
                    entry = PackageEntry.model_validate(json.loads(entry_file.read_text()))
                else:
                    entry = await pipeline.adapter.get_package_entry(package)
                progress.update(task, description="Estimating quality...")
                quality = await pipeline.estimate(entry)
            except Exception as e:
                console.print(f"[red]Error estimating {package}: {escape(str(e))}[/red]")
                raise typer.Exit(1)

    repository = entry.repository.url if entry.repository else None
    color = _score_color(quality)
    console.print(
        Panel(
            f"[bold][{color}]{quality:.4f}[/{color}][/bold]\n[dim]{repository or 'no repository'}[/dim]",
            title=f"{entry.name} quality",
            expand=False,
        )
    )

    if output:
        data = {"name": entry.name, "quality": quality, "repository": repository}
        output.write_text(json.dumps(data, indent=2))
        console.print(f"\n[green]Saved to {output}[/green]")


@app.command()
def batch(
    packages: list[str] = typer.Argument(..., help="Package names to estimate"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every request and stage"),
) -> None:
    """Estimate several packages concurrently."""
    context = _build_context(verbose)
    asyncio.run(_estimate_batch(packages, output, context))


async def _estimate_batch(
    packages: list[str],
    output: Path | None,
    context: EstimationContext,
) -> None:
    """Async implementation of batch."""
    async with QualityPipeline(context) as pipeline:
        entries = await asyncio.gather(
            *(pipeline.adapter.get_package_entry(name) for name in packages),
            return_exceptions=True,
        )
        found = [entry for entry in entries if isinstance(entry, PackageEntry)]
        estimates = dict(await pipeline.estimate_many(found))

    table = Table(title=f"Quality of {len(packages)} packages")
    table.add_column("Package", style="cyan")
    table.add_column("Quality", justify="right")

    results = []
    for name, entry in zip(packages, entries):
        result = entry if isinstance(entry, BaseException) else estimates.get(entry.name)
        if isinstance(result, BaseException):
            table.add_row(name, f"[red]{escape(str(result))}[/red]")
            results.append({"name": name, "quality": None, "error": str(result)})
        else:
            color = _score_color(result)
            table.add_row(name, f"[{color}]{result:.4f}[/{color}]")
            results.append({"name": name, "quality": result, "error": None})

    console.print(table)

    if output:
        output.write_text(json.dumps(results, indent=2))
        console.print(f"\n[green]Saved to {output}[/green]")

    if any(item["error"] for item in results):
        raise typer.Exit(1)


@app.command()
def locate(
    repo_type: str = typer.Argument(..., help="Repository type, e.g. git"),
    url: str = typer.Argument(..., help="Repository URL"),
) -> None:
    """Show the owner and name parsed from a repository descriptor."""
    location = locate_repo(RepoDescriptor(type=repo_type, url=url))
    if not location.valid:
        console.print(f"[red]Cannot locate repository {url}[/red]")
        raise typer.Exit(1)
    console.print(f"[bold]Owner:[/bold] {location.owner}")
    console.print(f"[bold]Name:[/bold] {location.name}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
