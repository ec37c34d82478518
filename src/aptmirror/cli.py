"""aptmirror command line interface."""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from aptmirror import constants
from aptmirror.config import MirrorConfig
from aptmirror.errors import ManifestError, ReleaseMissingError
from aptmirror.mirror import SyncResult, run

logger = logging.getLogger(__name__)

EXIT_NO_RELEASE = 1
EXIT_BAD_MANIFEST = 3
EXIT_NOT_FOUND = 4

cli = typer.Typer(help="Mirror APT package indices and inspect the packages they list.")
console = Console()


def setup_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _sync(config: MirrorConfig, cache: bool) -> SyncResult:
    try:
        return asyncio.run(run(config, cache=cache))
    except ReleaseMissingError as e:
        logger.error(f"{e}, exiting")
        raise typer.Exit(EXIT_NO_RELEASE) from e
    except ManifestError as e:
        logger.error(f"Unable to parse Release file: {e}")
        raise typer.Exit(EXIT_BAD_MANIFEST) from e


@cli.callback()
def common(
    ctx: typer.Context,
    archive_root: str = typer.Option(
        constants.ARCHIVE_ROOT, envvar="APTMIRROR_ARCHIVE_ROOT", help="Archive base URL"
    ),
    distribution: str = typer.Option(
        constants.DISTRIBUTION, envvar="APTMIRROR_DISTRIBUTION", help="Distribution (suite) name"
    ),
    os_id: str = typer.Option(constants.OS_ID, help="OS name used in the cache layout"),
    components: str = typer.Option(
        " ".join(constants.DEFAULT_COMPONENTS), help="Space-separated list of components"
    ),
    architectures: str = typer.Option(
        " ".join(constants.DEFAULT_ARCHITECTURES), help="Space-separated list of architectures"
    ),
    extensions: str = typer.Option(
        " ".join(constants.DEFAULT_EXTENSIONS),
        help="Space-separated index extensions in order of preference; a leading space means plain Packages",
    ),
    cache_root: Path = typer.Option(
        constants.CACHE_DIR, envvar="APTMIRROR_CACHE_DIR", help="Where downloaded files are stored"
    ),
    no_cache: bool = typer.Option(False, "--no-cache", help="Do not write downloaded files to disk"),
    user_agent: str = typer.Option(constants.USER_AGENT, help="HTTP User-Agent header"),
    timeout: float = typer.Option(constants.REQUEST_TIMEOUT, help="Per-request timeout in seconds"),
    mirror_all_variants: bool = typer.Option(
        False, help="Also download less preferred index variants (cached, not parsed)"
    ),
    concurrency: int = typer.Option(1, min=1, help="Component indices fetched in parallel"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Shared mirror options."""
    setup_logging(verbose)
    ctx.obj = {
        "config": MirrorConfig(
            archive_root=archive_root,
            os_id=os_id,
            distribution=distribution,
            components=components,
            architectures=architectures,
            extensions=extensions,
            user_agent=user_agent,
            cache_root=cache_root,
            timeout=timeout,
            mirror_all_variants=mirror_all_variants,
            concurrency=concurrency,
        ),
        "cache": not no_cache,
    }


@cli.command()
def sync(ctx: typer.Context):
    """Mirror the Release file and package indices, then summarize them."""
    result = _sync(ctx.obj["config"], ctx.obj["cache"])

    table = Table(title=f"{result.manifest.codename or ctx.obj['config'].distribution} packages")
    table.add_column("Architecture")
    table.add_column("Packages", justify="right")
    for arch, packages in result.tables.items():
        table.add_row(arch, str(len(packages)))
    console.print(table)


@cli.command()
def show(
    ctx: typer.Context,
    package: str = typer.Argument(..., help="Package name to look up"),
    arch: str | None = typer.Option(None, "--arch", "-a", help="Only show this architecture"),
):
    """Mirror the package indices and print one package's record."""
    result = _sync(ctx.obj["config"], ctx.obj["cache"])
    found = result.lookup(package, arch)
    if not found:
        logger.error(f"Package {package} not found")
        raise typer.Exit(EXIT_NOT_FOUND)

    for arch_name, record in found.items():
        table = Table(title=f"{record.name} ({arch_name})", show_header=False)
        table.add_column("Field", style="bold")
        table.add_column("Value")
        for field, value in record.model_dump().items():
            table.add_row(field, "" if value is None else str(value))
        table.add_row("dependencies", ", ".join(record.dependency_names()))
        console.print(table)


def main() -> None:
    """Main entry point for the aptmirror CLI."""
    cli()


if __name__ == "__main__":
    main()
