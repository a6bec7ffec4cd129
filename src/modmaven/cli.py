from __future__ import annotations

from typing import Optional

import typer
from dotenv import load_dotenv

from .driver import Mavenizer, discover_repositories
from .errors import ModMavenError
from .logging import get_logger
from .utils import load_config, rejected_markers
from .version import MappingVersion


load_dotenv()

app = typer.Typer(add_completion=False, help="Generate and publish modding artifacts into a local Maven repository")
log = get_logger("modmaven.cli")


def _apply_overrides(params: dict, **overrides) -> dict:
    params = dict(params)
    sections = {
        "output": ("output", "dir"),
        "cache": ("cache", "dir"),
        "report": ("output", "report"),
        "minecraft": ("parchment", "minecraft"),
    }
    for name, value in overrides.items():
        if value is None:
            continue
        section, key = sections[name]
        params[section] = dict(params.get(section) or {})
        params[section][key] = value
    return params


@app.command("list")
def list_repositories():
    """List registered repositories and the modules they handle."""
    repos = discover_repositories()
    if not repos:
        typer.echo("No repositories discovered.")
        raise typer.Exit(code=0)
    typer.echo("Discovered repositories:")
    for name in sorted(repos):
        patterns = ", ".join(repos[name].modules) or "(configured)"
        typer.echo(f"- {name}: {patterns}")


@app.command()
def run(
    module: str = typer.Argument(..., help="Module to generate, as group:name"),
    version: str = typer.Argument(..., help="Version to generate"),
    config: Optional[str] = typer.Option(None, help="Path to YAML config"),
    output: Optional[str] = typer.Option(None, help="Root directory of the output repository"),
    cache: Optional[str] = typer.Option(None, help="Directory for cached task results"),
    report: Optional[str] = typer.Option(None, help="Write a JSON report of the published artifacts"),
    minecraft: Optional[str] = typer.Option(None, help="Minecraft version for mappings that do not name one"),
):
    """Generate every artifact for MODULE at VERSION."""
    params = _apply_overrides(
        load_config(config), output=output, cache=cache, report=report, minecraft=minecraft
    )
    try:
        outputs = Mavenizer(params).run(module, version)
    except ModMavenError as e:
        log.error("%s", e)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    for o in outputs:
        typer.echo(f"{o.artifact.descriptor} -> {o.file}")


@app.command("parse-version")
def parse_version(
    version: str = typer.Argument(..., help="Mapping version, e.g. 1.18.2-2022.08.07-1.19.1"),
    minecraft: Optional[str] = typer.Option(None, help="Retarget to this Minecraft version"),
    config: Optional[str] = typer.Option(None, help="Path to YAML config"),
):
    """Decode a mapping version and print its canonical form."""
    params = load_config(config)
    try:
        parsed = MappingVersion.parse(version, rejected_markers(params))
    except ModMavenError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1)
    if minecraft:
        parsed = parsed.with_minecraft(minecraft)
    typer.echo(f"timestamp:         {parsed.timestamp}")
    typer.echo(f"minecraft:         {parsed.mc_version or '-'}")
    typer.echo(f"mapping minecraft: {parsed.map_mc_version or '-'}")
    typer.echo(f"friendly:          {parsed.to_friendly()}")


def main():  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
