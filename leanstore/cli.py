"""
Command line tools for LeanStore
"""

import logging
from pathlib import Path

import typer

from .chunks import DEFAULT_PARTS, split_backup
from .exceptions import ValidationError

app = typer.Typer(help="Prepare LeanCloud backup files for re-import.")


@app.command()
def split(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Backup file, one JSON object per line."),
    parts: int = typer.Option(DEFAULT_PARTS, "--parts", "-n", min=1, help="Number of chunks."),
    output_dir: Path = typer.Option(Path("."), "--output-dir", "-o", help="Where chunk.<index>.json files go."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging."),
) -> None:
    """Split a backup into chunk.<index>.json array files."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(levelname)s:     %(message)s'
    )

    try:
        written = split_backup(path, parts=parts, output_dir=output_dir)
    except ValidationError as e:
        typer.echo(f"Error: {e.message}", err=True)
        raise typer.Exit(code=1)

    typer.echo(f"{len(written)} chunk(s) written")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
