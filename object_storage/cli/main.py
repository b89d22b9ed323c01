"""Main CLI entry point for object-storage commands."""

import click

from object_storage import __version__
from object_storage.cli.commands import storage
from object_storage.infra.logging.config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="object-storage")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Object Storage CLI - S3-compatible bucket operations.

    \b
    Command Groups:
      storage    Upload, list, copy, move, fetch and delete objects

    \b
    Quick Start:
      export STORAGE_BUCKET=my-bucket STORAGE_REGION=eu-west-1
      object-storage storage info
      object-storage storage upload ./readme.txt docs/readme.txt
      object-storage storage ls docs
    """
    ctx.ensure_object(dict)


cli.add_command(storage.storage)


def main() -> None:
    """Entry point for CLI."""
    setup_logging()
    cli(obj={})


if __name__ == "__main__":
    main()
