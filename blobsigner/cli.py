"""
blobsigner Command-Line Interface

Signs blob requests from the shell, e.g. to hand a download URL to a
script that has no access to the account key.
"""

import sys
import json
import logging
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError

from blobsigner import __version__
from blobsigner.auth.exceptions import SigningError
from blobsigner.blob.models import Blob, BlobOperation, GetOptions
from blobsigner.blob.signer import BlobRequestSigner
from blobsigner.core.config_manager import ConfigManager
from blobsigner.core.logging_config import apply_logging_config


def _parse_range(value: str) -> tuple:
    start, sep, end = value.partition("-")
    if not sep:
        raise click.BadParameter("expected START-END, START- or -COUNT", param_hint="--range")
    try:
        return (int(start) if start else None, int(end) if end else None)
    except ValueError:
        raise click.BadParameter(f"not a byte range: {value}", param_hint="--range")


@click.group()
@click.version_option(version=__version__, prog_name="blobsigner")
@click.pass_context
def cli(ctx):
    """
    blobsigner - Shared Access Signatures for Azure Blob Storage
    
    Issue time-limited URLs for reading, writing and deleting blobs.
    """
    ctx.ensure_object(dict)


@cli.command()
@click.argument(
    "operation",
    type=click.Choice([op.value for op in BlobOperation], case_sensitive=False),
)
@click.argument("container")
@click.argument("name")
@click.option(
    "--ttl",
    type=click.IntRange(min=0),
    help="Signature lifetime in seconds (default: configured TTL)",
)
@click.option(
    "--content-length",
    type=click.IntRange(min=0),
    help="Size of the blob to write (required for write)",
)
@click.option(
    "--range",
    "byte_range",
    help="Byte range for read, e.g. 0-1023",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    help="Logging level (overrides the configured level)",
)
@click.option(
    "--url-only",
    is_flag=True,
    help="Print only the signed URL",
)
def sign(
    operation: str,
    container: str,
    name: str,
    ttl: Optional[int],
    content_length: Optional[int],
    byte_range: Optional[str],
    config: Optional[Path],
    log_level: Optional[str],
    url_only: bool,
):
    """
    Sign a blob request and print it as JSON.
    
    Account credentials come from the config file or the
    BLOBSIGNER_ACCOUNT_NAME / BLOBSIGNER_ACCOUNT_KEY environment variables.
    
    Examples:
        blobsigner sign read mycontainer myblob.txt --ttl 60
        blobsigner sign write mycontainer upload.bin --content-length 1024
        blobsigner sign read mycontainer big.bin --range 0-1023 --url-only
    """
    op = BlobOperation(operation.lower())
    if content_length is not None and op is not BlobOperation.WRITE:
        raise click.UsageError("--content-length only applies to write")
    if byte_range and op is not BlobOperation.READ:
        raise click.UsageError("--range only applies to read")
    if byte_range and ttl is not None:
        raise click.UsageError("--range reads always use the configured TTL")
    
    try:
        cli_overrides = {"logging": {"level": log_level.upper()}} if log_level else None
        signer_config = ConfigManager().load(
            config_file=str(config) if config else None,
            cli_overrides=cli_overrides
        )
    except ValidationError as e:
        click.echo(f"[ERROR] Invalid configuration: {e}", err=True)
        sys.exit(1)
    
    apply_logging_config(signer_config.logging)
    logger = logging.getLogger("blobsigner.cli")
    
    try:
        signer = BlobRequestSigner.from_config(signer_config)
        if op is BlobOperation.WRITE:
            blob = Blob(name=name, content_length=content_length)
            request = signer.sign_write(container, name, blob, ttl_seconds=ttl)
        elif op is BlobOperation.DELETE:
            request = signer.sign_delete(container, name, ttl_seconds=ttl)
        elif byte_range:
            start, end = _parse_range(byte_range)
            options = GetOptions(ranges=[(start, end)])
            request = signer.sign_read_with_options(container, name, options)
        else:
            request = signer.sign_read(container, name, ttl_seconds=ttl)
    except SigningError as e:
        logger.debug(f"Signing failed: {e.error_code}")
        click.echo(f"[ERROR] {e.message}", err=True)
        sys.exit(1)
    except ValidationError as e:
        click.echo(f"[ERROR] {e}", err=True)
        sys.exit(1)
    
    if url_only:
        click.echo(request.url)
    else:
        click.echo(json.dumps(request.to_dict(), indent=2))


@cli.command()
def version():
    """Show blobsigner version."""
    click.echo(f"blobsigner version {__version__}")


def main():
    """Main entry point."""
    cli(obj={})


if __name__ == "__main__":
    main()
