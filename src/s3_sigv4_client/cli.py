#!/usr/bin/env python3
"""S3 CLI interface using the s3-sigv4-client library."""

import asyncio
import logging
import sys

import click

from .auth import SigningRequest, sign
from .client import S3Client
from .config import ClientConfig
from .exceptions import S3SigV4ClientError


def _run(coro):
    try:
        return asyncio.run(coro)
    except S3SigV4ClientError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@click.group()
@click.option("--config-file", help="Path to an INI config file")
@click.option("--profile", default="default", help="Profile section in the config file")
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level",
)
@click.pass_context
def cli(ctx, config_file, profile, log_level):
    """S3 CLI - SigV4 signed requests against an S3-compatible endpoint."""
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    ctx.obj["config_file"] = config_file
    ctx.obj["profile"] = profile


def _load_config(ctx) -> ClientConfig:
    # loaded per command so that "<command> --help" works without any config
    try:
        if ctx.obj["config_file"]:
            return ClientConfig.from_file(ctx.obj["config_file"], ctx.obj["profile"])
        return ClientConfig.from_env()
    except S3SigV4ClientError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)


@cli.command(name="list")
@click.option("--prefix", help="Object key prefix filter")
@click.option("--delimiter", help="Group keys sharing a prefix up to this character")
@click.option("--max-keys", default=1000, help="Maximum number of objects to return")
@click.option("--all", "list_all", is_flag=True, help="Follow continuation tokens")
@click.pass_context
def list_objects(ctx, prefix, delimiter, max_keys, list_all):
    """List objects in the bucket."""
    config = _load_config(ctx)

    async def _list():
        async with S3Client(config) as client:
            if list_all:
                count = 0
                async for obj in client.iter_objects(
                    prefix=prefix, delimiter=delimiter, page_size=max_keys
                ):
                    _echo_object(obj)
                    count += 1
                if not count:
                    click.echo("No objects found")
                return

            result = await client.list_objects(
                prefix=prefix, delimiter=delimiter, max_keys=max_keys
            )

        if not result.contents and not result.common_prefixes:
            click.echo("No objects found")
            return

        click.echo(f"Bucket: {result.name or client.bucket}")
        if prefix:
            click.echo(f"Prefix: {prefix}")
        for common_prefix in result.common_prefixes:
            click.echo(f"{'PRE':>30}  {common_prefix}")
        for obj in result.contents:
            _echo_object(obj)

        if result.is_truncated:
            click.echo("\n... (truncated, use --all or --max-keys to see more)")

    _run(_list())


def _echo_object(obj):
    size_mb = obj.size / (1024 * 1024)
    last_modified = (obj.last_modified or "")[:19]
    click.echo(f"{last_modified:<19} {size_mb:>8.2f} MB  {obj.key}")


@cli.command()
@click.argument("key")
@click.argument("output_path", type=click.Path())
@click.pass_context
def get(ctx, key, output_path):
    """Download an object."""
    config = _load_config(ctx)

    async def _get():
        async with S3Client(config) as client:
            result = await client.get_object(key)

        with open(output_path, "wb") as f:
            f.write(result.body)

        click.echo("Download successful!")
        click.echo(f"Content Type: {result.content_type or 'N/A'}")
        click.echo(f"Content Length: {result.content_length} bytes")
        click.echo(f"ETag: {result.etag}")

    _run(_get())


@cli.command()
@click.argument("key")
@click.pass_context
def head(ctx, key):
    """Get object metadata without downloading."""
    config = _load_config(ctx)

    async def _head():
        async with S3Client(config) as client:
            result = await client.head_object(key)

        click.echo(f"Object: {client.bucket}/{key}")
        click.echo(f"Content Type: {result.content_type or 'N/A'}")
        click.echo(f"Content Length: {result.content_length} bytes")
        click.echo(f"ETag: {result.etag}")
        click.echo(f"Last Modified: {result.last_modified or 'N/A'}")

        if result.version_id:
            click.echo(f"Version ID: {result.version_id}")

        if result.metadata:
            click.echo("Metadata:")
            for k, v in result.metadata.items():
                click.echo(f"  {k}: {v}")

    _run(_head())


@cli.command()
@click.argument("key")
@click.pass_context
def delete(ctx, key):
    """Delete an object."""
    config = _load_config(ctx)

    async def _delete():
        async with S3Client(config) as client:
            result = await client.delete_object(key)

        click.echo("Delete successful!")
        if result.version_id:
            click.echo(f"Version ID: {result.version_id}")
        if result.delete_marker:
            click.echo("Delete marker created")

    _run(_delete())


@cli.command(name="sign")
@click.argument("method")
@click.argument("url")
@click.option("--timestamp", help="Fixed x-amz-date value (YYYYMMDDTHHMMSSZ)")
@click.option(
    "--header", "headers", multiple=True, help="Extra header as NAME:VALUE"
)
@click.pass_context
def sign_command(ctx, method, url, timestamp, headers):
    """Print the signed headers for a request without sending it."""
    config = _load_config(ctx)

    extra = {}
    for header in headers:
        name, sep, value = header.partition(":")
        if not sep or not name.strip():
            raise click.BadParameter(
                f"expected NAME:VALUE, got {header!r}", param_hint="--header"
            )
        extra[name.strip()] = value.strip()

    try:
        request = SigningRequest.build(method.upper(), url, extra)
        signed = sign(config.access_key, config.secret_key, request, timestamp)
    except S3SigV4ClientError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for name, value in signed.headers.items():
        click.echo(f"{name}: {value}")


if __name__ == "__main__":
    cli()
