"""Command-line interface for bucket-browser.

Commands:
    - list: List one level of the bucket (folders and files)
    - search: Find objects in one page whose key contains a term
    - sign: Print a time-limited download URL for a key
    - credentials: Show which credential source is in use

The bucket, region and credentials come from the environment (see
``bucket_browser.core.config``); --bucket, --region and --endpoint-url
override them.
"""

import asyncio
from typing import Annotated, Optional

import typer

from . import __version__
from .browser import StorageBrowser
from .cli_params import (
    bucket_option,
    continuation_token_option,
    endpoint_url_option,
    max_keys_option,
    region_option,
)
from .core import settings
from .schemas import ListingPage, ListQuery, SearchQuery, StorageObject

app = typer.Typer(
    name="bucket-browser",
    help="Browse, search and download objects in an S3 bucket.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Display version information."""
    if value:
        typer.echo(f"bucket-browser {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        Optional[bool],
        typer.Option("--version", callback=version_callback, help="Show version."),
    ] = None,
) -> None:
    """
    Bucket Browser: list, search and sign download URLs for an S3 bucket.
    """
    pass


def _create_browser(
    bucket: Optional[str] = None,
    region_name: Optional[str] = None,
    endpoint_url: Optional[str] = None,
) -> StorageBrowser:
    """Build a browser from settings, applying command-line overrides."""
    overrides = {
        "bucket": bucket,
        "region_name": region_name,
        "endpoint_url": endpoint_url,
    }
    config = settings.model_copy(
        update={name: value for name, value in overrides.items() if value is not None}
    )
    return StorageBrowser.from_settings(config)


def _human_size(size: int) -> str:
    if size >= 1024**3:
        return f"{size / (1024**3):.2f} GB"
    elif size >= 1024**2:
        return f"{size / (1024**2):.2f} MB"
    elif size >= 1024:
        return f"{size / 1024:.2f} KB"
    return f"{size} B"


def _echo_object(obj: StorageObject) -> None:
    content_type = obj.content_type or "-"
    modified = obj.last_modified.strftime("%Y-%m-%d %H:%M")
    typer.echo(
        f"  {obj.key}  {_human_size(obj.size)}  {modified}  {content_type}"
    )


def _echo_pagination(page: ListingPage) -> None:
    if page.truncated:
        typer.echo(
            f"More results: --continuation-token {page.next_continuation_token}"
        )


@app.command("list")
def list_cmd(
    prefix: Annotated[str, typer.Argument(help="Folder prefix to list")] = "",
    bucket: Annotated[Optional[str], bucket_option()] = None,
    region_name: Annotated[Optional[str], region_option()] = None,
    endpoint_url: Annotated[Optional[str], endpoint_url_option()] = None,
    max_keys: Annotated[Optional[int], max_keys_option()] = None,
    continuation_token: Annotated[
        Optional[str], continuation_token_option()
    ] = None,
    no_metadata: Annotated[
        bool, typer.Option("--no-metadata", help="Skip content-type lookups")
    ] = False,
) -> None:
    """
    List folders and files directly under a prefix.

    Examples:
        bucket-browser list photos/ --bucket my-bucket
        bucket-browser list photos/ --continuation-token TOKEN
    """
    try:
        browser = _create_browser(bucket, region_name, endpoint_url)
        query = ListQuery(
            prefix=prefix,
            max_keys=max_keys or browser.page_size,
            continuation_token=continuation_token,
        )
        page = asyncio.run(
            browser.list_objects(query, with_metadata=not no_metadata)
        )

        if not page.prefixes and not page.objects:
            typer.echo("No objects found.")
        for folder in page.prefixes:
            typer.echo(f"  {folder}")
        for obj in page.objects:
            _echo_object(obj)
        _echo_pagination(page)

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("search")
def search_cmd(
    query: Annotated[str, typer.Argument(help="Case-insensitive key substring")],
    prefix: Annotated[
        str, typer.Option("--prefix", help="Only search under this prefix")
    ] = "",
    bucket: Annotated[Optional[str], bucket_option()] = None,
    region_name: Annotated[Optional[str], region_option()] = None,
    endpoint_url: Annotated[Optional[str], endpoint_url_option()] = None,
    max_keys: Annotated[Optional[int], max_keys_option()] = None,
    continuation_token: Annotated[
        Optional[str], continuation_token_option()
    ] = None,
) -> None:
    """
    Search one page of keys under a prefix.

    Only the page fetched for this call is searched; when more keys exist
    the continuation token for the next page is printed.

    Examples:
        bucket-browser search jan --prefix reports/ --bucket my-bucket
    """
    try:
        browser = _create_browser(bucket, region_name, endpoint_url)
        search_query = SearchQuery(
            prefix=prefix,
            query=query,
            max_keys=max_keys or browser.page_size,
            continuation_token=continuation_token,
        )
        page = asyncio.run(browser.search_page(search_query))

        if page.objects:
            typer.echo(f"Found {len(page.objects)} matching objects:")
            for obj in page.objects:
                _echo_object(obj)
        else:
            typer.echo("No matching objects found.")
        _echo_pagination(page)

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("sign")
def sign_cmd(
    key: Annotated[str, typer.Argument(help="Object key to sign")],
    bucket: Annotated[Optional[str], bucket_option()] = None,
    region_name: Annotated[Optional[str], region_option()] = None,
    endpoint_url: Annotated[Optional[str], endpoint_url_option()] = None,
    expires_in: Annotated[
        Optional[int],
        typer.Option("--expires-in", help="URL lifetime in seconds"),
    ] = None,
    download_name: Annotated[
        Optional[str],
        typer.Option("--download-name", help="Filename offered to browsers"),
    ] = None,
) -> None:
    """
    Print a time-limited download URL for a key.

    Examples:
        bucket-browser sign reports/jan.csv --expires-in 600
    """
    try:
        browser = _create_browser(bucket, region_name, endpoint_url)
        url = asyncio.run(
            browser.signed_url(key, expires_in, download_name=download_name)
        )
        typer.echo(url)

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command("credentials")
def credentials_cmd(
    bucket: Annotated[Optional[str], bucket_option()] = None,
    region_name: Annotated[Optional[str], region_option()] = None,
    endpoint_url: Annotated[Optional[str], endpoint_url_option()] = None,
) -> None:
    """
    Resolve credentials and show which source provided them.
    """
    try:
        browser = _create_browser(bucket, region_name, endpoint_url)
        source = asyncio.run(browser.credentials_source())
        typer.echo(f"✓ Credentials resolved from: {source}")

    except Exception as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
