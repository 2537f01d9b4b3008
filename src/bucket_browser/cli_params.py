"""Shared CLI parameter definitions.

Each function returns a typer option for use inside ``Annotated`` so that
every command spells the store and paging options the same way:

    @app.command()
    def my_command(
        bucket: Annotated[Optional[str], bucket_option()] = None,
    ):
        pass

Options left unset fall back to the environment-driven settings.
"""

import typer


def bucket_option():
    """Bucket name option."""
    return typer.Option("--bucket", "-b", help="Bucket to browse (overrides S3_BUCKET)")


def region_option():
    """AWS region option."""
    return typer.Option("--region", help="AWS region name (overrides S3_REGION)")


def endpoint_url_option():
    """Custom endpoint option."""
    return typer.Option(
        "--endpoint-url", help="Custom endpoint for S3-compatible services"
    )


def max_keys_option():
    """Page size option."""
    return typer.Option(
        "--max-keys",
        min=1,
        max=1000,
        help="Maximum number of entries per page (overrides BUCKET_BROWSER_PAGE_SIZE)",
    )


def continuation_token_option():
    """Continuation token option."""
    return typer.Option(
        "--continuation-token",
        help="Token printed by a previous truncated listing",
    )
