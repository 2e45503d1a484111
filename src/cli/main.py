"""Metering query CLI (Typer).

Commands:
- list-metrics: bucket or account metrics (`--metric buckets|accounts`).
- list-bucket-metrics: older bucket-only form (`-b/--buckets`).

The command bodies only tokenize options; `_dispatch` is the single place that
decides what reaches stdout and which exit code the process returns.
"""

import asyncio
from typing import Annotated, Optional

import httpx
import typer
from botocore.exceptions import BotoCoreError

from adapters.metrics_query_client import MetricsQueryClient
from cli.ui_components import build_error_console, print_usage_error
from core.config import AppSettings
from core.domain.models import QueryOutcome
from core.logging import get_logger, resolve_log_level, setup_logging
from core.services.query_builder import (
    QueryOptions,
    QueryValidationError,
    build_query_request,
)

VERSION = "0.1.0"

logger = get_logger(__name__)

app = typer.Typer(
    no_args_is_help=True,
    rich_markup_mode=None,
    add_completion=False,
    help="Query a utapi metering service for bucket and account metrics.",
)

AccessKeyOption = Annotated[Optional[str], typer.Option("-a", "--access-key", help="Access key id.")]
SecretKeyOption = Annotated[Optional[str], typer.Option("-k", "--secret-key", help="Secret access key.")]
StartOption = Annotated[
    Optional[str],
    typer.Option("-s", "--start", help="Start of time range (epoch ms). Zero is not accepted."),
]
EndOption = Annotated[Optional[str], typer.Option("-e", "--end", help="End of time range (epoch ms).")]
HostOption = Annotated[Optional[str], typer.Option("-h", "--host", help="Host of the server.")]
PortOption = Annotated[Optional[str], typer.Option("-p", "--port", help="Port of the server.")]
SslOption = Annotated[bool, typer.Option("--ssl", help="Enable ssl.")]
VerboseOption = Annotated[bool, typer.Option("-v", "--verbose", help="Log request and response details.")]
RecentOption = Annotated[
    bool,
    typer.Option("-r", "--recent", help="List metrics of the latest 15 minute interval."),
]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(VERSION)
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", callback=_version_callback, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    """Query a utapi metering service for bucket and account metrics."""


def _report(outcome: QueryOutcome) -> int:
    if outcome.ok:
        typer.echo(outcome.render())
        return 0
    logger.error(
        "request failed with HTTP status",
        status_code=outcome.status_code,
        body=outcome.body,
    )
    return 1


def _dispatch(ctx: typer.Context, options: QueryOptions, *, legacy: bool) -> None:
    settings = AppSettings()
    setup_logging(
        level=resolve_log_level(settings.log_level, options.verbose),
        format_type=settings.log_format,
    )

    try:
        query = build_query_request(options, legacy=legacy)
    except QueryValidationError as exc:
        logger.error(exc.message, option=exc.option)
        print_usage_error(build_error_console(), exc.message, ctx.get_help())
        raise typer.Exit(code=1) from None

    client = MetricsQueryClient(settings)
    try:
        outcome = asyncio.run(client.list_metrics(query))
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        logger.error(
            "request to metering service failed",
            host=query.host,
            port=query.port,
            error=str(exc),
        )
        raise typer.Exit(code=1) from None
    except BotoCoreError as exc:
        logger.error("could not sign request", error=str(exc))
        raise typer.Exit(code=1) from None

    raise typer.Exit(code=_report(outcome))


@app.command("list-metrics")
def list_metrics(
    ctx: typer.Context,
    access_key: AccessKeyOption = None,
    secret_key: SecretKeyOption = None,
    metric: Annotated[
        Optional[str],
        typer.Option("-m", "--metric", help="Metric type: buckets or accounts."),
    ] = None,
    buckets: Annotated[
        Optional[str],
        typer.Option("--buckets", help="Name of bucket(s) with a comma separator if more than one."),
    ] = None,
    accounts: Annotated[
        Optional[str],
        typer.Option("--accounts", help="Name of account(s) with a comma separator if more than one."),
    ] = None,
    start: StartOption = None,
    end: EndOption = None,
    host: HostOption = None,
    port: PortOption = None,
    ssl: SslOption = False,
    verbose: VerboseOption = False,
    recent: RecentOption = False,
) -> None:
    """List metrics for buckets or accounts."""

    options = QueryOptions(
        host=host,
        port=port,
        access_key=access_key,
        secret_key=secret_key,
        metric=metric,
        buckets=buckets,
        accounts=accounts,
        start=start,
        end=end,
        verbose=verbose,
        recent=recent,
        ssl=ssl,
    )
    _dispatch(ctx, options, legacy=False)


@app.command("list-bucket-metrics")
def list_bucket_metrics(
    ctx: typer.Context,
    access_key: AccessKeyOption = None,
    secret_key: SecretKeyOption = None,
    buckets: Annotated[
        Optional[str],
        typer.Option("-b", "--buckets", help="Name of bucket(s) with a comma separator if more than one."),
    ] = None,
    start: StartOption = None,
    end: EndOption = None,
    host: HostOption = None,
    port: PortOption = None,
    ssl: SslOption = False,
    verbose: VerboseOption = False,
    recent: RecentOption = False,
) -> None:
    """List bucket metrics (bucket-only form)."""

    options = QueryOptions(
        host=host,
        port=port,
        access_key=access_key,
        secret_key=secret_key,
        buckets=buckets,
        start=start,
        end=end,
        verbose=verbose,
        recent=recent,
        ssl=ssl,
    )
    _dispatch(ctx, options, legacy=True)


def run() -> None:
    app()
