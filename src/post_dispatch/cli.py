"""Command line interface for the POST dispatcher.

Entry point for the post-dispatch CLI tool. Options left unset fall back to
Settings, so every option can also come from the environment or .env.
"""

from typing import Optional

import typer

from post_dispatch import __version__
from post_dispatch.config import Settings
from post_dispatch.dispatch.collector import LoggingResultCollector
from post_dispatch.dispatch.dispatcher import dispatch
from post_dispatch.dispatch.exceptions import ConfigurationError
from post_dispatch.logging_config import configure_logging
from post_dispatch.models.request_models import PostPayload

app = typer.Typer(
    name="post-dispatch",
    help="Send a batch of POST requests with bounded concurrency and retries.",
    add_completion=False,
)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"post-dispatch version {__version__}")
        raise typer.Exit()


@app.command()
def main(
    url: Optional[str] = typer.Argument(
        None,
        help="Destination URL.",
        show_default=False,
    ),
    title: Optional[str] = typer.Option(
        None,
        "--title",
        "-t",
        help="Title parameter of the POST request.",
    ),
    body: Optional[str] = typer.Option(
        None,
        "--body",
        "-b",
        help="Body parameter of the POST request.",
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        "--concurrency",
        "-c",
        help="Maximum number of requests to be handled simultaneously.",
    ),
    attempts: Optional[int] = typer.Option(
        None,
        "--attempts",
        "-a",
        help="Maximum number of attempts when a request fails.",
    ),
    count: Optional[int] = typer.Option(
        None,
        "--count",
        "-n",
        help="Number of requests in the batch.",
    ),
    retry_status: Optional[list[int]] = typer.Option(
        None,
        "--retry-status",
        help="Status code to retry (repeatable). Defaults to 429, 503 and 504.",
    ),
    base_delay_ms: Optional[int] = typer.Option(
        None,
        "--base-delay-ms",
        help="Backoff unit: retry N waits N times this many milliseconds.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (DEBUG, INFO, WARNING, ERROR).",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Make POST requests to the specified URL."""
    settings = Settings()
    configure_logging(log_level or settings.LOG_LEVEL, settings.ENVIRONMENT)

    payload = PostPayload(
        title=title if title is not None else settings.POST_TITLE,
        body=body if body is not None else settings.POST_BODY,
    )

    try:
        report = dispatch(
            url or settings.TARGET_URL,
            payload,
            request_count=count if count is not None else settings.REQUEST_COUNT,
            concurrency_limit=concurrency if concurrency is not None else settings.CONCURRENCY_LIMIT,
            max_attempts=attempts if attempts is not None else settings.MAX_ATTEMPTS,
            retryable_status_codes=retry_status or settings.RETRYABLE_STATUS_CODES,
            collector=LoggingResultCollector(),
            base_delay_ms=base_delay_ms if base_delay_ms is not None else settings.RETRY_BASE_DELAY_MS,
            timeout=settings.REQUEST_TIMEOUT,
            metrics_enabled=settings.PROMETHEUS_ENABLED,
        )
    except ConfigurationError as e:
        typer.echo(f"Configuration error: {e.message}", err=True)
        for error in e.details.get("errors", []):
            loc = ".".join(str(x) for x in error["loc"])
            typer.echo(f"  - {loc}: {error['msg']}", err=True)
        raise typer.Exit(2) from None

    typer.echo(
        f"{report.succeeded} succeeded, {report.failed} failed "
        f"({report.total_attempts} attempts, {report.elapsed_ms} ms)"
    )


if __name__ == "__main__":
    app()
