"""Command-line entry point.

    amqp-tools read   <queue> [-c <profile>] [-l N] [-o <path>] [--requeue]
    amqp-tools peek   <queue> [-c <profile>]
    amqp-tools shovel <src-queue> <dst-queue> [-s <profile>] [-d <profile>]

Profiles are read from ``<user-config-dir>/amqp-tools/config.toml``.
"""

import asyncio
from typing import Any, Coroutine, TypeVar

import click
from loguru import logger

from amqp_tools import __version__, commands
from amqp_tools.config import get_settings
from amqp_tools.exceptions import AMQPToolsError
from amqp_tools.log_config import setup_logging

T = TypeVar("T")

connection_option = click.option(
    "--connection",
    "-c",
    default=None,
    metavar="PROFILE",
    help="Connection profile from the config file (default: guest@localhost).",
)


def run(command: str, coro: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine, turning tool errors into a click error exit."""
    with logger.contextualize(command=command):
        try:
            return asyncio.run(coro)
        except AMQPToolsError as e:
            logger.opt(exception=e).debug("Command failed")
            raise click.ClickException(str(e)) from e


@click.group()
@click.version_option(version=__version__, prog_name="amqp-tools")
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Inspect and move messages on AMQP 0-9-1 queues."""
    ctx.ensure_object(dict)
    settings = get_settings()
    setup_logging(settings, verbose=verbose)
    ctx.obj["settings"] = settings


@cli.command(name="read")
@click.argument("queue_name")
@connection_option
@click.option(
    "--limit",
    "-l",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of messages to read (default: all).",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(),
    default=None,
    help="File to write to, or a directory (existing or ending in a separator) "
    "to write one message_<n> file per message. Default: stdout.",
)
@click.option(
    "--requeue",
    is_flag=True,
    help="Reject each message back onto the queue instead of acknowledging it.",
)
@click.pass_context
def read(
    ctx: click.Context,
    queue_name: str,
    connection: str | None,
    limit: int | None,
    output: str | None,
    requeue: bool,
) -> None:
    """Consume messages from QUEUE_NAME and write their bodies, one per line.

    Messages are acknowledged (removed) after they are written unless
    --requeue is given. With --requeue the broker usually puts the message
    back at the head, so a limit above one may return the same message again.
    """
    count = run(
        "read",
        commands.read(
            queue_name,
            connection=connection,
            limit=limit,
            output=output,
            requeue=requeue,
            settings=ctx.obj["settings"],
        ),
    )
    click.echo(f"Read {count} messages from {queue_name}", err=True)


@cli.command(name="peek")
@click.argument("queue_name")
@connection_option
@click.pass_context
def peek(ctx: click.Context, queue_name: str, connection: str | None) -> None:
    """Print the body of the message at the head of QUEUE_NAME without removing it."""
    found = run("peek", commands.peek(queue_name, connection=connection, settings=ctx.obj["settings"]))
    if not found:
        click.echo("the queue is empty")


@cli.command(name="shovel")
@click.argument("source_queue")
@click.argument("destination_queue")
@click.option(
    "--source-connection",
    "-s",
    default=None,
    metavar="PROFILE",
    help="Connection profile for the source queue.",
)
@click.option(
    "--destination-connection",
    "-d",
    default=None,
    metavar="PROFILE",
    help="Connection profile for the destination queue.",
)
@click.pass_context
def shovel(
    ctx: click.Context,
    source_queue: str,
    destination_queue: str,
    source_connection: str | None,
    destination_connection: str | None,
) -> None:
    """Move every message from SOURCE_QUEUE to DESTINATION_QUEUE, keeping properties."""
    if source_queue == destination_queue and source_connection == destination_connection:
        # republished messages would land back on the source and never drain
        raise click.UsageError("source and destination are the same queue on the same connection")

    count = run(
        "shovel",
        commands.shovel(
            source_queue,
            destination_queue,
            source_connection=source_connection,
            destination_connection=destination_connection,
            settings=ctx.obj["settings"],
        ),
    )
    click.echo(f"Moved {count} messages from {source_queue} to {destination_queue}", err=True)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
