"""Queue commands: read, peek and shovel.

Each command is a straight loop over broker round trips with a fixed order:

- read:   get -> write -> ack (or reject with requeue) -> next get
- peek:   get -> write -> reject with requeue
- shovel: get (source) -> publish (destination) -> ack (source) -> next get

A delivered message is always disposed of on its own channel before the next
get. If a step fails the command stops with the message still unacked, and the
broker redelivers it once the session is closed.
"""

import os

from aio_pika import Message
from aio_pika.abc import AbstractIncomingMessage
from loguru import logger

from amqp_tools.amqp_wrapper import BrokerSession, open_session
from amqp_tools.config import Settings
from amqp_tools.output import write_message, write_raw


def republishable(message: AbstractIncomingMessage) -> Message:
    """Copy a delivered message's body and basic properties into a new message."""
    return Message(
        body=message.body,
        headers=dict(message.headers) if message.headers else None,
        content_type=message.content_type,
        content_encoding=message.content_encoding,
        delivery_mode=message.delivery_mode,
        priority=message.priority,
        correlation_id=message.correlation_id,
        reply_to=message.reply_to,
        expiration=message.expiration,
        message_id=message.message_id,
        timestamp=message.timestamp,
        type=message.type,
        user_id=message.user_id,
        app_id=message.app_id,
    )


async def read_messages(
    session: BrokerSession,
    queue_name: str,
    limit: int | None = None,
    output: str | os.PathLike | None = None,
    requeue: bool = False,
) -> int:
    """Consume up to ``limit`` messages (all when None), writing each payload.

    Returns the number of messages read.
    """
    count = 0
    while limit is None or count < limit:
        message = await session.get(queue_name)
        if message is None:
            break

        write_message(output, count, message.body)

        if requeue:
            await session.reject(message, requeue=True)
        else:
            await session.ack(message)
        count += 1

    logger.info("Read finished", queue=queue_name, count=count, requeue=requeue)
    return count


async def peek_message(session: BrokerSession, queue_name: str) -> bool:
    """Write the head message's payload to stdout and return it to the queue.

    Returns False when the queue is empty. Whether the requeued message goes
    back to the head depends on the broker.
    """
    message = await session.get(queue_name)
    if message is None:
        return False

    try:
        write_raw(message.body)
    finally:
        await session.reject(message, requeue=True)
    return True


async def shovel_messages(
    source: BrokerSession,
    destination: BrokerSession,
    source_queue: str,
    destination_queue: str,
) -> int:
    """Move every message from ``source_queue`` to ``destination_queue`` in order.

    Publish happens before the source ack, so a failure in between may leave a
    duplicate on the destination but never loses a message. The destination
    queue must already exist; nothing is taken from the source otherwise.
    """
    await destination.ensure_queue(destination_queue)

    count = 0
    while True:
        message = await source.get(source_queue)
        if message is None:
            break

        await destination.publish(republishable(message), destination_queue)
        await source.ack(message)
        count += 1

    logger.info(
        "Shovel finished",
        source_queue=source_queue,
        destination_queue=destination_queue,
        count=count,
    )
    return count


async def read(
    queue_name: str,
    connection: str | None = None,
    limit: int | None = None,
    output: str | os.PathLike | None = None,
    requeue: bool = False,
    settings: Settings | None = None,
) -> int:
    async with open_session(connection, settings) as session:
        return await read_messages(session, queue_name, limit=limit, output=output, requeue=requeue)


async def peek(queue_name: str, connection: str | None = None, settings: Settings | None = None) -> bool:
    async with open_session(connection, settings) as session:
        return await peek_message(session, queue_name)


async def shovel(
    source_queue: str,
    destination_queue: str,
    source_connection: str | None = None,
    destination_connection: str | None = None,
    settings: Settings | None = None,
) -> int:
    """Open one session per side, even when both name the same profile."""
    async with open_session(source_connection, settings) as source:
        async with open_session(destination_connection, settings) as destination:
            return await shovel_messages(source, destination, source_queue, destination_queue)
