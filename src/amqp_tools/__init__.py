"""Command-line tools for inspecting and moving messages on AMQP 0-9-1 queues."""

__version__ = "0.1.0"
