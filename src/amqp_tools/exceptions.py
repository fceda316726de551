"""Error kinds raised by amqp-tools.

Every failure that should end a command is an ``AMQPToolsError``; the CLI turns
these into a one-line message and a non-zero exit status.
"""


class AMQPToolsError(Exception):
    """Base exception for amqp-tools errors."""

    pass


class ConfigLocationError(AMQPToolsError):
    """Raised when the user configuration directory cannot be determined."""

    pass


class FilesystemError(AMQPToolsError):
    """Raised when a file or directory cannot be created or opened."""

    pass


class ConfigParseError(AMQPToolsError):
    """Raised when the profile file is not valid TOML or fails validation."""

    pass


class UnknownProfileError(AMQPToolsError):
    """Raised when a named connection profile is not in the config file."""

    def __init__(self, name: str, config_path: object = None):
        self.name = name
        self.config_path = config_path
        location = f" in {config_path}" if config_path else ""
        super().__init__(f"unknown connection '{name}': no such profile{location}")


class AMQPConnectionError(AMQPToolsError):
    """Raised when connection to the broker fails."""

    pass


class BrokerError(AMQPToolsError):
    """Raised when a channel operation (get, ack, reject, publish) fails."""

    pass


class OutputError(AMQPToolsError):
    """Raised when writing a message payload to its sink fails."""

    pass
