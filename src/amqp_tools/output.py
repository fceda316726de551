"""Where ``read`` writes message payloads.

A target is resolved from the ``--output`` value and a message's 0-based
ordinal each time a message is written:

- no path: standard output
- an existing directory, or a path ending in a separator: one new file per
  message, ``<dir>/message_<ordinal>``, never overwriting an existing file
- anything else: a single file, truncated for ordinal 0 and appended to after
"""

import os
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Iterator

from loguru import logger

from amqp_tools.exceptions import FilesystemError, OutputError

MESSAGE_FILE_PREFIX = "message_"


class OutputKind(str, Enum):
    """Output target variants."""

    STDOUT = "stdout"
    FILE = "file"
    DIRECTORY = "directory"


def stdout_stream() -> BinaryIO:
    """Binary standard output."""
    return sys.stdout.buffer


def message_file_name(ordinal: int) -> str:
    return f"{MESSAGE_FILE_PREFIX}{ordinal}"


def has_trailing_separator(path: str) -> bool:
    separators = {os.sep} | ({os.altsep} if os.altsep else set())
    return any(path.endswith(sep) for sep in separators)


@dataclass(frozen=True)
class OutputTarget:
    """A resolved sink for one message."""

    kind: OutputKind
    path: Path | None = None
    # Single files only: append instead of truncating.
    append: bool = False

    @classmethod
    def resolve(cls, output: str | os.PathLike | None, ordinal: int) -> "OutputTarget":
        """Resolve the sink for the message with the given ordinal."""
        if output is None:
            return cls(OutputKind.STDOUT)

        raw = os.fspath(output)
        path = Path(raw)
        if path.is_dir() or has_trailing_separator(raw):
            return cls(OutputKind.DIRECTORY, path / message_file_name(ordinal))

        return cls(OutputKind.FILE, path, append=ordinal > 0)

    @contextmanager
    def open(self) -> Iterator[BinaryIO]:
        """Open the sink for writing.

        Standard output is yielded without being closed. Files are closed on
        exit.

        Raises:
            FilesystemError: If the file or its directory cannot be created.
        """
        if self.kind is OutputKind.STDOUT:
            yield stdout_stream()
            return

        if self.kind is OutputKind.DIRECTORY:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FilesystemError(
                    f"failed to create output directory {self.path.parent}: {e}"
                ) from e
            mode = "xb"
        else:
            mode = "ab" if self.append else "wb"

        try:
            stream = open(self.path, mode)
        except FileExistsError as e:
            raise FilesystemError(f"refusing to overwrite existing file {self.path}") from e
        except OSError as e:
            raise FilesystemError(f"failed to open output file {self.path}: {e}") from e

        with stream:
            yield stream


def write_message(output: str | os.PathLike | None, ordinal: int, body: bytes) -> OutputTarget:
    """Write one payload followed by a newline to its resolved sink and flush.

    Returns the target that was written to.
    """
    target = OutputTarget.resolve(output, ordinal)

    with target.open() as stream:
        try:
            stream.write(body)
            stream.write(b"\n")
            stream.flush()
        except OSError as e:
            raise OutputError(f"failed to write message {ordinal} to {target.kind.value}: {e}") from e

    logger.debug("Wrote message", ordinal=ordinal, target=target.kind.value, size=len(body))
    return target


def write_raw(body: bytes) -> None:
    """Write a payload to standard output as-is and flush."""
    stream = stdout_stream()
    try:
        stream.write(body)
        stream.flush()
    except OSError as e:
        raise OutputError(f"failed to write message to stdout: {e}") from e
