"""Signal-aware output writing for the projsnap CLI."""

import errno
import os
import types
from pathlib import Path
from typing import Optional, Type, Union

from projsnap.cli.signal_handler import signal_handler


class SafeWriter:
    """Writes the snapshot to a file or file descriptor, stopping on interruption.

    Output errors are not absorbed: a destination that cannot be opened or
    written to raises, since without it the run has no effect.

    Attributes:
        file: Either a file path or file descriptor for output.
        fd: The actual file descriptor being written to.
        encoding: Encoding used for the written text.
    """

    def __init__(self, file: Union[int, str, Path], encoding: str = "utf-8"):
        """Initialize the safe writer.

        Args:
            file: Either a file descriptor (int) or a path to create or truncate.
            encoding: Encoding used for the written text. Defaults to "utf-8".

        Raises:
            TypeError: If file is neither a descriptor nor a path.
            OSError: If the destination file cannot be opened.
        """
        self.file = file
        self.encoding = encoding
        self._closed = False

        if isinstance(file, int):
            self.fd = file
            self._file_obj = None
        elif isinstance(file, (str, os.PathLike)):
            self._file_obj = Path(file).open("wb")
            self.fd = self._file_obj.fileno()
        else:
            raise TypeError(f"Expected int, str, or PathLike, got {type(file).__name__}")

    def write(self, data: str) -> None:
        """Write data, checking for signals first.

        Raises:
            BrokenPipeError: If SIGPIPE/SIGINT was received or the pipe is broken.
            OSError: If an I/O error occurs during writing.
            ValueError: If attempting to write to a closed writer.
        """
        if self._closed:
            raise ValueError("Cannot write to closed SafeWriter")

        if signal_handler.interrupted():
            raise BrokenPipeError()

        payload = memoryview(data.encode(self.encoding))
        try:
            # os.write may write fewer bytes than requested
            while payload:
                written = os.write(self.fd, payload)
                payload = payload[written:]
        except OSError as e:
            if e.errno == errno.EPIPE:
                raise BrokenPipeError()
            raise

    def close(self) -> None:
        """Close the file if this writer opened it."""
        if self._closed:
            return

        if self._file_obj is not None:
            try:
                self._file_obj.close()
            except OSError as e:
                if e.errno != errno.EPIPE:
                    raise

        self._closed = True

    def __enter__(self) -> "SafeWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[types.TracebackType],
    ) -> None:
        try:
            self.close()
        except OSError:
            # Only suppress close errors if there was already an exception
            if exc_type is None:
                raise
