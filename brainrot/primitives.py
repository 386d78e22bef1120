"""Output and process primitives the built-ins delegate to."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import BinaryIO, Callable

from .printf import format_c


@dataclass
class Exit(Exception):
    """Raised by ragequit; unwinds to the runtime, which returns code."""

    code: int


class Primitives:
    """Host services used by the built-in dispatcher.

    Formatting methods receive a printf-style format and the already
    evaluated arguments.
    """

    def yapping(self, fmt: str, *args: object) -> None:
        raise NotImplementedError

    def yappin(self, fmt: str, *args: object) -> None:
        raise NotImplementedError

    def baka(self, fmt: str, *args: object) -> None:
        raise NotImplementedError

    def ragequit(self, code: int) -> None:
        raise NotImplementedError

    def chill(self, seconds: int) -> None:
        raise NotImplementedError

    def report(self, message: str) -> None:
        """Diagnostic channel."""
        raise NotImplementedError


class StreamPrimitives(Primitives):
    """Primitives backed by binary streams.

    yapping targets stdout and yappin the alternate stream, which is stdout
    unless altout is given. baka and diagnostics go to stderr. sleep is
    injectable so tests and --no-sleep can skip the wait.
    """

    def __init__(
        self,
        stdout: BinaryIO,
        stderr: BinaryIO,
        *,
        altout: BinaryIO | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.stdout = stdout
        self.stderr = stderr
        self.altout = altout if altout is not None else stdout
        self._sleep = sleep

    def _write(self, stream: BinaryIO, text: str) -> None:
        stream.write(text.encode("utf-8"))
        stream.flush()

    def yapping(self, fmt: str, *args: object) -> None:
        self._write(self.stdout, format_c(fmt, args))

    def yappin(self, fmt: str, *args: object) -> None:
        self._write(self.altout, format_c(fmt, args))

    def baka(self, fmt: str, *args: object) -> None:
        self._write(self.stderr, format_c(fmt, args))

    def ragequit(self, code: int) -> None:
        raise Exit(code)

    def chill(self, seconds: int) -> None:
        self._sleep(seconds)

    def report(self, message: str) -> None:
        self._write(self.stderr, message)
