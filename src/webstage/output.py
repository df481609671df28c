"""
Timestamped console output for webstage.

Every line is prefixed with the elapsed time since the staging run started,
in MM:SS.cc format, so a slow copy or a hanging junction fallback is easy to
spot in build logs.

Example output:
    00:00.01 [1/2] Exposing node modules...
    00:00.02       target/web/lib -> node_modules
    00:00.03 [2/2] Collecting direct assets...
    00:00.41       Copied 12 asset(s) into target/web/assets

Usage:
    from webstage.output import log, log_phase, log_detail

    log_phase(1, 2, "Exposing node modules...")
    log_detail("Copied 12 asset(s)")
"""

import sys
import time
from pathlib import Path
from types import TracebackType
from typing import Optional, TextIO

_start_time: Optional[float] = None
_output_stream: Optional[TextIO] = None
_verbose: bool = True
_output_file: Optional[TextIO] = None


def init_timer(output_stream: Optional[TextIO] = None) -> None:
    """
    Start the staging clock.

    Called automatically on first use when nothing set it up.

    Args:
        output_stream: Stream receiving the output (defaults to sys.stdout)
    """
    global _start_time, _output_stream
    _start_time = time.time()
    _output_stream = output_stream


def set_verbose(verbose: bool) -> None:
    """Enable or suppress verbose-only messages."""
    global _verbose
    _verbose = verbose


def set_output_file(output_file: Optional[TextIO]) -> None:
    """
    Mirror every line into a file as well as the console.

    Args:
        output_file: Open text file, or None to stop mirroring
    """
    global _output_file
    _output_file = output_file


def get_elapsed() -> float:
    """Seconds elapsed since init_timer()."""
    if _start_time is None:
        init_timer(_output_stream)
    return time.time() - _start_time  # type: ignore


def format_timestamp() -> str:
    elapsed = get_elapsed()
    minutes = int(elapsed // 60)
    seconds = elapsed % 60
    return f"{minutes:02d}:{seconds:05.2f}"


def _print(message: str) -> None:
    line = f"{format_timestamp()} {message}\n"
    # Looked up per call so a replaced sys.stdout is honoured
    stream = _output_stream if _output_stream is not None else sys.stdout
    stream.write(line)
    stream.flush()

    if _output_file is not None:
        _output_file.write(line)
        _output_file.flush()


def log(message: str, verbose_only: bool = False) -> None:
    """
    Log a message with timestamp.

    Args:
        message: Message to log
        verbose_only: Only print when verbose mode is enabled
    """
    if verbose_only and not _verbose:
        return
    _print(message)


def log_phase(phase: int, total: int, message: str, verbose_only: bool = False) -> None:
    """Log a staging phase as ``[N/M] message``."""
    if verbose_only and not _verbose:
        return
    _print(f"[{phase}/{total}] {message}")


def log_detail(message: str, indent: int = 6, verbose_only: bool = False) -> None:
    if verbose_only and not _verbose:
        return
    _print(f"{' ' * indent}{message}")


def log_asset(source: Path, destination: Path, verbose_only: bool = True) -> None:
    """
    Log a single copied asset.

    Format: [asset] source -> destination
    """
    if verbose_only and not _verbose:
        return
    _print(f"      [asset] {source} -> {destination}")


class TimedLogger:
    """
    Context manager that logs an operation and how long it took.

    Usage:
        with TimedLogger("Collecting direct assets", phase=(2, 2)) as timed:
            ...
            timed.detail("Copied 3 asset(s)")
    """

    def __init__(self, operation: str, phase: Optional[tuple[int, int]] = None, verbose_only: bool = False):
        self.operation = operation
        self.phase = phase
        self.verbose_only = verbose_only
        self.start_time = 0.0

    def __enter__(self) -> "TimedLogger":
        self.start_time = time.time()
        if self.phase:
            log_phase(self.phase[0], self.phase[1], f"{self.operation}...", self.verbose_only)
        else:
            log(f"{self.operation}...", self.verbose_only)
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        del exc_val, exc_tb  # Unused
        elapsed = time.time() - self.start_time
        if exc_type is None:
            log_detail(f"Done ({elapsed:.2f}s)", verbose_only=self.verbose_only)
        return None

    def detail(self, message: str) -> None:
        """Log a detail line within this operation."""
        log_detail(message, verbose_only=self.verbose_only)
