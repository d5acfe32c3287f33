# Copyright 2025 Roger Cibrian
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Output interface for myday-deploy.

This module provides a configurable logging interface that library modules
can use for output without depending on the CLI. The logger can be configured
globally or passed as a parameter for better isolation.

The logger supports three kinds of output:
- Step: Progress indicators, printed unless silent
- Info: Outcome messages (dry run report, upload summary), printed unless silent
- Verbose: Request details, only printed when verbose mode is enabled

Errors are not routed through the logger; the CLI prints them to stderr,
so silent mode never hides a failure.

Example:
    Configure global logger:
        ```python
        from mydaydeploy.config import OutputMode
        from mydaydeploy.logging import get_logger, set_global_logger

        set_global_logger(get_logger(OutputMode.VERBOSE))
        ```

    Use in library code:
        ```python
        from mydaydeploy.logging import get_global_logger

        logger = get_global_logger()
        logger.step(1, 3, "Requesting an access token...")
        logger.verbose("HTTP", "GET https://api.example.com/apps")
        ```

Note:
    The default global logger is silent, so library functions won't print
    anything unless explicitly configured. The CLI configures the global
    logger before running a deployment.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from mydaydeploy.config.loader import OutputMode


class Logger(Protocol):
    """Protocol for logger implementations."""

    def step(self, step: int, total: int, message: str) -> None:
        """Print a step indicator.

        Args:
            step: Current step number (1-based).
            total: Total number of steps.
            message: Step description.
        """
        ...

    def info(self, message: str) -> None:
        """Print an outcome message."""
        ...

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message.

        Args:
            prefix: Message prefix (e.g., "AUTH", "HTTP").
            message: Log message.
        """
        ...


class DefaultLogger:
    """Default logger implementation that prints to stdout."""

    def __init__(self, verbose: bool = False) -> None:
        self._verbose = verbose

    def step(self, step: int, total: int, message: str) -> None:
        print(f"[{step}/{total}] {message}")

    def info(self, message: str) -> None:
        print(message)

    def verbose(self, prefix: str, message: str) -> None:
        """Print a verbose log message (only when verbose mode is active)."""
        if self._verbose:
            print(f"[{prefix}] {message}")


class SilentLogger:
    """Logger that suppresses all output.

    Used for `--silent` and as the library default.
    """

    def step(self, step: int, total: int, message: str) -> None:
        pass

    def info(self, message: str) -> None:
        pass

    def verbose(self, prefix: str, message: str) -> None:
        pass


# Global logger instance (defaults to silent)
_global_logger: Logger = SilentLogger()


def get_logger(mode: OutputMode | None = None) -> Logger:
    """Get a logger instance for an output mode.

    Args:
        mode: Requested output mode. None behaves like normal mode.

    Returns:
        A SilentLogger for silent mode, otherwise a DefaultLogger that
            prints verbose messages only in verbose mode.
    """
    from mydaydeploy.config.loader import OutputMode

    if mode is OutputMode.SILENT:
        return SilentLogger()
    return DefaultLogger(verbose=mode is OutputMode.VERBOSE)


def get_global_logger() -> Logger:
    """Get the global logger instance."""
    return _global_logger


def set_global_logger(logger: Logger) -> None:
    """Set the global logger instance.

    Note:
        This affects all library functions called without an explicit
        logger. For better isolation, pass logger instances directly.
    """
    global _global_logger
    _global_logger = logger
