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

"""Formatters applied to generated source before it is returned."""

from __future__ import annotations

import subprocess  # nosec B404
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from .errors import FormatError

__all__ = [
    "DEFAULT_FORMAT_COMMAND",
    "FormatFailurePolicy",
    "Formatter",
    "RuffFormatter",
]

DEFAULT_FORMAT_COMMAND: tuple[str, ...] = (
    sys.executable,
    "-m",
    "ruff",
    "format",
    "--quiet",
    "--stdin-filename",
    "{filename}",
    "-",
)


class FormatFailurePolicy(StrEnum):
    """What a :class:`~datacode.errors.FormatError` carries on failure."""

    INCLUDE_SOURCE = "include-source"
    ERROR_ONLY = "error-only"


class Formatter(Protocol):
    """Canonicalizes generated source text."""

    def format(self, source: str) -> str:
        """Return formatted ``source`` or raise :class:`FormatError`."""
        ...


@dataclass(frozen=True, slots=True)
class RuffFormatter:
    """Format source by piping it through ``ruff format``.

    ``command`` entries may contain ``{filename}``, replaced with
    ``filename`` so ruff picks up project settings for the output path.
    """

    filename: str = "data.py"
    command: Sequence[str] = DEFAULT_FORMAT_COMMAND
    timeout: int = 60
    policy: FormatFailurePolicy = FormatFailurePolicy.INCLUDE_SOURCE

    def format(self, source: str) -> str:
        argv = [part.replace("{filename}", self.filename) for part in self.command]
        cmd_str = " ".join(argv)
        try:
            # Bandit false positive: formatter command is an explicit argv list.
            result = subprocess.run(  # nosec B603
                argv,
                input=source,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as error:
            raise self._error(
                f"Formatter not found: {error.filename}\nAttempted: {cmd_str}", source
            ) from error
        except subprocess.TimeoutExpired as error:
            raise self._error(
                f"Formatter timed out after {self.timeout}s\nCommand: {cmd_str}",
                source,
            ) from error

        if result.returncode != 0:
            detail = result.stderr.strip() or result.stdout.strip()
            raise self._error(
                f"Formatter exited with status {result.returncode}: {detail}", source
            )
        return result.stdout

    def _error(self, message: str, source: str) -> FormatError:
        kept = source if self.policy is FormatFailurePolicy.INCLUDE_SOURCE else None
        return FormatError(message, source=kept)
