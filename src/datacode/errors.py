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

"""Base exception hierarchy for :mod:`datacode`."""

from __future__ import annotations

from collections.abc import Sequence


class DatacodeError(Exception):
    """Base class for all datacode exceptions.

    Callers can catch every generation failure with a single handler while
    standard Python exceptions, notably :class:`OSError` raised while reading
    inputs or writing the output, propagate unchanged.

    Note:
        Subclasses also inherit from the matching builtin exception type
        (``ValueError``, ``RuntimeError``, ...) so existing handlers keep
        working.
    """


class InvalidIdentifierError(DatacodeError, ValueError):
    """Raised when a path does not map to a usable Python function name.

    The derived name can be empty (``"___"``), start with a digit
    (``"1.txt"``) or collide with a reserved keyword (``"class.txt"``).
    """

    def __init__(self, path: str, identifier: str, reason: str) -> None:
        self.path = path
        self.identifier = identifier
        self.reason = reason
        super().__init__(
            f"Cannot derive a function name from {path!r}: "
            f"{identifier!r} {reason}."
        )


class DuplicateIdentifierError(DatacodeError, ValueError):
    """Raised when two inputs derive the same function name."""

    def __init__(self, identifier: str, paths: Sequence[str]) -> None:
        self.identifier = identifier
        self.paths = tuple(paths)
        joined = ", ".join(repr(path) for path in self.paths)
        super().__init__(f"Duplicate identifier {identifier!r} (from {joined}).")


class PayloadError(DatacodeError, ValueError):
    """Base class for payload encoding and decoding failures."""


class CompressionError(PayloadError):
    """Raised when file data cannot be compressed at the requested level."""


class PayloadDecodeError(PayloadError):
    """Raised when an embedded literal cannot be turned back into bytes."""


class FormatError(DatacodeError, RuntimeError):
    """Raised when the formatter rejects the generated source.

    ``source`` holds the unformatted text when the failure policy keeps it,
    so callers can inspect what was produced.
    """

    def __init__(self, message: str, *, source: str | None = None) -> None:
        self.source = source
        super().__init__(message)


class PackageResolutionError(DatacodeError, LookupError):
    """Raised when no package name can be determined for a directory."""


class OutputExistsError(DatacodeError, FileExistsError):
    """Raised when the output file exists and overwriting was not requested."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"Can't output, {path!r} exists (use --force to override).")


__all__ = [
    "CompressionError",
    "DatacodeError",
    "DuplicateIdentifierError",
    "FormatError",
    "InvalidIdentifierError",
    "OutputExistsError",
    "PackageResolutionError",
    "PayloadDecodeError",
    "PayloadError",
]
