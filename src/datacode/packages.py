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

"""Resolve the package a generated module will live in."""

from __future__ import annotations

import keyword
from pathlib import Path
from typing import Protocol

from .errors import PackageResolutionError

__all__ = ["ImportPackageResolver", "PackageResolver", "validate_package_name"]


class PackageResolver(Protocol):
    """Determines the dotted package name for an output directory."""

    def resolve_package_name(self, directory: Path) -> str: ...


class ImportPackageResolver:
    """Resolve names the way the import system sees regular packages.

    Starting at ``directory``, walk up while each directory contains an
    ``__init__.py`` and join the directory names, outermost first.
    """

    marker: str = "__init__.py"

    def resolve_package_name(self, directory: Path) -> str:
        current = directory.resolve()
        if not (current / self.marker).is_file():
            msg = f"No Python package in {str(directory)!r} (missing {self.marker})."
            raise PackageResolutionError(msg)

        segments: list[str] = []
        while (current / self.marker).is_file():
            segments.append(current.name)
            if current.parent == current:
                break
            current = current.parent

        return validate_package_name(".".join(reversed(segments)))


def validate_package_name(name: str) -> str:
    """Return ``name`` if every dotted segment is a usable identifier."""

    segments = name.split(".")
    for segment in segments:
        if not segment.isidentifier() or keyword.iskeyword(segment):
            msg = f"Invalid package name {name!r}."
            raise PackageResolutionError(msg)
    return name
