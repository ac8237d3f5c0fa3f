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

"""Intermediate representation and renderer for generated modules.

The generator never formats strings directly: it builds a :class:`Document`
from embedded units and :func:`render_document` serializes it. Which imports
a module needs and how each function body decodes its payload are decided
here, from the encoding and compression settings.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .model import EmbeddedUnit
from .payload import Encoding

__all__ = [
    "DataFunction",
    "Document",
    "ModuleHeader",
    "build_document",
    "render_document",
]

GENERATED_MARKER = "Code generated by datacode. DO NOT EDIT."

# Imported under private aliases so embedded function names cannot shadow them.
_IMPORT_ALIASES = {"base64": "_base64", "zlib": "_zlib"}


@dataclass(frozen=True, slots=True)
class ModuleHeader:
    """Package declaration, imports and export list of a generated module."""

    package: str
    imports: tuple[str, ...] = ()
    exports: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DataFunction:
    """A zero-argument function returning one embedded file."""

    name: str
    literal: str
    encoding: Encoding
    compressed: bool

    def body(self) -> tuple[str, ...]:
        """Statements of the function body, without indentation."""

        if self.encoding is Encoding.BASE64:
            lines = [f'data = "{self.literal}"']
            decoded = "_base64.b64decode(data, validate=True)"
        else:
            lines = [f'data = b"{self.literal}"']
            decoded = "data"
        if self.compressed:
            lines.append(f"return _zlib.decompress({decoded}, -_zlib.MAX_WBITS)")
        else:
            lines.append(f"return {decoded}")
        return tuple(lines)


@dataclass(frozen=True, slots=True)
class Document:
    header: ModuleHeader
    functions: tuple[DataFunction, ...]


def build_document(
    package: str,
    units: Iterable[EmbeddedUnit],
    *,
    encoding: Encoding,
    compressed: bool,
) -> Document:
    """Compose the document for ``units``, preserving their order."""

    functions = tuple(
        DataFunction(
            name=unit.identifier,
            literal=unit.encoded_payload,
            encoding=encoding,
            compressed=compressed,
        )
        for unit in units
    )
    imports: list[str] = []
    if encoding is Encoding.BASE64:
        imports.append("base64")
    if compressed:
        imports.append("zlib")
    header = ModuleHeader(
        package=package,
        imports=tuple(imports),
        exports=tuple(function.name for function in functions),
    )
    return Document(header=header, functions=functions)


def render_document(document: Document) -> str:
    """Serialize ``document`` to Python source text."""

    header = document.header
    lines = [
        f'"""Embedded file data for the ``{header.package}`` package.',
        "",
        GENERATED_MARKER,
        '"""',
        "",
    ]
    if header.imports:
        lines.extend(
            f"import {module} as {_IMPORT_ALIASES[module]}" for module in header.imports
        )
        lines.append("")
    if header.exports:
        lines.append("__all__ = [")
        lines.extend(f'    "{name}",' for name in header.exports)
        lines.append("]")
    else:
        lines.append("__all__: list[str] = []")

    for function in document.functions:
        lines.extend(["", "", f"def {function.name}() -> bytes:"])
        lines.extend(f"    {statement}" for statement in function.body())

    return "\n".join(lines) + "\n"
