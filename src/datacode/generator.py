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

"""Turn a :class:`GenerationRequest` into the source of a data module.

The pipeline is a single linear pass::

    derive identifiers -> check uniqueness -> read + encode -> render -> format

Identifiers are derived and checked for every input before any file is
read, so a collision never wastes encoding work. Nothing is written to
disk; callers persist the returned text with :mod:`datacode.output`.
"""

from __future__ import annotations

from .document import build_document, render_document
from .formatting import Formatter, RuffFormatter
from .identifiers import check_unique, derive_identifier
from .logging import StructuredLogger, get_logger
from .model import EmbeddedUnit, GenerationRequest, InputSpec
from .packages import validate_package_name
from .payload import read_payload

__all__ = ["embed", "generate"]


def embed(spec: InputSpec, identifier: str, request: GenerationRequest) -> EmbeddedUnit:
    """Read and encode one input into an :class:`EmbeddedUnit`."""

    payload = read_payload(
        spec.path,
        compress=spec.compress,
        level=spec.compress_level,
        encoding=request.encoding,
    )
    return EmbeddedUnit(identifier=identifier, encoded_payload=payload, path=spec.path)


def generate(
    request: GenerationRequest,
    *,
    formatter: Formatter | None = None,
    logger: StructuredLogger | None = None,
) -> str:
    """Return the generated module text for ``request``.

    Raises:
        ValueError: ``request`` has no inputs.
        InvalidIdentifierError: A path does not map to a valid name.
        DuplicateIdentifierError: Two paths map to the same name.
        CompressionError: An input could not be compressed.
        PackageResolutionError: The package name is not a dotted identifier.
        FormatError: Formatting was enabled and the formatter failed.
        OSError: An input could not be read.
    """

    log = get_logger(__name__, logger_override=logger).bind(
        package=request.package_name
    )
    if not request.inputs:
        raise ValueError("At least one input path is required.")
    _ = validate_package_name(request.package_name)

    identifiers = [
        derive_identifier(spec.path, spec.prefix, spec.suffix)
        for spec in request.inputs
    ]
    check_unique(
        (spec.path, identifier)
        for spec, identifier in zip(request.inputs, identifiers, strict=True)
    )

    units: list[EmbeddedUnit] = []
    for spec, identifier in zip(request.inputs, identifiers, strict=True):
        unit = embed(spec, identifier, request)
        log.debug(
            "Embedded input file.",
            event="datacode.generate.embedded",
            context={
                "path": spec.path,
                "identifier": identifier,
                "encoded_size": len(unit.encoded_payload),
            },
        )
        units.append(unit)

    document = build_document(
        request.package_name,
        units,
        encoding=request.encoding,
        compressed=request.compress,
    )
    source = render_document(document)

    if request.format_output:
        source = (formatter or RuffFormatter()).format(source)

    log.info(
        "Generated data module.",
        event="datacode.generate.complete",
        context={
            "functions": len(units),
            "encoding": str(request.encoding),
            "compressed": request.compress,
            "formatted": request.format_output,
        },
    )
    return source
