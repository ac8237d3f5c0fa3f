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

"""Embed files in generated Python modules as functions returning their bytes.

Usage:
    from datacode import GenerationRequest, generate

    request = GenerationRequest.from_paths(
        ["assets/logo.png"],
        package_name="myapp.assets",
        prefix="assets/",
        suffix=".png",
    )
    source = generate(request)
"""

from __future__ import annotations

from .document import (
    DataFunction,
    Document,
    ModuleHeader,
    build_document,
    render_document,
)
from .errors import (
    CompressionError,
    DatacodeError,
    DuplicateIdentifierError,
    FormatError,
    InvalidIdentifierError,
    OutputExistsError,
    PackageResolutionError,
    PayloadDecodeError,
    PayloadError,
)
from .formatting import FormatFailurePolicy, Formatter, RuffFormatter
from .generator import generate
from .identifiers import derive_identifier
from .model import EmbeddedUnit, GenerationRequest, InputSpec
from .output import write_output
from .packages import ImportPackageResolver, PackageResolver
from .payload import Encoding, decode, encode

__all__ = [
    "CompressionError",
    "DataFunction",
    "DatacodeError",
    "Document",
    "DuplicateIdentifierError",
    "EmbeddedUnit",
    "Encoding",
    "FormatError",
    "FormatFailurePolicy",
    "Formatter",
    "GenerationRequest",
    "ImportPackageResolver",
    "InputSpec",
    "InvalidIdentifierError",
    "ModuleHeader",
    "OutputExistsError",
    "PackageResolutionError",
    "PackageResolver",
    "PayloadDecodeError",
    "PayloadError",
    "RuffFormatter",
    "build_document",
    "decode",
    "derive_identifier",
    "encode",
    "generate",
    "render_document",
    "write_output",
]
