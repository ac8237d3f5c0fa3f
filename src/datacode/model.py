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

"""Value types shared by the generator pipeline."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .payload import DEFAULT_COMPRESSION, Encoding, validate_level

__all__ = ["EmbeddedUnit", "GenerationRequest", "InputSpec"]


@dataclass(frozen=True, slots=True)
class InputSpec:
    """One requested embed.

    ``prefix``, ``suffix``, ``compress`` and ``compress_level`` are shared by
    every input of a run; they are copied here so each spec is self-contained.
    """

    path: str
    prefix: str = ""
    suffix: str = ""
    compress: bool = True
    compress_level: int = DEFAULT_COMPRESSION


@dataclass(frozen=True, slots=True)
class EmbeddedUnit:
    """A derived function name paired with its encoded payload."""

    identifier: str
    encoded_payload: str
    path: str = ""


@dataclass(frozen=True, slots=True)
class GenerationRequest:
    """Whole-run configuration passed through the generator."""

    package_name: str
    inputs: tuple[InputSpec, ...]
    compress: bool = True
    compress_level: int = DEFAULT_COMPRESSION
    encoding: Encoding = Encoding.BASE64
    format_output: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "inputs", tuple(self.inputs))
        object.__setattr__(self, "encoding", Encoding(self.encoding))
        _ = validate_level(self.compress_level)
        for spec in self.inputs:
            if spec.compress != self.compress:
                msg = (
                    f"Input {spec.path!r} disagrees with the run-wide compress setting."
                )
                raise ValueError(msg)

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[str],
        *,
        package_name: str,
        prefix: str = "",
        suffix: str = "",
        compress: bool = True,
        compress_level: int = DEFAULT_COMPRESSION,
        encoding: Encoding | str = Encoding.BASE64,
        format_output: bool = True,
    ) -> GenerationRequest:
        """Build a request whose inputs share the run-wide settings."""

        inputs = tuple(
            InputSpec(
                path=str(path),
                prefix=prefix,
                suffix=suffix,
                compress=compress,
                compress_level=compress_level,
            )
            for path in paths
        )
        return cls(
            package_name=package_name,
            inputs=inputs,
            compress=compress,
            compress_level=compress_level,
            encoding=Encoding(encoding),
            format_output=format_output,
        )
