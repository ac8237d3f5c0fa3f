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

"""Derive Python function names from embedded file paths.

A path is trimmed of the run-wide prefix and suffix, every character that is
not a digit, a letter or a non-ASCII code point becomes ``_``, the result is
lowercased and surrounding underscores are stripped. Names are NFKC-normalized
the same way the Python parser folds identifiers, so two paths that only
differ by compatibility characters (U+FB01 versus ``fi``) collide::

    >>> derive_identifier("assets/logo.png", prefix="assets/", suffix=".png")
    'logo'
    >>> derive_identifier("static/css/site-v2.css")
    'static_css_site_v2_css'
"""

from __future__ import annotations

import keyword
import unicodedata
from collections.abc import Iterable

from .errors import DuplicateIdentifierError, InvalidIdentifierError

__all__ = ["check_unique", "derive_identifier", "sanitize"]


def _replace(char: str) -> str:
    if char.isdecimal() or char.isalpha() or ord(char) > 127:
        return char
    return "_"


def sanitize(path: str, prefix: str = "", suffix: str = "") -> str:
    """Apply the trimming and character mapping without validating the result."""

    name = path.removeprefix(prefix).removesuffix(suffix)
    name = unicodedata.normalize("NFKC", name)
    name = "".join(_replace(char) for char in name)
    return unicodedata.normalize("NFKC", name.lower()).strip("_")


def derive_identifier(path: str, prefix: str = "", suffix: str = "") -> str:
    """Return the function name embedded code uses for ``path``.

    Raises:
        InvalidIdentifierError: The sanitized name is empty, starts with a
            digit, is a reserved keyword or is otherwise not a valid Python
            identifier.
    """

    name = sanitize(path, prefix, suffix)
    if not name:
        raise InvalidIdentifierError(path, name, "is empty")
    if name[0].isdecimal():
        raise InvalidIdentifierError(path, name, "starts with a digit")
    if keyword.iskeyword(name):
        raise InvalidIdentifierError(path, name, "is a reserved keyword")
    if not name.isidentifier():
        raise InvalidIdentifierError(path, name, "is not a valid identifier")
    return name


def check_unique(pairs: Iterable[tuple[str, str]]) -> None:
    """Fail on the first identifier derived by two different inputs.

    ``pairs`` yields ``(path, identifier)`` tuples in input order.
    """

    seen: dict[str, str] = {}
    for path, identifier in pairs:
        previous = seen.get(identifier)
        if previous is not None:
            raise DuplicateIdentifierError(identifier, (previous, path))
        seen[identifier] = path
