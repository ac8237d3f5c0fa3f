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

"""Persist generated modules without clobbering or half-writing files."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .errors import OutputExistsError

__all__ = ["ensure_writable", "write_output"]


def ensure_writable(path: Path, *, force: bool) -> None:
    """Raise :class:`OutputExistsError` if ``path`` exists and ``force`` is unset."""

    if not force and path.exists():
        raise OutputExistsError(str(path))


def write_output(path: Path, text: str, *, force: bool = False) -> None:
    """Write ``text`` to ``path`` through a temporary file and atomic rename.

    A failure before the rename removes the temporary file and leaves any
    existing ``path`` untouched.
    """

    ensure_writable(path, force=force)
    directory = path.parent
    with tempfile.NamedTemporaryFile(
        "w",
        dir=directory,
        prefix=".datacode_tmp_",
        suffix=".py",
        delete=False,
        encoding="utf-8",
        newline="\n",
    ) as handle:
        temp_path = Path(handle.name)
        try:
            _ = handle.write(text)
        except BaseException:
            handle.close()
            temp_path.unlink(missing_ok=True)
            raise
    try:
        os.chmod(temp_path, 0o644)
        _ = temp_path.replace(path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
