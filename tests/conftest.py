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

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from pathlib import Path
from types import ModuleType

import pytest

type WriteFile = Callable[[str, bytes], Path]
type LoadModule = Callable[[str], ModuleType]


class RecordingFormatter:
    """Formatter double that records its input and returns it unchanged."""

    def __init__(self, *, fail: bool = False) -> None:
        self.calls: list[str] = []
        self.fail = fail

    def format(self, source: str) -> str:
        from datacode.errors import FormatError

        self.calls.append(source)
        if self.fail:
            raise FormatError("formatter rejected input", source=source)
        return source


@pytest.fixture
def write_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> WriteFile:
    """Write files relative to ``tmp_path``, which becomes the working directory."""

    monkeypatch.chdir(tmp_path)

    def factory(relative: str, data: bytes) -> Path:
        path = tmp_path / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        _ = path.write_bytes(data)
        return path

    return factory


@pytest.fixture
def load_module() -> LoadModule:
    """Execute generated source as a throwaway module."""

    def factory(source: str) -> ModuleType:
        module = ModuleType("datacode_generated")
        exec(compile(source, "<generated>", "exec"), module.__dict__)  # noqa: S102
        return module

    return factory


@pytest.fixture
def recording_formatter() -> RecordingFormatter:
    return RecordingFormatter()


@pytest.fixture
def reset_logging_state() -> Iterator[None]:
    root = logging.getLogger()
    original_handlers = list(root.handlers)
    original_level = root.level
    try:
        yield
    finally:
        for handler in root.handlers:
            if handler not in original_handlers:
                handler.close()
        root.handlers = original_handlers
        root.setLevel(original_level)
