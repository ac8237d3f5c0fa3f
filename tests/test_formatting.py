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

"""Tests for :mod:`datacode.formatting`."""

from __future__ import annotations

import subprocess
import sys
from unittest import mock

import pytest

from datacode.errors import FormatError
from datacode.formatting import (
    DEFAULT_FORMAT_COMMAND,
    FormatFailurePolicy,
    RuffFormatter,
)

UNFORMATTED = "def f( ):\n  return   b'x'\n"


def test_default_command_runs_ruff_from_current_interpreter() -> None:
    assert DEFAULT_FORMAT_COMMAND[:4] == (sys.executable, "-m", "ruff", "format")
    assert "{filename}" in DEFAULT_FORMAT_COMMAND


def test_ruff_formats_source() -> None:
    pytest.importorskip("ruff")

    formatted = RuffFormatter().format(UNFORMATTED)

    assert formatted == 'def f():\n    return b"x"\n'


def test_filename_placeholder_is_substituted() -> None:
    completed = subprocess.CompletedProcess(
        args=[], returncode=0, stdout="formatted\n", stderr=""
    )
    with mock.patch(
        "datacode.formatting.subprocess.run", return_value=completed
    ) as run:
        result = RuffFormatter(
            filename="pkg/data.py", command=("fmt", "--name", "{filename}")
        ).format("source")

    assert result == "formatted\n"
    argv = run.call_args.args[0]
    assert argv == ["fmt", "--name", "pkg/data.py"]
    assert run.call_args.kwargs["input"] == "source"


def test_non_zero_exit_raises_with_source() -> None:
    formatter = RuffFormatter(
        command=(sys.executable, "-c", "import sys; sys.exit('bad syntax')")
    )

    with pytest.raises(FormatError, match="status 1: bad syntax") as excinfo:
        _ = formatter.format(UNFORMATTED)

    assert excinfo.value.source == UNFORMATTED


def test_error_only_policy_drops_source() -> None:
    formatter = RuffFormatter(
        command=(sys.executable, "-c", "import sys; sys.exit(3)"),
        policy=FormatFailurePolicy.ERROR_ONLY,
    )

    with pytest.raises(FormatError) as excinfo:
        _ = formatter.format(UNFORMATTED)

    assert excinfo.value.source is None


def test_missing_executable_raises_format_error() -> None:
    formatter = RuffFormatter(command=("datacode-no-such-formatter", "-"))

    with pytest.raises(FormatError, match="Formatter not found"):
        _ = formatter.format(UNFORMATTED)


def test_timeout_raises_format_error() -> None:
    with mock.patch(
        "datacode.formatting.subprocess.run",
        side_effect=subprocess.TimeoutExpired(cmd="ruff", timeout=1),
    ):
        with pytest.raises(FormatError, match="timed out after 1s"):
            _ = RuffFormatter(timeout=1).format(UNFORMATTED)
