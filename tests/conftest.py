# Copyright 2025 Edward Clewer
#
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

"""Shared pytest fixtures for the fixed-point EMA test suite."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Any

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest


@pytest.fixture
def config_factory(tmp_path: Path) -> Callable[[str], Path]:
    """Return a helper that writes YAML text to a temporary config file."""

    def _write(yaml_text: str, name: str = "filters.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml_text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def samples_csv_factory(tmp_path: Path) -> Callable[..., Path]:
    """Return a helper that writes a sample table as CSV, with a leading row counter."""

    def _write(values: Iterable[Any], column: str = "value", name: str = "samples.csv") -> Path:
        path = tmp_path / name
        rows = list(values)
        # read_csv drops blank lines, so a lone empty cell needs a second column
        pd.DataFrame({"t": range(len(rows)), column: rows}).to_csv(path, index=False)
        return path

    return _write


@pytest.fixture
def restore_root_logging():
    """Snapshot root logger handlers/level and restore them after the test."""

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
