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

"""Tests for path and table-suffix validation."""

from __future__ import annotations

from pathlib import Path

import pytest

from fixed_point_ema.config_parsers.utils.utils import validate_path, validate_table_suffix
from fixed_point_ema.exceptions import ConfigError


def test_validate_path_resolves_existing_file(tmp_path: Path):
    target = tmp_path / "samples.csv"
    target.write_text("value\n1\n", encoding="utf-8")

    resolved = validate_path(target, must_exist=True, expect_dir=False, label="input")

    assert resolved == target.resolve()
    assert resolved.is_absolute()


def test_validate_path_requires_existing_path(tmp_path: Path):
    with pytest.raises(ConfigError) as excinfo:
        validate_path(tmp_path / "absent.yaml", must_exist=True, expect_dir=False, label="config")
    assert "required path 'config' does not exist" in str(excinfo.value)


def test_validate_path_rejects_directory_where_file_expected(tmp_path: Path):
    with pytest.raises(ConfigError) as excinfo:
        validate_path(tmp_path, must_exist=True, expect_dir=False, label="input")
    assert "to be a file" in str(excinfo.value)


def test_validate_path_creates_missing_directory(tmp_path: Path):
    target = tmp_path / "a" / "b"

    resolved = validate_path(
        target, must_exist=False, expect_dir=True, create_if_missing=True, label="log_dir"
    )

    assert resolved.is_dir()


def test_validate_path_rejects_file_where_directory_expected(tmp_path: Path):
    target = tmp_path / "file.log"
    target.write_text("", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        validate_path(target, must_exist=False, expect_dir=True, create_if_missing=True, label="log_dir")
    assert "to be a directory" in str(excinfo.value)


def test_validate_path_reports_directory_creation_failure(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        validate_path(
            blocker / "logs", must_exist=False, expect_dir=True, create_if_missing=True, label="log_dir"
        )
    assert "failed to create directory 'log_dir'" in str(excinfo.value)


def test_validate_path_leaves_missing_file_alone_when_optional(tmp_path: Path):
    target = tmp_path / "later.csv"
    assert validate_path(target, must_exist=False, expect_dir=False) == target.resolve()
    assert not target.exists()


@pytest.mark.parametrize("name", ["a.csv", "a.CSV", "a.parquet"])
def test_validate_table_suffix_accepts_supported_formats(name):
    assert validate_table_suffix(Path(name)) == Path(name)


def test_validate_table_suffix_rejects_other_formats():
    with pytest.raises(ConfigError) as excinfo:
        validate_table_suffix(Path("out.xlsx"), label="output")
    assert "'output' must end in one of" in str(excinfo.value)
