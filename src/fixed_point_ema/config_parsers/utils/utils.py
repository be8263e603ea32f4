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

import logging
import os
from pathlib import Path

from fixed_point_ema.exceptions import ConfigError

logger = logging.getLogger(__name__)

SAMPLE_SUFFIXES = (".csv", ".parquet")


def validate_path(path: Path, must_exist: bool, expect_dir: bool, create_if_missing: bool = False, label: str = "") -> Path:
    """Validate and normalize a filesystem path.

    Args:
        path: The input path (may be relative or string-like).
        must_exist: Whether the path must already exist.
        expect_dir: True if we expect a directory, False if a file.
        create_if_missing: Whether to create the directory if it doesn't exist (log dirs).
        label: Friendly name for clearer error messages.

    Returns:
        The resolved absolute Path object.
    """
    p = Path(path).expanduser().resolve(strict=False)
    label = label or str(p)

    if must_exist and not p.exists():
        raise ConfigError(f"required path '{label}' does not exist: {p}")

    if create_if_missing and expect_dir and not p.exists():
        try:
            p.mkdir(parents=True, exist_ok=True)
            logger.info("created missing directory", extra={"path": p, "label": label})
        except OSError as e:
            raise ConfigError(f"failed to create directory '{label}' at {p}: {e}") from e

    if p.exists():
        if expect_dir and not p.is_dir():
            raise ConfigError(f"expected '{label}' to be a directory, but got a file: {p}")
        if not expect_dir and not p.is_file():
            raise ConfigError(f"expected '{label}' to be a file, but got a directory: {p}")

        if expect_dir:
            if not os.access(p, os.R_OK | os.X_OK):
                raise ConfigError(f"directory '{p}' is not readable/executable")
        else:
            if not os.access(p, os.R_OK):
                raise ConfigError(f"file '{p}' is not readable")

    return p


def validate_table_suffix(path: Path, label: str = "") -> Path:
    """Require a .csv or .parquet suffix, the two table formats we read and write."""
    p = Path(path)
    if p.suffix.lower() not in SAMPLE_SUFFIXES:
        raise ConfigError(
            f"'{label or p}' must end in one of {list(SAMPLE_SUFFIXES)}, got '{p.suffix}'"
        )
    return p
