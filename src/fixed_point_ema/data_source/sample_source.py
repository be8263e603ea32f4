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

"""Load integer sample streams from CSV or parquet tables."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from fixed_point_ema.data_source.validation import SampleValidationStats, SampleValidator
from fixed_point_ema.exceptions import DataSourceError

__all__ = ["LoadedSamples", "load_samples", "read_table", "write_table"]

logger = logging.getLogger(__name__)


@dataclass
class LoadedSamples:
    """Accepted samples alongside the row positions they came from."""

    values: np.ndarray
    row_index: np.ndarray
    stats: SampleValidationStats

    def __len__(self) -> int:
        return int(self.values.shape[0])


def read_table(path: Path) -> pd.DataFrame:
    path = Path(path)
    if not path.exists():
        raise DataSourceError(f"sample file not found: {path}")

    suffix = path.suffix.lower()
    try:
        if suffix == ".csv":
            return pd.read_csv(path)
        if suffix == ".parquet":
            return pd.read_parquet(path, engine="pyarrow")
    except (OSError, ValueError) as exc:
        raise DataSourceError(f"failed to read sample file {path}: {exc}") from exc

    raise DataSourceError(f"unsupported sample file type '{path.suffix}' for {path}")


def write_table(frame: pd.DataFrame, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()
    if suffix == ".csv":
        frame.to_csv(path, index=False)
    elif suffix == ".parquet":
        frame.to_parquet(path, engine="pyarrow", index=False)
    else:
        raise DataSourceError(f"unsupported output file type '{path.suffix}' for {path}")
    return path


def load_samples(path: Path, column: str = "value") -> LoadedSamples:
    """Read ``column`` from a table and keep the rows holding integer samples."""
    frame = read_table(path)
    if column not in frame.columns:
        raise DataSourceError(
            f"column '{column}' not found in {path}; available columns: {list(frame.columns)}"
        )

    validator = SampleValidator(source=str(path))
    values: list[int] = []
    rows: list[int] = []
    for position, raw in enumerate(frame[column].tolist()):
        sample = validator.validate(raw)
        if sample is None:
            continue
        values.append(sample)
        rows.append(position)

    stats = validator.stats
    if stats.skipped_samples:
        logger.warning(
            "skipped invalid samples",
            extra={"path": str(path), "column": column, "validation": stats.as_dict()},
        )
    logger.info(
        "samples loaded",
        extra={"path": str(path), "column": column, "accepted": stats.accepted_samples},
    )

    return LoadedSamples(
        values=np.asarray(values, dtype=np.int64),
        row_index=np.asarray(rows, dtype=np.int64),
        stats=stats,
    )
