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

from __future__ import annotations

import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np
import pandas as pd

from fixed_point_ema.bank.filter_bank import FilterBank
from fixed_point_ema.config_parsers.filters.config_dataclass import FilterBankConfigData
from fixed_point_ema.config_parsers.filters.config_parser import FilterBankConfigParser
from fixed_point_ema.config_parsers.utils.utils import validate_path, validate_table_suffix
from fixed_point_ema.data_source.sample_source import load_samples, write_table
from fixed_point_ema.exceptions import ConfigError
from fixed_point_ema.logging_utils import (
    configure_logging,
    generate_run_id,
    get_git_hash,
    log_run_metadata,
    run_context,
)

logger = logging.getLogger(__name__)

__all__ = [
    "load_config",
    "run_filter",
]


def load_config(config_path: Path | str) -> FilterBankConfigData:
    """Parse a filter bank configuration file."""
    parser = FilterBankConfigParser(Path(config_path))
    return parser.load_filter_config()


def _summarize_config(config: FilterBankConfigData) -> List[Dict[str, object]]:
    summary: List[Dict[str, object]] = []
    for cfg in config.filters:
        params = cfg.to_kwargs()
        params["smoothing_exponent"] = params["smoothing_exponent"].name
        summary.append({"name": cfg.name, "enabled": cfg.enabled, "params": params})
    return summary


def _hash_file(path: Path, chunk_size: int = 1024 * 1024) -> str:
    hasher = hashlib.sha256()
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
    return hasher.hexdigest()


def _default_output_path(input_path: Path) -> Path:
    return input_path.with_name(f"{input_path.stem}_filtered.csv")


def _write_manifest(output_path: Path, manifest: Dict[str, object]) -> Path:
    manifest_path = output_path.with_name(f"{output_path.stem}_manifest.json")
    manifest_path.write_text(json.dumps(manifest, indent=2, sort_keys=True), encoding="utf-8")
    return manifest_path


def run_filter(
    config_path: Path | str,
    input_path: Path | str,
    *,
    column: str = "value",
    output_path: Path | str | None = None,
    run_id: Optional[str] = None,
    log_level: str | int = "INFO",
    log_dir: Path | str | None = None,
) -> Dict[str, object]:
    """
    Run every enabled filter of a bank over one column of a sample table.

    The output table keeps the source row number and the input column and adds
    one integer column per filter. A JSON manifest describing the run is
    written beside it.
    """
    run_id = run_id or generate_run_id()
    if log_dir is not None:
        log_dir = validate_path(
            log_dir, must_exist=False, expect_dir=True, create_if_missing=True, label="log_dir"
        )
    configure_logging(run_id=run_id, log_dir=log_dir, level=log_level)

    config_path = validate_path(config_path, must_exist=True, expect_dir=False, label="config")
    input_path = validate_path(input_path, must_exist=True, expect_dir=False, label="input")
    validate_table_suffix(input_path, label="input")
    if output_path is None:
        output_path = _default_output_path(input_path)
    output_path = validate_table_suffix(Path(output_path).expanduser().resolve(), label="output")
    if output_path == input_path:
        raise ConfigError(f"output path must differ from input path: {output_path}")

    with run_context(run_id=run_id, source=input_path.name):
        log_run_metadata(
            logger,
            filter_config_path=config_path,
            input_path=input_path,
            git_hash=get_git_hash(),
        )

        config = load_config(config_path)
        bank = FilterBank.from_config_data(config)
        if len(bank) == 0:
            raise ConfigError(f"no enabled filters in {config_path}")

        samples = load_samples(input_path, column=column)

        outputs: Dict[str, np.ndarray] = {
            name: np.empty(len(samples), dtype=np.int64) for name in bank.names
        }
        for position, sample in enumerate(samples.values.tolist()):
            for name, value in bank.update(sample).items():
                outputs[name][position] = value

        frame = pd.DataFrame({"row": samples.row_index, column: samples.values})
        for name in bank.names:
            if name in frame.columns:
                raise ConfigError(f"filter name '{name}' collides with an output column")
            frame[name] = outputs[name]

        write_table(frame, output_path)

        manifest: Dict[str, object] = {
            "run_id": run_id,
            "created_at": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "config": {
                "path": str(config_path),
                "sha256": _hash_file(config_path),
                "schema_version": config.schema_version,
                "filters": _summarize_config(config),
            },
            "input": {
                "path": str(input_path),
                "sha256": _hash_file(input_path),
                "column": column,
                "validation": samples.stats.as_dict(),
            },
            "output": {
                "path": str(output_path),
                "rows": len(samples),
            },
            "final_state": {
                "current": bank.current(),
                "scaled": bank.scaled(),
            },
        }
        manifest_path = _write_manifest(output_path, manifest)

        logger.info(
            "filter run complete",
            extra={
                "output_path": str(output_path),
                "rows": len(samples),
                "filters": bank.names,
            },
        )

    return {
        "run_id": run_id,
        "output_path": output_path,
        "manifest_path": manifest_path,
        "rows": len(samples),
        "validation": samples.stats.as_dict(),
        "filters": bank.names,
    }
