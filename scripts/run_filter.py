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

import argparse
import logging
import sys
from pathlib import Path

from fixed_point_ema.workflow import run_filter

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run a bank of fixed-point EMA filters over a column of integer samples."
    )
    parser.add_argument(
        "--config",
        required=True,
        type=Path,
        help="Path to the filter bank YAML configuration file.",
    )
    parser.add_argument(
        "--input",
        required=True,
        type=Path,
        help="CSV or parquet file holding the samples.",
    )
    parser.add_argument(
        "--column",
        default="value",
        help="Column of the input table to filter (default: value).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Output CSV or parquet path. Defaults to <input>_filtered.csv.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level for the run (default: INFO).",
    )
    parser.add_argument(
        "--run-id",
        default=None,
        help="Optional run identifier; generated when omitted.",
    )
    parser.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Optional directory that receives a <run-id>.log file.",
    )
    return parser.parse_args(argv)


def _setup_logging(level: str) -> str:
    resolved = getattr(logging, level.upper(), None)
    if not isinstance(resolved, int):
        logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
        logger.warning("invalid log level supplied; defaulting to INFO", extra={"log_level": level})
        return "INFO"
    return level.upper()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    level = _setup_logging(args.log_level)

    try:
        result = run_filter(
            args.config,
            args.input,
            column=args.column,
            output_path=args.output,
            run_id=args.run_id,
            log_level=level,
            log_dir=args.log_dir,
        )
    except Exception:  # pragma: no cover - CLI boundary
        logger.exception("filter run failed", extra={"config": str(args.config)})
        return 1

    logger.info(
        "run complete",
        extra={
            "run_id": result["run_id"],
            "output_path": str(result["output_path"]),
            "rows": result["rows"],
        },
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
