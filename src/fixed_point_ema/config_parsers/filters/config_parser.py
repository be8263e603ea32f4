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

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from fixed_point_ema.config_parsers.filters.config_dataclass import FilterBankConfigData, FilterConfig
from fixed_point_ema.config_validation import validate_filter_bank_config
from fixed_point_ema.exceptions import ConfigError

logger = logging.getLogger(__name__)


class FilterBankConfigParser:
    """
    Parses and validates the filter bank YAML configuration file.

    Produces FilterConfig dataclasses describing how runtime
    FixedPointEMA objects should be instantiated.
    """

    def __init__(self, config_path: Path):
        self.config_path = Path(config_path)

        if not self.config_path.exists():
            raise FileNotFoundError(f"Filter config not found: {config_path}")

    # ------------------------------------------------------------------
    def load_filter_config(self) -> FilterBankConfigData:
        """Load and validate the filter YAML into config dataclasses."""

        # --- Parse YAML ---
        try:
            with self.config_path.open("r", encoding="utf-8") as f:
                raw: Dict[str, Any] = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML at {self.config_path}: {e}") from e

        if not isinstance(raw, dict):
            raise ConfigError("Invalid filter config: root must be a mapping (YAML dict)")

        try:
            validated = validate_filter_bank_config(raw)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc

        configs: List[FilterConfig] = []
        seen_names: set[str] = set()

        # --- Build config dataclasses ---
        for i, entry in enumerate(validated["filters"], start=1):
            name = entry["name"]
            params = entry["params"]

            if name in seen_names:
                raise ConfigError(f"Duplicate filter name detected: '{name}'")
            seen_names.add(name)

            if "smoothing_exponent" not in params:
                raise ConfigError(f"Filter '{name}' (entry #{i}) missing 'smoothing_exponent'")

            try:
                config_obj = FilterConfig(name=name, enabled=entry["enabled"], **params)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Failed to instantiate config for filter '{name}': {e}") from e

            configs.append(config_obj)

        logger.debug(
            "filter config loaded",
            extra={"config_path": self.config_path, "filters": sorted(seen_names)},
        )
        return FilterBankConfigData(schema_version=validated["schema_version"], filters=configs)
