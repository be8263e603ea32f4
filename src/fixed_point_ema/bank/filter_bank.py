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

"""A named set of fixed-point filters fed from the same sample stream."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List

from fixed_point_ema.config_parsers.filters.config_dataclass import FilterBankConfigData, FilterConfig
from fixed_point_ema.config_parsers.filters.config_parser import FilterBankConfigParser
from fixed_point_ema.filters.fixed_point_ema import FixedPointEMA

logger = logging.getLogger(__name__)


class FilterBank:
    def __init__(self, configs: Iterable[FilterConfig]) -> None:
        filters: Dict[str, FixedPointEMA] = {}
        for cfg in configs:
            if not cfg.enabled:
                logger.info("filter disabled via config", extra={"filter_name": cfg.name})
                continue
            if cfg.name in filters:
                raise ValueError(f"Duplicate filter name '{cfg.name}'")
            filters[cfg.name] = cfg.build()

        self._filters = filters

    @classmethod
    def from_config_data(cls, config_data: FilterBankConfigData) -> "FilterBank":
        return cls(config_data.filters)

    @classmethod
    def from_config_path(cls, config_path: Path) -> "FilterBank":
        parser = FilterBankConfigParser(config_path)
        return cls.from_config_data(parser.load_filter_config())

    @property
    def names(self) -> List[str]:
        return list(self._filters)

    def get(self, name: str) -> FixedPointEMA:
        try:
            return self._filters[name]
        except KeyError:
            raise KeyError(f"Unknown filter '{name}'. Known filters: {self.names}") from None

    def update(self, sample: int) -> Dict[str, int]:
        """Step every filter with ``sample`` and return the rounded outputs by name."""
        return {name: ema.step(sample) for name, ema in self._filters.items()}

    def current(self) -> Dict[str, int]:
        return {name: ema.current_ema() for name, ema in self._filters.items()}

    def scaled(self) -> Dict[str, int]:
        return {name: ema.scaled_ema() for name, ema in self._filters.items()}

    def reset(self) -> None:
        for ema in self._filters.values():
            ema.reset()

    def __len__(self) -> int:
        return len(self._filters)

    def __contains__(self, name: object) -> bool:
        return name in self._filters
