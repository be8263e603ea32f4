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

import operator
from dataclasses import asdict, dataclass, field
from typing import List

from fixed_point_ema.filters.fixed_point_ema import (
    DEFAULT_ACCUMULATOR_BITS,
    DEFAULT_INPUT_BITS,
    DEFAULT_SCALE,
    FixedPointEMA,
)
from fixed_point_ema.filters.smoothing import SmoothingExponent, coerce_smoothing_exponent


def _integral(value, name: str) -> int:
    if isinstance(value, bool):
        raise TypeError(f"'{name}' must be an integer, not bool")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"'{name}' must be an integer, got {value}")
        return int(value)
    try:
        return operator.index(value)
    except TypeError:
        raise TypeError(f"'{name}' must be an int, got {type(value).__name__}") from None


@dataclass(kw_only=True)
class FilterConfig:
    """Validated parameters for one named filter in a bank."""

    name: str
    enabled: bool = True
    smoothing_exponent: SmoothingExponent
    scale: int = DEFAULT_SCALE
    accumulator_bits: int = DEFAULT_ACCUMULATOR_BITS
    input_bits: int = DEFAULT_INPUT_BITS
    saturate: bool = False
    requantize: bool = False

    def __post_init__(self):
        # --- enabled ---
        if not isinstance(self.enabled, bool):
            raise TypeError(f"'enabled' must be a bool, got {type(self.enabled).__name__}")

        # --- smoothing_exponent ---
        self.smoothing_exponent = coerce_smoothing_exponent(self.smoothing_exponent)

        # --- widths (YAML may spell them as 4.0) ---
        self.scale = _integral(self.scale, "scale")
        self.accumulator_bits = _integral(self.accumulator_bits, "accumulator_bits")
        self.input_bits = _integral(self.input_bits, "input_bits")

        # Range and width checks live in FixedPointEMA; a config must be buildable.
        self.build()

    def to_kwargs(self) -> dict:
        """Constructor kwargs for FixedPointEMA; config-only fields are stripped."""
        d = asdict(self)
        for key in ("name", "enabled"):
            d.pop(key, None)
        return d

    def build(self) -> FixedPointEMA:
        return FixedPointEMA(**self.to_kwargs())


@dataclass(kw_only=True)
class FilterBankConfigData:
    """
    Container for all validated filter configuration objects.
    Created by FilterBankConfigParser and passed downstream for instantiation.
    """
    schema_version: str
    filters: List[FilterConfig] = field(default_factory=list)
