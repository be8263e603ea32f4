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

"""Fixed-point EMA filter and its smoothing enumeration."""

from fixed_point_ema.filters.fixed_point_ema import (
    DEFAULT_ACCUMULATOR_BITS,
    DEFAULT_INPUT_BITS,
    DEFAULT_SCALE,
    FixedPointEMA,
)
from fixed_point_ema.filters.smoothing import SmoothingExponent, coerce_smoothing_exponent

__all__ = [
    "DEFAULT_ACCUMULATOR_BITS",
    "DEFAULT_INPUT_BITS",
    "DEFAULT_SCALE",
    "FixedPointEMA",
    "SmoothingExponent",
    "coerce_smoothing_exponent",
]
