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

"""Integer-only exponential moving average built on power-of-two shifts.

The filter keeps a single signed accumulator holding the smoothed estimate
multiplied by ``2**scale``. Each sample moves the accumulator by
``1 / 2**smoothing_exponent`` of the distance to the (scaled) sample::

    scaled = scaled - (scaled >> k) + ((x << scale) >> k)

which is ``ema += alpha * (x - ema)`` with ``alpha = 2**-k``. Reads round the
accumulator to the nearest integer, ties upward.

Python integers are unbounded, so the fixed widths of the target platform are
modelled explicitly: samples must fit a signed ``input_bits`` integer and
``input_bits + scale`` must fit the signed ``accumulator_bits`` accumulator.
Under those two conditions the recurrence cannot leave the scaled input range.
"""

from __future__ import annotations

import logging
import operator
from typing import Tuple

from fixed_point_ema.exceptions import FilterParameterError, SampleRangeError
from fixed_point_ema.filters.smoothing import SmoothingExponent, coerce_smoothing_exponent

__all__ = [
    "DEFAULT_ACCUMULATOR_BITS",
    "DEFAULT_INPUT_BITS",
    "DEFAULT_SCALE",
    "FixedPointEMA",
]

logger = logging.getLogger(__name__)

DEFAULT_SCALE = 4
DEFAULT_ACCUMULATOR_BITS = 32
DEFAULT_INPUT_BITS = 16


def _require_int(value, name: str) -> int:
    if isinstance(value, bool):
        raise FilterParameterError(f"'{name}' must be an int, got bool")
    try:
        return operator.index(value)
    except TypeError:
        raise FilterParameterError(
            f"'{name}' must be an int, got {type(value).__name__}"
        ) from None


class FixedPointEMA:
    """Single-pole EMA over integer samples using only adds and shifts."""

    __slots__ = (
        "_smoothing_exponent",
        "_scale",
        "_rounding",
        "_accumulator_bits",
        "_input_bits",
        "_input_min",
        "_input_max",
        "_saturate",
        "_requantize",
        "_scaled_ema",
        "_first_update",
    )

    def __init__(
        self,
        smoothing_exponent: SmoothingExponent | int | str,
        scale: int = DEFAULT_SCALE,
        *,
        accumulator_bits: int = DEFAULT_ACCUMULATOR_BITS,
        input_bits: int = DEFAULT_INPUT_BITS,
        saturate: bool = False,
        requantize: bool = False,
    ) -> None:
        exponent = coerce_smoothing_exponent(smoothing_exponent)
        scale = _require_int(scale, "scale")
        accumulator_bits = _require_int(accumulator_bits, "accumulator_bits")
        input_bits = _require_int(input_bits, "input_bits")

        if scale < 1:
            raise FilterParameterError(f"'scale' must be at least 1, got {scale}")
        if input_bits < 2:
            raise FilterParameterError(f"'input_bits' must be at least 2, got {input_bits}")
        if int(exponent) >= accumulator_bits:
            raise FilterParameterError(
                f"smoothing_exponent {int(exponent)} must be below accumulator_bits "
                f"({accumulator_bits})"
            )
        if input_bits + scale > accumulator_bits:
            raise FilterParameterError(
                f"input_bits ({input_bits}) + scale ({scale}) exceeds accumulator_bits "
                f"({accumulator_bits}); samples shifted by scale would overflow"
            )
        if not isinstance(saturate, bool):
            raise FilterParameterError(f"'saturate' must be a bool, got {type(saturate).__name__}")
        if not isinstance(requantize, bool):
            raise FilterParameterError(
                f"'requantize' must be a bool, got {type(requantize).__name__}"
            )

        self._smoothing_exponent = exponent
        self._scale = scale
        self._rounding = 1 << (scale - 1)
        self._accumulator_bits = accumulator_bits
        self._input_bits = input_bits
        self._input_min = -(1 << (input_bits - 1))
        self._input_max = (1 << (input_bits - 1)) - 1
        self._saturate = saturate
        self._requantize = requantize
        self._scaled_ema = 0
        self._first_update = True

    # ------------------------------------------------------------------
    def update(self, new_value: int) -> None:
        """Absorb one sample. The first sample after construction or reset seeds the filter."""
        sample = self._check_sample(new_value)
        scaled_sample = sample << self._scale

        if self._first_update:
            self._scaled_ema = scaled_sample
            self._first_update = False
            return

        k = int(self._smoothing_exponent)
        big = self._scaled_ema - (self._scaled_ema >> k) + (scaled_sample >> k)
        if self._requantize:
            big = ((big + self._rounding) >> self._scale) << self._scale
        self._scaled_ema = big

    def step(self, new_value: int) -> int:
        """Update with ``new_value`` and return the rounded estimate."""
        self.update(new_value)
        return self.current_ema()

    def current_ema(self) -> int:
        """Rounded estimate in input units. Does not mutate state."""
        return (self._scaled_ema + self._rounding) >> self._scale

    def scaled_ema(self) -> int:
        """Raw accumulator, the estimate times 2**scale."""
        return self._scaled_ema

    def reset(self) -> None:
        """Clear the estimate so the next sample seeds again; tuning is unchanged."""
        self._first_update = True
        self._scaled_ema = 0

    # ------------------------------------------------------------------
    @property
    def smoothing_exponent(self) -> SmoothingExponent:
        return self._smoothing_exponent

    @property
    def smoothing_factor(self) -> int:
        return self._smoothing_exponent.factor

    @property
    def scale(self) -> int:
        return self._scale

    @property
    def rounding(self) -> int:
        return self._rounding

    @property
    def accumulator_bits(self) -> int:
        return self._accumulator_bits

    @property
    def input_bits(self) -> int:
        return self._input_bits

    @property
    def input_range(self) -> Tuple[int, int]:
        """Inclusive (min, max) accepted sample values."""
        return self._input_min, self._input_max

    @property
    def saturate(self) -> bool:
        return self._saturate

    @property
    def requantize(self) -> bool:
        return self._requantize

    @property
    def is_seeded(self) -> bool:
        return not self._first_update

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(smoothing_exponent={self._smoothing_exponent.name}, "
            f"scale={self._scale}, accumulator_bits={self._accumulator_bits}, "
            f"input_bits={self._input_bits}, saturate={self._saturate}, "
            f"requantize={self._requantize})"
        )

    # ------------------------------------------------------------------
    def _check_sample(self, value) -> int:
        if isinstance(value, bool):
            raise TypeError("sample must be an integer, not bool")
        try:
            sample = operator.index(value)
        except TypeError:
            raise TypeError(f"sample must be an integer, got {type(value).__name__}") from None

        if self._input_min <= sample <= self._input_max:
            return sample

        if not self._saturate:
            raise SampleRangeError(
                f"sample {sample} outside signed {self._input_bits}-bit range "
                f"[{self._input_min}, {self._input_max}]"
            )

        clamped = self._input_max if sample > self._input_max else self._input_min
        logger.debug(
            "sample saturated to input range",
            extra={"sample": sample, "clamped": clamped, "input_bits": self._input_bits},
        )
        return clamped
