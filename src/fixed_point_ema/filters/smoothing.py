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

"""Closed set of power-of-two smoothing exponents."""

from __future__ import annotations

import operator
from enum import IntEnum

from fixed_point_ema.exceptions import FilterParameterError

__all__ = ["SmoothingExponent", "coerce_smoothing_exponent"]


class SmoothingExponent(IntEnum):
    """Maps symbolic smoothing factors to the right-shift applied per update."""

    SMOOTHING_VALUE_1 = 0
    SMOOTHING_VALUE_2 = 1
    SMOOTHING_VALUE_4 = 2
    SMOOTHING_VALUE_8 = 3
    SMOOTHING_VALUE_16 = 4
    SMOOTHING_VALUE_32 = 5
    SMOOTHING_VALUE_64 = 6
    SMOOTHING_VALUE_128 = 7
    SMOOTHING_VALUE_256 = 8
    SMOOTHING_VALUE_512 = 9

    @property
    def factor(self) -> int:
        """Smoothing divisor, 2**exponent."""
        return 1 << int(self)

    @classmethod
    def from_factor(cls, factor: int) -> "SmoothingExponent":
        if isinstance(factor, bool):
            raise FilterParameterError("smoothing factor must be an int, got bool")
        try:
            factor = operator.index(factor)
        except TypeError:
            raise FilterParameterError(
                f"smoothing factor must be an int, got {type(factor).__name__}"
            ) from None
        if factor <= 0 or factor & (factor - 1):
            raise FilterParameterError(f"smoothing factor must be a power of two, got {factor}")
        return coerce_smoothing_exponent(factor.bit_length() - 1)


def coerce_smoothing_exponent(value) -> SmoothingExponent:
    """Return the enum member for a member, its integer value, or its name."""
    if isinstance(value, SmoothingExponent):
        return value

    if isinstance(value, bool):
        raise FilterParameterError("smoothing_exponent must not be a bool")

    if isinstance(value, str):
        key = value.strip().upper()
        try:
            return SmoothingExponent[key]
        except KeyError:
            known = ", ".join(member.name for member in SmoothingExponent)
            raise FilterParameterError(
                f"unknown smoothing_exponent '{value}'. Expected one of [{known}]"
            ) from None

    # operator.index admits numpy integers and rejects floats
    try:
        exponent = operator.index(value)
    except TypeError:
        raise FilterParameterError(
            f"smoothing_exponent must be an int or member name, got {type(value).__name__}"
        ) from None

    try:
        return SmoothingExponent(exponent)
    except ValueError:
        raise FilterParameterError(
            f"smoothing_exponent must be between {min(SmoothingExponent).value} and "
            f"{max(SmoothingExponent).value}, got {exponent}"
        ) from None
