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

"""Tests for the FixedPointEMA filter."""

from __future__ import annotations

import random

import numpy as np
import pytest

from fixed_point_ema.exceptions import FilterParameterError, SampleRangeError
from fixed_point_ema.filters.fixed_point_ema import FixedPointEMA
from fixed_point_ema.filters.smoothing import SmoothingExponent


def _reference_integer_state_ema(samples, exponent, scale):
    """Integer-state EMA that re-rounds its state to output units after every sample."""
    current = None
    outputs = []
    for x in samples:
        if current is None:
            current = x
        else:
            big = (current << scale) - ((current << scale) >> exponent) + ((x << scale) >> exponent)
            current = (big + (1 << (scale - 1))) >> scale
        outputs.append(current)
    return outputs


@pytest.mark.parametrize("exponent", [0, 2, 9])
@pytest.mark.parametrize("scale", [1, 4, 16])
@pytest.mark.parametrize("sample", [-32768, -1, 0, 1, 100, 32767])
def test_first_sample_passes_through(exponent, scale, sample):
    """A fresh filter seeded with x reports exactly x."""

    ema = FixedPointEMA(exponent, scale)
    assert ema.step(sample) == sample
    assert ema.scaled_ema() == sample << scale


def test_current_ema_is_idempotent():
    """Repeated reads without an update return the same value and leave state alone."""

    ema = FixedPointEMA(SmoothingExponent.SMOOTHING_VALUE_8)
    for sample in (10, 50, -20, 33):
        ema.update(sample)

    scaled = ema.scaled_ema()
    first = ema.current_ema()
    second = ema.current_ema()

    assert first == second
    assert ema.scaled_ema() == scaled


def test_reset_restores_seeding():
    """After reset the next sample re-seeds the filter exactly like a fresh one."""

    ema = FixedPointEMA(SmoothingExponent.SMOOTHING_VALUE_16, scale=6)
    for sample in (100, 400, -250, 7):
        ema.update(sample)
    assert ema.is_seeded

    ema.reset()

    assert not ema.is_seeded
    assert ema.scaled_ema() == 0
    assert ema.scale == 6
    assert ema.smoothing_exponent is SmoothingExponent.SMOOTHING_VALUE_16
    assert ema.step(-4321) == -4321


@pytest.mark.parametrize("exponent", list(SmoothingExponent))
def test_constant_stream_is_stationary(exponent):
    """Feeding the seed value again never moves the estimate."""

    ema = FixedPointEMA(exponent, scale=4)
    ema.update(-123)
    for _ in range(50):
        assert ema.step(-123) == -123
    assert ema.scaled_ema() == -123 << 4


def test_step_from_zero_rises_monotonically_without_overshoot():
    """A step input drives the output up monotonically until it lands on the target."""

    ema = FixedPointEMA(SmoothingExponent.SMOOTHING_VALUE_4, scale=4)
    ema.update(0)

    outputs = [ema.step(1000) for _ in range(200)]

    assert all(b >= a for a, b in zip(outputs, outputs[1:]))
    assert max(outputs) <= 1000
    assert outputs[-1] == 1000


def test_concrete_scenario_smoothing_four_scale_four():
    """Hand-computed values for exponent 2 (factor 4) and scale 4."""

    ema = FixedPointEMA(SmoothingExponent.SMOOTHING_VALUE_4, scale=4)

    assert ema.step(100) == 100
    assert ema.scaled_ema() == 1600

    ema.update(200)
    # 1600 - (1600 >> 2) + ((200 << 4) >> 2) = 1600 - 400 + 800
    assert ema.scaled_ema() == 2000
    # (2000 + 8) >> 4 = 125
    assert ema.current_ema() == 125

    assert ema.step(200) == 144
    assert ema.scaled_ema() == 2300


def test_negative_values_use_floor_shifts():
    """Right shifts of negative accumulators round toward negative infinity."""

    ema = FixedPointEMA(SmoothingExponent.SMOOTHING_VALUE_4, scale=1)
    ema.update(-3)
    assert ema.scaled_ema() == -6

    ema.update(0)
    # -6 - (-6 >> 2) + 0 = -6 - (-2)
    assert ema.scaled_ema() == -4
    assert ema.current_ema() == -2


def test_crossing_zero_from_negative_seed():
    ema = FixedPointEMA(SmoothingExponent.SMOOTHING_VALUE_2, scale=4)
    ema.update(-100)
    assert ema.step(100) == 0
    assert ema.scaled_ema() == 0


def test_unit_smoothing_tracks_latest_sample():
    """With a smoothing factor of 1 the output is always the newest sample."""

    ema = FixedPointEMA(SmoothingExponent.SMOOTHING_VALUE_1)
    for sample in (5, -9, 300, 0, 17):
        assert ema.step(sample) == sample


@pytest.mark.parametrize(
    "exponent, scale, requantize",
    [(1, 1, False), (3, 4, False), (6, 8, False), (9, 12, False), (3, 4, True), (9, 2, True)],
)
def test_scaled_accessor_consistency(exponent, scale, requantize):
    """The rounded output is always derivable from the raw accumulator."""

    rng = random.Random(1234)
    ema = FixedPointEMA(exponent, scale, requantize=requantize)
    for _ in range(300):
        ema.update(rng.randint(-2000, 2000))
        assert ema.current_ema() == (ema.scaled_ema() + ema.rounding) >> ema.scale


def test_current_ema_before_first_sample_is_zero():
    ema = FixedPointEMA(3)
    assert ema.current_ema() == 0
    assert ema.scaled_ema() == 0
    assert not ema.is_seeded


def test_requantize_rounds_state_every_update():
    """Requantized state drops the sub-unit precision the default mode keeps."""

    precise = FixedPointEMA(SmoothingExponent.SMOOTHING_VALUE_4, scale=4)
    coarse = FixedPointEMA(SmoothingExponent.SMOOTHING_VALUE_4, scale=4, requantize=True)

    for ema in (precise, coarse):
        ema.update(100)
        ema.update(200)
        ema.update(200)

    assert precise.scaled_ema() == 2300
    assert coarse.scaled_ema() == 2304
    assert precise.current_ema() == coarse.current_ema() == 144


@pytest.mark.parametrize("exponent, scale", [(2, 4), (5, 3), (8, 6)])
def test_requantize_matches_integer_state_reference(exponent, scale):
    rng = random.Random(99)
    samples = [rng.randint(-1000, 1000) for _ in range(250)]

    ema = FixedPointEMA(exponent, scale, requantize=True)
    outputs = [ema.step(x) for x in samples]

    assert outputs == _reference_integer_state_ema(samples, exponent, scale)


def test_accepts_numpy_integers():
    ema = FixedPointEMA(2)
    assert ema.step(np.int16(42)) == 42
    assert ema.step(np.int64(42)) == 42


@pytest.mark.parametrize("bad", [1.5, 2.0, True, "3", None])
def test_rejects_non_integer_samples(bad):
    ema = FixedPointEMA(2)
    with pytest.raises(TypeError):
        ema.update(bad)
    assert not ema.is_seeded


@pytest.mark.parametrize("sample", [32768, -32769, 10**9])
def test_out_of_range_sample_raises(sample):
    """Samples beyond the signed input width are refused without touching state."""

    ema = FixedPointEMA(2)
    with pytest.raises(SampleRangeError) as excinfo:
        ema.update(sample)

    assert "16-bit" in str(excinfo.value)
    assert isinstance(excinfo.value, ValueError)
    assert not ema.is_seeded


def test_saturate_clamps_to_input_range():
    ema = FixedPointEMA(SmoothingExponent.SMOOTHING_VALUE_2, saturate=True)
    assert ema.step(40000) == 32767

    ema.reset()
    assert ema.step(-40000) == -32768


def test_custom_input_width():
    ema = FixedPointEMA(1, scale=2, accumulator_bits=16, input_bits=12)
    assert ema.input_range == (-2048, 2047)
    assert ema.step(2047) == 2047
    with pytest.raises(SampleRangeError):
        ema.update(2048)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"smoothing_exponent": 2, "scale": 0},
        {"smoothing_exponent": 2, "scale": -1},
        {"smoothing_exponent": 2, "scale": True},
        {"smoothing_exponent": 2, "scale": 4.0},
        {"smoothing_exponent": 10},
        {"smoothing_exponent": -1},
        {"smoothing_exponent": "SMOOTHING_VALUE_3"},
        {"smoothing_exponent": 2, "scale": 17},
        {"smoothing_exponent": 9, "scale": 1, "accumulator_bits": 8, "input_bits": 4},
        {"smoothing_exponent": 2, "input_bits": 1},
        {"smoothing_exponent": 2, "saturate": "yes"},
        {"smoothing_exponent": 2, "requantize": 1},
    ],
)
def test_invalid_construction_parameters(kwargs):
    """Unusable tuning is rejected when the filter is built."""

    with pytest.raises(FilterParameterError):
        FixedPointEMA(**kwargs)


def test_numpy_integer_tuning_parameters():
    """Parameters pulled out of arrays or DataFrames build the same filter."""

    ema = FixedPointEMA(
        np.int64(2), np.int64(4), accumulator_bits=np.int32(32), input_bits=np.uint8(16)
    )
    reference = FixedPointEMA(2, 4)

    assert ema.smoothing_exponent is SmoothingExponent.SMOOTHING_VALUE_4
    assert type(ema.scale) is int and ema.scale == 4
    assert type(ema.accumulator_bits) is int
    assert ema.input_range == reference.input_range
    assert [ema.step(x) for x in (100, 200, 200)] == [reference.step(x) for x in (100, 200, 200)]


def test_numpy_float_scale_is_rejected():
    with pytest.raises(FilterParameterError):
        FixedPointEMA(2, np.float64(4.0))


def test_exponent_beyond_accumulator_width_message():
    with pytest.raises(FilterParameterError) as excinfo:
        FixedPointEMA(9, scale=1, accumulator_bits=8, input_bits=4)
    assert "accumulator_bits" in str(excinfo.value)


def test_reset_keeps_tuning():
    ema = FixedPointEMA(3, scale=6, saturate=True)
    ema.update(500)
    ema.update(-40000)
    ema.reset()

    assert not ema.is_seeded
    assert ema.smoothing_exponent is SmoothingExponent.SMOOTHING_VALUE_8
    assert (ema.scale, ema.saturate) == (6, True)
    assert ema.step(7) == 7


def test_largest_scale_that_fits_default_widths():
    ema = FixedPointEMA(9, scale=16)
    assert ema.rounding == 1 << 15
    assert ema.step(-32768) == -32768


def test_properties_and_repr():
    ema = FixedPointEMA("smoothing_value_4")

    assert ema.smoothing_exponent is SmoothingExponent.SMOOTHING_VALUE_4
    assert ema.smoothing_factor == 4
    assert ema.scale == 4
    assert ema.rounding == 8
    assert ema.accumulator_bits == 32
    assert ema.input_bits == 16
    assert ema.input_range == (-32768, 32767)
    assert ema.saturate is False
    assert ema.requantize is False
    assert "SMOOTHING_VALUE_4" in repr(ema)
    assert "scale=4" in repr(ema)
