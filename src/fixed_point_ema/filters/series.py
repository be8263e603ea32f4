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

"""Batch helpers that run a filter over an array or Series of samples."""

from __future__ import annotations

from typing import Iterable

import numpy as np
import pandas as pd

from fixed_point_ema.filters.fixed_point_ema import DEFAULT_SCALE, FixedPointEMA
from fixed_point_ema.filters.smoothing import SmoothingExponent

__all__ = ["apply_filter", "filter_series"]


def apply_filter(ema: FixedPointEMA, samples: Iterable[int] | pd.Series):
    """Step ``ema`` over ``samples``, continuing from its current state.

    Returns an int64 array of rounded outputs, or a Series sharing the input's
    index and name when a Series is given.
    """
    if isinstance(samples, pd.Series):
        values = samples.to_numpy()
    elif isinstance(samples, np.ndarray):
        values = samples
    else:
        values = np.asarray(list(samples))

    if values.ndim != 1:
        raise ValueError(f"samples must be one-dimensional, got shape {values.shape}")
    if values.size and not np.issubdtype(values.dtype, np.integer):
        raise TypeError(f"samples must have an integer dtype, got {values.dtype}")

    out = np.empty(values.shape[0], dtype=np.int64)
    step = ema.step
    for idx, sample in enumerate(values.tolist()):
        out[idx] = step(sample)

    if isinstance(samples, pd.Series):
        return pd.Series(out, index=samples.index, name=samples.name)
    return out


def filter_series(
    samples: Iterable[int] | pd.Series,
    smoothing_exponent: SmoothingExponent | int | str,
    scale: int = DEFAULT_SCALE,
    **options,
):
    """Run a freshly constructed filter over ``samples``."""
    ema = FixedPointEMA(smoothing_exponent, scale, **options)
    return apply_filter(ema, samples)
