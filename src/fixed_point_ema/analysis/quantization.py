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

"""Compare the fixed-point filter with an ideal floating-point EMA."""

from __future__ import annotations

import logging
import math
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from fixed_point_ema.filters.fixed_point_ema import DEFAULT_SCALE
from fixed_point_ema.filters.series import filter_series
from fixed_point_ema.filters.smoothing import SmoothingExponent, coerce_smoothing_exponent

__all__ = [
    "QuantizationReport",
    "compare_to_float",
    "float_reference",
    "plot_step_response",
    "settling_index",
    "step_response",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuantizationReport:
    """Error statistics of the fixed-point output against the float EMA."""

    smoothing_exponent: int
    scale: int
    samples: int
    max_abs_error: float
    mean_abs_error: float
    bias: float
    rmse: float

    def as_dict(self) -> dict:
        return asdict(self)


def float_reference(
    samples: Sequence[int],
    smoothing_exponent: SmoothingExponent | int | str,
) -> np.ndarray:
    """Ideal EMA seeded with the first sample, alpha = 2**-exponent."""
    exponent = coerce_smoothing_exponent(smoothing_exponent)
    alpha = 1.0 / exponent.factor
    values = np.asarray(samples, dtype=np.float64)

    out = np.empty_like(values)
    if values.size == 0:
        return out

    y = values[0]
    out[0] = y
    for idx in range(1, values.size):
        y = y + alpha * (values[idx] - y)
        out[idx] = y
    return out


def compare_to_float(
    samples: Sequence[int],
    smoothing_exponent: SmoothingExponent | int | str,
    scale: int = DEFAULT_SCALE,
    **options,
) -> QuantizationReport:
    exponent = coerce_smoothing_exponent(smoothing_exponent)
    values = np.asarray(samples, dtype=np.int64)
    if values.size == 0:
        raise ValueError("compare_to_float requires at least one sample")

    fixed = filter_series(values, exponent, scale, **options).astype(np.float64)
    ideal = float_reference(values, exponent)
    error = fixed - ideal

    report = QuantizationReport(
        smoothing_exponent=int(exponent),
        scale=scale,
        samples=int(values.size),
        max_abs_error=float(np.max(np.abs(error))),
        mean_abs_error=float(np.mean(np.abs(error))),
        bias=float(np.mean(error)),
        rmse=float(math.sqrt(np.mean(error ** 2))),
    )
    logger.debug("quantization report", extra={"report": report.as_dict()})
    return report


def step_response(
    smoothing_exponent: SmoothingExponent | int | str,
    scale: int = DEFAULT_SCALE,
    *,
    low: int = 0,
    high: int = 1000,
    length: Optional[int] = None,
    lead: int = 1,
    **options,
) -> pd.DataFrame:
    """Feed ``lead`` samples at ``low`` then ``length`` samples at ``high``."""
    exponent = coerce_smoothing_exponent(smoothing_exponent)
    if lead < 1:
        raise ValueError(f"'lead' must be at least 1, got {lead}")
    if length is None:
        length = max(32, 8 * exponent.factor)
    if length < 1:
        raise ValueError(f"'length' must be at least 1, got {length}")

    inputs = np.concatenate(
        [np.full(lead, low, dtype=np.int64), np.full(length, high, dtype=np.int64)]
    )
    return pd.DataFrame(
        {
            "input": inputs,
            "fixed": filter_series(inputs, exponent, scale, **options),
            "float": float_reference(inputs, exponent),
        }
    )


def settling_index(frame: pd.DataFrame, tolerance: int = 0) -> Optional[int]:
    """First row from which the fixed output stays within ``tolerance`` of the final input."""
    target = frame["input"].iloc[-1]
    within = ((frame["fixed"] - target).abs() <= tolerance).to_numpy()
    if within.size == 0 or not within[-1]:
        return None
    outside = np.flatnonzero(~within)
    return 0 if outside.size == 0 else int(outside[-1]) + 1


def plot_step_response(frame: pd.DataFrame, output: Path, *, title: Optional[str] = None) -> Path:
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots(figsize=(9, 4))
    ax.step(frame.index, frame["input"], where="post", color="black", label="input")
    ax.plot(frame.index, frame["float"], label="float EMA")
    ax.step(frame.index, frame["fixed"], where="post", label="fixed-point EMA")
    ax.set_xlabel("sample")
    ax.set_ylabel("value")
    ax.set_title(title or "Step response")
    ax.legend()
    ax.grid(alpha=0.3)
    fig.tight_layout()
    fig.savefig(output, dpi=140)
    plt.close(fig)

    logger.info("step response plot written", extra={"path": str(output)})
    return output
