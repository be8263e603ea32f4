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

"""Top-level exports for the fixed_point_ema package."""

from fixed_point_ema.filters.fixed_point_ema import FixedPointEMA
from fixed_point_ema.filters.smoothing import SmoothingExponent

__all__ = [
    "FilterBank",
    "FixedPointEMA",
    "SmoothingExponent",
    "compare_to_float",
    "filter_series",
    "run_filter",
]


def __getattr__(name):
    """Lazily import heavier submodules when their symbols are first accessed."""
    if name == "filter_series":
        from fixed_point_ema.filters.series import filter_series
        globals()["filter_series"] = filter_series
        return filter_series

    if name == "FilterBank":
        from fixed_point_ema.bank.filter_bank import FilterBank
        globals()["FilterBank"] = FilterBank
        return FilterBank

    if name == "compare_to_float":
        from fixed_point_ema.analysis.quantization import compare_to_float
        globals()["compare_to_float"] = compare_to_float
        return compare_to_float

    if name == "run_filter":
        from fixed_point_ema.workflow import run_filter
        globals()["run_filter"] = run_filter
        return run_filter

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
