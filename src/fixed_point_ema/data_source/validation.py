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

import math
from collections import Counter
from dataclasses import dataclass, field
from numbers import Integral, Real
from typing import Any, Dict, Optional


@dataclass
class SampleValidationStats:
    """Accumulates counts for sample validation outcomes."""

    total_samples: int = 0
    accepted_samples: int = 0
    skipped_samples: int = 0
    issues: Counter = field(default_factory=Counter)

    def record_issue(self, issue: str) -> None:
        self.skipped_samples += 1
        self.issues[issue] += 1

    def as_dict(self) -> Dict[str, Any]:
        return {
            "total_samples": self.total_samples,
            "accepted_samples": self.accepted_samples,
            "skipped_samples": self.skipped_samples,
            "issues": dict(self.issues),
        }


class SampleValidator:
    """Validates raw sample values read from a table, tracking error tallies."""

    def __init__(self, *, source: str) -> None:
        self.source = source
        self.stats = SampleValidationStats()

    def validate(self, value: Any) -> Optional[int]:
        """Return the sample as an int, or record an issue and return None."""
        self.stats.total_samples += 1

        if value is None:
            self.stats.record_issue("missing_value")
            return None

        if isinstance(value, bool):
            self.stats.record_issue("non_numeric_value")
            return None

        if isinstance(value, Integral):
            self.stats.accepted_samples += 1
            return int(value)

        if isinstance(value, str):
            text = value.strip()
            if not text:
                self.stats.record_issue("missing_value")
                return None
            try:
                value = float(text)
            except ValueError:
                self.stats.record_issue("non_numeric_value")
                return None

        if not isinstance(value, Real):
            self.stats.record_issue("non_numeric_value")
            return None

        number = float(value)
        if math.isnan(number):
            self.stats.record_issue("missing_value")
            return None
        if not math.isfinite(number):
            self.stats.record_issue("non_finite_value")
            return None
        if not number.is_integer():
            self.stats.record_issue("non_integral_value")
            return None

        self.stats.accepted_samples += 1
        return int(number)
