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

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

from fixed_point_ema.exceptions import ConfigError
from fixed_point_ema.filters.smoothing import SmoothingExponent

Migration = Callable[[Mapping[str, object]], Mapping[str, object]]


@dataclass(frozen=True)
class SchemaSpec:
    """Describes how to bring a declared schema version up to the canonical one."""

    canonical: str
    migration: Optional[Migration] = None


def _migrate_filters_0_1(raw: Mapping[str, object]) -> Mapping[str, object]:
    """0.1 configs gave the smoothing divisor (``smoothing_factor: 16``) instead of the exponent."""
    migrated = dict(raw)
    filters = migrated.get("filters")
    if not isinstance(filters, list):
        return migrated

    entries = []
    for entry in filters:
        params = entry.get("params") if isinstance(entry, dict) else None
        if isinstance(params, dict) and "smoothing_factor" in params:
            params = dict(params)
            if "smoothing_exponent" in params:
                raise ValueError(
                    f"filter '{entry.get('name')}' sets both 'smoothing_factor' and 'smoothing_exponent'"
                )
            params["smoothing_exponent"] = SmoothingExponent.from_factor(params.pop("smoothing_factor"))
            entry = {**entry, "params": params}
        entries.append(entry)
    migrated["filters"] = entries
    return migrated


SUPPORTED_SCHEMAS: Dict[str, Dict[str, SchemaSpec]] = {
    "filters": {
        "0.1": SchemaSpec(canonical="1.0", migration=_migrate_filters_0_1),
        "1.0": SchemaSpec(canonical="1.0"),
    },
}


def validate_schema_version(config_name: str, version: Optional[str]) -> SchemaSpec:
    """Look up the handler for a declared schema version."""
    versions = SUPPORTED_SCHEMAS.get(config_name)
    if versions is None:
        raise ConfigError(f"Unsupported configuration type '{config_name}'")

    known = ", ".join(sorted(versions))
    if version is None:
        raise ConfigError(
            f"{config_name} configuration must declare 'schema_version' (supported: [{known}])"
        )

    spec = versions.get(str(version))
    if spec is None:
        raise ConfigError(
            f"{config_name} configuration references unsupported schema_version '{version}'. "
            f"Supported versions: [{known}]"
        )
    return spec
