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

from fixed_point_ema.config_validation.schema_registry import validate_schema_version
from fixed_point_ema.exceptions import ConfigError


def validate_filter_bank_config(raw: dict) -> dict:
    """Validate filter bank YAML payload and return normalized mapping."""
    if not isinstance(raw, dict):
        raise ValueError("Invalid filter configuration: root must be a mapping")

    try:
        schema_spec = validate_schema_version("filters", raw.get("schema_version"))
    except ConfigError as exc:
        raise ValueError(str(exc)) from exc

    working = dict(raw)
    if schema_spec.migration is not None:
        migrated = schema_spec.migration(working)
        working = dict(migrated)

    working["schema_version"] = schema_spec.canonical

    allowed_root = {"schema_version", "filters"}
    extra_root = sorted(set(working.keys()) - allowed_root)
    if extra_root:
        raise ValueError(f"Invalid filter configuration: unexpected keys {extra_root}")

    filters = working.get("filters", [])
    if filters is None:
        filters = []
    if not isinstance(filters, list):
        raise ValueError("Invalid filter configuration: 'filters' must be a list")

    normalized = []
    for idx, entry in enumerate(filters, start=1):
        if not isinstance(entry, dict):
            raise ValueError(
                f"Invalid filter configuration: entry #{idx} must be a mapping"
            )

        allowed_entry = {"name", "enabled", "params"}
        extra_entry = sorted(set(entry.keys()) - allowed_entry)
        if extra_entry:
            raise ValueError(
                f"Invalid filter configuration: entry #{idx} has unexpected keys {extra_entry}"
            )

        if "name" not in entry:
            raise ValueError(f"Invalid filter configuration: entry #{idx} missing keys ['name']")

        name = entry["name"]
        if not isinstance(name, str) or not name.strip():
            raise ValueError(
                f"Invalid filter configuration: entry #{idx} 'name' must be a non-empty string"
            )
        enabled = entry.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError(
                f"Invalid filter configuration: entry #{idx} 'enabled' must be a boolean"
            )
        params = entry.get("params", {})
        if params is None:
            params = {}
        if not isinstance(params, dict):
            raise ValueError(
                f"Invalid filter configuration: entry #{idx} 'params' must be a mapping"
            )

        normalized.append(
            {
                "name": name.strip(),
                "enabled": enabled,
                "params": dict(params),
            }
        )

    return {
        "schema_version": working["schema_version"],
        "filters": normalized,
    }
