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

"""JSON structured logging with a per-run context (run id and sample source)."""

from __future__ import annotations

import json
import logging
import subprocess
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import numpy as np


_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar(
    "fixed_point_ema_logging_context",
    default={"run_id": None, "source": None},
)


def _json_default(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return str(value)


def _serialize(obj: Any) -> Any:
    if isinstance(obj, Mapping):
        return {k: _serialize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_serialize(v) for v in obj]
    if isinstance(obj, Path):
        return str(obj)
    return obj


# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
    "taskName",
}
_CONTEXT_KEYS = ("run_id", "source")


class StructuredFormatter(logging.Formatter):
    """One JSON object per record, tagged with the active run_id and source."""

    def format(self, record: logging.LogRecord) -> str:
        context = _CONTEXT.get()
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _CONTEXT_KEYS:
            payload[key] = getattr(record, key, context.get(key))

        extra = {
            key: _serialize(value)
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRS and key not in _CONTEXT_KEYS
        }

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        if extra:
            payload["extra"] = extra

        return json.dumps(payload, default=_json_default)


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level '{level}'")
    return resolved


def configure_logging(
    *,
    run_id: str,
    log_dir: Optional[Path] = None,
    level: int | str = logging.INFO,
) -> None:
    """Route the root logger to stderr, and to ``<log_dir>/<run_id>.log`` when given, as JSON lines."""

    root = logging.getLogger()
    root.setLevel(_resolve_level(level))

    # reconfiguring replaces, never stacks
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_dir is not None:
        log_dir = Path(log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_dir / f"{run_id}.log", encoding="utf-8"))

    formatter = StructuredFormatter()
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(root.level)
        root.addHandler(handler)

    set_run_context(run_id=run_id)


def generate_run_id() -> str:
    """Return a short unique identifier for the current run."""
    return datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S") + "-" + uuid.uuid4().hex[:8]


def set_run_context(**updates: Any) -> Token:
    """Merge updates into the current logging context; returns a token for reset."""
    ctx = dict(_CONTEXT.get())
    ctx.update(updates)
    return _CONTEXT.set(ctx)


def reset_run_context(token: Token) -> None:
    _CONTEXT.reset(token)


@contextmanager
def run_context(**updates: Any):
    """Context manager that temporarily overrides logging context."""
    token = set_run_context(**updates)
    try:
        yield
    finally:
        reset_run_context(token)


def get_git_hash() -> Optional[str]:
    """Return the current git commit hash if available."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "HEAD"],
            check=False,
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            return None
        return result.stdout.strip()
    except (OSError, ValueError):
        return None


def log_run_metadata(
    logger: logging.Logger,
    *,
    filter_config_path: Path,
    input_path: Path,
    git_hash: Optional[str],
) -> None:
    """Emit configuration and environment metadata for reproducibility."""
    metadata: Dict[str, Any] = {
        "git_hash": git_hash,
        "filter_config_path": str(filter_config_path),
        "input_path": str(input_path),
    }

    try:
        metadata["filter_config_yaml"] = Path(filter_config_path).read_text(encoding="utf-8")
    except OSError:
        metadata["filter_config_yaml"] = None

    logger.info("run metadata snapshot", extra=metadata)
