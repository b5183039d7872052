"""Writing Kubernetes objects to YAML manifest files."""

from __future__ import annotations

import os
from dataclasses import fields, is_dataclass
from datetime import timedelta
from enum import Enum
from typing import Any

import yaml

from exprunner.utility import format_duration


def _plain(obj: Any) -> Any:
    if hasattr(obj, "to_dict") and callable(obj.to_dict):
        return _plain(obj.to_dict())
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _plain(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, Enum):
        return _plain(obj.value)
    if isinstance(obj, timedelta):
        return format_duration(obj)
    if isinstance(obj, dict):
        return {str(key): _plain(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_plain(item) for item in obj]
    return obj


def write_kubernetes_manifest(obj: Any, path: str | os.PathLike) -> None:
    """Serialise ``obj`` as YAML and write it to ``path``, replacing any file there."""
    document = _plain(obj)
    with open(path, "w", encoding="utf-8") as handle:
        yaml.safe_dump(
            document,
            handle,
            default_flow_style=False,
            sort_keys=True,
            allow_unicode=True,
        )