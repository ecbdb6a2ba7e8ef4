"""Helpers for reading and writing ``package.json`` manifests."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict
import json


class ManifestError(RuntimeError):
    """Raised when a package manifest is missing or malformed."""


def load_manifest(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ManifestError(f"No package.json found at '{path}'")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Invalid JSON in '{path}': {exc.msg} (line {exc.lineno})") from exc
    if not isinstance(data, dict):
        raise ManifestError(f"Manifest '{path}' must contain a JSON object at the root")
    return data


def write_manifest(path: Path, data: Dict[str, Any]) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def declared_dependency(data: Dict[str, Any], package_name: str) -> bool:
    """Return True if ``package_name`` is listed in dependencies or devDependencies."""

    for section in ("dependencies", "devDependencies"):
        entries = data.get(section)
        if isinstance(entries, dict) and entries.get(package_name):
            return True
    return False


__all__ = ["ManifestError", "declared_dependency", "load_manifest", "write_manifest"]
