"""Expose bundled components through the package manifest ``exports`` map."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List
import os

from .manifest import load_manifest, write_manifest


class ExportsError(RuntimeError):
    """Raised when the bundle output directory cannot be exported."""


@dataclass(slots=True)
class ExportsResult:
    exports: Dict[str, str] = field(default_factory=dict)
    components: List[str] = field(default_factory=list)
    types_path: Path | None = None
    manifest_updated: bool = False


def _relative_posix(path: Path, start: Path) -> str:
    return Path(os.path.relpath(path, start)).as_posix()


def build_exports_map(output_dir: Path, package_root: Path, *, include_manifest: bool = False) -> Dict[str, str]:
    """Return ``{"./Name": "./<output>/Name.js"}`` for every bundled ``.js`` file."""

    if not output_dir.is_dir():
        raise ExportsError(f"Exports folder not found: {output_dir}")

    prefix = _relative_posix(output_dir, package_root)
    exports: Dict[str, str] = {}
    for path in sorted(output_dir.iterdir(), key=lambda item: item.name):
        if not path.is_file() or path.suffix != ".js":
            continue
        exports[f"./{path.stem}"] = f"./{prefix}/{path.name}"

    if exports and include_manifest:
        exports["./package.json"] = "./package.json"
    return exports


def render_type_definitions(names: List[str]) -> str:
    lines = ["// Auto-generated type definitions for bundled components"]
    lines.extend(f"export declare const {name}: any;" for name in names if name.isidentifier())
    return "\n".join(lines) + "\n"


def generate_exports(
    manifest_path: Path,
    output_dir: Path,
    *,
    types_file: str | None = None,
    include_manifest: bool = False,
) -> ExportsResult:
    """Rewrite the manifest ``exports`` field from the contents of ``output_dir``.

    Nothing is written when the output directory holds no ``.js`` files. With
    ``types_file`` a declaration file is written next to the bundles and the
    manifest ``types`` field is set if it was missing.
    """

    package_root = manifest_path.parent
    exports = build_exports_map(output_dir, package_root, include_manifest=include_manifest)
    result = ExportsResult(exports=exports)
    if not exports:
        return result

    result.components = [key[2:] for key in exports if key != "./package.json"]

    manifest = load_manifest(manifest_path)
    manifest["exports"] = exports
    if types_file:
        types_path = output_dir / types_file
        if not manifest.get("types"):
            manifest["types"] = f"./{_relative_posix(types_path, package_root)}"
        types_path.write_text(render_type_definitions(result.components), encoding="utf-8")
        result.types_path = types_path

    write_manifest(manifest_path, manifest)
    result.manifest_updated = True
    return result


__all__ = [
    "ExportsError",
    "ExportsResult",
    "build_exports_map",
    "generate_exports",
    "render_type_definitions",
]
