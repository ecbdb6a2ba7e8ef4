"""Bundle planning and execution around an external Rollup install."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence
import json
import os

from .command_runner import CommandResult, CommandRunner
from .config_loader import BundleSettings, ProjectConfig
from .entries import EntryCollision, EntryPointResolver
from .manifest import ManifestError, declared_dependency, load_manifest


TEMP_CONFIG_NAME = ".crokit-rollup.config.mjs"


class BundleError(RuntimeError):
    """Raised when a bundle cannot be planned or the project is not set up for it."""


@dataclass(slots=True)
class BundleOptions:
    force: bool = False


@dataclass(slots=True)
class BundleStep:
    description: str
    command: Sequence[str]
    cwd: Path


@dataclass(slots=True)
class BundlePlan:
    entries: Dict[str, str]
    collisions: List[EntryCollision]
    missing_roots: List[Path]
    config_path: Path
    config_text: str
    output_dir: Path
    steps: List[BundleStep] = field(default_factory=list)


def validate_project(root: Path, package_name: str, *, force: bool = False) -> None:
    """Ensure ``root`` is a Node project that depends on or is ``package_name``.

    A project passes when its manifest declares the package, when the package
    is linked into ``node_modules``, or when ``force`` is set. The library
    package itself always passes.
    """

    manifest_path = root / "package.json"
    try:
        manifest = load_manifest(manifest_path)
    except ManifestError as exc:
        raise BundleError(f"{exc}. Are you in a Node.js project?") from exc

    if force or manifest.get("name") == package_name:
        return
    if declared_dependency(manifest, package_name):
        return
    if (root / "node_modules" / package_name / "package.json").is_file():
        return

    raise BundleError(
        f"{package_name} not found. Install it with `npm install {package_name}`, "
        f"link it with `npm link {package_name}`, or rerun with --force."
    )


def render_rollup_config(entries: Dict[str, str], settings: BundleSettings) -> str:
    """Render an ES module Rollup configuration for ``entries``."""

    lines: List[str] = []
    for plugin in settings.plugins:
        lines.append(f"import {plugin.name} from {json.dumps(plugin.module)};")
    if lines:
        lines.append("")

    input_block = json.dumps(entries, indent=2, sort_keys=True).replace("\n", "\n  ")
    plugin_calls = ", ".join(plugin.call for plugin in settings.plugins)
    lines.extend(
        [
            "export default {",
            f"  input: {input_block},",
            "  output: {",
            f"    dir: {json.dumps(str(settings.output_dir))},",
            f"    format: {json.dumps(settings.format)},",
            '    entryFileNames: "[name].js"',
            "  },",
            f"  plugins: [{plugin_calls}]",
            "};",
            "",
        ]
    )
    return "\n".join(lines)


def rollup_command(root: Path, config_path: Path) -> List[str]:
    local_bin = root / "node_modules" / ".bin" / ("rollup.cmd" if os.name == "nt" else "rollup")
    if local_bin.exists():
        return [str(local_bin), "-c", str(config_path)]
    return ["npx", "rollup", "-c", str(config_path)]


class BundleEngine:
    def __init__(self, *, config: ProjectConfig, command_runner: CommandRunner) -> None:
        self._config = config
        self._command_runner = command_runner

    def resolver(self) -> EntryPointResolver:
        return EntryPointResolver(
            self._config.include_extensions,
            self._config.exclude_suffixes,
            strict=self._config.strict_collisions,
        )

    def plan(self, options: BundleOptions) -> BundlePlan:
        config = self._config
        if config.bundle.require_package:
            validate_project(config.root, config.bundle.package_name, force=options.force)

        resolution = self.resolver().resolve_detailed(config.component_dirs)
        if not resolution.entries:
            searched = ", ".join(str(path) for path in config.component_dirs) or "<none>"
            raise BundleError(f"No component entry points found (searched: {searched})")

        config_path = config.root / TEMP_CONFIG_NAME
        step = BundleStep(
            description="Bundle components with Rollup",
            command=rollup_command(config.root, config_path),
            cwd=config.root,
        )
        return BundlePlan(
            entries=resolution.entries,
            collisions=resolution.collisions,
            missing_roots=resolution.missing_roots,
            config_path=config_path,
            config_text=render_rollup_config(resolution.entries, config.bundle),
            output_dir=config.bundle.output_dir,
            steps=[step],
        )

    def execute(self, plan: BundlePlan, *, dry_run: bool) -> List[CommandResult]:
        results: List[CommandResult] = []
        if dry_run:
            for step in plan.steps:
                results.append(self._command_runner.run(step.command, cwd=step.cwd, note=step.description))
            return results

        plan.config_path.write_text(plan.config_text, encoding="utf-8")
        try:
            for step in plan.steps:
                result = self._command_runner.run(step.command, cwd=step.cwd, note=step.description, stream=True)
                results.append(result)
        finally:
            plan.config_path.unlink(missing_ok=True)
        return results


__all__ = [
    "BundleEngine",
    "BundleError",
    "BundleOptions",
    "BundlePlan",
    "BundleStep",
    "TEMP_CONFIG_NAME",
    "render_rollup_config",
    "rollup_command",
    "validate_project",
]
