"""Command line interface for the component tooling."""
from __future__ import annotations

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import Iterable
import json
import sys

from .bundle import BundleEngine, BundleError, BundleOptions
from .command_runner import CommandError, RecordingCommandRunner, SubprocessCommandRunner
from .config_loader import ProjectConfig
from .entries import EntryCollision, EntryCollisionError, EntryScanError
from .exports import ExportsError, generate_exports
from .manifest import ManifestError
from .project_setup import setup_project
from .scaffold import ScaffoldError, create_component


def _error(message: object) -> None:
    print(f"Error: {message}", file=sys.stderr)


def _warn_collisions(collisions: Iterable[EntryCollision]) -> None:
    for collision in collisions:
        print(
            f"Warning: entry '{collision.name}' from '{collision.previous}' "
            f"is replaced by '{collision.replacement}'",
            file=sys.stderr,
        )


def _parse_arguments(argv: Iterable[str]) -> Namespace:
    parser = ArgumentParser(prog="crokit", description="Web component build and scaffolding tools")
    parser.add_argument("--root", help="Project root (defaults to the current directory)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    entries_parser = subparsers.add_parser("entries", help="List the resolved bundle entry points")
    entries_parser.add_argument("--json", action="store_true", help="Print the entry map as JSON")

    build_parser = subparsers.add_parser("build", help="Bundle components and update package exports")
    build_parser.add_argument("--force", action="store_true", help="Skip the library dependency check")
    build_parser.add_argument("--dry-run", action="store_true", help="Print commands without executing them")
    build_parser.add_argument("--skip-exports", action="store_true", help="Do not update package.json exports")

    subparsers.add_parser("exports", help="Update package.json exports from the bundle output")

    generate_parser = subparsers.add_parser("generate", help="Create a new component")
    generate_parser.add_argument("path", help="Component name or folder/ComponentName")
    generate_parser.add_argument("--overwrite", action="store_true", help="Replace existing component files")

    subparsers.add_parser("setup", help="Prepare a consuming project")

    return parser.parse_args(list(argv))


def _load_config(args: Namespace, workspace: Path) -> ProjectConfig:
    root = Path(args.root).expanduser() if getattr(args, "root", None) else workspace
    return ProjectConfig.from_directory(root)


def main(argv: Iterable[str] | None = None) -> int:
    args = _parse_arguments(sys.argv[1:] if argv is None else argv)
    workspace = Path.cwd()

    try:
        config = _load_config(args, workspace)
    except (OSError, TypeError, ValueError) as exc:
        _error(exc)
        return 2

    if args.command == "entries":
        return _handle_entries(args, config)
    if args.command == "build":
        return _handle_build(args, config)
    if args.command == "exports":
        return _handle_exports(args, config)
    if args.command == "generate":
        return _handle_generate(args, config)
    if args.command == "setup":
        return _handle_setup(args, config)
    raise ValueError(f"Unknown command: {args.command}")


def _handle_entries(args: Namespace, config: ProjectConfig) -> int:
    engine = BundleEngine(config=config, command_runner=RecordingCommandRunner())
    try:
        resolution = engine.resolver().resolve_detailed(config.component_dirs)
    except (EntryCollisionError, EntryScanError) as exc:
        _error(exc)
        return 1

    _warn_collisions(resolution.collisions)
    if args.json:
        print(json.dumps(resolution.entries, indent=2, sort_keys=True))
        return 0
    if not resolution.entries:
        print("No component entry points found")
        return 0
    width = max(len(name) for name in resolution.entries)
    for name in sorted(resolution.entries):
        print(f"{name.ljust(width)}  {resolution.entries[name]}")
    return 0


def _handle_build(args: Namespace, config: ProjectConfig) -> int:
    runner: SubprocessCommandRunner | RecordingCommandRunner
    if args.dry_run:
        runner = RecordingCommandRunner()
    else:
        runner = SubprocessCommandRunner()

    engine = BundleEngine(config=config, command_runner=runner)
    try:
        plan = engine.plan(BundleOptions(force=args.force))
    except (BundleError, EntryCollisionError, EntryScanError) as exc:
        _error(exc)
        return 1

    _warn_collisions(plan.collisions)
    print(f"Found components: {', '.join(sorted(plan.entries))}")

    try:
        engine.execute(plan, dry_run=args.dry_run)
    except CommandError as exc:
        _error(exc)
        print("Rollup build failed. Install it with `npm install --save-dev rollup`.", file=sys.stderr)
        return 1
    except OSError as exc:
        _error(exc)
        return 1

    if args.dry_run and isinstance(runner, RecordingCommandRunner):
        for line in runner.iter_formatted():
            print(line)
        return 0

    print(f"Bundled {len(plan.entries)} components into {plan.output_dir}")
    if args.skip_exports:
        return 0
    return _handle_exports(args, config)


def _handle_exports(args: Namespace, config: ProjectConfig) -> int:
    settings = config.exports
    try:
        result = generate_exports(
            config.manifest_path,
            settings.output_dir,
            types_file=settings.types_file,
            include_manifest=settings.include_manifest,
        )
    except (ExportsError, ManifestError) as exc:
        _error(exc)
        return 1

    if not result.exports:
        print(f"Warning: No JavaScript files found in {settings.output_dir}", file=sys.stderr)
        return 0

    print(f"Generated exports for {len(result.components)} components")
    if result.types_path is not None:
        print(f"Wrote type definitions to {result.types_path}")
    print(f"Available exports: {', '.join(key for key in result.exports if key != './package.json')}")
    return 0


def _handle_generate(args: Namespace, config: ProjectConfig) -> int:
    settings = config.scaffold
    try:
        result = create_component(
            settings.base_dir,
            args.path,
            tag_prefix=settings.tag_prefix,
            story_title=settings.story_title,
            overwrite=args.overwrite,
        )
    except ScaffoldError as exc:
        _error(exc)
        return 1

    component = result.component
    print(f"Created component: {component.name}")
    print(f"Location: {result.directory}")
    print(f"Tag name: <{component.tag}>")
    if component.folder:
        print(f"Nested path: {component.folder}")
    print("Files created:")
    for path in result.files:
        print(f"  - {path.name}")
    return 0


def _handle_setup(args: Namespace, config: ProjectConfig) -> int:
    try:
        report = setup_project(
            config.root,
            package_name=config.bundle.package_name,
            components_dir=config.scaffold.base_dir,
        )
    except (ManifestError, OSError) as exc:
        _error(exc)
        return 1

    if report.skipped:
        print(report.skipped)
        return 0
    for action in report.actions:
        print(action)
    print("Setup complete" if report.actions else "Project already set up")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
