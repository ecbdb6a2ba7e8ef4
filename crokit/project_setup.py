"""One-time setup for projects that consume the component library."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from .manifest import load_manifest, write_manifest


BUILD_SCRIPT_NAME = "build-cro-components"
BUILD_SCRIPT_COMMAND = "crokit build"

GITIGNORE_ENTRIES: tuple[str, ...] = (
    "# CRO Components",
    "cro-component-exports/",
    "storybook-static/",
    "coverage/",
    "",
    "# Keep cro components",
    "!cro-components/",
)

README_TEMPLATE = """\
# CRO Components

This directory holds project-specific components that extend the base
component library.

## Creating a New Component

```bash
crokit generate MyButton
crokit generate forms/ContactForm
```

`crokit generate MyButton` creates:

- `cro-my-button/MyButton.js` - the component implementation
- `cro-my-button/MyButton.stories.js` - Storybook stories
- `cro-my-button/MyButton.test.js` - Jest tests

## Building and Exporting

```bash
npm run build-cro-components
```

Every component is bundled under its own name (`MyButton`, `ContactForm`).
Names must be unique across folders; a later file with the same name replaces
an earlier one and the build prints a warning.
"""


@dataclass(slots=True)
class SetupReport:
    skipped: str | None = None
    actions: List[str] = field(default_factory=list)


def is_consuming_project(root: Path, package_name: str) -> bool:
    manifest_path = root / "package.json"
    if not manifest_path.is_file():
        return False
    return load_manifest(manifest_path).get("name") != package_name


def ensure_components_dir(components_dir: Path) -> bool:
    if components_dir.exists():
        return False
    components_dir.mkdir(parents=True)
    (components_dir / "README.md").write_text(README_TEMPLATE, encoding="utf-8")
    return True


def add_build_script(manifest_path: Path) -> bool:
    manifest = load_manifest(manifest_path)
    scripts = manifest.get("scripts")
    if not isinstance(scripts, dict):
        scripts = {}
        manifest["scripts"] = scripts
    if scripts.get(BUILD_SCRIPT_NAME):
        return False
    scripts[BUILD_SCRIPT_NAME] = BUILD_SCRIPT_COMMAND
    write_manifest(manifest_path, manifest)
    return True


def update_gitignore(path: Path, entries: Sequence[str] = GITIGNORE_ENTRIES) -> List[str]:
    """Append the ``entries`` not already present in ``path``; blank lines are kept for layout."""

    existing = path.read_text(encoding="utf-8") if path.exists() else ""
    present = {line.strip() for line in existing.splitlines()}
    missing = [entry for entry in entries if entry and entry not in present]
    if not missing:
        return []

    block = [entry for entry in entries if not entry or entry in missing]
    prefix = "" if not existing or existing.endswith("\n") else "\n"
    separator = "\n" if existing.strip() else ""
    with path.open("a", encoding="utf-8") as handle:
        handle.write(prefix + separator + "\n".join(block).strip("\n") + "\n")
    return missing


def setup_project(
    root: Path,
    *,
    package_name: str = "cro-components",
    components_dir: Path | None = None,
) -> SetupReport:
    report = SetupReport()
    if not is_consuming_project(root, package_name):
        report.skipped = f"Skipping setup: no consuming project at '{root}'"
        return report

    components_dir = components_dir or root / "cro-components"
    if ensure_components_dir(components_dir):
        report.actions.append(f"Created {components_dir.name} directory with README")
    if add_build_script(root / "package.json"):
        report.actions.append(f"Added '{BUILD_SCRIPT_NAME}' script to package.json")
    if update_gitignore(root / ".gitignore"):
        report.actions.append("Updated .gitignore")
    return report


__all__ = [
    "BUILD_SCRIPT_COMMAND",
    "BUILD_SCRIPT_NAME",
    "GITIGNORE_ENTRIES",
    "SetupReport",
    "add_build_script",
    "ensure_components_dir",
    "is_consuming_project",
    "setup_project",
    "update_gitignore",
]
