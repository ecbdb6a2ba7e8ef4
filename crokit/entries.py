"""Component entry-point discovery for multi-entry bundler inputs."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Sequence
import os


DEFAULT_INCLUDE_EXTENSIONS: tuple[str, ...] = (".js", ".ts")
DEFAULT_EXCLUDE_SUFFIXES: tuple[str, ...] = (".stories.js", ".test.js")


class EntryScanError(RuntimeError):
    """Raised when a component directory cannot be listed."""

    def __init__(self, path: Path, error: OSError):
        super().__init__(f"Unable to scan '{path}': {error.strerror or error}")
        self.path = path
        self.error = error


class EntryCollisionError(ValueError):
    """Raised in strict mode when two files map to the same entry name."""

    def __init__(self, collision: "EntryCollision"):
        super().__init__(
            f"Entry '{collision.name}' is defined by both '{collision.previous}' and '{collision.replacement}'"
        )
        self.collision = collision


@dataclass(frozen=True, slots=True)
class EntryFile:
    path: Path
    name: str
    excluded: bool


@dataclass(frozen=True, slots=True)
class EntryCollision:
    name: str
    previous: str
    replacement: str


@dataclass(slots=True)
class EntryResolution:
    entries: Dict[str, str] = field(default_factory=dict)
    collisions: List[EntryCollision] = field(default_factory=list)
    scanned_roots: List[Path] = field(default_factory=list)
    missing_roots: List[Path] = field(default_factory=list)


def _normalize_suffixes(values: Iterable[str], *, field_name: str) -> tuple[str, ...]:
    suffixes: List[str] = []
    for value in values:
        if not isinstance(value, str):
            raise TypeError(f"{field_name} entries must be strings")
        text = value.strip()
        if text and text not in suffixes:
            suffixes.append(text)
    return tuple(suffixes)


def entry_name(path: Path) -> str:
    """Return the entry name for ``path``: its file name without the final extension."""

    stem, _ = os.path.splitext(path.name)
    return stem


class EntryPointResolver:
    """Map component source files below one or more roots to bundle entry names.

    Files qualify when their name ends with one of ``include_extensions`` and
    with none of ``exclude_suffixes``. The entry name ignores the directory the
    file lives in, so two files sharing a base name collide; roots are folded in
    the given order and the later file replaces the earlier one. Directory
    listings are sorted so the outcome of a collision does not depend on the
    filesystem.
    """

    def __init__(
        self,
        include_extensions: Iterable[str] = DEFAULT_INCLUDE_EXTENSIONS,
        exclude_suffixes: Iterable[str] = DEFAULT_EXCLUDE_SUFFIXES,
        *,
        strict: bool = False,
    ) -> None:
        self.include_extensions = _normalize_suffixes(include_extensions, field_name="include_extensions")
        self.exclude_suffixes = _normalize_suffixes(exclude_suffixes, field_name="exclude_suffixes")
        if not self.include_extensions:
            raise ValueError("At least one include extension is required")
        self.strict = strict

    def classify(self, path: Path) -> EntryFile:
        file_name = path.name
        included = file_name.endswith(self.include_extensions)
        excluded = not included or file_name.endswith(self.exclude_suffixes)
        return EntryFile(path=path, name=entry_name(path), excluded=excluded)

    def iter_files(self, root: Path) -> Iterator[Path]:
        """Yield every file below ``root`` depth-first in sorted order."""

        try:
            children = sorted(root.iterdir(), key=lambda child: child.name)
        except OSError as exc:
            raise EntryScanError(root, exc) from exc

        for child in children:
            if child.is_dir():
                yield from self.iter_files(child)
            elif child.is_file():
                yield child

    def resolve_detailed(self, roots: Sequence[Path | str]) -> EntryResolution:
        result = EntryResolution()

        for raw_root in roots:
            root = Path(raw_root)
            if not root.exists():
                result.missing_roots.append(root)
                continue
            result.scanned_roots.append(root)

            for path in self.iter_files(root):
                record = self.classify(path)
                if record.excluded:
                    continue

                replacement = str(record.path)
                previous = result.entries.get(record.name)
                if previous is not None and previous != replacement:
                    collision = EntryCollision(name=record.name, previous=previous, replacement=replacement)
                    if self.strict:
                        raise EntryCollisionError(collision)
                    result.collisions.append(collision)
                result.entries[record.name] = replacement

        return result

    def resolve(self, roots: Sequence[Path | str]) -> Dict[str, str]:
        return self.resolve_detailed(roots).entries


def resolve(
    roots: Sequence[Path | str],
    include_extensions: Iterable[str] = DEFAULT_INCLUDE_EXTENSIONS,
    exclude_suffixes: Iterable[str] = DEFAULT_EXCLUDE_SUFFIXES,
) -> Dict[str, str]:
    """Return the ``name -> path`` entry mapping for ``roots``."""

    return EntryPointResolver(include_extensions, exclude_suffixes).resolve(roots)


__all__ = [
    "DEFAULT_EXCLUDE_SUFFIXES",
    "DEFAULT_INCLUDE_EXTENSIONS",
    "EntryCollision",
    "EntryCollisionError",
    "EntryFile",
    "EntryPointResolver",
    "EntryResolution",
    "EntryScanError",
    "entry_name",
    "resolve",
]
