"""Configuration loading and validation logic."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Sequence
import json
import tomllib

import yaml

from .entries import DEFAULT_EXCLUDE_SUFFIXES, DEFAULT_INCLUDE_EXTENSIONS


ConfigLoader = Callable[[Any], Mapping[str, Any]]

CONFIG_STEM = "crokit"

FILE_LOADERS: Dict[str, ConfigLoader] = {
    ".toml": lambda stream: tomllib.load(stream),
    ".json": lambda stream: json.load(stream),
    ".yaml": lambda stream: yaml.safe_load(stream),
    ".yml": lambda stream: yaml.safe_load(stream),
}
"""Mapping of file suffixes to loader callables."""


def load_config_file(path: Path) -> Mapping[str, Any]:
    """Load and decode a configuration mapping from ``path``."""

    suffix = path.suffix.lower()
    loader = FILE_LOADERS.get(suffix)
    if loader is None:
        supported = ", ".join(sorted(FILE_LOADERS)) or "<none>"
        raise ValueError(
            f"Unsupported configuration file extension: {suffix}. Supported: {supported}"
        )

    mode = "rb" if suffix == ".toml" else "r"
    kwargs: Dict[str, Any] = {}
    if mode == "r":
        kwargs["encoding"] = "utf-8"

    with path.open(mode, **kwargs) as handle:
        try:
            data = loader(handle)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid configuration file '{path}': {exc}") from exc

    # An empty YAML document decodes to None.
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise TypeError(f"Configuration file '{path}' must contain a mapping at the root")
    return data


def find_config_file(root: Path) -> Path | None:
    """Return the single ``crokit.*`` file in ``root``, if any."""

    candidates = [
        root / f"{CONFIG_STEM}{suffix}"
        for suffix in sorted(FILE_LOADERS)
        if (root / f"{CONFIG_STEM}{suffix}").is_file()
    ]
    if len(candidates) > 1:
        names = ", ".join(f"'{path.name}'" for path in candidates)
        raise ValueError(
            f"Multiple configuration files found: {names}. Only one format per project is allowed."
        )
    return candidates[0] if candidates else None


def normalize_string_list(value: Any, *, field_name: str) -> List[str]:
    """Coerce ``value`` into a list of trimmed strings."""

    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        text = str(value).strip()
        return [text] if text else []
    if isinstance(value, Sequence):
        result: List[str] = []
        for item in value:
            if not isinstance(item, (str, bytes)):
                raise TypeError(f"{field_name} entries must be strings")
            text = str(item).strip()
            if text:
                result.append(text)
        return result
    raise TypeError(f"{field_name} must be a string or sequence of strings")


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name, {})
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise TypeError(f"[{name}] must be a table")
    return section


def _optional_bool(section: Mapping[str, Any], key: str, default: bool, *, label: str) -> bool:
    value = section.get(key)
    if value is None:
        return default
    if not isinstance(value, bool):
        raise TypeError(f"{label}.{key} must be a boolean")
    return value


@dataclass(frozen=True, slots=True)
class RollupPlugin:
    """A Rollup plugin import and the expression that instantiates it."""

    module: str
    name: str
    call: str

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "RollupPlugin":
        module = data.get("import")
        name = data.get("name")
        if not module or not name:
            raise ValueError("bundle.plugins entries require 'import' and 'name'")
        call = data.get("call") or f"{name}()"
        return cls(module=str(module), name=str(name), call=str(call))


DEFAULT_PLUGINS: tuple[RollupPlugin, ...] = (
    RollupPlugin("@rollup/plugin-node-resolve", "resolve", "resolve()"),
    RollupPlugin("@rollup/plugin-commonjs", "commonjs", "commonjs()"),
    RollupPlugin("rollup-plugin-terser", "{ terser }", "terser()"),
)


@dataclass(slots=True)
class BundleSettings:
    output_dir: Path
    format: str = "es"
    package_name: str = "cro-components"
    require_package: bool = True
    plugins: List[RollupPlugin] = field(default_factory=lambda: list(DEFAULT_PLUGINS))

    @classmethod
    def from_mapping(cls, section: Mapping[str, Any], *, root: Path) -> "BundleSettings":
        plugins_section = section.get("plugins")
        plugins = list(DEFAULT_PLUGINS)
        if plugins_section is not None:
            if not isinstance(plugins_section, Sequence) or isinstance(plugins_section, (str, bytes)):
                raise TypeError("bundle.plugins must be an array of tables")
            plugins = []
            for entry in plugins_section:
                if not isinstance(entry, Mapping):
                    raise TypeError("bundle.plugins entries must be tables")
                plugins.append(RollupPlugin.from_mapping(entry))

        return cls(
            output_dir=_resolve_dir(root, section.get("output_dir") or "dist"),
            format=str(section.get("format") or "es"),
            package_name=str(section.get("package_name") or "cro-components"),
            require_package=_optional_bool(section, "require_package", True, label="bundle"),
            plugins=plugins,
        )


@dataclass(slots=True)
class ExportSettings:
    output_dir: Path
    types_file: str | None = None
    include_manifest: bool = False

    @classmethod
    def from_mapping(cls, section: Mapping[str, Any], *, root: Path, default_output: Path) -> "ExportSettings":
        output_dir = section.get("output_dir")
        types_file = section.get("types_file")
        return cls(
            output_dir=_resolve_dir(root, output_dir) if output_dir else default_output,
            types_file=str(types_file) if types_file else None,
            include_manifest=_optional_bool(section, "include_manifest", False, label="exports"),
        )


@dataclass(slots=True)
class ScaffoldSettings:
    base_dir: Path
    tag_prefix: str = "cro"
    story_title: str = "CRO Components"

    @classmethod
    def from_mapping(cls, section: Mapping[str, Any], *, root: Path) -> "ScaffoldSettings":
        tag_prefix = str(section.get("tag_prefix") or "cro").strip().strip("-")
        if not tag_prefix:
            raise ValueError("scaffold.tag_prefix cannot be empty")
        return cls(
            base_dir=_resolve_dir(root, section.get("base_dir") or "cro-components"),
            tag_prefix=tag_prefix,
            story_title=str(section.get("story_title") or "CRO Components"),
        )


def _resolve_dir(root: Path, value: Any) -> Path:
    path = Path(str(value)).expanduser()
    return path if path.is_absolute() else root / path


@dataclass(slots=True)
class ProjectConfig:
    root: Path
    component_dirs: List[Path]
    include_extensions: List[str]
    exclude_suffixes: List[str]
    bundle: BundleSettings
    exports: ExportSettings
    scaffold: ScaffoldSettings
    strict_collisions: bool = False
    source: Path | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any], *, root: Path, source: Path | None = None) -> "ProjectConfig":
        components = _section(data, "components")
        dirs = normalize_string_list(components.get("dirs"), field_name="components.dirs")
        if "dirs" not in components:
            dirs = ["stories", "cro-components"]

        include_extensions = normalize_string_list(
            components.get("include_extensions"),
            field_name="components.include_extensions",
        ) or list(DEFAULT_INCLUDE_EXTENSIONS)
        exclude_suffixes = normalize_string_list(
            components.get("exclude_suffixes"),
            field_name="components.exclude_suffixes",
        )
        if "exclude_suffixes" not in components:
            exclude_suffixes = list(DEFAULT_EXCLUDE_SUFFIXES)

        bundle = BundleSettings.from_mapping(_section(data, "bundle"), root=root)
        exports = ExportSettings.from_mapping(
            _section(data, "exports"),
            root=root,
            default_output=bundle.output_dir,
        )
        scaffold = ScaffoldSettings.from_mapping(_section(data, "scaffold"), root=root)

        return cls(
            root=root,
            component_dirs=[_resolve_dir(root, value) for value in dirs],
            include_extensions=include_extensions,
            exclude_suffixes=exclude_suffixes,
            bundle=bundle,
            exports=exports,
            scaffold=scaffold,
            strict_collisions=_optional_bool(components, "strict_collisions", False, label="components"),
            source=source,
        )

    @classmethod
    def from_directory(cls, root: Path) -> "ProjectConfig":
        root = root.resolve()
        path = find_config_file(root)
        data = load_config_file(path) if path is not None else {}
        return cls.from_mapping(data, root=root, source=path)

    @property
    def manifest_path(self) -> Path:
        return self.root / "package.json"


__all__ = [
    "BundleSettings",
    "CONFIG_STEM",
    "ConfigLoader",
    "DEFAULT_PLUGINS",
    "ExportSettings",
    "FILE_LOADERS",
    "ProjectConfig",
    "RollupPlugin",
    "ScaffoldSettings",
    "find_config_file",
    "load_config_file",
    "normalize_string_list",
]
