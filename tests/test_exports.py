from __future__ import annotations

from pathlib import Path
import json
import tempfile
import unittest

from crokit.exports import ExportsError, build_exports_map, generate_exports, render_type_definitions
from crokit.manifest import ManifestError


class GenerateExportsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        self.manifest_path = self.root / "package.json"
        self.manifest_path.write_text(json.dumps({"name": "cro-components", "version": "1.0.0"}))
        self.output_dir = self.root / "dist"
        self.output_dir.mkdir()
        for name in ("Overlay.js", "Button.js", "Header.js", "Button.js.map", "notes.txt"):
            (self.output_dir / name).write_text("")

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_build_exports_map(self) -> None:
        exports = build_exports_map(self.output_dir, self.root)
        self.assertEqual(
            exports,
            {
                "./Button": "./dist/Button.js",
                "./Header": "./dist/Header.js",
                "./Overlay": "./dist/Overlay.js",
            },
        )
        self.assertEqual(list(exports), ["./Button", "./Header", "./Overlay"])

    def test_generate_exports_updates_manifest(self) -> None:
        result = generate_exports(self.manifest_path, self.output_dir)
        manifest = json.loads(self.manifest_path.read_text())
        self.assertTrue(result.manifest_updated)
        self.assertEqual(result.components, ["Button", "Header", "Overlay"])
        self.assertEqual(manifest["exports"]["./Button"], "./dist/Button.js")
        self.assertEqual(manifest["version"], "1.0.0")
        self.assertNotIn("types", manifest)
        self.assertTrue(self.manifest_path.read_text().startswith('{\n  "name"'))

    def test_generate_exports_with_types_and_manifest_entry(self) -> None:
        result = generate_exports(
            self.manifest_path,
            self.output_dir,
            types_file="index.d.ts",
            include_manifest=True,
        )
        manifest = json.loads(self.manifest_path.read_text())
        self.assertEqual(manifest["exports"]["./package.json"], "./package.json")
        self.assertEqual(manifest["types"], "./dist/index.d.ts")
        self.assertEqual(result.types_path, self.output_dir / "index.d.ts")
        types = result.types_path.read_text()
        self.assertIn("export declare const Button: any;", types)
        self.assertNotIn("package.json", types)

    def test_existing_types_field_is_preserved(self) -> None:
        self.manifest_path.write_text(json.dumps({"name": "app", "types": "./types/custom.d.ts"}))
        generate_exports(self.manifest_path, self.output_dir, types_file="index.d.ts")
        manifest = json.loads(self.manifest_path.read_text())
        self.assertEqual(manifest["types"], "./types/custom.d.ts")

    def test_empty_output_dir_leaves_manifest_untouched(self) -> None:
        empty = self.root / "empty"
        empty.mkdir()
        before = self.manifest_path.read_text()
        result = generate_exports(self.manifest_path, empty)
        self.assertEqual(result.exports, {})
        self.assertFalse(result.manifest_updated)
        self.assertEqual(self.manifest_path.read_text(), before)

    def test_missing_output_dir_raises(self) -> None:
        with self.assertRaises(ExportsError):
            generate_exports(self.manifest_path, self.root / "missing")

    def test_missing_manifest_raises(self) -> None:
        self.manifest_path.unlink()
        with self.assertRaises(ManifestError):
            generate_exports(self.manifest_path, self.output_dir)

    def test_type_definitions_skip_invalid_identifiers(self) -> None:
        text = render_type_definitions(["Button", "my-widget"])
        self.assertIn("Button", text)
        self.assertNotIn("my-widget", text)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
