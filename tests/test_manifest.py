from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from crokit.manifest import ManifestError, declared_dependency, load_manifest, write_manifest


class ManifestTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = Path(self.temp_dir.name) / "package.json"

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_write_then_load(self) -> None:
        write_manifest(self.path, {"name": "app", "scripts": {}})
        self.assertEqual(self.path.read_text(), '{\n  "name": "app",\n  "scripts": {}\n}\n')
        self.assertEqual(load_manifest(self.path)["name"], "app")

    def test_invalid_json_raises(self) -> None:
        self.path.write_text("{not json")
        with self.assertRaises(ManifestError):
            load_manifest(self.path)

    def test_array_root_raises(self) -> None:
        self.path.write_text("[]")
        with self.assertRaises(ManifestError):
            load_manifest(self.path)

    def test_declared_dependency(self) -> None:
        self.assertTrue(declared_dependency({"dependencies": {"lib": "1"}}, "lib"))
        self.assertTrue(declared_dependency({"devDependencies": {"lib": "1"}}, "lib"))
        self.assertFalse(declared_dependency({"dependencies": {"other": "1"}}, "lib"))
        self.assertFalse(declared_dependency({"dependencies": ["lib"]}, "lib"))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
