from __future__ import annotations

from pathlib import Path
import json
import tempfile
import unittest

from crokit.project_setup import (
    BUILD_SCRIPT_COMMAND,
    BUILD_SCRIPT_NAME,
    setup_project,
    update_gitignore,
)


class SetupProjectTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)
        self.manifest_path = self.root / "package.json"

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_skips_without_manifest(self) -> None:
        report = setup_project(self.root)
        self.assertIsNotNone(report.skipped)
        self.assertFalse((self.root / "cro-components").exists())

    def test_skips_inside_library_package(self) -> None:
        self.manifest_path.write_text(json.dumps({"name": "cro-components"}))
        report = setup_project(self.root)
        self.assertIsNotNone(report.skipped)
        self.assertEqual(report.actions, [])

    def test_sets_up_consuming_project(self) -> None:
        self.manifest_path.write_text(json.dumps({"name": "shop"}))
        report = setup_project(self.root)
        self.assertIsNone(report.skipped)
        self.assertEqual(len(report.actions), 3)
        self.assertTrue((self.root / "cro-components" / "README.md").is_file())
        manifest = json.loads(self.manifest_path.read_text())
        self.assertEqual(manifest["scripts"][BUILD_SCRIPT_NAME], BUILD_SCRIPT_COMMAND)
        gitignore = (self.root / ".gitignore").read_text()
        self.assertIn("cro-component-exports/", gitignore)
        self.assertIn("!cro-components/", gitignore)

    def test_setup_is_idempotent(self) -> None:
        self.manifest_path.write_text(json.dumps({"name": "shop", "scripts": {"test": "jest"}}))
        setup_project(self.root)
        gitignore_before = (self.root / ".gitignore").read_text()
        report = setup_project(self.root)
        self.assertEqual(report.actions, [])
        self.assertEqual((self.root / ".gitignore").read_text(), gitignore_before)
        manifest = json.loads(self.manifest_path.read_text())
        self.assertEqual(manifest["scripts"]["test"], "jest")

    def test_existing_build_script_is_kept(self) -> None:
        self.manifest_path.write_text(json.dumps({"name": "shop", "scripts": {BUILD_SCRIPT_NAME: "make"}}))
        setup_project(self.root)
        manifest = json.loads(self.manifest_path.read_text())
        self.assertEqual(manifest["scripts"][BUILD_SCRIPT_NAME], "make")

    def test_custom_components_dir(self) -> None:
        self.manifest_path.write_text(json.dumps({"name": "shop"}))
        setup_project(self.root, components_dir=self.root / "src" / "widgets")
        self.assertTrue((self.root / "src" / "widgets" / "README.md").is_file())


class UpdateGitignoreTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = Path(self.temp_dir.name) / ".gitignore"

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_appends_only_missing_entries(self) -> None:
        self.path.write_text("node_modules/\ncoverage/")
        added = update_gitignore(self.path)
        self.assertNotIn("coverage/", added)
        content = self.path.read_text()
        self.assertTrue(content.startswith("node_modules/\ncoverage/\n"))
        self.assertEqual(content.count("coverage/"), 1)
        self.assertTrue(content.endswith("!cro-components/\n"))


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
