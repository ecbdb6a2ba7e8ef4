from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from crokit.scaffold import (
    ScaffoldError,
    create_component,
    parse_component_path,
    to_kebab_case,
    to_pascal_case,
)


class ComponentNamingTests(unittest.TestCase):
    def test_case_conversions(self) -> None:
        self.assertEqual(to_pascal_case("myButton"), "MyButton")
        self.assertEqual(to_kebab_case("MyButton"), "my-button")
        self.assertEqual(to_kebab_case("SignupModal"), "signup-modal")
        self.assertEqual(to_kebab_case("Button"), "button")

    def test_parse_nested_path(self) -> None:
        spec = parse_component_path("modals/newsletter/signupModal")
        self.assertEqual(spec.name, "SignupModal")
        self.assertEqual(spec.tag, "cro-signup-modal")
        self.assertEqual(spec.folder, "modals/newsletter")
        self.assertEqual(spec.title("CRO Components"), "CRO Components/modals/newsletter/SignupModal")

    def test_parse_uses_tag_prefix(self) -> None:
        spec = parse_component_path("ContactForm", tag_prefix="acme")
        self.assertEqual(spec.tag, "acme-contact-form")
        self.assertEqual(spec.title("Acme"), "Acme/ContactForm")

    def test_invalid_paths(self) -> None:
        for value in ("", "  /  ", "forms/1Form", "forms/Contact-Form", "../Escape", "a/../Button"):
            with self.subTest(value=value):
                with self.assertRaises(ScaffoldError):
                    parse_component_path(value)


class CreateComponentTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.base = Path(self.temp_dir.name) / "cro-components"

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def test_creates_component_files(self) -> None:
        result = create_component(self.base, "MyButton")
        target = self.base / "cro-my-button"
        self.assertEqual(result.directory, target)
        self.assertEqual(
            [path.name for path in result.files],
            ["MyButton.js", "MyButton.stories.js", "MyButton.test.js"],
        )

        component = (target / "MyButton.js").read_text()
        self.assertIn("class MyButton extends HTMLElement", component)
        self.assertIn('customElements.define("cro-my-button", MyButton);', component)
        self.assertIn('this.getAttribute("label") || "MyButton Component"', component)
        self.assertIn(".cro-my-button {", component)
        self.assertNotIn("{{", component)

        stories = (target / "MyButton.stories.js").read_text()
        self.assertIn('title: "CRO Components/MyButton"', stories)
        self.assertIn("Template.bind({})", stories)

        test = (target / "MyButton.test.js").read_text()
        self.assertIn('describe("MyButton Component"', test)

    def test_nested_component_directory(self) -> None:
        result = create_component(self.base, "forms/ContactForm", story_title="Shop")
        self.assertEqual(result.directory, self.base / "forms" / "cro-contact-form")
        stories = (result.directory / "ContactForm.stories.js").read_text()
        self.assertIn('title: "Shop/forms/ContactForm"', stories)

    def test_existing_files_are_not_overwritten(self) -> None:
        create_component(self.base, "Banner")
        component = self.base / "cro-banner" / "Banner.js"
        component.write_text("custom")
        with self.assertRaises(ScaffoldError):
            create_component(self.base, "Banner")
        self.assertEqual(component.read_text(), "custom")

        create_component(self.base, "Banner", overwrite=True)
        self.assertIn("class Banner", component.read_text())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
