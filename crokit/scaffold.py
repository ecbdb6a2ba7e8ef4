"""Generate boilerplate for new web components."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List
import re

from .template import render_template


_NAME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9]*$")
_FOLDER_PATTERN = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9_.-]*$")


COMPONENT_TEMPLATE = """\
class {{component.name}} extends HTMLElement {
  constructor() {
    super();
    this.attachShadow({ mode: "open" });
    this.shadowRoot.innerHTML = `
      <div class="{{component.tag}}">
        <span>${this.getAttribute("label") || "{{component.label}}"}</span>
      </div>
    `;

    const style = document.createElement("style");
    style.textContent = `
      .{{component.tag}} {
        padding: 16px;
        border: 1px solid #ccc;
        border-radius: 4px;
        font-family: Arial, sans-serif;
      }
    `;

    this.shadowRoot.append(style);
  }

  static get observedAttributes() {
    return ["label"];
  }

  attributeChangedCallback(name, oldValue, newValue) {
    const element = this.shadowRoot.querySelector("span");
    if (name === "label" && element) {
      element.textContent = newValue;
    }
  }
}

if (!customElements.get("{{component.tag}}")) {
  customElements.define("{{component.tag}}", {{component.name}});
}
"""

STORIES_TEMPLATE = """\
import "./{{component.name}}";

export default {
  title: "{{component.title}}",
  tags: ["autodocs"],
  argTypes: {
    label: { control: "text" }
  }
};

const Template = ({ label }) => {
  const element = document.createElement("{{component.tag}}");
  if (label) element.setAttribute("label", label);
  return element;
};

export const Default = Template.bind({});
Default.args = {
  label: "{{component.label}}"
};
"""

TEST_TEMPLATE = """\
import "./{{component.name}}";

describe("{{component.name}} Component", () => {
  let component;

  beforeEach(() => {
    component = document.createElement("{{component.tag}}");
    document.body.appendChild(component);
  });

  afterEach(() => {
    document.body.innerHTML = "";
  });

  it("should render with default label", () => {
    const span = component.shadowRoot.querySelector("span");
    expect(span.textContent).toBe("{{component.label}}");
  });

  it("should update label when attribute changes", () => {
    component.setAttribute("label", "Custom Label");
    const span = component.shadowRoot.querySelector("span");
    expect(span.textContent).toBe("Custom Label");
  });
});
"""

TEMPLATES: Dict[str, str] = {
    "{name}.js": COMPONENT_TEMPLATE,
    "{name}.stories.js": STORIES_TEMPLATE,
    "{name}.test.js": TEST_TEMPLATE,
}


class ScaffoldError(ValueError):
    """Raised when a component cannot be generated."""


@dataclass(frozen=True, slots=True)
class ComponentSpec:
    name: str
    kebab_name: str
    tag: str
    folder: str

    def title(self, story_title: str) -> str:
        parts = [story_title, self.folder, self.name] if self.folder else [story_title, self.name]
        return "/".join(part for part in parts if part)


@dataclass(slots=True)
class ScaffoldResult:
    component: ComponentSpec
    directory: Path
    files: List[Path] = field(default_factory=list)


def to_pascal_case(name: str) -> str:
    return name[:1].upper() + name[1:]


def to_kebab_case(name: str) -> str:
    return re.sub(r"(?<!^)([A-Z])", r"-\1", name).lower()


def parse_component_path(component_path: str, *, tag_prefix: str = "cro") -> ComponentSpec:
    """Split ``forms/ContactForm`` into a folder and a component definition."""

    parts = [part for part in component_path.strip().replace("\\", "/").split("/") if part]
    if not parts:
        raise ScaffoldError("Please provide a component name or path")

    raw_name = parts[-1]
    folders = parts[:-1]
    if not _NAME_PATTERN.match(raw_name):
        raise ScaffoldError(
            f"Invalid component name '{raw_name}': use letters and digits, starting with a letter"
        )
    for folder in folders:
        if folder in {".", ".."} or not _FOLDER_PATTERN.match(folder):
            raise ScaffoldError(f"Invalid folder name '{folder}' in '{component_path}'")

    name = to_pascal_case(raw_name)
    kebab_name = to_kebab_case(name)
    return ComponentSpec(
        name=name,
        kebab_name=kebab_name,
        tag=f"{tag_prefix}-{kebab_name}",
        folder="/".join(folders),
    )


def create_component(
    base_dir: Path,
    component_path: str,
    *,
    tag_prefix: str = "cro",
    story_title: str = "CRO Components",
    overwrite: bool = False,
) -> ScaffoldResult:
    component = parse_component_path(component_path, tag_prefix=tag_prefix)
    target_dir = base_dir.joinpath(*component.folder.split("/")) if component.folder else base_dir
    target_dir = target_dir / component.tag

    targets = {pattern.format(name=component.name): template for pattern, template in TEMPLATES.items()}
    if not overwrite:
        existing = [name for name in targets if (target_dir / name).exists()]
        if existing:
            raise ScaffoldError(
                f"Component files already exist in '{target_dir}': {', '.join(existing)}"
            )

    context = {
        "component": {
            "name": component.name,
            "tag": component.tag,
            "label": f"{component.name} Component",
            "title": component.title(story_title),
        }
    }

    target_dir.mkdir(parents=True, exist_ok=True)
    result = ScaffoldResult(component=component, directory=target_dir)
    for file_name, template in targets.items():
        path = target_dir / file_name
        path.write_text(render_template(template, context), encoding="utf-8")
        result.files.append(path)
    return result


__all__ = [
    "ComponentSpec",
    "ScaffoldError",
    "ScaffoldResult",
    "create_component",
    "parse_component_path",
    "to_kebab_case",
    "to_pascal_case",
]
