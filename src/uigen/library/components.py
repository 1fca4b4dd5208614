"""The fixed component library generated UIs are allowed to use."""

from __future__ import annotations

from uigen.schemas.generation import ComponentDefinition

COMPONENT_LIBRARY: dict[str, ComponentDefinition] = {
    "Button": ComponentDefinition(
        name="Button",
        allowed_props=["variant", "size", "children", "onClick", "disabled"],
        props={
            "variant": ["primary", "secondary", "outline", "ghost"],
            "size": ["sm", "md", "lg"],
        },
        description="Interactive button component with variants",
    ),
    "Card": ComponentDefinition(
        name="Card",
        allowed_props=["title", "children", "footer", "variant"],
        props={"variant": ["default", "elevated", "outlined"]},
        description="Container component for content grouping",
    ),
    "Input": ComponentDefinition(
        name="Input",
        allowed_props=["type", "placeholder", "label", "value", "onChange", "disabled"],
        props={"type": ["text", "email", "password", "number"]},
        description="Text input field with label",
    ),
    "Table": ComponentDefinition(
        name="Table",
        allowed_props=["columns", "data", "striped", "bordered"],
        description="Data table with columns and rows",
    ),
    "Modal": ComponentDefinition(
        name="Modal",
        allowed_props=["isOpen", "onClose", "title", "children", "footer"],
        description="Overlay modal dialog",
    ),
    "Sidebar": ComponentDefinition(
        name="Sidebar",
        allowed_props=["items", "active", "onItemClick", "collapsed"],
        description="Navigation sidebar",
    ),
    "Navbar": ComponentDefinition(
        name="Navbar",
        allowed_props=["logo", "items", "actions", "variant"],
        props={"variant": ["light", "dark"]},
        description="Top navigation bar",
    ),
    "Chart": ComponentDefinition(
        name="Chart",
        allowed_props=["type", "data", "title", "xAxis", "yAxis"],
        props={"type": ["line", "bar", "pie", "area"]},
        description="Chart component using recharts",
    ),
}

COMPONENT_WHITELIST: list[str] = list(COMPONENT_LIBRARY)


def get_component(name: str) -> ComponentDefinition | None:
    return COMPONENT_LIBRARY.get(name)


def describe_library() -> str:
    """Render the library as a bullet list for inclusion in prompts."""
    lines = []
    for name, definition in COMPONENT_LIBRARY.items():
        lines.append(f"- {name}: {definition.description}")
        lines.append(f"  Allowed props: {', '.join(definition.allowed_props)}")
        for prop, values in definition.props.items():
            lines.append(f"  {prop} values: {', '.join(values)}")
    return "\n".join(lines)
