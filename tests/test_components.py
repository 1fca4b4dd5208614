"""Tests for the component library definitions."""

from uigen.library.components import (
    COMPONENT_LIBRARY,
    COMPONENT_WHITELIST,
    describe_library,
    get_component,
)


class TestComponentLibrary:
    def test_whitelist(self) -> None:
        assert COMPONENT_WHITELIST == [
            "Button", "Card", "Input", "Table", "Modal", "Sidebar", "Navbar", "Chart",
        ]

    def test_names_match_keys(self) -> None:
        for name, definition in COMPONENT_LIBRARY.items():
            assert definition.name == name

    def test_enumerated_props_are_allowed_props(self) -> None:
        for definition in COMPONENT_LIBRARY.values():
            assert set(definition.props) <= set(definition.allowed_props)

    def test_get_component(self) -> None:
        chart = get_component("Chart")
        assert chart is not None
        assert chart.props["type"] == ["line", "bar", "pie", "area"]
        assert get_component("Carousel") is None

    def test_describe_library(self) -> None:
        text = describe_library()
        assert "- Button: Interactive button component with variants" in text
        assert "  Allowed props: variant, size, children, onClick, disabled" in text
        assert "  variant values: primary, secondary, outline, ghost" in text
        assert "- Table: Data table with columns and rows" in text
