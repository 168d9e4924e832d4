"""
ComponentGenerator 單元測試
單一節點 → 元件 / 樣式 / 型別 / index / 測試 / stories。
"""
import pytest

from figma_codegen.component_generator import (
    ComponentGenerator,
    GenerationOptions,
    generate_component,
)
from figma_codegen.nodes import DesignNode
from figma_codegen.style_converter import PLACEHOLDER_COMMENT

CARD_CSS = "display: flex;\nwidth: 200px;\nbackground-color: #3b82f6;"


def make_options(idiom="scoped-class", **kwargs):
    return GenerationOptions(style_idiom=idiom, **kwargs)


def generate(node, idiom="scoped-class", **kwargs):
    return ComponentGenerator().generate(node, make_options(idiom, **kwargs))


# ─── options ────────────────────────────────────────────────────────────────

def test_unknown_idiom_rejected():
    with pytest.raises(ValueError, match="Unsupported style idiom"):
        GenerationOptions(style_idiom="sass")


# ─── scenario: empty-name node ──────────────────────────────────────────────

class TestEmptyNode:
    def setup_method(self):
        self.result = generate({"id": "1", "name": "", "type": "FRAME"})

    def test_name_falls_back(self):
        assert self.result.name == "Component"

    def test_stylesheet_placeholder(self):
        styles = self.result.files["styles"]
        assert styles.startswith(".component {")
        assert PLACEHOLDER_COMMENT in styles

    def test_component_imports_stylesheet_and_types(self):
        component = self.result.files["component"]
        assert "import styles from './Component.module.css';" in component
        assert "import type { ComponentProps } from './Component.types';" in component
        assert "styles.component" in component
        assert 'data-testid="component"' in component

    def test_file_roles(self):
        assert list(self.result.files) == ["component", "styles", "types", "index"]

    def test_file_names(self):
        assert self.result.file_name("component") == "Component.tsx"
        assert self.result.file_name("styles") == "Component.module.css"
        assert self.result.file_name("types") == "Component.types.ts"
        assert self.result.file_name("index") == "index.ts"

    def test_metadata(self):
        assert self.result.metadata == {
            "originalName": "",
            "nodeType": "FRAME",
            "hasChildren": False,
            "isInteractive": False,
            "styleIdiom": "scoped-class",
        }


def test_none_node_still_generates():
    result = generate_component(None)
    assert result.name == "Component"
    assert "export default Component;" in result.files["component"]


# ─── scenario: text node ────────────────────────────────────────────────────

def test_text_node_falls_back_to_characters():
    node = DesignNode(id="2", name="Hello, World!", type="TEXT", characters="Hi")
    result = generate(node, include_tests=True)
    component = result.files["component"]
    assert result.name == "HelloWorld"
    assert "{children ?? 'Hi'}" in component
    assert "as: Element = 'span'" in component
    assert "it('renders text content'" in result.files["test"]
    assert "screen.getByText('Hi')" in result.files["test"]


def test_text_characters_are_escaped():
    node = DesignNode(name="Quote", type="TEXT", characters="Don't")
    component = generate(node).files["component"]
    assert "{children ?? 'Don\\'t'}" in component


def test_non_text_node_renders_children_slot():
    component = generate(DesignNode(name="Box")).files["component"]
    assert "      {children}\n" in component
    assert "??" not in component


# ─── scenario: interactive classification ───────────────────────────────────

@pytest.mark.parametrize("name, node_type, interactive", [
    ("Submit btn", "FRAME", True),
    ("Container", "FRAME", False),
    ("Thing", "INSTANCE", True),
])
def test_interactive_metadata(name, node_type, interactive):
    result = generate(DesignNode(name=name, type=node_type))
    assert result.metadata["isInteractive"] is interactive
    assert ("onClick={onClick}" in result.files["component"]) is interactive


def test_interactive_component_is_keyboard_reachable():
    component = generate(DesignNode(name="Submit btn")).files["component"]
    assert 'role="button"' in component
    assert "tabIndex={0}" in component


def test_interactive_text_has_no_button_role():
    component = generate(DesignNode(name="Link", type="TEXT", characters="More")).files["component"]
    assert "onClick={onClick}" in component
    assert 'role="button"' not in component


def test_interactive_types_include_on_click():
    types = generate(DesignNode(name="Submit btn")).files["types"]
    assert "onClick?: (event: MouseEvent<HTMLElement>) => void;" in types
    assert "MouseEvent" not in generate(DesignNode(name="Box")).files["types"]


# ─── idioms ─────────────────────────────────────────────────────────────────

def test_scoped_class_composes_classes():
    result = generate(DesignNode(name="Card", css=CARD_CSS))
    assert result.files["styles"] == f".card {{\n  {CARD_CSS}\n}}\n"
    assert "className={[styles.card, className].filter(Boolean).join(' ')}" in result.files["component"]


def test_tagged_template_declares_local_primitive():
    result = generate(DesignNode(name="Card", css=CARD_CSS), "tagged-template")
    component = result.files["component"]
    assert "import styled from 'styled-components';" in component
    assert "const StyledCard = styled.div`" in component
    assert "<StyledCard\n" in component
    assert "as={Element}" in component
    assert ".module.css" not in component
    assert "./Card.styles" not in component
    assert result.file_name("styles") == "Card.styles.ts"
    assert result.files["styles"].startswith("import styled from 'styled-components';")
    assert "export const StyledCard = styled.div`" in result.files["styles"]


def test_utility_classes_inline_class_string():
    result = generate(DesignNode(name="Card", css=CARD_CSS), "utility-classes")
    component = result.files["component"]
    assert "const baseClassName = 'flex w-[200px] bg-[#3b82f6]';" in component
    assert "[baseClassName, className]" in component
    assert "styles" not in result.files


def test_inline_object_merges_styles():
    node = DesignNode(name="Card", css="background-color: red;\nborder-radius: 8px;")
    result = generate(node, "inline-object")
    component = result.files["component"]
    assert "const baseStyle: React.CSSProperties = {\n  backgroundColor: 'red',\n  borderRadius: '8px',\n};" in component
    assert "style={{ ...baseStyle, ...style }}" in component
    assert "styles" not in result.files


@pytest.mark.parametrize("idiom", ["tagged-template", "utility-classes", "inline-object"])
def test_only_scoped_class_imports_stylesheet(idiom):
    component = generate(DesignNode(name="Card", css=CARD_CSS), idiom).files["component"]
    assert "import styles from" not in component


# ─── types / index ──────────────────────────────────────────────────────────

def test_without_types_props_declared_inline():
    result = generate(DesignNode(name="Card"), include_types=False)
    component = result.files["component"]
    assert "types" not in result.files
    assert "./Card.types" not in component
    assert "export interface CardProps {" in component
    assert "style?: React.CSSProperties;" in component
    assert "export type { CardProps } from './Card';" in result.files["index"]


def test_index_reexports_default_and_props():
    index = generate(DesignNode(name="Card")).files["index"]
    assert index == (
        "export { default } from './Card';\n"
        "export type { CardProps } from './Card.types';\n"
    )


# ─── children ───────────────────────────────────────────────────────────────

def test_children_rendered_as_static_markup():
    node = DesignNode(
        name="Card",
        children=[
            DesignNode(name="title", type="TEXT", characters="Welcome"),
            DesignNode(name="body", children=[DesignNode(name="icon", type="VECTOR")]),
        ],
    )
    component = generate(node).files["component"]
    assert "<span data-node=\"Title\">{'Welcome'}</span>" in component
    assert '<div data-node="Body">' in component
    assert '<div data-node="Icon" />' in component
    assert component.index('data-node="Title"') < component.index("{children}")


def test_children_skipped_when_disabled():
    node = DesignNode(name="Card", children=[DesignNode(name="title", type="TEXT", characters="x")])
    result = generate(node, include_children=False)
    assert "data-node" not in result.files["component"]
    assert result.metadata["hasChildren"] is True


# ─── scaffolds ──────────────────────────────────────────────────────────────

def test_test_scaffold_cases():
    result = generate(DesignNode(name="Submit btn"), include_tests=True)
    test = result.files["test"]
    assert result.file_name("test") == "SubmitBtn.test.tsx"
    assert "it('renders without crashing'" in test
    assert "it('calls onClick when clicked'" in test
    assert "fireEvent.click(screen.getByRole('button'));" in test
    assert "it('applies a custom className'" in test
    assert "it('applies inline style overrides'" in test
    assert "screen.getByTestId('submitbtn')" in test
    assert "renders text content" not in test


def test_test_scaffold_non_interactive_has_no_click_case():
    test = generate(DesignNode(name="Container"), include_tests=True).files["test"]
    assert "onClick" not in test
    assert "fireEvent" not in test


def test_story_scaffold_variants():
    text_story = generate(DesignNode(name="Label", type="TEXT", characters="x"), include_stories=True).files["stories"]
    assert "export const Default: Story" in text_story
    assert "export const CustomText: Story" in text_story
    assert "export const Interactive" not in text_story
    assert "export const CustomStyling: Story" in text_story

    button_story = generate(DesignNode(name="Buy", type="BUTTON"), include_stories=True).files["stories"]
    assert "export const Interactive: Story" in button_story
    assert "onClick: { action: 'clicked' }" in button_story
    assert "title: 'Components/Buy'" in button_story


def test_scaffolds_absent_by_default():
    files = generate(DesignNode(name="Card")).files
    assert "test" not in files
    assert "stories" not in files


# ─── determinism ────────────────────────────────────────────────────────────

@pytest.mark.parametrize("idiom", ["scoped-class", "tagged-template", "utility-classes", "inline-object"])
def test_generation_is_deterministic(idiom):
    node = {
        "id": "9",
        "name": "Pricing card",
        "type": "FRAME",
        "css": CARD_CSS,
        "children": [{"id": "10", "name": "Price", "type": "TEXT", "characters": "$9"}],
    }
    options = make_options(idiom, include_tests=True, include_stories=True)
    first = ComponentGenerator().generate(node, options)
    second = ComponentGenerator().generate(node, options)
    assert first.files == second.files
    assert first.metadata == second.metadata


def test_explicit_component_name():
    result = ComponentGenerator().generate(DesignNode(name="Card"), component_name="Card17")
    assert result.name == "Card17"
    assert "export default Card17;" in result.files["component"]
