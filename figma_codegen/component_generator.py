"""
單一元件產生器 — DesignNode → React + TypeScript 元件

一個節點輸出一個元件資料夾的內容：元件本體、樣式、型別、index，以及選用的測試與 stories。
樣式寫法每次呼叫只選一種（scoped class / tagged template / utility classes / inline object）。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import structlog

from .naming_engine import NamingEngine, build_test_id, class_name
from .nodes import DesignNode
from .scaffolds import render_story, render_test
from .style_converter import StyleConverter, js_string

logger = structlog.get_logger(__name__)

STYLE_IDIOMS = ("scoped-class", "tagged-template", "utility-classes", "inline-object")

_ROLE_SUFFIXES = {
    "component": ".tsx",
    "types": ".types.ts",
    "test": ".test.tsx",
    "stories": ".stories.tsx",
}

# 只有這兩種寫法會輸出獨立樣式檔
_STYLE_SUFFIXES = {
    "scoped-class": ".module.css",
    "tagged-template": ".styles.ts",
}


@dataclass
class GenerationOptions:
    style_idiom: str = "scoped-class"
    include_types: bool = True
    include_children: bool = True
    include_tests: bool = False
    include_stories: bool = False
    project_name: str = "figma-components"

    def __post_init__(self) -> None:
        if self.style_idiom not in STYLE_IDIOMS:
            raise ValueError(f"Unsupported style idiom: {self.style_idiom}")


@dataclass
class GeneratedComponent:
    name: str
    files: Dict[str, str] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def file_name(self, role: str) -> str:
        """檔案角色 → 資料夾內檔名."""
        if role == "index":
            return "index.ts"
        if role == "styles":
            return f"{self.name}{_STYLE_SUFFIXES[self.metadata['styleIdiom']]}"
        return f"{self.name}{_ROLE_SUFFIXES[role]}"


class ComponentGenerator:
    """把設計節點轉成元件檔案組."""

    def __init__(self, naming_engine: Optional[NamingEngine] = None):
        self.naming = naming_engine or NamingEngine()

    def generate(
        self,
        node: Union[DesignNode, dict, None],
        options: Optional[GenerationOptions] = None,
        component_name: Optional[str] = None,
    ) -> GeneratedComponent:
        if not isinstance(node, DesignNode):
            node = DesignNode.from_dict(node)
        options = options or GenerationOptions()
        name = component_name or self.naming.component_name(node.name)
        interactive = self.naming.is_interactive(node)
        role = self.naming.aria_role(node)

        files: Dict[str, str] = {
            "component": self._render_component(name, node, options, interactive, role),
        }
        styles = self._render_styles(name, node, options.style_idiom)
        if styles is not None:
            files["styles"] = styles
        if options.include_types:
            files["types"] = self._render_types(name, interactive)
        files["index"] = self._render_index(name, options.include_types)
        if options.include_tests:
            files["test"] = render_test(name, node, interactive, role)
        if options.include_stories:
            files["stories"] = render_story(name, node, interactive)

        logger.debug("component_generated", name=name, idiom=options.style_idiom, roles=list(files))
        return GeneratedComponent(
            name=name,
            files=files,
            metadata={
                "originalName": node.name,
                "nodeType": node.type,
                "hasChildren": node.has_children,
                "isInteractive": interactive,
                "styleIdiom": options.style_idiom,
            },
        )

    # ─── component ───

    def _render_component(
        self, name: str, node: DesignNode, options: GenerationOptions, interactive: bool, role: str
    ) -> str:
        idiom = options.style_idiom
        element = "span" if node.is_text else "div"

        imports = ["import React from 'react';"]
        if idiom == "scoped-class":
            imports.append(f"import styles from './{name}.module.css';")
        elif idiom == "tagged-template":
            imports.append("import styled from 'styled-components';")
        if options.include_types:
            imports.append(f"import type {{ {name}Props }} from './{name}.types';")

        declarations = []
        if not options.include_types:
            declarations.append(_props_interface(name, interactive, "React."))
        if idiom == "tagged-template":
            declarations.append(StyleConverter.to_tagged_template(node.css, name, element))
        elif idiom == "utility-classes":
            utility = StyleConverter.to_utility_classes(node.css)
            declarations.append(f"const baseClassName = {js_string(utility)};")
        elif idiom == "inline-object":
            literal = StyleConverter.to_style_object_literal(node.css)
            declarations.append(f"const baseStyle: React.CSSProperties = {literal};")

        params = [f"as: Element = '{element}'", "className", "style", "children"]
        if interactive:
            params.append("onClick")

        tag = f"Styled{name}" if idiom == "tagged-template" else "Element"
        attributes = []
        if idiom == "tagged-template":
            attributes.append("as={Element}")
        attributes.extend(_style_attributes(name, idiom))
        attributes.append(f'data-testid="{build_test_id(name)}"')
        if interactive:
            attributes.append("onClick={onClick}")
            if role == "button":
                attributes.append('role="button"')
                attributes.append("tabIndex={0}")

        content = []
        if options.include_children:
            for child in node.children:
                content.extend(self._render_child(child, 3))
        if node.is_text and node.characters is not None:
            content.append(f"      {{children ?? {js_string(node.characters)}}}")
        else:
            content.append("      {children}")

        body = (
            f"const {name}: React.FC<{name}Props> = ({{\n"
            + "".join(f"  {p},\n" for p in params)
            + "}) => {\n"
            "  return (\n"
            f"    <{tag}\n"
            + "".join(f"      {a}\n" for a in attributes)
            + "    >\n"
            + "\n".join(content)
            + f"\n    </{tag}>\n"
            "  );\n"
            "};\n"
        )

        sections = ["\n".join(imports)] + declarations + [body + f"\nexport default {name};"]
        return "\n\n".join(sections) + "\n"

    def _render_child(self, child: DesignNode, depth: int) -> List[str]:
        """子節點輸出為靜態巢狀標記（不帶樣式）."""
        pad = "  " * depth
        label = self.naming.component_name(child.name)
        if child.is_text:
            if child.characters:
                return [f'{pad}<span data-node="{label}">{{{js_string(child.characters)}}}</span>']
            return [f'{pad}<span data-node="{label}" />']
        if not child.children:
            return [f'{pad}<div data-node="{label}" />']
        lines = [f'{pad}<div data-node="{label}">']
        for grandchild in child.children:
            lines.extend(self._render_child(grandchild, depth + 1))
        lines.append(f"{pad}</div>")
        return lines

    # ─── companions ───

    def _render_styles(self, name: str, node: DesignNode, idiom: str) -> Optional[str]:
        if idiom == "scoped-class":
            return StyleConverter.to_scoped_class(node.css, class_name(name))
        if idiom == "tagged-template":
            element = "span" if node.is_text else "div"
            declaration = StyleConverter.to_tagged_template(node.css, name, element)
            return "import styled from 'styled-components';\n\nexport " + declaration + "\n"
        return None

    def _render_types(self, name: str, interactive: bool) -> str:
        names = ["CSSProperties", "ElementType"]
        if interactive:
            names.append("MouseEvent")
        names.append("ReactNode")
        return (
            f"import type {{ {', '.join(names)} }} from 'react';\n\n"
            + _props_interface(name, interactive, "")
            + "\n"
        )

    def _render_index(self, name: str, include_types: bool) -> str:
        source = f"./{name}.types" if include_types else f"./{name}"
        return (
            f"export {{ default }} from './{name}';\n"
            f"export type {{ {name}Props }} from '{source}';\n"
        )


def _props_interface(name: str, interactive: bool, qualifier: str) -> str:
    lines = [
        f"export interface {name}Props {{",
        "  /** Element rendered at the root */",
        f"  as?: {qualifier}ElementType;",
        "  className?: string;",
        f"  style?: {qualifier}CSSProperties;",
        f"  children?: {qualifier}ReactNode;",
    ]
    if interactive:
        lines.append(f"  onClick?: (event: {qualifier}MouseEvent<HTMLElement>) => void;")
    lines.append("}")
    return "\n".join(lines)


def _style_attributes(name: str, idiom: str) -> List[str]:
    if idiom == "scoped-class":
        return [
            f"className={{[styles.{class_name(name)}, className].filter(Boolean).join(' ')}}",
            "style={style}",
        ]
    if idiom == "utility-classes":
        return [
            "className={[baseClassName, className].filter(Boolean).join(' ')}",
            "style={style}",
        ]
    if idiom == "inline-object":
        return ["className={className}", "style={{ ...baseStyle, ...style }}"]
    return ["className={className}", "style={style}"]


def generate_component(
    node: Union[DesignNode, dict, None],
    options: Optional[GenerationOptions] = None,
    component_name: Optional[str] = None,
) -> GeneratedComponent:
    return ComponentGenerator().generate(node, options, component_name)
