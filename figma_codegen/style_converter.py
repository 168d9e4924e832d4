"""
StyleConverter — CSS 宣告 ↔ 四種樣式寫法

scoped class（CSS Modules）、tagged template（styled-components）、
utility classes（Tailwind）、inline style object（React.CSSProperties）。
"""

import re
from typing import Any, Dict, List, Optional, Tuple

PLACEHOLDER_COMMENT = "/* Add styles here */"

# Tailwind 最小對應表（有損轉換，未列入的屬性直接捨棄）
_UTILITY_PREFIXES = {
    "background-color": "bg",
    "color": "text",
    "border-radius": "rounded",
    "padding": "p",
    "margin": "m",
}


def css_object_to_string(css: Any) -> str:
    """CSS 可能是字串或 { property: value } 物件，統一轉成宣告文字。"""
    if isinstance(css, str):
        return css
    if isinstance(css, dict):
        return "\n".join(f"{prop}: {value};" for prop, value in css.items())
    return ""


class StyleConverter:
    """節點 CSS 宣告轉換."""

    @staticmethod
    def parse_declarations(css: Optional[str]) -> List[Tuple[str, str]]:
        """逐行解析 `property: value;`，保留輸入順序；空屬性或空值的行略過。"""
        declarations = []
        if not css:
            return declarations
        for line in css.splitlines():
            line = line.strip()
            if not line or line.startswith("/*"):
                continue
            prop, _, value = line.partition(":")
            prop = prop.strip()
            value = value.strip().rstrip(";").strip()
            if not prop or not value:
                continue
            declarations.append((prop, value))
        return declarations

    @staticmethod
    def to_scoped_class(css: Optional[str], class_name: str) -> str:
        body = css if css and css.strip() else PLACEHOLDER_COMMENT
        return f".{class_name} {{\n  {body}\n}}\n"

    @staticmethod
    def to_tagged_template(css: Optional[str], component_name: str, element: str = "div") -> str:
        body = css if css and css.strip() else PLACEHOLDER_COMMENT
        return f"const Styled{component_name} = styled.{element}`\n  {body}\n`;"

    @staticmethod
    def to_utility_classes(css: Optional[str]) -> str:
        classes = []
        for prop, value in StyleConverter.parse_declarations(css):
            token = StyleConverter._utility_token(prop, value)
            if token:
                classes.append(token)
        return " ".join(classes) or "block"

    @staticmethod
    def _utility_token(prop: str, value: str) -> Optional[str]:
        if prop == "display":
            return "flex" if value == "flex" else None
        if prop in ("width", "height"):
            if not value.endswith("px"):
                return None
            return f"{prop[0]}-[{_arbitrary(value)}]"
        prefix = _UTILITY_PREFIXES.get(prop)
        if prefix:
            return f"{prefix}-[{_arbitrary(value)}]"
        return None

    @staticmethod
    def to_style_object(css: Optional[str]) -> Dict[str, str]:
        return {
            StyleConverter.kebab_to_camel(prop): value
            for prop, value in StyleConverter.parse_declarations(css)
        }

    @staticmethod
    def to_style_object_literal(css: Optional[str], indent: str = "") -> str:
        """產生 JS 物件字面值，例如 `{ backgroundColor: 'red' }`。"""
        entries = StyleConverter.to_style_object(css)
        if not entries:
            return "{}"
        lines = [f"{indent}  {prop}: {js_string(value)}," for prop, value in entries.items()]
        return "{\n" + "\n".join(lines) + f"\n{indent}}}"

    @staticmethod
    def kebab_to_camel(prop: str) -> str:
        return re.sub(r"-+(.)?", lambda m: (m.group(1) or "").upper(), prop)

    @staticmethod
    def camel_to_kebab(prop: str) -> str:
        return re.sub(r"[A-Z]", lambda m: "-" + m.group(0).lower(), prop)

    @staticmethod
    def style_object_to_css(style: Dict[str, str]) -> str:
        """style object → 正規化 CSS 宣告（每行一個 `property: value;`）。"""
        return "\n".join(
            f"{StyleConverter.camel_to_kebab(prop)}: {value};" for prop, value in style.items()
        )


def _arbitrary(value: str) -> str:
    # Tailwind 任意值以底線代替空白
    return "_".join(value.split())


def js_string(value: str) -> str:
    """單引號 JS 字串字面值."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace("'", "\\'")
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f"'{escaped}'"
