"""
設計節點 — 產碼核心的輸入模型

接收 Figma 外掛 / Dev Mode 擷取的節點資料（id、name、type、css、characters、children），
轉為 DesignNode 供命名引擎與產生器使用。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, List, Optional

from .style_converter import css_object_to_string

# 已知節點類型；其餘類型一律當一般容器處理
KNOWN_NODE_TYPES = {
    "FRAME", "GROUP", "COMPONENT", "COMPONENT_SET", "INSTANCE", "TEXT",
    "RECTANGLE", "ELLIPSE", "VECTOR", "LINE", "SECTION", "BUTTON",
}

CONTAINER_TYPES = ("FRAME", "COMPONENT")


@dataclass
class DesignNode:
    """單一設計節點."""
    id: str = ""
    name: str = ""
    type: str = "FRAME"
    css: Optional[str] = None
    characters: Optional[str] = None
    children: List["DesignNode"] = field(default_factory=list)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    @property
    def is_text(self) -> bool:
        return self.type == "TEXT"

    @property
    def is_known_type(self) -> bool:
        return self.type in KNOWN_NODE_TYPES

    def walk(self) -> Iterator["DesignNode"]:
        """深度優先走訪（含自身）."""
        yield self
        for child in self.children:
            yield from child.walk()

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "DesignNode":
        """從外掛 JSON 建立節點；缺欄位或型別錯誤一律降級，不拋例外。"""
        if not isinstance(data, dict):
            return cls()

        node_type = data.get("type") or "FRAME"
        if not isinstance(node_type, str):
            node_type = "FRAME"

        # 優先使用 getCSSAsync() 原生 CSS，其次外掛 css，最後由 layout 推算
        css = css_object_to_string(data.get("nativeCSS")) or css_object_to_string(data.get("css"))
        if not css and data.get("layout"):
            css = css_from_layout(data)

        characters = data.get("characters")
        if characters is None and isinstance(data.get("text"), dict):
            characters = data["text"].get("characters")

        raw_children = data.get("children") or []
        if not isinstance(raw_children, list):
            raw_children = []

        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            type=node_type.upper(),
            css=css or None,
            characters=characters if isinstance(characters, str) else None,
            children=[cls.from_dict(c) for c in raw_children if isinstance(c, dict)],
        )


def css_from_layout(data: dict) -> str:
    """外掛沒有提供 CSS 時，由 layout / styles 產生基本宣告."""
    layout = _mapping(data.get("layout"))
    styles = _mapping(data.get("styles"))
    css: list[str] = []

    dimensions = _mapping(layout.get("dimensions")) or layout
    if dimensions.get("width"):
        css.append(f"width: {_px(dimensions['width'])}")
    if dimensions.get("height"):
        css.append(f"height: {_px(dimensions['height'])}")

    position = layout.get("position")
    if isinstance(position, dict):
        css.append("position: absolute")
        if position.get("x") is not None:
            css.append(f"left: {_px(position['x'])}")
        if position.get("y") is not None:
            css.append(f"top: {_px(position['y'])}")

    background = styles.get("background")
    if isinstance(background, dict) and background.get("color"):
        css.append(f"background-color: {background['color']}")
    if styles.get("borderRadius"):
        css.append(f"border-radius: {_px(styles['borderRadius'])}")

    if data.get("type") in CONTAINER_TYPES:
        css.append("display: flex")
        css.append("flex-direction: column")

    return "\n".join(f"{decl};" for decl in css)


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _px(value: Any) -> str:
    if isinstance(value, (int, float)):
        if float(value).is_integer():
            return f"{int(value)}px"
        return f"{round(value, 2)}px"
    return str(value)


def count_nodes(node: Optional[DesignNode]) -> int:
    if node is None:
        return 0
    n = 1
    for child in node.children:
        n += count_nodes(child)
    return n
