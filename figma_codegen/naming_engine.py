"""
命名引擎 — Figma 圖層名稱 → 合法且穩定的元件識別字

設計師命名可能含標點、空白、非 ASCII 或為空字串；輸出一律為 PascalCase ASCII 識別字，
空結果 fallback 為 Component。
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

import structlog

from .nodes import DesignNode

logger = structlog.get_logger(__name__)

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


@dataclass
class NamingConfig:
    """命名引擎設定."""
    fallback_name: str = "Component"
    interactive_types: set = field(default_factory=lambda: {"BUTTON", "INSTANCE"})
    interactive_keywords: tuple = ("button", "btn", "link", "clickable", "input", "form")
    custom_overrides: dict = field(default_factory=dict)


def normalize_name(name: Optional[str], fallback: str = "Component") -> str:
    """設計師命名 → PascalCase 識別字（可重複套用，結果不變）."""
    tokens = _NON_ALNUM.sub(" ", name or "").split()
    identifier = "".join(t[:1].upper() + t[1:] for t in tokens)
    if not identifier:
        return fallback
    # 數字開頭無法大寫化，補上 fallback 前綴
    if not identifier[0].isalpha():
        identifier = fallback + identifier
    return identifier


def class_name(identifier: str) -> str:
    """scoped class selector / CSS module key."""
    return identifier.lower()


def build_test_id(identifier: str, suffix: Optional[str] = None) -> str:
    base = identifier.lower()
    return f"{base}-{suffix}" if suffix else base


class NamingEngine:
    """元件命名、互動判定與專案內名稱去重."""

    def __init__(self, config: Optional[NamingConfig] = None):
        self.config = config or NamingConfig()

    def component_name(self, name: Optional[str]) -> str:
        override = self.config.custom_overrides.get(name or "")
        if override:
            return normalize_name(override, self.config.fallback_name)
        return normalize_name(name, self.config.fallback_name)

    def is_interactive(self, node: DesignNode) -> bool:
        if node.type in self.config.interactive_types:
            return True
        lowered = (node.name or "").lower()
        return any(keyword in lowered for keyword in self.config.interactive_keywords)

    def aria_role(self, node: DesignNode) -> str:
        if node.is_text:
            return "text"
        if self.is_interactive(node):
            return "button"
        return "generic"

    def resolve_project_names(self, nodes: Iterable[DesignNode]) -> List[str]:
        """替每個節點決定專案內唯一的元件名稱。

        第一個節點保留原名；之後同名者加上節點 id（正規化後），仍衝突再加流水號。
        """
        taken: set = set()
        names = []
        for node in nodes:
            name = self.component_name(node.name)
            if name in taken:
                original = name
                id_suffix = _NON_ALNUM.sub("", node.id or "")
                candidate = f"{name}{id_suffix}" if id_suffix else name
                counter = 2
                while candidate in taken:
                    candidate = f"{name}{id_suffix}{counter}"
                    counter += 1
                name = candidate
                logger.debug("component_name_collision", original=original, resolved=name, node_id=node.id)
            taken.add(name)
            names.append(name)
        return names


def preview_naming_tree(node: DesignNode, indent: int = 0, engine: Optional[NamingEngine] = None) -> str:
    """除錯用：印出節點命名樹."""
    engine = engine or NamingEngine()
    prefix = "  " * indent
    label = f"{prefix}├─ {engine.component_name(node.name)}  [{node.type}]"
    if node.name:
        label += f"  \"{node.name}\""
    lines = [label]
    for child in node.children:
        lines.append(preview_naming_tree(child, indent + 1, engine))
    return "\n".join(lines)
