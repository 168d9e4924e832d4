"""
figma-codegen — Figma 設計節點 → React + TypeScript 元件（Python 產碼核心）

命名引擎、樣式轉換、單一元件與整個專案的產生器，以及 Dev Mode 輔助程式的 bridge 客戶端。
"""

__version__ = "0.1.0"

from .nodes import DesignNode
from .naming_engine import (
    NamingConfig,
    NamingEngine,
    normalize_name,
    preview_naming_tree,
)
from .style_converter import StyleConverter
from .component_generator import (
    STYLE_IDIOMS,
    ComponentGenerator,
    GeneratedComponent,
    GenerationOptions,
    generate_component,
)
from .generator import ProjectTree, generate_project
from .dev_bridge import (
    BridgeError,
    BridgeState,
    BridgeUnavailable,
    ClientClosed,
    DevModeBridge,
    EventSource,
    NotConnected,
    RemoteError,
    RequestTimeout,
)
from .config import (
    bridge_kwargs_from_config,
    generation_options_from_config,
    load_config,
    validate_config,
)

__all__ = [
    "__version__",
    "DesignNode",
    "NamingConfig",
    "NamingEngine",
    "normalize_name",
    "preview_naming_tree",
    "StyleConverter",
    "STYLE_IDIOMS",
    "ComponentGenerator",
    "GeneratedComponent",
    "GenerationOptions",
    "generate_component",
    "ProjectTree",
    "generate_project",
    "BridgeError",
    "BridgeState",
    "BridgeUnavailable",
    "ClientClosed",
    "DevModeBridge",
    "EventSource",
    "NotConnected",
    "RemoteError",
    "RequestTimeout",
    "bridge_kwargs_from_config",
    "generation_options_from_config",
    "load_config",
    "validate_config",
]
