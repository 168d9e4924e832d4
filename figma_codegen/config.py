"""設定檔載入與基本驗證."""

import json
from pathlib import Path
from typing import Any

import structlog

from .component_generator import STYLE_IDIOMS, GenerationOptions

logger = structlog.get_logger(__name__)

DEFAULT_CONFIG_PATH = "figma-codegen.config.json"

# 已知有效的頂層欄位
_KNOWN_TOP_KEYS = {"generate", "bridge", "output"}

# 各區塊已知欄位（用於拼字提示）
_KNOWN_SECTION_KEYS = {
    "generate": {"styleIdiom", "includeTypes", "includeChildren", "includeTests", "includeStories", "projectName"},
    "bridge": {"baseUrl", "eventsUrl", "connectTimeout", "requestTimeout", "healthTimeout"},
    "output": {"dir"},
}

# JSON camelCase → 建構參數
_GENERATE_FIELDS = {
    "styleIdiom": "style_idiom",
    "includeTypes": "include_types",
    "includeChildren": "include_children",
    "includeTests": "include_tests",
    "includeStories": "include_stories",
    "projectName": "project_name",
}

_BRIDGE_FIELDS = {
    "baseUrl": "base_url",
    "eventsUrl": "events_url",
    "connectTimeout": "connect_timeout",
    "requestTimeout": "request_timeout",
    "healthTimeout": "health_timeout",
}

_TIMEOUT_KEYS = ("connectTimeout", "requestTimeout", "healthTimeout")


def _warn(msg: str, **context: Any) -> None:
    logger.warning("config_warning", message=msg, **context)


def _section(cfg: dict, name: str) -> dict:
    value = cfg.get(name, {})
    return value if isinstance(value, dict) else {}


def validate_config(cfg: dict) -> None:
    """對 config 做基本欄位驗證，記錄警告但不拋例外。"""
    if not cfg:
        return

    # 頂層未知欄位
    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            known = ", ".join(sorted(_KNOWN_TOP_KEYS))
            _warn(f"未知頂層欄位 '{key}'（已知欄位：{known}）", key=key)

    # 各區塊欄位
    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section, {})
        if not isinstance(section_cfg, dict):
            _warn(f"[{section}] 應為 JSON 物件，目前是 {type(section_cfg).__name__}", section=section)
            continue
        for key in section_cfg:
            if key not in known_keys:
                known = ", ".join(sorted(known_keys))
                _warn(f"[{section}] 未知欄位 '{key}'（已知欄位：{known}）", section=section, key=key)

    generate = _section(cfg, "generate")

    # generate.styleIdiom 值驗證
    idiom = generate.get("styleIdiom")
    if idiom is not None and idiom not in STYLE_IDIOMS:
        valid = ", ".join(STYLE_IDIOMS)
        _warn(f"generate.styleIdiom '{idiom}' 不在已知值中（{valid}）", value=idiom)

    # include* 旗標應為布林
    for key in ("includeTypes", "includeChildren", "includeTests", "includeStories"):
        val = generate.get(key)
        if val is not None and not isinstance(val, bool):
            _warn(f"generate.{key} 應為布林值，目前是 {type(val).__name__}", key=key)

    # bridge 逾時值類型
    bridge = _section(cfg, "bridge")
    for key in _TIMEOUT_KEYS:
        val = bridge.get(key)
        if val is not None and (isinstance(val, bool) or not isinstance(val, (int, float))):
            _warn(f"bridge.{key} 應為數字，目前是 {type(val).__name__}", key=key)


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> dict:
    """載入 JSON 設定檔，不存在則回傳空 dict；存在則做基本驗證。"""
    path = Path(config_path)
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        cfg: Any = json.load(f)
    if not isinstance(cfg, dict):
        _warn(f"'{config_path}' 格式錯誤，應為 JSON 物件，回傳空設定。", path=str(config_path))
        return {}
    validate_config(cfg)
    return cfg


def generation_options_from_config(cfg: dict) -> GenerationOptions:
    """generate 區塊 → GenerationOptions；未知的 styleIdiom 會丟 ValueError。"""
    generate = _section(cfg, "generate")
    kwargs = {attr: generate[key] for key, attr in _GENERATE_FIELDS.items() if key in generate}
    return GenerationOptions(**kwargs)


def bridge_kwargs_from_config(cfg: dict) -> dict:
    """bridge 區塊 → DevModeBridge 建構參數."""
    bridge = _section(cfg, "bridge")
    return {attr: bridge[key] for key, attr in _BRIDGE_FIELDS.items() if key in bridge}


def output_dir_from_config(cfg: dict, default: str = "generated") -> str:
    return _section(cfg, "output").get("dir") or default
