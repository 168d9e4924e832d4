"""
Generator — DesignNode 列表 → React + TypeScript 專案檔案樹

每個節點一個元件資料夾；另輸出 barrel、共用型別、工具函式、全域樣式、預覽入口、
package.json 與 tsconfig.json。輸出順序由輸入順序決定，不含時間戳。
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

import structlog

from .component_generator import ComponentGenerator, GeneratedComponent, GenerationOptions
from .naming_engine import NamingEngine
from .nodes import DesignNode, count_nodes

logger = structlog.get_logger(__name__)

COMPONENTS_DIR = "src/components"

REACT_VERSION = "^18.2.0"
STYLED_COMPONENTS_VERSION = "^6.1.0"

_BASE_DEV_DEPENDENCIES = {
    "@testing-library/jest-dom": "^6.1.0",
    "@testing-library/react": "^14.1.0",
    "@types/jest": "^29.5.0",
    "@types/react": "^18.2.0",
    "@types/react-dom": "^18.2.0",
    "jest": "^29.7.0",
    "jest-environment-jsdom": "^29.7.0",
    "ts-jest": "^29.1.0",
    "typescript": "^5.3.0",
}

_STORYBOOK_DEV_DEPENDENCIES = {
    "@storybook/react": "^7.6.0",
    "@storybook/react-vite": "^7.6.0",
    "storybook": "^7.6.0",
}


@dataclass
class ProjectTree:
    files: Dict[str, str] = field(default_factory=dict)
    package_json: dict = field(default_factory=dict)
    tsconfig: dict = field(default_factory=dict)
    components: List[GeneratedComponent] = field(default_factory=list)

    def to_files(self) -> Dict[str, str]:
        """完整路徑 → 內容（含 package.json、tsconfig.json）."""
        out = dict(self.files)
        out["package.json"] = _json_text(self.package_json)
        out["tsconfig.json"] = _json_text(self.tsconfig)
        return out

    def write(self, output_dir: Union[str, Path]) -> List[Path]:
        base = Path(output_dir)
        written = []
        for rel_path, content in self.to_files().items():
            path = base / rel_path
            _write(path, content)
            written.append(path)
        logger.info("project_written", output_dir=str(base), files=len(written))
        return written


def generate_project(
    nodes: Iterable[Union[DesignNode, dict]],
    options: Optional[GenerationOptions] = None,
    naming_engine: Optional[NamingEngine] = None,
) -> ProjectTree:
    options = options or GenerationOptions()
    engine = naming_engine or NamingEngine()
    generator = ComponentGenerator(engine)

    design_nodes = [n if isinstance(n, DesignNode) else DesignNode.from_dict(n) for n in nodes]
    names = engine.resolve_project_names(design_nodes)

    tree = ProjectTree()
    for node, name in zip(design_nodes, names):
        component = generator.generate(node, options, component_name=name)
        folder = f"{COMPONENTS_DIR}/{name}"
        for role, content in component.files.items():
            tree.files[f"{folder}/{component.file_name(role)}"] = content
        tree.components.append(component)

    component_names = [c.name for c in tree.components]
    tree.files[f"{COMPONENTS_DIR}/index.ts"] = _render_barrel(component_names)
    tree.files["src/types/index.ts"] = _shared_types()
    tree.files["src/utils/index.ts"] = _shared_utils()
    tree.files["src/styles/globals.css"] = _globals_css(options.style_idiom == "utility-classes")
    if options.style_idiom == "scoped-class":
        tree.files["src/types/css-modules.d.ts"] = _css_module_declarations()
    tree.files["src/main.tsx"] = _render_main(component_names)

    tree.package_json = build_package_json(options, tree.components)
    tree.tsconfig = build_tsconfig()
    logger.debug(
        "project_generated",
        components=len(component_names),
        nodes=sum(count_nodes(n) for n in design_nodes),
        unknown_types=sorted({n.type for root in design_nodes for n in root.walk() if not n.is_known_type}),
        files=len(tree.files),
    )
    return tree


# ─── shared files ───

def _render_barrel(names: List[str]) -> str:
    return "".join(f"export {{ default as {name} }} from './{name}';\n" for name in names)


def _render_main(names: List[str]) -> str:
    lines = [
        "import React from 'react';",
        "import { createRoot } from 'react-dom/client';",
        "import './styles/globals.css';",
    ]
    if names:
        lines.append(f"import {{ {', '.join(names)} }} from './components';")
    lines.append("")
    lines.append("const root = createRoot(document.getElementById('root') as HTMLElement);")
    if names:
        rendered = "\n".join(f"    <{name} />" for name in names)
        lines.append(f"root.render(\n  <React.StrictMode>\n{rendered}\n  </React.StrictMode>\n);")
    else:
        lines.append("root.render(<React.StrictMode />);")
    return "\n".join(lines) + "\n"


def _shared_types() -> str:
    return (
        "import type { CSSProperties, ElementType, MouseEvent, ReactNode } from 'react';\n\n"
        "export interface BaseProps {\n"
        "  as?: ElementType;\n"
        "  className?: string;\n"
        "  style?: CSSProperties;\n"
        "  children?: ReactNode;\n"
        "}\n\n"
        "export interface InteractiveProps extends BaseProps {\n"
        "  onClick?: (event: MouseEvent<HTMLElement>) => void;\n"
        "  disabled?: boolean;\n"
        "}\n\n"
        "export interface TextProps extends BaseProps {\n"
        "  text?: string;\n"
        "}\n\n"
        "export type Variant = 'primary' | 'secondary' | 'tertiary';\n\n"
        "export type Size = 'small' | 'medium' | 'large';\n"
    )


def _shared_utils() -> str:
    return (
        "import type { CSSProperties } from 'react';\n\n"
        "export const cn = (...classes: Array<string | false | null | undefined>): string =>\n"
        "  classes.filter(Boolean).join(' ');\n\n"
        "export const mergeStyles = (\n"
        "  ...styles: Array<CSSProperties | undefined>\n"
        "): CSSProperties => Object.assign({}, ...styles);\n\n"
        "export const createTestId = (name: string, suffix?: string): string =>\n"
        "  suffix ? `${name.toLowerCase()}-${suffix}` : name.toLowerCase();\n"
    )


def _globals_css(include_tailwind: bool) -> str:
    reset = (
        "*,\n*::before,\n*::after {\n"
        "  box-sizing: border-box;\n"
        "}\n\n"
        "body {\n"
        "  margin: 0;\n"
        "}\n\n"
    )
    tailwind = "@tailwind base;\n@tailwind components;\n@tailwind utilities;\n\n" if include_tailwind else ""
    return tailwind + reset + _visually_hidden_css()


def _visually_hidden_css() -> str:
    return (
        ".visually-hidden {\n"
        "  position: absolute;\n"
        "  width: 1px;\n"
        "  height: 1px;\n"
        "  padding: 0;\n"
        "  margin: -1px;\n"
        "  overflow: hidden;\n"
        "  clip: rect(0, 0, 0, 0);\n"
        "  white-space: nowrap;\n"
        "  border: 0;\n"
        "}\n"
    )


def _css_module_declarations() -> str:
    return (
        "declare module '*.module.css' {\n"
        "  const classes: { readonly [key: string]: string };\n"
        "  export default classes;\n"
        "}\n"
    )


# ─── manifest / compiler config ───

def build_package_json(
    options: GenerationOptions,
    components: Optional[List[GeneratedComponent]] = None,
) -> dict:
    """執行期依賴只列出輸出檔案實際 import 的套件."""
    dependencies = {"react": REACT_VERSION, "react-dom": REACT_VERSION}
    if options.style_idiom == "tagged-template" and components:
        dependencies["styled-components"] = STYLED_COMPONENTS_VERSION

    dev_dependencies = dict(_BASE_DEV_DEPENDENCIES)
    if options.style_idiom == "utility-classes":
        dev_dependencies["tailwindcss"] = "^3.4.0"
    jest = {"preset": "ts-jest", "testEnvironment": "jsdom"}
    if options.style_idiom == "scoped-class":
        dev_dependencies["identity-obj-proxy"] = "^3.0.0"
        jest["moduleNameMapper"] = {r"\.css$": "identity-obj-proxy"}
    scripts = {"build": "tsc", "test": "jest"}
    if options.include_stories:
        dev_dependencies.update(_STORYBOOK_DEV_DEPENDENCIES)
        scripts["storybook"] = "storybook dev -p 6006"

    return {
        "name": options.project_name,
        "version": "0.1.0",
        "private": True,
        "main": "dist/components/index.js",
        "types": "dist/components/index.d.ts",
        "scripts": scripts,
        "dependencies": dependencies,
        "peerDependencies": {"react": REACT_VERSION, "react-dom": REACT_VERSION},
        "devDependencies": dict(sorted(dev_dependencies.items())),
        "jest": jest,
    }


def build_tsconfig() -> dict:
    return {
        "compilerOptions": {
            "target": "ES2020",
            "lib": ["DOM", "DOM.Iterable", "ES2020"],
            "module": "ESNext",
            "moduleResolution": "bundler",
            "jsx": "react-jsx",
            "strict": True,
            "declaration": True,
            "outDir": "dist",
            "esModuleInterop": True,
            "skipLibCheck": True,
        },
        "include": ["src"],
        "exclude": ["node_modules", "dist", "**/*.test.tsx", "**/*.stories.tsx"],
    }


def _json_text(document: dict) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
