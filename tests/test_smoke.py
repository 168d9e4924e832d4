"""
Smoke tests：驗證套件可匯入、版本與公開 API 存在。
"""
import pytest


def test_import_package():
    """套件可正常匯入"""
    import figma_codegen
    assert figma_codegen.__version__ == "0.1.0"


def test_public_api():
    """公開 API 可從 figma_codegen 取得"""
    from figma_codegen import (
        __version__,
        STYLE_IDIOMS,
        DesignNode,
        DevModeBridge,
        GenerationOptions,
        StyleConverter,
        generate_component,
        generate_project,
        load_config,
        normalize_name,
        preview_naming_tree,
    )
    assert __version__ == "0.1.0"
    assert STYLE_IDIOMS == ("scoped-class", "tagged-template", "utility-classes", "inline-object")
    assert callable(generate_component)
    assert callable(generate_project)
    assert callable(load_config)
    assert callable(preview_naming_tree)
    assert normalize_name("smoke test") == "SmokeTest"
    assert GenerationOptions().style_idiom == "scoped-class"
    assert DevModeBridge(event_source_factory=None).events_url.endswith("/sse")
    assert StyleConverter.to_utility_classes("") == "block"
    assert DesignNode().type == "FRAME"


def test_generate_project_end_to_end():
    """plugin JSON → 專案檔案樹"""
    from figma_codegen import GenerationOptions, generate_project

    nodes = [
        {
            "id": "12:3",
            "name": "Login form",
            "type": "FRAME",
            "nativeCSS": {"display": "flex", "padding": "24px"},
            "children": [
                {"id": "12:4", "name": "Email input", "type": "INSTANCE"},
                {"id": "12:5", "name": "Submit", "type": "TEXT", "text": {"characters": "Sign in"}},
            ],
        }
    ]
    tree = generate_project(nodes, GenerationOptions(style_idiom="utility-classes", include_tests=True))
    component = tree.files["src/components/LoginForm/LoginForm.tsx"]
    assert "const baseClassName = 'flex p-[24px]';" in component
    assert '<div data-node="EmailInput" />' in component
    assert "{'Sign in'}" in component
    assert tree.components[0].metadata["isInteractive"] is True


@pytest.mark.parametrize("idiom", ["scoped-class", "tagged-template", "utility-classes", "inline-object"])
def test_every_idiom_generates(idiom):
    from figma_codegen import GenerationOptions, generate_component

    result = generate_component({"name": "Card"}, GenerationOptions(style_idiom=idiom))
    assert result.metadata["styleIdiom"] == idiom
    assert result.files["component"].startswith("import React from 'react';")
