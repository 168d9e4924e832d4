"""
測試與 Storybook 骨架

依節點類型與互動判定產生 React Testing Library 測試、Storybook CSF stories。
"""

from .naming_engine import build_test_id
from .nodes import DesignNode
from .style_converter import js_string

SAMPLE_TEXT = "Sample text"


def _click_target(name: str, node: DesignNode, role: str) -> str:
    if role == "button":
        return "screen.getByRole('button')"
    if role == "text" and node.characters:
        return f"screen.getByText({js_string(node.characters)})"
    return f"screen.getByTestId({js_string(build_test_id(name))})"


def render_test(name: str, node: DesignNode, interactive: bool, role: str) -> str:
    test_id = js_string(build_test_id(name))
    cases = [
        "  it('renders without crashing', () => {\n"
        f"    render(<{name} />);\n"
        f"    expect(screen.getByTestId({test_id})).toBeInTheDocument();\n"
        "  });"
    ]

    if node.is_text:
        if node.characters:
            render_call = f"render(<{name} />);"
            text = js_string(node.characters)
        else:
            render_call = f"render(<{name}>{SAMPLE_TEXT}</{name}>);"
            text = js_string(SAMPLE_TEXT)
        cases.append(
            "  it('renders text content', () => {\n"
            f"    {render_call}\n"
            f"    expect(screen.getByText({text})).toBeInTheDocument();\n"
            "  });"
        )

    if interactive:
        cases.append(
            "  it('calls onClick when clicked', () => {\n"
            "    const handleClick = jest.fn();\n"
            f"    render(<{name} onClick={{handleClick}} />);\n"
            f"    fireEvent.click({_click_target(name, node, role)});\n"
            "    expect(handleClick).toHaveBeenCalledTimes(1);\n"
            "  });"
        )

    cases.append(
        "  it('applies a custom className', () => {\n"
        f"    render(<{name} className=\"custom-class\" />);\n"
        f"    expect(screen.getByTestId({test_id})).toHaveClass('custom-class');\n"
        "  });"
    )
    cases.append(
        "  it('applies inline style overrides', () => {\n"
        f"    render(<{name} style={{{{ margin: '10px' }}}} />);\n"
        f"    expect(screen.getByTestId({test_id})).toHaveStyle({{ margin: '10px' }});\n"
        "  });"
    )

    testing_imports = "render, screen, fireEvent" if interactive else "render, screen"
    return (
        "import React from 'react';\n"
        f"import {{ {testing_imports} }} from '@testing-library/react';\n"
        "import '@testing-library/jest-dom';\n"
        f"import {name} from './{name}';\n\n"
        f"describe('{name}', () => {{\n"
        + "\n\n".join(cases)
        + "\n});\n"
    )


def render_story(name: str, node: DesignNode, interactive: bool) -> str:
    stories = ["export const Default: Story = {\n  args: {},\n};"]
    if node.is_text:
        stories.append(
            "export const CustomText: Story = {\n"
            "  args: {\n"
            "    children: 'Custom text',\n"
            "  },\n"
            "};"
        )
    if interactive:
        stories.append(
            "export const Interactive: Story = {\n"
            "  argTypes: {\n"
            "    onClick: { action: 'clicked' },\n"
            "  },\n"
            "};"
        )
    stories.append(
        "export const CustomStyling: Story = {\n"
        "  args: {\n"
        "    style: { border: '2px dashed #3b82f6', padding: '16px' },\n"
        "  },\n"
        "};"
    )
    return (
        "import type { Meta, StoryObj } from '@storybook/react';\n"
        f"import {name} from './{name}';\n\n"
        f"const meta: Meta<typeof {name}> = {{\n"
        f"  title: 'Components/{name}',\n"
        f"  component: {name},\n"
        "  tags: ['autodocs'],\n"
        "};\n\n"
        "export default meta;\n"
        f"type Story = StoryObj<typeof {name}>;\n\n"
        + "\n\n".join(stories)
        + "\n"
    )
