"""Extension scaffolding for the CodeInspector CLI.

Creates new extensions from templates with:
- manifest.json and package.json
- A JavaScript or TypeScript entry file
- README and .gitignore
"""

from .generator import ExtensionGenerator, ScaffoldAnswers, default_description, pascal_case
from .templates import (
    TEMPLATES,
    ExtensionTemplate,
    Language,
    get_template,
)

__all__ = [
    # Generator
    "ExtensionGenerator",
    "ScaffoldAnswers",
    "default_description",
    "pascal_case",
    # Templates
    "TEMPLATES",
    "ExtensionTemplate",
    "Language",
    "get_template",
]
