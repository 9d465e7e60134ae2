"""Extension templates for scaffolding.

Each template defines:
- Entry file location and contents (as templates with variables)
- Package descriptor additions
- Extra configuration files
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class Language(str, Enum):
    """Language of the scaffolded entry file."""

    JAVASCRIPT = "JavaScript"
    TYPESCRIPT = "TypeScript"


HANDLER_PACKAGE = "@codeinspector/extension-handler"
HANDLER_VERSION = "^1.0.0"


@dataclass
class ExtensionTemplate:
    """Definition of an extension template."""

    language: Language
    entry_path: str  # where the source entry file is written
    main: str  # manifest / package.json entry point
    files: dict[str, str | Callable]  # path -> content or generator function
    dev_dependencies: dict[str, str] = field(default_factory=dict)
    scripts: dict[str, str] = field(default_factory=dict)
    directories: list[str] = field(default_factory=list)


# =============================================================================
# Shared files
# =============================================================================

README_TEMPLATE = """# {extension_name}

{description}

## Installation

```bash
npm install
```

## Development

Edit `{entry_path}` to add your extension logic.

## Publishing

```bash
codeinspector publish
```
"""

GITIGNORE_TEMPLATE = """node_modules/
dist/
*.log
.DS_Store
"""


# =============================================================================
# JavaScript Template
# =============================================================================

JAVASCRIPT_ENTRY = """import Extension from '@codeinspector/extension-handler';

class {class_name} extends Extension {
  activate() {
    console.log(`${this.name} activated`);

    // Register a command
    this.registerCommand('{extension_id}.action', () => {
      this.showNotification('{extension_name}', 'Action executed!');
      return { status: 'success' };
    });

    // Register a menu item
    this.registerMenu({
      id: '{extension_id}-menu',
      label: '{extension_name}',
      submenu: [
        {
          id: '{extension_id}.action',
          label: 'Execute Action',
          command: '{extension_id}.action'
        }
      ]
    });

    // Register a command menu item (appears in command palette)
    this.registerCommandMenu({
      id: '{extension_id}.command-palette-action',
      name: '{extension_name}: Execute Action',
      action: 'executeExtensionCommand',
      extensionId: this.id,
      command: 'action',
      description: 'Execute action from {extension_name}',
      shortcut: 'Ctrl+Shift+M'
    });
  }

  deactivate() {
    console.log(`${this.name} deactivated`);
  }

  action() {
    this.showNotification('{extension_name}', 'Command palette action executed!');
    return { status: 'success' };
  }
}

export default {class_name};
"""

JAVASCRIPT_TEMPLATE = ExtensionTemplate(
    language=Language.JAVASCRIPT,
    entry_path="index.js",
    main="index.js",
    files={
        "index.js": JAVASCRIPT_ENTRY,
        "README.md": README_TEMPLATE,
        ".gitignore": GITIGNORE_TEMPLATE,
    },
)


# =============================================================================
# TypeScript Template
# =============================================================================

TYPESCRIPT_ENTRY = """import Extension, { CommandMenuConfig, MenuConfig } from '@codeinspector/extension-handler';

class {class_name} extends Extension {
  activate(): void {
    console.log(`${this.name} activated`);

    // Register a command
    this.registerCommand('{extension_id}.action', () => {
      this.showNotification('{extension_name}', 'Action executed!');
      return { status: 'success' };
    });

    // Register a menu item with proper typing
    const menuConfig: MenuConfig = {
      id: '{extension_id}-menu',
      label: '{extension_name}',
      submenu: [
        {
          id: '{extension_id}.action',
          label: 'Execute Action',
          command: '{extension_id}.action'
        }
      ]
    };
    this.registerMenu(menuConfig);

    // Register a command menu item (appears in command palette)
    const commandMenuConfig: CommandMenuConfig = {
      id: '{extension_id}.command-palette-action',
      name: '{extension_name}: Execute Action',
      action: 'executeExtensionCommand',
      extensionId: this.id,
      command: 'action',
      description: 'Execute action from {extension_name}',
      shortcut: 'Ctrl+Shift+M'
    };
    this.registerCommandMenu(commandMenuConfig);
  }

  deactivate(): void {
    console.log(`${this.name} deactivated`);
  }

  action(): { status: string } {
    this.showNotification('{extension_name}', 'Command palette action executed!');
    return { status: 'success' };
  }
}

export default {class_name};
"""


def _tsconfig(variables: dict[str, Any]) -> dict[str, Any]:
    """TypeScript compiler configuration (written as JSON)."""
    return {
        "compilerOptions": {
            "target": "ES2020",
            "module": "ESNext",
            "lib": ["ES2020"],
            "declaration": True,
            "declarationMap": True,
            "sourceMap": True,
            "outDir": "./dist",
            "rootDir": "./src",
            "strict": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
            "forceConsistentCasingInFileNames": True,
        },
        "include": ["src/**/*"],
        "exclude": ["node_modules", "dist"],
    }


TYPESCRIPT_TEMPLATE = ExtensionTemplate(
    language=Language.TYPESCRIPT,
    entry_path="src/index.ts",
    main="dist/index.js",
    directories=["src"],
    files={
        "src/index.ts": TYPESCRIPT_ENTRY,
        "tsconfig.json": _tsconfig,
        "README.md": README_TEMPLATE,
        ".gitignore": GITIGNORE_TEMPLATE,
    },
    dev_dependencies={"typescript": "^5.0.0"},
    scripts={"build": "tsc", "watch": "tsc --watch"},
)


# =============================================================================
# Template Registry
# =============================================================================

TEMPLATES: dict[Language, ExtensionTemplate] = {
    Language.JAVASCRIPT: JAVASCRIPT_TEMPLATE,
    Language.TYPESCRIPT: TYPESCRIPT_TEMPLATE,
}


def get_template(language: Language | str) -> ExtensionTemplate:
    """Get the template for a language.

    Raises:
        ValueError: If the language is unknown.
    """
    return TEMPLATES[Language(language)]
