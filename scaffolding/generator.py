"""Extension generator for scaffolding new extensions."""

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.markup import escape

from extensions.manifest import (
    MANIFEST_FILENAME,
    PACKAGE_FILENAME,
    ExtensionManifest,
    derive_extension_id,
    write_json,
)

from .templates import HANDLER_PACKAGE, HANDLER_VERSION, Language, get_template


console = Console()

DEFAULT_OUTPUT_DIR = "extensions"


def default_description(name: str) -> str:
    return f"{name} extension for CodeInspector"


@dataclass
class ScaffoldAnswers:
    """Answers collected by the create prompt flow."""

    description: str = ""
    author: str = "Your Name"
    version: str = "1.0.0"
    language: Language = Language.JAVASCRIPT
    scope: str = ""


def pascal_case(name: str) -> str:
    """Convert a display name to PascalCase ("my cool-thing" -> "MyCoolThing")."""
    words = re.split(r"[\s_-]+", name.strip())
    return "".join(word[:1].upper() + word[1:] for word in words if word)


class ExtensionGenerator:
    """Generates new extensions from templates.

    Creates:
    - manifest.json
    - Entry file (index.js or src/index.ts)
    - package.json
    - README.md and .gitignore
    - tsconfig.json (TypeScript only)
    """

    def __init__(
        self,
        name: str,
        answers: ScaffoldAnswers | None = None,
        output_dir: Path | None = None,
    ):
        """Initialize extension generator.

        Args:
            name: Extension display name (e.g., "My Cool Thing")
            answers: Prompt answers (defaults when omitted)
            output_dir: Parent directory (default: ./extensions)
        """
        self.name = name
        self.answers = answers or ScaffoldAnswers()
        self.extension_id = derive_extension_id(name)
        self.description = self.answers.description or default_description(name)
        self.output_dir = Path(output_dir) if output_dir else Path.cwd() / DEFAULT_OUTPUT_DIR
        self.extension_dir = self.output_dir / name
        self.template = get_template(self.answers.language)

    @property
    def class_name(self) -> str:
        return f"{pascal_case(self.name)}Extension"

    @property
    def package_name(self) -> str:
        scope = self.answers.scope.strip().lstrip("@")
        return f"@{scope}/{self.extension_id}" if scope else self.extension_id

    def generate(self) -> Path:
        """Generate the extension.

        Returns:
            Path to created extension directory

        Raises:
            FileExistsError: If the target directory already exists.
        """
        if self.extension_dir.exists():
            raise FileExistsError(f'Extension "{self.name}" already exists')

        self.extension_dir.mkdir(parents=True)
        self._print_created(f"{self.extension_dir}/")

        for directory in self.template.directories:
            (self.extension_dir / directory).mkdir(parents=True, exist_ok=True)

        self.build_manifest().to_json(self.extension_dir / MANIFEST_FILENAME)
        self._print_created(MANIFEST_FILENAME)

        write_json(self.extension_dir / PACKAGE_FILENAME, self.build_package())
        self._print_created(PACKAGE_FILENAME)

        self._create_files()
        return self.extension_dir

    def build_manifest(self) -> ExtensionManifest:
        return ExtensionManifest(
            id=self.extension_id,
            name=self.name,
            version=self.answers.version,
            description=self.description,
            author=self.answers.author,
            main=self.template.main,
        )

    def build_package(self) -> dict[str, Any]:
        """Build the package.json contents."""
        package: dict[str, Any] = {
            "name": self.package_name,
            "version": self.answers.version,
            "description": self.description,
            "main": self.template.main,
            "type": "module",
            "author": self.answers.author,
            "dependencies": {HANDLER_PACKAGE: HANDLER_VERSION},
        }
        if self.template.dev_dependencies:
            package["devDependencies"] = dict(self.template.dev_dependencies)
        if self.template.scripts:
            package["scripts"] = dict(self.template.scripts)
        return package

    def _create_files(self) -> None:
        """Create files from template."""
        variables = {
            "extension_name": self.name,
            "extension_id": self.extension_id,
            "class_name": self.class_name,
            "description": self.description,
            "entry_path": self.template.entry_path,
        }

        for file_path, content in self.template.files.items():
            if callable(content):
                # Structured content is written as JSON
                file_content = json.dumps(content(variables), indent=2) + "\n"
            else:
                file_content = self._substitute_variables(content, variables)

            full_path = self.extension_dir / file_path
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_text(file_content, encoding="utf-8")
            self._print_created(file_path)

    def _substitute_variables(self, content: str, variables: dict) -> str:
        """Substitute {variable} placeholders in content."""
        for key, value in variables.items():
            content = content.replace("{" + key + "}", str(value))
        return content

    def _print_created(self, path: str) -> None:
        console.print(f"[green]Created:[/green] {escape(path)}")
