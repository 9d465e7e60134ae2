"""Extension manifest schema for CodeInspector extensions.

Defines the structure and validation for extension manifests (manifest.json).
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

MANIFEST_FILENAME = "manifest.json"
PACKAGE_FILENAME = "package.json"

REQUIRED_FIELDS = ("id", "name", "version", "main")
RECOMMENDED_FIELDS = ("description", "author")

# Prefix match: "1.2.3-beta.1" is accepted
VERSION_PATTERN = re.compile(r"^\d+\.\d+\.\d+")


class ManifestError(Exception):
    """Raised when a manifest cannot be read or parsed."""

    pass


class ManifestValidationError(ManifestError):
    """Raised when a manifest parses but breaks required-field rules."""

    def __init__(self, result: ValidationResult) -> None:
        super().__init__("Manifest validation failed")
        self.result = result


def is_valid_version(version: Any) -> bool:
    """Check that a version starts with major.minor.patch."""
    return bool(VERSION_PATTERN.match(str(version)))


def derive_extension_id(name: str) -> str:
    """Derive an extension id: lowercase, whitespace runs become hyphens."""
    return re.sub(r"\s+", "-", name.lower())


@dataclass
class ExtensionManifest:
    """Extension manifest containing identity and entry point.

    Attributes:
        id: Unique extension identifier (e.g., "my-extension").
        name: Human-readable name.
        version: Semantic version string (e.g., "1.0.0").
        main: Entry file, relative to the extension directory.
        description: Short description of what the extension does.
        author: Extension author name or organization.
    """

    id: str
    name: str
    version: str
    main: str
    description: str = ""
    author: str = ""
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExtensionManifest:
        """Create a manifest from parsed JSON.

        Missing fields become empty strings; use validate_extension() to
        enforce the field rules.
        """
        known = {"id", "name", "version", "main", "description", "author"}
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            version=str(data.get("version") or ""),
            main=str(data.get("main") or ""),
            description=str(data.get("description") or ""),
            author=str(data.get("author") or ""),
            extra={k: v for k, v in data.items() if k not in known},
        )

    @classmethod
    def from_json(cls, path: Path) -> ExtensionManifest:
        """Load a manifest from an extension directory or manifest file.

        Raises:
            ManifestError: If the file is missing or invalid.
        """
        return cls.from_dict(load_manifest_data(path))

    def to_dict(self) -> dict[str, Any]:
        """Convert manifest to dictionary, in manifest key order."""
        result: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "version": self.version,
        }
        if self.description:
            result["description"] = self.description
        if self.author:
            result["author"] = self.author
        result["main"] = self.main
        result.update(self.extra)
        return result

    def to_json(self, path: Path) -> None:
        """Write the manifest as 2-space indented UTF-8 JSON."""
        write_json(path, self.to_dict())

    def __repr__(self) -> str:
        return (
            f"ExtensionManifest(id={self.id!r}, name={self.name!r}, "
            f"version={self.version!r})"
        )


@dataclass
class ValidationResult:
    """Outcome of validating a manifest."""

    manifest: dict[str, Any]
    path: Path
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        """Raise ManifestValidationError if any error was found."""
        if self.errors:
            raise ManifestValidationError(self)


def manifest_path_for(path: Path) -> Path:
    """Resolve an extension directory or manifest file to the manifest path."""
    path = Path(path)
    if path.is_file():
        return path
    return path / MANIFEST_FILENAME


def load_manifest_data(path: Path) -> dict[str, Any]:
    """Read and parse a manifest.

    Args:
        path: Extension directory or manifest file.

    Returns:
        The parsed JSON object.

    Raises:
        ManifestError: If the file is missing, not JSON, or not an object.
    """
    manifest_path = manifest_path_for(path)
    if not manifest_path.exists():
        raise ManifestError(f"{MANIFEST_FILENAME} not found in {manifest_path.parent}")

    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError
        raise ManifestError(f"Invalid JSON in {MANIFEST_FILENAME}: {e}")

    if not isinstance(data, dict):
        raise ManifestError(f"{MANIFEST_FILENAME} must contain a JSON object")

    return data


def validate_extension(path: Path) -> ValidationResult:
    """Validate an extension manifest.

    Reading and parsing fail fast; the field rules after that accumulate
    every error and warning.

    Args:
        path: Extension directory or manifest file.

    Returns:
        ValidationResult with errors and warnings.

    Raises:
        ManifestError: If the manifest is missing or not valid JSON.
    """
    manifest_path = manifest_path_for(path)
    data = load_manifest_data(manifest_path)
    result = ValidationResult(manifest=data, path=manifest_path)

    for name in REQUIRED_FIELDS:
        if not data.get(name):
            result.errors.append(f"Missing required field: {name}")

    version = data.get("version")
    if version and not is_valid_version(version):
        result.errors.append("Invalid version format (should be semantic: x.y.z)")

    main = data.get("main")
    if main and not (manifest_path.parent / str(main)).exists():
        result.warnings.append(f"Main file not found: {main}")

    for name in RECOMMENDED_FIELDS:
        if not data.get(name):
            result.warnings.append(f"Missing recommended field: {name}")

    return result


def read_json(path: Path) -> dict[str, Any]:
    """Read a JSON object from disk."""
    return json.loads(Path(path).read_text(encoding="utf-8"))


def write_json(path: Path, data: dict[str, Any]) -> None:
    """Write a JSON object with 2-space indentation."""
    Path(path).write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
