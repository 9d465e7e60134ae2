"""Extension system for the CodeInspector CLI.

This module provides manifest validation, discovery, installation and
development-mode watching for CodeInspector extensions.

An extension is a folder with:
- manifest.json: id, name, version, main (+ description, author)
- the main entry file referenced by the manifest
- optionally a package.json with its npm dependencies

Installed extensions live in ~/.codeinspector/extensions/ by default.
"""

from extensions.installer import ExtensionInstaller, InstallError, InstallResult
from extensions.loader import ExtensionLoader, LoadedExtension
from extensions.manifest import (
    ExtensionManifest,
    ManifestError,
    ManifestValidationError,
    ValidationResult,
    validate_extension,
)
from extensions.watcher import ExtensionWatcher

__all__ = [
    "ExtensionInstaller",
    "ExtensionLoader",
    "ExtensionManifest",
    "ExtensionWatcher",
    "InstallError",
    "InstallResult",
    "LoadedExtension",
    "ManifestError",
    "ManifestValidationError",
    "ValidationResult",
    "validate_extension",
]
