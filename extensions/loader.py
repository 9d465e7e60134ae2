"""Extension discovery for the CodeInspector CLI.

Finds extensions laid out one per folder under an extensions directory.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from extensions.manifest import MANIFEST_FILENAME, ExtensionManifest, ManifestError

logger = logging.getLogger(__name__)


@dataclass
class LoadedExtension:
    """An extension folder with a readable manifest."""

    manifest: ExtensionManifest
    path: Path


class ExtensionLoader:
    """Discover extensions in a directory.

    Extensions are organized as:
    extensions/
    └── <extension-folder>/
        ├── manifest.json
        ├── index.js
        └── package.json

    Example:
        >>> loader = ExtensionLoader(Path("extensions"))
        >>> for ext in loader.discover():
        ...     print(ext.manifest.id)
    """

    def __init__(self, extensions_dir: Path) -> None:
        """Initialize the loader.

        Args:
            extensions_dir: Directory holding one folder per extension.
        """
        self.extensions_dir = Path(extensions_dir)

    def exists(self) -> bool:
        return self.extensions_dir.is_dir()

    def discover(self) -> list[LoadedExtension]:
        """Find all extensions with a readable manifest.

        Folders without a manifest are ignored; folders whose manifest cannot
        be parsed are skipped with a warning.

        Returns:
            Extensions sorted by folder name.
        """
        if not self.exists():
            return []

        found: list[LoadedExtension] = []
        for ext_dir in sorted(self.extensions_dir.iterdir()):
            if not ext_dir.is_dir():
                continue
            if not (ext_dir / MANIFEST_FILENAME).exists():
                continue
            try:
                manifest = ExtensionManifest.from_json(ext_dir)
            except ManifestError as e:
                logger.warning("Skipping %s: %s", ext_dir.name, e)
                continue
            found.append(LoadedExtension(manifest=manifest, path=ext_dir))

        return found
