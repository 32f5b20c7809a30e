"""Copy release archive contents into the install layout."""

from __future__ import annotations

import logging
import shutil
import tarfile
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..errors import MissingBinary
from .layout import Destination, InstallItem, InstallLayout, default_items
from .utils import make_executable

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class InstalledFile:
    source: str
    destination: Destination
    path: Path


@dataclass(slots=True)
class InstallResult:
    installed: List[InstalledFile] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    logs: List[str] = field(default_factory=list)

    @property
    def binary_path(self) -> Optional[Path]:
        for item in self.installed:
            if item.destination is Destination.BIN:
                return item.path
        return None

    def to_dict(self) -> Dict[str, object]:
        return {
            "installed": [
                {"source": item.source, "destination": item.destination.value, "path": str(item.path)}
                for item in self.installed
            ],
            "skipped": list(self.skipped),
            "logs": list(self.logs),
        }


class Installer:
    """Installs a verified release archive into an :class:`InstallLayout`."""

    def __init__(
        self,
        layout: InstallLayout,
        *,
        binary: str = "ai-agents-cli",
        items: Optional[Sequence[InstallItem]] = None,
    ) -> None:
        self.layout = layout
        self.binary = binary
        self.items = list(items) if items is not None else default_items(binary)

    def install(self, archive: Path) -> InstallResult:
        """Extract ``archive`` into a staging directory and install from it."""

        if not archive.exists():
            raise FileNotFoundError(f"Archive not found: {archive}")

        with tempfile.TemporaryDirectory(prefix="ai-agents-install-") as tmp_dir:
            staging_root = Path(tmp_dir)
            with tarfile.open(archive, "r:*") as bundle:
                bundle.extractall(staging_root, filter="data")
            return self.install_from_directory(_unwrap_single_directory(staging_root))

    def install_from_directory(self, root: Path) -> InstallResult:
        result = InstallResult()

        missing_required = [item.source for item in self.items if item.required and not (root / item.source).is_file()]
        if missing_required:
            raise MissingBinary(f"Archive does not contain required file(s): {', '.join(missing_required)}")

        for item in self.items:
            source = root / item.source
            if not source.is_file():
                result.skipped.append(item.source)
                result.logs.append(f"Skipped optional {item.destination.value} file {item.source} (not in archive)")
                continue

            target_dir = self.layout.directory(item.destination)
            target_dir.mkdir(parents=True, exist_ok=True)
            target = target_dir / source.name
            shutil.copy2(source, target)
            if item.destination is Destination.BIN:
                make_executable(target)

            result.installed.append(InstalledFile(source=item.source, destination=item.destination, path=target))
            result.logs.append(f"Installed {item.source} -> {target}")
            logger.info("Installed %s -> %s", item.source, target)

        return result


def _unwrap_single_directory(root: Path) -> Path:
    # Archives packed as <name>/... are installed from inside that directory.
    entries = list(root.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return root
