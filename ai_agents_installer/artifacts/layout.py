"""Install destinations under a prefix."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List


class Destination(str, Enum):
    BIN = "bin"
    BASH_COMPLETION = "bash_completion"
    ZSH_COMPLETION = "zsh_completion"
    FISH_COMPLETION = "fish_completion"
    MAN1 = "man1"


@dataclass(frozen=True, slots=True)
class InstallLayout:
    """Homebrew-style directory layout rooted at ``prefix``."""

    prefix: Path

    @property
    def bin_dir(self) -> Path:
        return self.prefix / "bin"

    @property
    def bash_completion_dir(self) -> Path:
        return self.prefix / "etc" / "bash_completion.d"

    @property
    def zsh_completion_dir(self) -> Path:
        return self.prefix / "share" / "zsh" / "site-functions"

    @property
    def fish_completion_dir(self) -> Path:
        return self.prefix / "share" / "fish" / "vendor_completions.d"

    @property
    def man1_dir(self) -> Path:
        return self.prefix / "share" / "man" / "man1"

    def directory(self, destination: Destination) -> Path:
        return self.directories()[destination]

    def directories(self) -> Dict[Destination, Path]:
        return {
            Destination.BIN: self.bin_dir,
            Destination.BASH_COMPLETION: self.bash_completion_dir,
            Destination.ZSH_COMPLETION: self.zsh_completion_dir,
            Destination.FISH_COMPLETION: self.fish_completion_dir,
            Destination.MAN1: self.man1_dir,
        }


@dataclass(frozen=True, slots=True)
class InstallItem:
    """A file expected inside the release archive."""

    source: str
    destination: Destination
    required: bool = False


def default_items(binary: str) -> List[InstallItem]:
    """The binary plus the optional completions and man page."""

    return [
        InstallItem(source=binary, destination=Destination.BIN, required=True),
        InstallItem(source=f"completions/bash/{binary}.bash", destination=Destination.BASH_COMPLETION),
        InstallItem(source=f"completions/zsh/_{binary}", destination=Destination.ZSH_COMPLETION),
        InstallItem(source=f"completions/fish/{binary}.fish", destination=Destination.FISH_COMPLETION),
        InstallItem(source=f"man/{binary}.1", destination=Destination.MAN1),
    ]
