"""Render a Homebrew formula (Ruby) from a :class:`Formula`."""

from __future__ import annotations

from typing import List

from ..artifacts.layout import Destination, default_items
from ..caveats import render_caveats
from ..schemas.release import Formula, PlatformKey

_RUBY_INSTALL_TARGETS = {
    Destination.BASH_COMPLETION: ("bash_completion", "Install bash completion"),
    Destination.ZSH_COMPLETION: ("zsh_completion", "Install zsh completion"),
    Destination.FISH_COMPLETION: ("fish_completion", "Install fish completion"),
    Destination.MAN1: ("man1", "Install man pages"),
}


def _ruby_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("#{", "\\#{")
    return f'"{escaped}"'


def render_homebrew_formula(formula: Formula) -> str:
    """Return the Ruby source of the Homebrew formula."""

    default = formula.descriptor(formula.default_platform)
    lines: List[str] = [
        f"class {formula.class_name} < Formula",
        f"  desc {_ruby_string(formula.description)}",
        f"  homepage {_ruby_string(formula.homepage)}",
        f"  url {_ruby_string(default.url)}",
        f"  sha256 {_ruby_string(default.checksum.sha256)}",
        f"  license {_ruby_string(formula.license)}",
        f"  version {_ruby_string(formula.version)}",
    ]

    if PlatformKey.MACOS_ARM64 in formula.checksums and formula.default_platform is not PlatformKey.MACOS_ARM64:
        arm = formula.descriptor(PlatformKey.MACOS_ARM64)
        lines += [
            "",
            "  on_macos do",
            "    if Hardware::CPU.arm?",
            f"      url {_ruby_string(arm.url)}",
            f"      sha256 {_ruby_string(arm.checksum.sha256)}",
            "    end",
            "  end",
        ]

    if PlatformKey.LINUX_AMD64 in formula.checksums and formula.default_platform is not PlatformKey.LINUX_AMD64:
        linux = formula.descriptor(PlatformKey.LINUX_AMD64)
        lines += [
            "",
            "  on_linux do",
            f"    url {_ruby_string(linux.url)}",
            f"    sha256 {_ruby_string(linux.checksum.sha256)}",
            "  end",
        ]

    lines += ["", "  def install"]
    for item in default_items(formula.name):
        source = _ruby_string(item.source)
        if item.required:
            lines.append(f"    bin.install {source}")
            continue
        method, comment = _RUBY_INSTALL_TARGETS[item.destination]
        lines += [
            "",
            f"    # {comment}",
            f"    {method}.install {source} if File.exist?({source})",
        ]
    lines.append("  end")

    binary = f"#{{bin}}/{formula.name}"
    lines += [
        "",
        "  test do",
        "    # Test basic functionality",
        f'    assert_match {_ruby_string(formula.title)}, shell_output("{binary} --help", 1)',
        "",
        "    # Test version",
        f'    assert_match {_ruby_string(formula.version)}, shell_output("{binary} version", 1)',
        "  end",
        "",
        "  def caveats",
        "    <<~EOS",
    ]
    for line in render_caveats(formula).splitlines():
        lines.append(f"      {line}" if line else "")
    lines += [
        "    EOS",
        "  end",
        "end",
    ]
    return "\n".join(lines) + "\n"
