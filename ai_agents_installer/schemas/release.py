"""Pydantic models describing release metadata."""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import UnsupportedPlatform

_DIGEST_RE = re.compile(r"^[0-9a-f]{64}$")
_VERSION_RE = re.compile(r"^\d+\.\d+\.\d+(?:[-+][0-9A-Za-z.-]+)?$")

DEFAULT_HOMEPAGE = "https://github.com/cloud-ru/evo-ai-agents-cli"


class PlatformKey(str, Enum):
    """Platforms a release archive is published for."""

    MACOS_ARM64 = "macos-arm64"
    MACOS_AMD64 = "macos-amd64"
    LINUX_AMD64 = "linux-amd64"

    @property
    def os_token(self) -> str:
        """OS component used in artifact file names."""
        return "darwin" if self.value.startswith("macos") else "linux"

    @property
    def arch(self) -> str:
        return self.value.split("-", 1)[1]


def render_download_url(homepage: str, version: str, binary: str, os_token: str, arch: str) -> str:
    """Return the GitHub release download URL for one artifact."""

    base = homepage.rstrip("/")
    return f"{base}/releases/download/v{version}/{binary}-{os_token}-{arch}.tar.gz"


class Checksum(BaseModel):
    sha256: str = Field(..., description="SHA-256 checksum for the release archive.")

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("sha256")
    @classmethod
    def strip_digest(cls, value: str) -> str:
        return value.strip()

    @property
    def is_digest(self) -> bool:
        """False for placeholders such as ``PLACEHOLDER_SHA256``."""
        return bool(_DIGEST_RE.match(self.sha256.lower()))


class ReleaseDescriptor(BaseModel):
    """One downloadable artifact: platform, URL, checksum and version."""

    platform: PlatformKey
    url: str
    checksum: Checksum
    version: str

    model_config = ConfigDict(extra="forbid", frozen=True)

    @property
    def filename(self) -> str:
        return self.url.rsplit("/", 1)[-1]


CredentialProfile = Literal["iam", "api-key"]


class Formula(BaseModel):
    """Static packaging recipe for the prebuilt binary."""

    name: str = "ai-agents-cli"
    title: str = "AI Agents CLI"
    description: str = "Command-line tool for managing AI agents and MCP servers"
    homepage: str = DEFAULT_HOMEPAGE
    license: str = "MIT"
    version: str = "1.0.0"
    checksums: Dict[PlatformKey, str] = Field(
        default_factory=lambda: {
            PlatformKey.MACOS_AMD64: "PLACEHOLDER_SHA256",
            PlatformKey.MACOS_ARM64: "PLACEHOLDER_SHA256_ARM64",
            PlatformKey.LINUX_AMD64: "PLACEHOLDER_SHA256_LINUX",
        }
    )
    default_platform: PlatformKey = PlatformKey.MACOS_AMD64
    credentials: CredentialProfile = "iam"

    model_config = ConfigDict(extra="forbid", frozen=True)

    @field_validator("version")
    @classmethod
    def validate_version(cls, value: str) -> str:
        value = value.strip().lstrip("v")
        if not _VERSION_RE.match(value):
            raise ValueError(f"Version '{value}' is not in major.minor.patch format.")
        return value

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not value or "/" in value or value.strip() != value:
            raise ValueError(f"Invalid binary name '{value}'")
        return value

    @model_validator(mode="after")
    def check_default_platform(self) -> "Formula":
        if self.default_platform not in self.checksums:
            raise ValueError(
                f"default_platform '{self.default_platform.value}' has no entry in checksums"
            )
        return self

    @property
    def class_name(self) -> str:
        """Homebrew class name, e.g. ``AiAgentsCli``."""
        return "".join(part.capitalize() for part in re.split(r"[-_.]", self.name) if part)

    @property
    def platforms(self) -> List[PlatformKey]:
        return [key for key in PlatformKey if key in self.checksums]

    def download_url(self, platform: PlatformKey) -> str:
        return render_download_url(self.homepage, self.version, self.name, platform.os_token, platform.arch)

    def descriptor(self, platform: PlatformKey) -> ReleaseDescriptor:
        try:
            digest = self.checksums[platform]
        except KeyError:
            raise UnsupportedPlatform(f"No checksum published for platform '{platform.value}'") from None
        return ReleaseDescriptor(
            platform=platform,
            url=self.download_url(platform),
            checksum=Checksum(sha256=digest),
            version=self.version,
        )

    def descriptors(self) -> List[ReleaseDescriptor]:
        return [self.descriptor(key) for key in self.platforms]
