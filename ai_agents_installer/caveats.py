"""Post-install guidance shown after a successful install."""

from __future__ import annotations

from typing import Dict, List, Tuple

from .schemas.release import CredentialProfile, Formula
from .secrets import SecretSpec, describe_secret, register_secret

PROJECT_VARIABLE = SecretSpec(name="PROJECT_ID", description="Project identifier")

CREDENTIAL_VARIABLES: Dict[str, Tuple[SecretSpec, ...]] = {
    "iam": (
        SecretSpec(name="IAM_KEY_ID", description="IAM key identifier"),
        SecretSpec(name="IAM_SECRET", description="IAM secret"),
    ),
    "api-key": (SecretSpec(name="API_KEY", description="API key"),),
}


def credential_variables(profile: CredentialProfile) -> List[SecretSpec]:
    specs = [*CREDENTIAL_VARIABLES[profile], PROJECT_VARIABLE]
    for spec in specs:
        register_secret(spec)
    return specs


def _credential_step(profile: CredentialProfile) -> str:
    if profile == "iam":
        return 'Set your IAM credentials: export IAM_KEY_ID="your-iam-key-id" IAM_SECRET="your-iam-secret"'
    return 'Set your API key: export API_KEY="your-api-key"'


def render_caveats(formula: Formula) -> str:
    lines = [
        f"{formula.title} has been installed!",
        "",
        "To get started:",
        f"  1. {_credential_step(formula.credentials)}",
        '  2. Set your project ID: export PROJECT_ID="your-project-id"',
        f"  3. Run: {formula.name} --help",
        "",
        f"For more information, visit: {formula.homepage}",
    ]
    return "\n".join(lines) + "\n"


def credential_status(formula: Formula) -> List[dict[str, object]]:
    """Report which credential variables are currently resolvable."""

    return [describe_secret(spec.name) for spec in credential_variables(formula.credentials)]
