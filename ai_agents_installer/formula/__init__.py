"""Formula manifests and Homebrew rendering."""

from .homebrew import render_homebrew_formula
from .manifest import dump_formula, load_formula, load_formula_or_default, update_formula

__all__ = [
    "dump_formula",
    "load_formula",
    "load_formula_or_default",
    "render_homebrew_formula",
    "update_formula",
]
