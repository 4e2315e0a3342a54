"""Command specifications: tree types, post-processors and the catalog."""

from __future__ import annotations

from .catalog import SpecCatalog, spec_from_dict
from .models import (
    ArgSpec,
    CommandSpec,
    GeneratorSpec,
    OptionSpec,
    ScriptGenerator,
    SubcommandSpec,
    Suggestion,
    Template,
    TemplateGenerator,
)
from .postprocess import POST_PROCESSORS, post_processor

__all__ = [
    "POST_PROCESSORS",
    "ArgSpec",
    "CommandSpec",
    "GeneratorSpec",
    "OptionSpec",
    "ScriptGenerator",
    "SpecCatalog",
    "SubcommandSpec",
    "Suggestion",
    "Template",
    "TemplateGenerator",
    "post_processor",
    "spec_from_dict",
]
