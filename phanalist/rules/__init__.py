"""phanalist.rules: the built-in rule set.

Submodules
----------
base
    ``Rule`` contract, settings coercion, namespace filter and
    ``RuleRegistry``.

structural
    E0001 – E0008: tags, catches, modifiers, naming, parameter counts and
    return type signatures.

metrics
    E0009 and E0010: method body complexity.

services
    E0012: services that mutate their own state.

demeter
    E0014: method chains on foreign objects.
"""

from __future__ import annotations

from typing import List

from .base import Rule, RuleRegistry, coerce_settings, do_validate_namespace
from .demeter import LawOfDemeterRule
from .metrics import CyclomaticComplexityRule, NpathComplexityRule
from .services import ServiceCompatibilityRule
from .structural import (
    CapitalizedClassNameRule,
    EmptyCatchRule,
    MethodModifiersRule,
    MethodParametersRule,
    OpeningTagRule,
    PropertyModifiersRule,
    ReturnTypeSignatureRule,
    UppercaseConstantsRule,
)

BUILTIN_RULES = (
    OpeningTagRule,
    EmptyCatchRule,
    MethodModifiersRule,
    UppercaseConstantsRule,
    CapitalizedClassNameRule,
    PropertyModifiersRule,
    MethodParametersRule,
    ReturnTypeSignatureRule,
    CyclomaticComplexityRule,
    NpathComplexityRule,
    ServiceCompatibilityRule,
    LawOfDemeterRule,
)


def all_rules() -> List[Rule]:
    """Fresh instances of every built-in rule, in ascending code order."""
    return sorted((cls() for cls in BUILTIN_RULES), key=lambda rule: rule.code)


__all__ = [
    "BUILTIN_RULES",
    "CapitalizedClassNameRule",
    "CyclomaticComplexityRule",
    "EmptyCatchRule",
    "LawOfDemeterRule",
    "MethodModifiersRule",
    "MethodParametersRule",
    "NpathComplexityRule",
    "OpeningTagRule",
    "PropertyModifiersRule",
    "ReturnTypeSignatureRule",
    "Rule",
    "RuleRegistry",
    "ServiceCompatibilityRule",
    "UppercaseConstantsRule",
    "all_rules",
    "coerce_settings",
    "do_validate_namespace",
]
