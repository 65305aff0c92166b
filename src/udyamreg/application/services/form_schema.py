"""
Form schema served to the presentation tier.

The authoritative schema is a JSON file produced by the external form
extractor. When it is missing or unreadable, a fallback is built from the
same contract models the server validates against, so the two cannot drift.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Type

from udyamreg.domain.registration import (
    RegistrationContract,
    RegistrationEnterprise,
    RegistrationIdentity,
    describe_contract,
)

logger = logging.getLogger(__name__)

_INPUT_TYPES = {
    "mobileNumber": "tel",
    "emailAddress": "email",
    "businessAddress": "textarea",
}

_STEP_TITLES = {1: "Aadhaar Verification", 2: "Business Details"}


def _field(name: str, rule: Dict[str, Any], step: int) -> Dict[str, Any]:
    options = rule.get("options")
    out: Dict[str, Any] = {
        "id": name,
        "name": name,
        "type": "select" if options else _INPUT_TYPES.get(name, "text"),
        "label": rule["label"],
        "required": rule["required"],
        "step": step,
    }
    if "maxLength" in rule:
        out["maxLength"] = rule["maxLength"]
    if "pattern" in rule:
        out["pattern"] = rule["pattern"]
    if options:
        out["options"] = [{"value": c, "label": c.replace("_", " ").title()} for c in options]
    if "autoFill" in rule:
        out["autoFill"] = rule["autoFill"]
    return out


def _step(number: int, rules: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "stepNumber": number,
        "title": _STEP_TITLES[number],
        "fields": [_field(name, rule, number) for name, rule in rules.items()],
    }


def build_fallback_schema() -> Dict[str, Any]:
    contracts: List[Type[RegistrationContract]] = [RegistrationIdentity, RegistrationEnterprise]
    rules = [describe_contract(model) for model in contracts]
    return {
        "steps": [_step(number, step_rules) for number, step_rules in enumerate(rules, start=1)],
        "validationRules": {name: rule for step_rules in rules for name, rule in step_rules.items()},
    }


class FormSchemaProvider:
    def __init__(self, schema_path: Optional[str] = None):
        self.schema_path = Path(schema_path) if schema_path else None

    def load(self) -> Tuple[Dict[str, Any], bool]:
        """Return ``(schema, is_fallback)``."""
        if self.schema_path is not None:
            try:
                return json.loads(self.schema_path.read_text(encoding="utf-8")), False
            except (OSError, ValueError) as e:
                logger.warning(f"Error reading form schema {self.schema_path}: {e}")
        return build_fallback_schema(), True
