"""Payload validation against endpoint schemas, backed by jsonschema."""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

from jsonschema.validators import validator_for


@dataclass(frozen=True)
class SchemaViolation:
    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


class SchemaValidator:
    """Validates payloads and aggregates the violations into one message"""

    def validate(self, schema: Dict[str, Any], payload: Any) -> List[SchemaViolation]:
        """Validate a payload against a JSON schema

        Args:
            schema: JSON schema; the draft is picked from ``$schema`` when present
            payload: Value to validate

        Returns:
            One SchemaViolation per failed rule, sorted by path (empty when valid)

        Raises:
            jsonschema.exceptions.SchemaError: If the schema itself is malformed
        """
        validator_cls = validator_for(schema)
        validator_cls.check_schema(schema)
        validator = validator_cls(schema)

        violations = []
        for error in validator.iter_errors(payload):
            path = ".".join(str(part) for part in error.absolute_path) or "(root)"
            violations.append(SchemaViolation(path=path, message=error.message))

        violations.sort(key=lambda violation: violation.path)
        if violations:
            logging.info(f"[SchemaValidator] Payload failed validation with {len(violations)} error(s)")
        return violations

    def generate_error_message(self, violations: List[SchemaViolation]) -> str:
        if not violations:
            return ""
        return "Invalid payload: " + "; ".join(str(violation) for violation in violations)


__all__ = [
    "SchemaValidator",
    "SchemaViolation",
]
