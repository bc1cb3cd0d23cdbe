"""
Guardrails Module - Validation of extracted vehicle attributes

Ensures:
1. Required fields are present (title, positive price, non-zero year)
2. Year is plausible (1900..next year)
3. Mileage and price are within sane bounds
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from carcheck.config import ValidationLevel
from carcheck.domains.cars.config import domain_config
from carcheck.domains.cars.schemas import MIN_MODEL_YEAR, VehicleAttributes


class Guardrails:
    """
    Validation system for extracted listing data
    """

    def __init__(self, level: ValidationLevel = ValidationLevel.NORMAL, rules: Optional[Dict[str, Any]] = None):
        self.level = level
        self.rules = rules or domain_config["guardrails"]
        self.errors: List[str] = []
        self.warnings: List[str] = []
        self.missing: List[str] = []

    def reset(self):
        """Clear error and warning logs"""
        self.errors = []
        self.warnings = []
        self.missing = []

    def validate_all(self, attrs: VehicleAttributes, current_year: Optional[int] = None) -> Tuple[bool, Dict[str, Any]]:
        """
        Run all validations on extracted attributes.

        Missing required fields always fail, whatever the level.
        Plausibility problems are errors under STRICT and warnings otherwise.

        Returns:
            (is_valid, report)
        """
        self.reset()

        self._check_required_fields(attrs)
        self._check_year(attrs, current_year or datetime.now().year)
        self._check_ranges(attrs)

        is_valid = not self.missing and (not self.errors or self.level == ValidationLevel.LENIENT)

        report = {
            "valid": is_valid,
            "missing": self.missing,
            "errors": self.errors,
            "warnings": self.warnings,
            "level": self.level.value,
        }

        return is_valid, report

    def _flag(self, message: str):
        if self.level == ValidationLevel.STRICT:
            self.errors.append(message)
        else:
            self.warnings.append(message)

    def _check_required_fields(self, attrs: VehicleAttributes):
        """Title must be non-empty, price positive, year non-zero"""
        for field in self.rules["required_fields"]:
            value = getattr(attrs, field)
            if isinstance(value, str):
                value = value.strip()
            if not value:
                self.missing.append(field)

    def _check_year(self, attrs: VehicleAttributes, current_year: int):
        if not attrs.year:
            return
        if not MIN_MODEL_YEAR <= attrs.year <= current_year:
            self._flag(f"Implausible model year: {attrs.year}")

    def _check_ranges(self, attrs: VehicleAttributes):
        if attrs.mileage is not None and attrs.mileage > self.rules["max_mileage"]:
            self._flag(f"Mileage looks wrong: {attrs.mileage}")
        if attrs.price is not None and attrs.price > self.rules["max_price"]:
            self._flag(f"Price looks wrong: {attrs.price}")
