# localcooks/validation.py
from __future__ import annotations
import re
from re import Pattern
from typing import Any
from collections.abc import Callable, Iterable

# --- Type Aliases ---
ValidationResult = tuple[bool, str]
# A validator gets the value and the entire form_data dict for context
ValidatorFunc = Callable[[Any | None, dict[str, Any]], ValidationResult]

# --- Regex Patterns (centralized) ---
EMAIL_PATTERN: Pattern[str] = re.compile(r"^[a-zA-Z0-9_.+-]+@[a-zA-Z0-9-]+(\.[a-zA-Z0-9-]+)+$")
PHONE_CHARS_PATTERN: Pattern[str] = re.compile(r'^\+?[0-9\s().\-]+$')
URL_PATTERN: Pattern[str] = re.compile(r'^https?://[^\s/$.?#][^\s]*$', re.IGNORECASE)
NON_DIGIT_PATTERN: Pattern[str] = re.compile(r'\D')

PHONE_COUNTRY_CODE: str = '1'
PHONE_SIGNIFICANT_DIGITS: int = 10

# ===================================================================
# PHONE NUMBER POLICY (one canonical format: +1 (XXX) XXX-XXXX)
# ===================================================================

def significant_phone_digits(value: str) -> str:
    """
    Strips formatting and the leading country code. The `1` counts as the
    country code when the number starts with `+` or has more than ten digits.
    """
    digits = NON_DIGIT_PATTERN.sub('', value or '')
    if not digits.startswith(PHONE_COUNTRY_CODE):
        return digits
    if value.lstrip().startswith('+') or len(digits) > PHONE_SIGNIFICANT_DIGITS:
        digits = digits[1:]
    return digits

def format_phone_number(raw: str) -> str:
    """
    Keystroke-level mask. Keeps at most ten significant digits and renders
    as much of `+1 (XXX) XXX-XXXX` as has been typed so far.
    """
    digits = significant_phone_digits(raw)[:PHONE_SIGNIFICANT_DIGITS]

    if not digits:
        return ''
    area, exchange, line = digits[:3], digits[3:6], digits[6:]
    formatted = f"+{PHONE_COUNTRY_CODE} ({area}"
    if len(digits) < 3:
        return formatted
    formatted += ')'
    if exchange:
        formatted += f" {exchange}"
    if line:
        formatted += f"-{line}"
    return formatted

# ===================================================================
# GENERIC VALIDATOR GENERATORS (Reusable Building Blocks)
# ===================================================================

def required(message: str = "This field is required.") -> ValidatorFunc:
    """Ensures a value is not None, not an empty string, and not just whitespace."""
    def validator(value: Any | None, form_data: dict[str, Any]) -> ValidationResult:
        if value is None:
            return False, message
        if isinstance(value, str) and not value.strip():
            return False, message
        if isinstance(value, (list, dict)) and not value:
            return False, message
        return True, ""
    return validator

def required_choice(message: str = "Please make a selection.") -> ValidatorFunc:
    """Ensures a value from a select/radio is not None or empty/whitespace."""
    def validator(value: Any | None, form_data: dict[str, Any]) -> ValidationResult:
        if value is None or (isinstance(value, str) and not value.strip()):
            return False, message
        return True, ""
    return validator

def one_of(choices: Iterable[str], message: str) -> ValidatorFunc:
    """Ensures a selected value belongs to a fixed set of choices."""
    allowed = frozenset(choices)
    def validator(value: Any | None, form_data: dict[str, Any]) -> ValidationResult:
        if value is None or value == '':
            return True, ""  # `required_choice` owns the empty case.
        if value not in allowed:
            return False, message
        return True, ""
    return validator

def match_pattern(pattern: Pattern[str], message: str) -> ValidatorFunc:
    """Ensures a string value matches a regex pattern."""
    def validator(value: Any | None, form_data: dict[str, Any]) -> ValidationResult:
        # Chain with required() to validate non-empty fields.
        if not value or not isinstance(value, str):
            return True, ""
        if not pattern.match(value.strip()):
            return False, message
        return True, ""
    return validator

def min_length(limit: int, message: str) -> ValidatorFunc:
    """Ensures a non-empty string has at least `limit` characters once stripped."""
    def validator(value: Any | None, form_data: dict[str, Any]) -> ValidationResult:
        if not value or not isinstance(value, str):
            return True, ""
        if len(value.strip()) < limit:
            return False, message
        return True, ""
    return validator

def max_length(limit: int, message: str) -> ValidatorFunc:
    """Ensures a string does not exceed `limit` characters."""
    def validator(value: Any | None, form_data: dict[str, Any]) -> ValidationResult:
        if not value or not isinstance(value, str):
            return True, ""
        if len(value) > limit:
            return False, message
        return True, ""
    return validator

def phone_number(message: str = "Phone number must contain exactly 10 digits.") -> ValidatorFunc:
    """Ensures a phone number reduces to exactly ten significant digits."""
    def validator(value: Any | None, form_data: dict[str, Any]) -> ValidationResult:
        if not value or not isinstance(value, str):
            return True, ""
        if len(significant_phone_digits(value)) != PHONE_SIGNIFICANT_DIGITS:
            return False, message
        return True, ""
    return validator
