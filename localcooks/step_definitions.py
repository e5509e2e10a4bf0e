# localcooks/step_definitions.py
from __future__ import annotations
from typing import Any

from .form_schema import AppSchema, StepDefinition, FieldErrors, KitchenPreference, CertificationAnswer
from .validation import (
    ValidatorFunc, required, required_choice, one_of, match_pattern,
    min_length, max_length, phone_number, EMAIL_PATTERN, PHONE_CHARS_PATTERN,
)

KITCHEN_PREFERENCE_VALUES: list[str] = [choice.value for choice in KitchenPreference]
CERTIFICATION_VALUES: list[str] = [choice.value for choice in CertificationAnswer]

STEPS_BY_ID: dict[int, StepDefinition] = {
    1: {
        'id': 1, 'name': 'personal_info', 'title': 'Personal information',
        'subtitle': "Let's get to know you! We'll use these details to reach you about your application.",
        'fields': [
            {'field': AppSchema.FULL_NAME, 'validators': [
                required("Full name is required."),
                min_length(2, "Full name must be at least 2 characters."),
                max_length(100, "Full name is too long."),
            ]},
            {'field': AppSchema.EMAIL, 'validators': [
                required("Email address is required."),
                match_pattern(EMAIL_PATTERN, "Please enter a valid email address."),
            ]},
            {'field': AppSchema.PHONE, 'validators': [
                required("Phone number is required."),
                match_pattern(PHONE_CHARS_PATTERN,
                              "Phone number can only contain numbers, spaces, parentheses, hyphens, and plus sign."),
                phone_number("Please enter a 10-digit phone number, e.g. +1 (709) 555-0100."),
            ]},
        ],
    },
    2: {
        'id': 2, 'name': 'kitchen_preference', 'title': 'Kitchen preference',
        'subtitle': 'Select your kitchen preference.',
        'fields': [
            {'field': AppSchema.KITCHEN_PREFERENCE, 'validators': [
                required_choice("Please select a kitchen preference."),
                one_of(KITCHEN_PREFERENCE_VALUES, "Please select one of the listed kitchen options."),
            ]},
        ],
    },
    3: {
        'id': 3, 'name': 'certifications', 'title': 'Certifications',
        'subtitle': "Tell us about your food safety certifications. Don't worry if you don't have them yet.",
        'fields': [
            {'field': AppSchema.FOOD_SAFETY_LICENSE, 'validators': [
                required_choice("Please tell us whether you have a Food Safety License."),
                one_of(CERTIFICATION_VALUES, "Please choose yes, no or not sure."),
            ]},
            {'field': AppSchema.FOOD_ESTABLISHMENT_CERT, 'validators': [
                required_choice("Please tell us whether you have a Food Establishment Certificate."),
                one_of(CERTIFICATION_VALUES, "Please choose yes, no or not sure."),
            ]},
            {'field': AppSchema.FEEDBACK, 'validators': [
                max_length(1000, "Feedback cannot exceed 1000 characters."),
            ]},
        ],
        'documents': [AppSchema.FOOD_SAFETY_LICENSE, AppSchema.FOOD_ESTABLISHMENT_CERT],
    },
}

TOTAL_STEPS: int = len(STEPS_BY_ID)
FIRST_STEP: int = 1

# ===================================================================
# STEP VALIDATION
# ===================================================================

def _validate_simple_field(field_key: str, validator_list: list[ValidatorFunc],
                           form_data: dict[str, Any], errors: FieldErrors) -> bool:
    value_to_validate = form_data.get(field_key)
    for validator_func in validator_list:
        is_valid, msg = validator_func(value_to_validate, form_data)
        if not is_valid:
            if field_key not in errors:
                errors[field_key] = msg
            return False
    return True

def execute_step_validators(step_def: StepDefinition, form_data: dict[str, Any]) -> tuple[bool, FieldErrors]:
    """Runs every rule of one step. Returns the first error message per field."""
    new_errors: FieldErrors = {}
    is_step_valid = True
    for field_conf in step_def.get('fields', []):
        if not _validate_simple_field(field_conf['field'].key, field_conf['validators'], form_data, new_errors):
            is_step_valid = False
    return is_step_valid, new_errors

def validate_all_steps(form_data: dict[str, Any]) -> tuple[bool, FieldErrors]:
    """Re-checks the whole draft, step by step."""
    all_errors: FieldErrors = {}
    for step_def in STEPS_BY_ID.values():
        _, step_errors = execute_step_validators(step_def, form_data)
        all_errors.update(step_errors)
    return not all_errors, all_errors

def step_field_keys(step_id: int) -> list[str]:
    step_def = STEPS_BY_ID[step_id]
    return [field_conf['field'].key for field_conf in step_def['fields']]
