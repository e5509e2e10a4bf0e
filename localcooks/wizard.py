# localcooks/wizard.py
from __future__ import annotations
import logging
from typing import Any
from collections.abc import Mapping

from .form_schema import AppSchema, FieldErrors
from .step_definitions import STEPS_BY_ID, execute_step_validators, step_field_keys
from .store import ApplicationFormStore
from .validation import format_phone_number

logger = logging.getLogger(__name__)

def clean_step_data(step_id: int, step_data: Mapping[str, Any]) -> dict[str, Any]:
    """
    Keeps only the step's own fields, trims text and masks the phone number.
    A field the applicant cleared becomes None so it replaces the old value.
    """
    cleaned: dict[str, Any] = {}
    for key in step_field_keys(step_id):
        if key not in step_data:
            continue
        value = step_data[key]
        if isinstance(value, str):
            value = value.strip()
            if key == AppSchema.PHONE.key:
                value = format_phone_number(value)
        cleaned[key] = None if value == '' else value
    return cleaned

def submit_step(store: ApplicationFormStore, step_data: Mapping[str, Any]) -> tuple[bool, FieldErrors]:
    """
    Validates `step_data` against the step under the cursor. Only valid data
    reaches the store, after which the cursor advances (a no-op on the last step).
    """
    step_id = store.current_step
    step_def = STEPS_BY_ID[step_id]
    context = {**store.form_data, **step_data}
    is_valid, errors = execute_step_validators(step_def, context)
    if not is_valid:
        logger.info(f"Step {step_id} ({step_def['name']}) rejected: {sorted(errors)}")
        return False, errors

    store.update_form_data(clean_step_data(step_id, step_data))
    store.go_to_next_step()
    return True, {}
