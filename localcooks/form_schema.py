# localcooks/form_schema.py
from __future__ import annotations
from typing import Any, NotRequired, TypedDict, TypeAlias
from dataclasses import dataclass
from enum import Enum

from .para import (
    kitchen_preferences, kitchen_preference_hints, food_safety_license_answers,
    food_establishment_cert_answers,
)
from .validation import ValidatorFunc

# ===================================================================
# 1. CHOICE VALUES (wire values sent to the backend)
# ===================================================================

class KitchenPreference(Enum):
    COMMERCIAL = 'commercial'
    HOME = 'home'
    NOT_SURE = 'notSure'

class CertificationAnswer(Enum):
    YES = 'yes'
    NO = 'no'
    NOT_SURE = 'notSure'

# ===================================================================
# 2. CORE DATA STRUCTURES & TYPE ALIASES
# ===================================================================

@dataclass(frozen=True)
class FormField:
    """Defines everything about a form field in one place."""
    key: str
    api_key: str
    label: str
    ui_type: str = 'text'
    options: dict[str, str] | None = None
    option_hints: dict[str, str] | None = None
    default_value: Any = ''
    placeholder: str = ''
    max_length: int | None = None
    # Set for certification answers that may carry proof documents.
    document_api_key: str | None = None

class FieldConfig(TypedDict):
    field: FormField
    validators: list[ValidatorFunc]

class StepDefinition(TypedDict):
    id: int
    name: str
    title: str
    subtitle: str
    fields: list[FieldConfig]
    documents: NotRequired[list[FormField]]

FieldErrors: TypeAlias = dict[str, str]

# ===================================================================
# 3. THE APPLICATION SCHEMA (Single Source of Truth)
# ===================================================================

class AppSchema:
    """
    Defines all fields of the chef application. Each field is an instance
    of the FormField dataclass, containing all its necessary metadata.
    """
    FULL_NAME = FormField(key='full_name', api_key='fullName', label='Full name',
                          placeholder='Enter your full name', max_length=100)
    EMAIL = FormField(key='email', api_key='email', label='Email address',
                      placeholder='your.email@example.com')
    PHONE = FormField(key='phone', api_key='phone', label='Phone number',
                      ui_type='phone', placeholder='+1 (555) 123-4567', max_length=17)
    KITCHEN_PREFERENCE = FormField(key='kitchen_preference', api_key='kitchenPreference',
                                   label='Where would you like to cook?', ui_type='radio',
                                   options=kitchen_preferences, option_hints=kitchen_preference_hints,
                                   default_value=None)
    FOOD_SAFETY_LICENSE = FormField(key='food_safety_license', api_key='foodSafetyLicense',
                                    label='Do you have a Food Safety License?', ui_type='radio',
                                    options=food_safety_license_answers, default_value=None,
                                    document_api_key='foodSafetyLicense')
    FOOD_ESTABLISHMENT_CERT = FormField(key='food_establishment_cert', api_key='foodEstablishmentCert',
                                        label='Do you have a Food Establishment Certificate?', ui_type='radio',
                                        options=food_establishment_cert_answers, default_value=None,
                                        document_api_key='foodEstablishmentCert')
    FEEDBACK = FormField(key='feedback', api_key='feedback', label='Anything else we should know?',
                         ui_type='textarea', placeholder='Questions or comments (optional)', max_length=1000)

    @classmethod
    def get_all_fields(cls) -> list[FormField]:
        return [
            field_instance for field_instance in cls.__dict__.values()
            if isinstance(field_instance, FormField)
        ]

    @classmethod
    def get_field(cls, key: str) -> FormField:
        for field in cls.get_all_fields():
            if field.key == key:
                return field
        raise KeyError(f"Unknown form field '{key}'")

    @classmethod
    def get_document_fields(cls) -> list[FormField]:
        return [field for field in cls.get_all_fields() if field.document_api_key]

# ===================================================================
# 4. CENTRALIZED CONSTANTS
# ===================================================================

DOCUMENT_REFS_KEY: str = 'document_refs'
USER_ID_API_KEY: str = 'userId'
# Suffix of the JSON field carrying a document link, e.g. foodSafetyLicenseUrl
DOCUMENT_URL_SUFFIX: str = 'Url'
