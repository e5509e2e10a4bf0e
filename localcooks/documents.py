# localcooks/documents.py
"""
Certification evidence and the wire shape of the final submission.

A document field carries exactly one kind of evidence: nothing, a file
picked by the applicant (sent to the backend as a raw part) or a link to a
file already in cloud storage. Whether any raw file is present decides
between a multipart and a JSON submission.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, TypeAlias
from collections.abc import Mapping

from . import config
from .form_schema import (
    AppSchema, CertificationAnswer, FieldErrors, DOCUMENT_URL_SUFFIX, USER_ID_API_KEY,
)
from .validation import ValidationResult, URL_PATTERN

MIME_TYPE_ALIASES: dict[str, str] = {'image/jpg': 'image/jpeg'}

# ===================================================================
# 1. EVIDENCE VARIANTS
# ===================================================================

@dataclass(frozen=True)
class NoEvidence:
    pass

@dataclass(frozen=True)
class UploadedFile:
    """A file picked by the applicant, not yet stored anywhere."""
    filename: str
    content: bytes = field(repr=False)
    mime_type: str

    @property
    def size_bytes(self) -> int:
        return len(self.content)

@dataclass(frozen=True)
class RemoteUrl:
    url: str

DocumentEvidence: TypeAlias = NoEvidence | UploadedFile | RemoteUrl

class SubmissionEncoding(Enum):
    JSON = 'json'
    MULTIPART = 'multipart'

# Answer that makes proof mandatory, per certification field.
DOCUMENT_REQUIREMENTS: dict[str, str] = {
    AppSchema.FOOD_SAFETY_LICENSE.key: CertificationAnswer.YES.value,
}
REQUIREMENT_MESSAGES: dict[str, str] = {
    AppSchema.FOOD_SAFETY_LICENSE.key: (
        "Please upload your Food Safety License document or provide a URL "
        "since you indicated you have one."
    ),
}

# ===================================================================
# 2. EVIDENCE VALIDATION
# ===================================================================

def normalize_mime_type(mime_type: str) -> str:
    cleaned = (mime_type or '').split(';')[0].strip().lower()
    return MIME_TYPE_ALIASES.get(cleaned, cleaned)

def validate_uploaded_file(upload: UploadedFile, max_bytes: int | None = None) -> ValidationResult:
    """Checks the type allow-list and the size ceiling."""
    limit = config.MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
    if normalize_mime_type(upload.mime_type) not in config.ALLOWED_UPLOAD_TYPES:
        return False, "Please upload PDF, JPG, PNG, or WebP files only."
    if upload.size_bytes == 0:
        return False, f"'{upload.filename}' is empty."
    if upload.size_bytes > limit:
        return False, f"Please upload files smaller than {limit / (1024 * 1024):g}MB."
    return True, ""

def validate_remote_url(url: str) -> ValidationResult:
    if not url or not URL_PATTERN.match(url.strip()):
        return False, "Please provide a valid link starting with http:// or https://."
    return True, ""

def validate_evidence(document_refs: Mapping[str, DocumentEvidence],
                      max_bytes: int | None = None) -> tuple[bool, FieldErrors]:
    errors: FieldErrors = {}
    for field_key, evidence in document_refs.items():
        if isinstance(evidence, UploadedFile):
            is_valid, msg = validate_uploaded_file(evidence, max_bytes)
        elif isinstance(evidence, RemoteUrl):
            is_valid, msg = validate_remote_url(evidence.url)
        else:
            continue
        if not is_valid:
            errors[field_key] = msg
    return not errors, errors

def check_document_requirements(form_data: Mapping[str, Any],
                                document_refs: Mapping[str, DocumentEvidence]) -> tuple[bool, FieldErrors]:
    """A 'yes' answer on a field listed in DOCUMENT_REQUIREMENTS needs a file or a link."""
    errors: FieldErrors = {}
    for field_key, requiring_answer in DOCUMENT_REQUIREMENTS.items():
        if form_data.get(field_key) != requiring_answer:
            continue
        evidence = document_refs.get(field_key, NoEvidence())
        if isinstance(evidence, RemoteUrl) and evidence.url.strip():
            continue
        if isinstance(evidence, UploadedFile):
            continue
        errors[field_key] = REQUIREMENT_MESSAGES.get(field_key, "A supporting document is required.")
    return not errors, errors

# ===================================================================
# 3. WIRE SHAPE
# ===================================================================

def choose_encoding(document_refs: Mapping[str, DocumentEvidence]) -> SubmissionEncoding:
    if any(isinstance(evidence, UploadedFile) for evidence in document_refs.values()):
        return SubmissionEncoding.MULTIPART
    return SubmissionEncoding.JSON

def _document_api_key(field_key: str) -> str:
    api_key = AppSchema.get_field(field_key).document_api_key
    if not api_key:
        raise KeyError(f"Field '{field_key}' does not accept documents")
    return api_key

def _scalar_fields(form_data: Mapping[str, Any], user_id: str) -> dict[str, Any]:
    body: dict[str, Any] = {}
    for form_field in AppSchema.get_all_fields():
        value = form_data.get(form_field.key)
        if value is None:
            continue
        body[form_field.api_key] = value
    body[USER_ID_API_KEY] = user_id
    return body

@dataclass(frozen=True)
class SubmissionPayload:
    """Everything needed for the single POST of the wizard."""
    encoding: SubmissionEncoding
    json_body: dict[str, Any] | None = None
    form_fields: dict[str, str] | None = None
    files: dict[str, tuple[str, bytes, str]] | None = None

def build_submission_payload(form_data: Mapping[str, Any],
                             document_refs: Mapping[str, DocumentEvidence],
                             user_id: str) -> SubmissionPayload:
    body = _scalar_fields(form_data, user_id)
    for field_key, evidence in document_refs.items():
        if isinstance(evidence, RemoteUrl):
            body[f"{_document_api_key(field_key)}{DOCUMENT_URL_SUFFIX}"] = evidence.url.strip()

    encoding = choose_encoding(document_refs)
    if encoding is SubmissionEncoding.JSON:
        return SubmissionPayload(encoding=encoding, json_body=body)

    files = {
        _document_api_key(field_key): (evidence.filename, evidence.content, normalize_mime_type(evidence.mime_type))
        for field_key, evidence in document_refs.items()
        if isinstance(evidence, UploadedFile)
    }
    form_fields = {key: str(value) for key, value in body.items()}
    return SubmissionPayload(encoding=encoding, form_fields=form_fields, files=files)
