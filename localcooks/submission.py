# localcooks/submission.py
"""
The single terminal action of the wizard.

`SubmissionOrchestrator.submit` re-checks the draft, resolves the document
evidence, sends exactly one POST to the applications endpoint and classifies
the outcome. The draft and cursor are only touched on success, when they are
discarded; every failure leaves them exactly as they were so the applicant
can retry.
"""
from __future__ import annotations
import asyncio
import logging
from collections.abc import Mapping

import httpx

from . import config
from .api_client import ApplicationApiClient, auth_headers, error_message
from .documents import (
    DocumentEvidence, SubmissionEncoding, UploadedFile, build_submission_payload,
    check_document_requirements, validate_evidence,
)
from .errors import SubmissionInProgressError, UploadError
from .form_schema import DOCUMENT_REFS_KEY
from .identity import IdentityProvider
from .results import (
    AuthRequired, DocumentRequirementUnmet, NetworkError, ServerRejected, Success,
    SubmissionResult, ValidationFailed,
)
from .step_definitions import validate_all_steps
from .store import ApplicationFormStore

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE: str = "We couldn't reach Local Cooks. Check your connection and try again."
TIMEOUT_MESSAGE: str = "The server took too long to respond. Please try again."


class SubmissionOrchestrator:
    """Submits a completed draft. At most one submission is in flight at a time."""

    def __init__(self, api_client: ApplicationApiClient, identity: IdentityProvider,
                 upload_mode: str = config.DOCUMENT_UPLOAD_MODE,
                 max_upload_bytes: int | None = None) -> None:
        if upload_mode not in (config.UPLOAD_MODE_INLINE, config.UPLOAD_MODE_OUT_OF_BAND):
            raise ValueError(f"Unknown upload mode '{upload_mode}'")
        self._api = api_client
        self._identity = identity
        self._upload_mode = upload_mode
        self._max_upload_bytes = max_upload_bytes
        self._pending = False

    @property
    def is_pending(self) -> bool:
        return self._pending

    async def submit(self, store: ApplicationFormStore) -> SubmissionResult:
        if self._pending:
            raise SubmissionInProgressError("An application submission is already in progress.")
        self._pending = True
        try:
            result = await self._submit(store)
        finally:
            self._pending = False
        if isinstance(result, Success):
            store.reset()
        return result

    async def _submit(self, store: ApplicationFormStore) -> SubmissionResult:
        # --- 1. Identity ---
        try:
            token = await self._identity.get_token()
            user_id = self._identity.current_user_id()
        except Exception as e:
            logger.warning(f"Could not obtain an identity token: {e}", exc_info=True)
            return AuthRequired()
        if not token or not user_id:
            logger.info("Submission blocked: no signed-in user.")
            return AuthRequired()

        # --- 2. Client-side checks, no network ---
        form_data = store.form_data
        document_refs: dict[str, DocumentEvidence] = form_data.pop(DOCUMENT_REFS_KEY, {})

        is_valid, errors = validate_all_steps(form_data)
        if not is_valid:
            return ValidationFailed(errors)
        is_valid, errors = validate_evidence(document_refs, self._max_upload_bytes)
        if not is_valid:
            return ValidationFailed(errors)
        is_valid, errors = check_document_requirements(form_data, document_refs)
        if not is_valid:
            logger.info(f"Submission blocked: missing documents for {sorted(errors)}.")
            return DocumentRequirementUnmet(errors)

        headers = auth_headers(token, user_id)

        # --- 3. Out-of-band uploads, all or nothing ---
        if self._upload_mode == config.UPLOAD_MODE_OUT_OF_BAND:
            try:
                document_refs = await self._upload_documents(document_refs, headers)
            except UploadError as e:
                logger.warning(f"Submission aborted: {e}")
                if e.status_code == 401:
                    return AuthRequired()
                if e.status_code is None:
                    return NetworkError(NETWORK_ERROR_MESSAGE)
                return ServerRejected(e.reason, e.status_code)

        # --- 4. The one POST ---
        payload = build_submission_payload(form_data, document_refs, user_id)
        try:
            if payload.encoding is SubmissionEncoding.MULTIPART:
                response = await self._api.submit_application_multipart(
                    payload.form_fields or {}, payload.files or {}, headers)
            else:
                response = await self._api.submit_application_json(payload.json_body or {}, headers)
        except httpx.TimeoutException as e:
            logger.warning(f"Application submission timed out: {e!r}")
            return NetworkError(TIMEOUT_MESSAGE)
        except httpx.HTTPError as e:
            logger.error(f"Application submission failed in transport: {e!r}", exc_info=True)
            return NetworkError(NETWORK_ERROR_MESSAGE)

        return self._classify(response, user_id, payload.encoding)

    async def _upload_documents(self, document_refs: Mapping[str, DocumentEvidence],
                                headers: dict[str, str]) -> dict[str, DocumentEvidence]:
        resolved: dict[str, DocumentEvidence] = dict(document_refs)
        pending = {
            field_key: asyncio.ensure_future(self._api.upload_file(evidence, headers))
            for field_key, evidence in document_refs.items()
            if isinstance(evidence, UploadedFile)
        }
        if not pending:
            return resolved
        try:
            urls = await asyncio.gather(*pending.values())
        except UploadError:
            for task in pending.values():
                task.cancel()
            await asyncio.gather(*pending.values(), return_exceptions=True)
            raise
        resolved.update(zip(pending.keys(), urls))
        return resolved

    @staticmethod
    def _classify(response: httpx.Response, user_id: str, encoding: SubmissionEncoding) -> SubmissionResult:
        if response.is_success:
            try:
                record = response.json()
            except ValueError:
                record = {}
            logger.info(f"Application submitted for user '{user_id}' ({encoding.value}, HTTP {response.status_code}).")
            return Success(record if isinstance(record, dict) else {})
        if response.status_code == 401:
            logger.info(f"Application submission for user '{user_id}' needs a fresh sign-in.")
            return AuthRequired()
        message = error_message(response)
        logger.warning(f"Application submission rejected with HTTP {response.status_code}: {message}")
        return ServerRejected(message, response.status_code)
