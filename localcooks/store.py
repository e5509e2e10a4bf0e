# localcooks/store.py
from __future__ import annotations
import logging
from typing import Any
from collections.abc import Callable, Mapping

from .documents import DocumentEvidence, NoEvidence
from .form_schema import DOCUMENT_REFS_KEY
from .step_definitions import TOTAL_STEPS, FIRST_STEP

logger = logging.getLogger(__name__)

StoreListener = Callable[['ApplicationFormStore'], None]

# ===================================================================
# 1. NAVIGATION MATH
# ===================================================================

def calculate_next_step_id(current_step_id: int, total_steps: int = TOTAL_STEPS) -> int:
    """Calculates the ID of the next step, staying on the last one."""
    if current_step_id < FIRST_STEP:
        return FIRST_STEP
    return min(current_step_id + 1, total_steps)

def calculate_prev_step_id(current_step_id: int, total_steps: int = TOTAL_STEPS) -> int:
    """Calculates the ID of the previous step, staying on the first one."""
    if current_step_id > total_steps:
        return total_steps
    return max(current_step_id - 1, FIRST_STEP)

def clamp_step_id(step_id: int, total_steps: int = TOTAL_STEPS) -> int:
    return max(FIRST_STEP, min(step_id, total_steps))

# ===================================================================
# 2. THE FORM STATE STORE
# ===================================================================

class ApplicationFormStore:
    """
    Holds the cursor and the accumulated draft of one wizard session.

    The store only merges and moves the pointer. Validation belongs to the
    caller (see `wizard.submit_step`). Listeners are called synchronously
    after every change with the store itself.
    """

    def __init__(self, total_steps: int = TOTAL_STEPS) -> None:
        self._total_steps = total_steps
        self._current_step = FIRST_STEP
        self._form_data: dict[str, Any] = {}
        self._listeners: list[StoreListener] = []

    # --- Read access ---
    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def total_steps(self) -> int:
        return self._total_steps

    @property
    def form_data(self) -> dict[str, Any]:
        """A shallow copy of the draft, including a copy of the document refs."""
        snapshot = dict(self._form_data)
        if DOCUMENT_REFS_KEY in snapshot:
            snapshot[DOCUMENT_REFS_KEY] = dict(snapshot[DOCUMENT_REFS_KEY])
        return snapshot

    @property
    def document_refs(self) -> dict[str, DocumentEvidence]:
        return dict(self._form_data.get(DOCUMENT_REFS_KEY, {}))

    @property
    def is_last_step(self) -> bool:
        return self._current_step == self._total_steps

    # --- Mutations ---
    def update_form_data(self, partial: Mapping[str, Any]) -> None:
        if not partial:
            return
        self._form_data.update(partial)
        self._notify()

    def attach_document(self, field_key: str, evidence: DocumentEvidence) -> None:
        refs = dict(self._form_data.get(DOCUMENT_REFS_KEY, {}))
        if isinstance(evidence, NoEvidence):
            if field_key not in refs:
                return
            del refs[field_key]
        else:
            refs[field_key] = evidence
        self._form_data[DOCUMENT_REFS_KEY] = refs
        self._notify()

    def go_to_next_step(self) -> None:
        self._move_to(calculate_next_step_id(self._current_step, self._total_steps))

    def go_to_previous_step(self) -> None:
        self._move_to(calculate_prev_step_id(self._current_step, self._total_steps))

    def set_current_step(self, step_id: int) -> None:
        self._move_to(clamp_step_id(step_id, self._total_steps))

    def reset(self) -> None:
        self._form_data = {}
        self._current_step = FIRST_STEP
        logger.info("Application draft cleared.")
        self._notify()

    # --- Observers ---
    def subscribe(self, listener: StoreListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _move_to(self, step_id: int) -> None:
        if step_id == self._current_step:
            return
        logger.info(f"Wizard moved from step {self._current_step} to step {step_id}.")
        self._current_step = step_id
        self._notify()

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)
