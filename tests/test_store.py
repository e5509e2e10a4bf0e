# tests/test_store.py
from __future__ import annotations

from localcooks.documents import NoEvidence, RemoteUrl, UploadedFile
from localcooks.form_schema import DOCUMENT_REFS_KEY
from localcooks.store import ApplicationFormStore

def test_fresh_store_is_empty_on_step_one(store: ApplicationFormStore) -> None:
    assert store.current_step == 1
    assert store.form_data == {}
    assert store.document_refs == {}

def test_update_form_data_merges_disjoint_keys(store: ApplicationFormStore) -> None:
    """Two updates with different keys keep both values."""
    store.update_form_data({'a': 1})
    store.update_form_data({'b': 2})
    assert store.form_data == {'a': 1, 'b': 2}

    other = ApplicationFormStore()
    other.update_form_data({'b': 2})
    other.update_form_data({'a': 1})
    assert other.form_data == store.form_data, "Merge order of disjoint keys should not matter"

def test_update_form_data_overwrites_shallowly(store: ApplicationFormStore) -> None:
    store.update_form_data({'full_name': 'Jane', 'email': 'jane@x.com'})
    store.update_form_data({'full_name': 'Jane Doe'})
    assert store.form_data == {'full_name': 'Jane Doe', 'email': 'jane@x.com'}

def test_update_form_data_does_not_move_cursor(store: ApplicationFormStore) -> None:
    store.update_form_data({'full_name': 'Jane Doe'})
    assert store.current_step == 1

def test_navigation_is_clamped(store: ApplicationFormStore) -> None:
    """Back on step 1 and next on step N are no-ops."""
    store.go_to_previous_step()
    assert store.current_step == 1, "Should not go below the first step"

    store.go_to_next_step()
    store.go_to_next_step()
    assert store.current_step == 3
    assert store.is_last_step

    store.go_to_next_step()
    assert store.current_step == 3, "Should not go past the last step"

    store.go_to_previous_step()
    assert store.current_step == 2

def test_set_current_step_clamps(store: ApplicationFormStore) -> None:
    store.set_current_step(3)
    assert store.current_step == 3
    store.set_current_step(42)
    assert store.current_step == 3
    store.set_current_step(-1)
    assert store.current_step == 1

def test_form_data_is_a_copy(store: ApplicationFormStore) -> None:
    store.update_form_data({'full_name': 'Jane Doe'})
    snapshot = store.form_data
    snapshot['full_name'] = 'Mallory'
    assert store.form_data['full_name'] == 'Jane Doe', "Readers should not mutate the draft"

def test_attach_document_keeps_one_evidence_per_field(store: ApplicationFormStore) -> None:
    upload = UploadedFile(filename='license.pdf', content=b'%PDF-1.7', mime_type='application/pdf')
    link = RemoteUrl(url='https://drive.example.com/license.pdf')

    store.attach_document('food_safety_license', upload)
    assert store.document_refs == {'food_safety_license': upload}

    store.attach_document('food_safety_license', link)
    assert store.document_refs == {'food_safety_license': link}, "A link should replace the file"

    store.attach_document('food_establishment_cert', upload)
    assert set(store.document_refs) == {'food_safety_license', 'food_establishment_cert'}

    store.attach_document('food_safety_license', NoEvidence())
    assert set(store.document_refs) == {'food_establishment_cert'}

def test_attached_documents_survive_later_updates(store: ApplicationFormStore) -> None:
    link = RemoteUrl(url='https://drive.example.com/cert.png')
    store.attach_document('food_establishment_cert', link)
    store.update_form_data({'feedback': 'Hello'})
    assert store.form_data[DOCUMENT_REFS_KEY] == {'food_establishment_cert': link}

def test_reset_discards_draft_and_cursor(store: ApplicationFormStore) -> None:
    store.update_form_data({'full_name': 'Jane Doe'})
    store.set_current_step(3)
    store.reset()
    assert store.form_data == {}
    assert store.current_step == 1

def test_listeners_are_notified_on_change(store: ApplicationFormStore) -> None:
    seen: list[tuple[int, dict]] = []
    unsubscribe = store.subscribe(lambda s: seen.append((s.current_step, s.form_data)))

    store.update_form_data({'email': 'jane@x.com'})
    store.go_to_next_step()
    store.go_to_previous_step()
    store.go_to_previous_step()  # no-op, no notification

    assert seen == [
        (1, {'email': 'jane@x.com'}),
        (2, {'email': 'jane@x.com'}),
        (1, {'email': 'jane@x.com'}),
    ]

    unsubscribe()
    store.go_to_next_step()
    assert len(seen) == 3, "Unsubscribed listeners should not be called"

def test_removing_missing_document_does_not_notify(store: ApplicationFormStore) -> None:
    calls: list[int] = []
    store.subscribe(lambda s: calls.append(s.current_step))
    store.attach_document('food_safety_license', NoEvidence())
    assert calls == []
