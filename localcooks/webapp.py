# ===================================================================
# 1. IMPORTS
# ===================================================================
import logging
from typing import Any
from collections.abc import Callable

from nicegui import app, events, ui

from . import config
from .api_client import ApplicationApiClient
from .application_status import fetch_active_application
from .documents import NoEvidence, RemoteUrl, UploadedFile, validate_remote_url, validate_uploaded_file
from .errors import ApplicationLookupError, AuthenticationError
from .form_schema import CertificationAnswer, FieldErrors, FormField, StepDefinition
from .identity import FirebaseAuthClient, SessionIdentity
from .results import (
    AuthRequired, DocumentRequirementUnmet, NetworkError, ServerRejected, Success,
    SubmissionResult, ValidationFailed,
)
from .sessions import WizardSession, WizardSessionRegistry
from .step_definitions import STEPS_BY_ID
from .store import ApplicationFormStore
from .submission import SubmissionOrchestrator
from .validation import format_phone_number
from .wizard import submit_step

logging.basicConfig(level=config.LOG_LEVEL, format='%(asctime)s - %(levelname)s - %(name)s - %(message)s')
logger = logging.getLogger(__name__)

api_client = ApplicationApiClient()
firebase_auth = FirebaseAuthClient()
app.on_shutdown(api_client.close)

# ===================================================================
# 2. WIZARD SESSIONS
# ===================================================================

wizard_sessions = WizardSessionRegistry(max_idle_seconds=config.SESSION_IDLE_SECONDS)
app.timer(config.SESSION_SWEEP_SECONDS, wizard_sessions.evict_idle)

def get_identity() -> SessionIdentity:
    return SessionIdentity(app.storage.user)

def get_wizard_session() -> WizardSession:
    return wizard_sessions.get(
        app.storage.browser['id'],
        lambda: WizardSession(
            store=ApplicationFormStore(),
            orchestrator=SubmissionOrchestrator(api_client, get_identity()),
        ),
    )

def discard_wizard_session() -> None:
    wizard_sessions.discard(app.storage.browser['id'])

# ===================================================================
# 3. FIELD RENDERING
# ===================================================================

def _create_text_input(f: FormField, values: dict[str, Any]) -> ui.input:
    def on_change(e: events.ValueChangeEventArguments) -> None:
        values[f.key] = e.value
        element.error = None
    element = ui.input(f.label, value=values.get(f.key, f.default_value), placeholder=f.placeholder,
                       on_change=on_change).classes('w-full')
    if f.max_length:
        element.props(f'maxlength={f.max_length}')
    return element

def _create_phone_input(f: FormField, values: dict[str, Any]) -> ui.input:
    def on_change(e: events.ValueChangeEventArguments) -> None:
        masked = format_phone_number(e.value or '')
        if masked != (e.value or ''):
            element.value = masked
            return
        values[f.key] = masked
        element.error = None
    element = ui.input(f.label, value=values.get(f.key, f.default_value), placeholder=f.placeholder,
                       on_change=on_change).classes('w-full').props('type=tel')
    return element

def _create_radio_buttons(f: FormField, values: dict[str, Any],
                          on_value: Callable[[Any], None] | None = None) -> ui.radio:
    def on_change(e: events.ValueChangeEventArguments) -> None:
        values[f.key] = e.value
        if on_value:
            on_value(e.value)
    ui.label(f.label).classes('text-subtitle1 q-mt-md')
    radio = ui.radio(f.options or {}, value=values.get(f.key, f.default_value), on_change=on_change)
    if f.option_hints:
        with ui.column().classes('q-pl-md gap-0'):
            for value, hint in f.option_hints.items():
                ui.label(f"{(f.options or {}).get(value, value)}: {hint}").classes('text-caption text-grey-7')
    return radio

def _create_textarea_input(f: FormField, values: dict[str, Any]) -> ui.textarea:
    def on_change(e: events.ValueChangeEventArguments) -> None:
        values[f.key] = e.value
        element.error = None
    element = ui.textarea(f.label, value=values.get(f.key, f.default_value) or '', placeholder=f.placeholder,
                          on_change=on_change).classes('w-full')
    if f.max_length:
        element.props(f'maxlength={f.max_length} counter')
    return element

def create_field(f: FormField, values: dict[str, Any]) -> ui.element:
    if f.ui_type == 'phone':
        return _create_phone_input(f, values)
    if f.ui_type == 'textarea':
        return _create_textarea_input(f, values)
    if f.ui_type == 'radio':
        return _create_radio_buttons(f, values)
    return _create_text_input(f, values)

def show_field_errors(errors: FieldErrors, elements: dict[str, ui.element]) -> None:
    for field_key, message in errors.items():
        element = elements.get(field_key)
        if isinstance(element, (ui.input, ui.textarea)):
            element.error = message
        ui.notification(message, type='negative', multi_line=True)

# ===================================================================
# 4. DOCUMENT EVIDENCE (upload a file or paste a link)
# ===================================================================

def render_document_picker(f: FormField, store: ApplicationFormStore) -> ui.column:
    current = store.document_refs.get(f.key, NoEvidence())

    async def handle_upload(e: events.UploadEventArguments) -> None:
        content = await e.file.read()
        upload = UploadedFile(filename=e.file.name, content=content, mime_type=e.file.content_type)
        is_valid, msg = validate_uploaded_file(upload)
        if not is_valid:
            uploader.reset()
            ui.notify(msg, type='negative')
            return
        store.attach_document(f.key, upload)
        url_input.value = ''
        status_label.text = f"Attached: {upload.filename}"
        ui.notify(f"{upload.filename} is ready to submit.", type='positive')

    def handle_url(e: events.ValueChangeEventArguments) -> None:
        url = (e.value or '').strip()
        if not url:
            if isinstance(store.document_refs.get(f.key), RemoteUrl):
                store.attach_document(f.key, NoEvidence())
            url_input.error = None
            return
        is_valid, msg = validate_remote_url(url)
        url_input.error = None if is_valid else msg
        if is_valid:
            store.attach_document(f.key, RemoteUrl(url=url))
            status_label.text = "Link attached."

    with ui.column().classes('w-full q-pl-lg') as container:
        with ui.tabs().classes('w-full') as tabs:
            upload_tab = ui.tab('Upload file', icon='upload')
            url_tab = ui.tab('Provide URL', icon='link')
        with ui.tab_panels(tabs, value=url_tab if isinstance(current, RemoteUrl) else upload_tab).classes('w-full'):
            with ui.tab_panel(upload_tab):
                uploader = ui.upload(label="Upload your document (PDF, JPG, PNG, WebP)",
                                     on_upload=handle_upload, auto_upload=True,
                                     max_file_size=config.MAX_UPLOAD_BYTES,
                                     on_rejected=lambda: ui.notify("File too large or not allowed.", type='negative'))
                uploader.props('accept=".pdf,.jpg,.jpeg,.png,.webp"').classes('w-full')
            with ui.tab_panel(url_tab):
                url_input = ui.input('Link to your document (Google Drive, Dropbox, ...)',
                                     value=current.url if isinstance(current, RemoteUrl) else '',
                                     on_change=handle_url).classes('w-full')
        status_label = ui.label(
            f"Attached: {current.filename}" if isinstance(current, UploadedFile) else ''
        ).classes('text-caption text-positive')
    return container

# ===================================================================
# 5. STEP RENDERERS
# ===================================================================

def render_progress(store: ApplicationFormStore) -> None:
    step_def = STEPS_BY_ID[store.current_step]
    ui.label(f"Step {store.current_step} of {store.total_steps}: {step_def['title']}").classes('text-caption')
    ui.linear_progress(value=store.current_step / store.total_steps, show_value=False).classes('q-mb-md')

def render_generic_step(step_def: StepDefinition, session: WizardSession) -> None:
    store = session.store
    values: dict[str, Any] = store.form_data
    elements: dict[str, ui.element] = {}

    ui.label(step_def['title']).classes('text-h6 q-mb-xs')
    ui.markdown(step_def['subtitle'])

    document_keys = {f.key for f in step_def.get('documents', [])}
    for field_conf in step_def['fields']:
        f = field_conf['field']
        if f.key in document_keys:
            elements[f.key] = _render_certification_field(f, values, store)
        else:
            elements[f.key] = create_field(f, values)

    def handle_next() -> None:
        is_valid, errors = submit_step(store, values)
        if not is_valid:
            show_field_errors(errors, elements)

    async def handle_submit() -> None:
        if session.orchestrator.is_pending:
            return
        submit_button.disable()
        submit_button.props('loading')
        try:
            is_valid, errors = submit_step(store, values)
            if not is_valid:
                show_field_errors(errors, elements)
                return
            result = await session.orchestrator.submit(store)
            present_result(result, elements)
        finally:
            if not submit_button.is_deleted:
                submit_button.props(remove='loading')
                submit_button.enable()

    with ui.row().classes('w-full q-mt-lg justify-between items-center'):
        if step_def['id'] > 1:
            ui.button("← Back", on_click=store.go_to_previous_step).props('flat color=grey')
        else:
            ui.label()
        if store.is_last_step:
            submit_button = ui.button("Submit application", on_click=handle_submit).props('color=primary unelevated')
        else:
            ui.button("Continue →", on_click=handle_next).props('color=primary unelevated')

def _render_certification_field(f: FormField, values: dict[str, Any], store: ApplicationFormStore) -> ui.radio:
    def on_answer(answer: Any) -> None:
        wants_proof = answer == CertificationAnswer.YES.value
        picker.set_visibility(wants_proof)
        if not wants_proof:
            store.attach_document(f.key, NoEvidence())

    radio = _create_radio_buttons(f, values, on_value=on_answer)
    picker = render_document_picker(f, store)
    picker.set_visibility(values.get(f.key) == CertificationAnswer.YES.value)
    return radio

def present_result(result: SubmissionResult, elements: dict[str, ui.element]) -> None:
    if isinstance(result, Success):
        discard_wizard_session()
        ui.navigate.to('/success')
    elif isinstance(result, (ValidationFailed, DocumentRequirementUnmet)):
        show_field_errors(result.field_errors, elements)
    elif isinstance(result, AuthRequired):
        ui.notify(result.reason, type='negative')
        ui.timer(1.5, lambda: ui.navigate.to('/auth?redirect=/apply'), once=True)
    elif isinstance(result, ServerRejected):
        ui.notify(f"Error submitting application: {result.message}", type='negative', multi_line=True)
    elif isinstance(result, NetworkError):
        ui.notify(result.message, type='warning', multi_line=True)

# ===================================================================
# 6. PAGE ROUTING & AUTH
# ===================================================================

def render_header() -> None:
    identity = get_identity()

    def logout() -> None:
        identity.sign_out()
        discard_wizard_session()
        ui.navigate.to('/auth')

    ui.query('body').style('background-color: #f0f2f5;')
    with ui.header(elevated=True).classes('bg-primary text-white q-pa-sm items-center'):
        ui.label("Local Cooks – Cook Application").classes('text-h5')
        ui.space()
        if identity.is_authenticated:
            ui.label(f"Signed in as {identity.email or identity.current_user_id()}").classes('q-mr-md')
            ui.button('Log out', on_click=logout, color='white', icon='logout').props('flat dense')
        else:
            ui.button('Log in', on_click=lambda: ui.navigate.to('/auth?redirect=/apply'),
                      color='white', icon='login').props('flat dense')

@ui.page('/auth')
def login_page(redirect: str = '/apply') -> None:
    """Email/password sign-in through Firebase."""
    identity = get_identity()
    if not redirect.startswith('/'):
        redirect = '/apply'

    async def attempt_login() -> None:
        email = (email_input.value or '').strip()
        password = password_input.value or ''
        if not email or not password:
            ui.notify('Please enter your email and password.', color='negative')
            return
        login_button.disable()
        try:
            data = await firebase_auth.sign_in_with_password(email, password)
        except AuthenticationError as e:
            ui.notify(str(e), color='negative')
            return
        finally:
            login_button.enable()
        identity.sign_in(data['localId'], data['idToken'], data.get('email', email))
        ui.navigate.to(redirect)

    with ui.card().classes('absolute-center'):
        ui.label('Log in to Local Cooks').classes('text-h6 self-center')
        email_input = ui.input('Email').on('keydown.enter', attempt_login)
        password_input = ui.input('Password', password=True, password_toggle_button=True).on('keydown.enter', attempt_login)
        login_button = ui.button('Log in', on_click=attempt_login).classes('self-center w-full')

@ui.page('/apply')
def application_page() -> None:
    session = get_wizard_session()
    store = session.store
    identity = get_identity()
    render_header()

    @ui.refreshable
    def progress() -> None:
        render_progress(store)

    @ui.refreshable
    def step_content() -> None:
        render_generic_step(STEPS_BY_ID[store.current_step], session)

    rendered = {'step': store.current_step}

    def on_store_change(changed: ApplicationFormStore) -> None:
        if changed.current_step != rendered['step']:
            rendered['step'] = changed.current_step
            progress.refresh()
            step_content.refresh()

    unsubscribe = store.subscribe(on_store_change)
    ui.context.client.on_disconnect(unsubscribe)

    async def check_active_application() -> None:
        try:
            active = await fetch_active_application(api_client, identity)
        except ApplicationLookupError as e:
            logger.warning(f"Active application check failed: {e}")
            return
        if active:
            wizard_card.clear()
            with wizard_card:
                ui.label('Active Application Exists').classes('text-h6 text-negative')
                ui.label('You already have an active application. Please cancel your existing '
                         'application before submitting a new one.')
                ui.label(f"Current status: {active.get('status', 'unknown')}").classes('text-caption q-mt-sm')

    with ui.column().classes('w-full items-center q-pa-md'):
        with ui.card().classes('q-pa-md shadow-4').style('width: 95%; max-width: 720px;') as wizard_card:
            with ui.column().classes('w-full'):
                progress()
                step_content()

    ui.timer(0.1, check_active_application, once=True)

@ui.page('/success')
def success_page() -> None:
    render_header()
    with ui.card().classes('absolute-center items-center'):
        ui.icon('check_circle', size='xl', color='positive')
        ui.label('Application submitted!').classes('text-h6')
        ui.label("Thanks for applying to cook with Local Cooks. We'll review your application and get back to you by email.")
        ui.button('Back to home', on_click=lambda: ui.navigate.to('/')).props('flat color=primary')

@ui.page('/')
def main_page() -> None:
    ui.navigate.to('/apply')

def main() -> None:
    ui.run(
        host='0.0.0.0',
        port=config.PORT,
        title='Local Cooks – Apply',
        storage_secret=config.STORAGE_SECRET,
        reload=False,
    )

if __name__ in {"__main__", "__mp_main__"}:
    main()
