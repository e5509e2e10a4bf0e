# localcooks/config.py
from __future__ import annotations
import os

# --- Backend ---
API_BASE_URL: str = os.environ.get('LOCALCOOKS_API_URL', 'http://localhost:5000').rstrip('/')
APPLICATIONS_PATH: str = '/api/applications'
MY_APPLICATIONS_PATH: str = '/api/applications/my-applications'
UPLOAD_PATH: str = '/api/upload'
REQUEST_TIMEOUT_SECONDS: float = float(os.environ.get('REQUEST_TIMEOUT_SECONDS', '30'))

# --- Document uploads ---
# One ceiling for every document class: the serverless body limit of 4.5 MB.
MAX_UPLOAD_BYTES: int = int(os.environ.get('MAX_UPLOAD_BYTES', str(int(4.5 * 1024 * 1024))))
ALLOWED_UPLOAD_TYPES: frozenset[str] = frozenset({
    'application/pdf', 'image/jpeg', 'image/png', 'image/webp',
})
UPLOAD_MODE_INLINE: str = 'inline'
UPLOAD_MODE_OUT_OF_BAND: str = 'out_of_band'
DOCUMENT_UPLOAD_MODE: str = os.environ.get('DOCUMENT_UPLOAD_MODE', UPLOAD_MODE_INLINE)

# --- Identity ---
FIREBASE_API_KEY: str = os.environ.get('FIREBASE_API_KEY', '')
FIREBASE_AUTH_URL: str = 'https://identitytoolkit.googleapis.com/v1'

# --- Web app ---
PORT: int = int(os.environ.get('PORT', 8080))
STORAGE_SECRET: str = os.environ.get('STORAGE_SECRET', 'a_very_secure_secret_key_for_local_dev')
LOG_LEVEL: str = os.environ.get('LOG_LEVEL', 'INFO').upper()
SESSION_IDLE_SECONDS: float = float(os.environ.get('SESSION_IDLE_SECONDS', '3600'))
SESSION_SWEEP_SECONDS: float = 60.0

if DOCUMENT_UPLOAD_MODE not in (UPLOAD_MODE_INLINE, UPLOAD_MODE_OUT_OF_BAND):
    raise ValueError(
        f"DOCUMENT_UPLOAD_MODE must be '{UPLOAD_MODE_INLINE}' or '{UPLOAD_MODE_OUT_OF_BAND}', "
        f"got '{DOCUMENT_UPLOAD_MODE}'"
    )
if MAX_UPLOAD_BYTES <= 0:
    raise ValueError(f"MAX_UPLOAD_BYTES must be positive, got {MAX_UPLOAD_BYTES}")
if REQUEST_TIMEOUT_SECONDS <= 0:
    raise ValueError(f"REQUEST_TIMEOUT_SECONDS must be positive, got {REQUEST_TIMEOUT_SECONDS}")
if SESSION_IDLE_SECONDS <= 0:
    raise ValueError(f"SESSION_IDLE_SECONDS must be positive, got {SESSION_IDLE_SECONDS}")
