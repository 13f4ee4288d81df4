"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from .enums import Role

DEFAULT_API_BASE_URL = "http://localhost:8000/api"
DEFAULT_STORAGE_BASE_URL = "http://localhost:8000/storage/"

DEFAULT_NOTIFICATION_SECONDS = 4.0
DEFAULT_REQUEST_TIMEOUT_SECONDS = 20.0
DEFAULT_ACTION_TIMEOUT_SECONDS = 15.0

ALL_STATUSES = "all"

TOKEN_KEYS = {
    Role.ADMIN: "admin_token",
    Role.EMPLOYEE: "employe_token",
}

# Laravel-style method spoofing for multipart updates.
METHOD_OVERRIDE_FIELD = "_method"

PDF_TYPES = frozenset({"application/pdf"})
DOCUMENT_TYPES = frozenset({"application/pdf", "image/jpeg", "image/png"})
DOCUMENT_EXTENSIONS = {
    "application/pdf": (".pdf",),
    "image/jpeg": (".jpg", ".jpeg"),
    "image/png": (".png",),
}
MAX_UPLOAD_BYTES = 2 * 1024 * 1024
