import os

from ..core.constants import DEFAULT_API_BASE_URL, DEFAULT_STORAGE_BASE_URL

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

API_BASE_URL = os.getenv("API_BASE_URL", DEFAULT_API_BASE_URL)
STORAGE_BASE_URL = os.getenv("STORAGE_BASE_URL", DEFAULT_STORAGE_BASE_URL)

REQUEST_TIMEOUT_SECONDS = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "20"))
ACTION_TIMEOUT_SECONDS = float(os.getenv("ACTION_TIMEOUT_SECONDS", "15"))
NOTIFICATION_SECONDS = float(os.getenv("NOTIFICATION_SECONDS", "4"))

DEBUG = False
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
