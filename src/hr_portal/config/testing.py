SECRET_KEY = "test-secret"

API_BASE_URL = "http://api.test/api"
STORAGE_BASE_URL = "http://api.test/storage/"

REQUEST_TIMEOUT_SECONDS = 2.0
ACTION_TIMEOUT_SECONDS = 1.0
NOTIFICATION_SECONDS = 4.0

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
