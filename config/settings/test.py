# config/settings/test.py
from .base import *  # noqa
from .base import LOGGING

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": ":memory:",
    }
}

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

LOGGING["loggers"]["erp_core"]["level"] = "DEBUG"
# let pytest's caplog (attached to the root logger) see erp_core records
LOGGING["loggers"]["erp_core"]["propagate"] = True
