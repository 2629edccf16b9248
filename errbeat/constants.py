"""Constants used throughout the errbeat library."""

import os

VERSION = "0.1.0"

USER_AGENT = f"errbeat-python/{VERSION}"

DEFAULT_API_URL = "https://intake.opbeat.com"

# Files under this directory belong to errbeat itself and are never a culprit
PACKAGE_ROOT = os.path.dirname(os.path.abspath(__file__))

LOG_LEVELS = ("debug", "info", "warning", "warn", "error", "fatal", "critical")

# Event level name -> logger method name
LOGGER_METHODS = {
    "debug": "debug",
    "info": "info",
    "warn": "warning",
    "warning": "warning",
    "error": "error",
    "fatal": "critical",
    "critical": "critical",
}

EVENT_ERROR = "error"
EVENT_LOGGED = "logged"
EVENT_NAMES = (EVENT_ERROR, EVENT_LOGGED)

REDACT_DEFAULT_KEYS = {
    "password",
    "passwd",
    "pwd",
    "secret",
    "api_secret",
    "client_secret",
    "token",
    "access_token",
    "refresh_token",
    "id_token",
    "key",
    "api_key",
    "authorization",
    "auth",
    "cookie",
    "set-cookie",
    "private_key",
}
