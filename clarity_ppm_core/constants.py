"""
Constants and enums for the Clarity PPM core.

This module centralizes the magic strings used when talking to the
Clarity PPM REST API so that handlers, schemas and tests agree on them.
"""

from enum import Enum


class AuthType(str, Enum):
    """Authentication schemes supported by the Clarity PPM REST API."""

    API_KEY = "apiKey"
    BASIC = "basic"
    SESSION_TOKEN = "token"

    @classmethod
    def _missing_(cls, value):
        aliases = {
            "api-key": cls.API_KEY,
            "api_key": cls.API_KEY,
            "session-token": cls.SESSION_TOKEN,
            "session_token": cls.SESSION_TOKEN,
        }
        if isinstance(value, str):
            return aliases.get(value.strip().lower())
        return None


class HttpMethod(str, Enum):
    """HTTP methods used by the backend."""

    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    PUT = "PUT"
    DELETE = "DELETE"


class ResourceType(str, Enum):
    """Resource kinds exposed by the adapter."""

    PROJECT = "project"
    TASK = "task"
    TIMESHEET = "timesheet"
    RESOURCE = "resource"
    ROADMAP = "roadmap"
    TEAM = "team"
    COST_PLAN = "costPlan"
    BENEFIT_PLAN = "benefitPlan"
    LOOKUP = "lookup"
    INTEGRATION = "integration"
    USER_PROFILE = "userProfile"


class OperationType(str, Enum):
    """Operations a resource can support."""

    CREATE = "create"
    GET = "get"
    GET_MANY = "getMany"
    UPDATE = "update"
    DELETE = "delete"
    SUBMIT = "submit"
    APPROVE = "approve"
    GET_VALUES = "getValues"


class TimesheetStatus(int, Enum):
    """Timesheet lifecycle codes. The backend owns transition rules."""

    OPEN = 0
    SUBMITTED = 1
    RETURNED = 2
    APPROVED = 3


class LogLevel(str, Enum):
    """Standard logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class EnvironmentVariable(str, Enum):
    """Standard environment variable names."""

    APP_ENV = "APP_ENV"
    LOG_LEVEL = "LOG_LEVEL"
    DEBUG = "DEBUG"
    CLARITY_HOST = "CLARITY_HOST"
    CLARITY_AUTH_TYPE = "CLARITY_AUTH_TYPE"
    CLARITY_USERNAME = "CLARITY_USERNAME"
    CLARITY_PASSWORD = "CLARITY_PASSWORD"
    CLARITY_API_KEY = "CLARITY_API_KEY"
    CLARITY_CLIENT_ID = "CLARITY_CLIENT_ID"
    CLARITY_TIMEOUT = "CLARITY_TIMEOUT"
    CLARITY_VERIFY_SSL = "CLARITY_VERIFY_SSL"
    CLARITY_PAGE_SIZE = "CLARITY_PAGE_SIZE"
    CLARITY_MAX_PAGES = "CLARITY_MAX_PAGES"


class LogContextKey(str, Enum):
    """Standard keys for logging context."""

    ITEM_INDEX = "item_index"
    RESOURCE = "resource"
    OPERATION = "operation"
    METHOD = "method"
    URL = "url"
    OFFSET = "offset"
    LIMIT = "limit"


class ApiPath:
    """Fixed paths on the Clarity PPM REST surface."""

    BASE = "/ppm/rest/v1"
    LOGIN = "/auth/login"
    LOGOUT = "/auth/logout"
    USER_PROFILE = "/virtual/userProfile"


class Headers:
    """Header names sent to the backend."""

    AUTHORIZATION = "Authorization"
    CLIENT_ID = "x-api-ppm-client"
    CONTENT_TYPE = "Content-Type"
    JSON = "application/json"


class ResponseKey:
    """Envelope keys returned by the backend."""

    RESULTS = "_results"
    NEXT = "_next"
    TOTAL_COUNT = "_totalCount"
    INTERNAL_ID = "_internalId"
    ERRORS = "_errors"
    AUTH_TOKEN = "authToken"


# Numeric constants
class Limits:
    """Paging defaults."""

    DEFAULT_PAGE_SIZE = 100
    DEFAULT_RETURN_LIMIT = 50
    DEFAULT_TIMEOUT_SECONDS = 60


UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"
