"""
Core module - data models, errors and shared helpers.

This module contains:
- models: Users, tasks and the request shapes that edit them
- errors: The application error taxonomy
- utils: Shared utility functions
- validation: pydantic failures as ValidationErrors
"""

from tasklist.core.models import (
    Priority,
    TaskStatus,
    User,
    UserResponse,
    Task,
    TaskCreate,
    TaskReplace,
    TaskPatch,
    TaskFilters,
)
from tasklist.core.errors import (
    AppError,
    ValidationError,
    ConflictError,
    AuthError,
    AuthRequiredError,
    TokenError,
    InvalidTokenError,
    ExpiredTokenError,
    NotFoundError,
    ConfigError,
)
from tasklist.core.utils import generate_id, utc_now, parse_duration
from tasklist.core.validation import format_errors, validate_input

__all__ = [
    # Models
    "Priority",
    "TaskStatus",
    "User",
    "UserResponse",
    "Task",
    "TaskCreate",
    "TaskReplace",
    "TaskPatch",
    "TaskFilters",
    # Errors
    "AppError",
    "ValidationError",
    "ConflictError",
    "AuthError",
    "AuthRequiredError",
    "TokenError",
    "InvalidTokenError",
    "ExpiredTokenError",
    "NotFoundError",
    "ConfigError",
    # Utils
    "generate_id",
    "utc_now",
    "parse_duration",
    # Validation
    "format_errors",
    "validate_input",
]
