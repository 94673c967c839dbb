"""Envelope statuses and response messages shared by the API layer."""
from __future__ import annotations

STATUS_SUCCESS = "SUCCESS"

MSG_USERS_FETCHED = "Users fetched successfully"
MSG_USER_FETCHED = "User fetched successfully"
MSG_USER_CREATED = "User created successfully"
MSG_USER_UPDATED = "User updated successfully"
MSG_USER_DELETED = "User deleted successfully"

MSG_UNEXPECTED_ERROR = "An unexpected error occurred"

DEFAULT_STATUS = "ACTIVE"
