"""Closed set of failures surfaced to callers of the chat services."""
from __future__ import annotations


class ChatError(Exception):
    """Base class for every failure a service reports to its caller."""

    code = "error"
    status_code = 400
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ChatError):
    code = "invalid_input"
    status_code = 400
    default_message = "Invalid input"


class DuplicateMemberIdError(ChatError):
    code = "duplicate_member_id"
    status_code = 409
    default_message = "Member id already in use"


class MemberNotFoundError(ChatError):
    code = "member_not_found"
    status_code = 404
    default_message = "Member does not exist"


class CredentialMismatchError(ChatError):
    code = "credential_mismatch"
    status_code = 401
    default_message = "ID or password do not match"


class RoomNotFoundError(ChatError):
    code = "room_not_found"
    status_code = 404
    default_message = "Room does not exist"


class InvalidRoomPasswordError(ChatError):
    code = "invalid_room_password"
    status_code = 403
    default_message = "Invalid room password"


class InvalidTokenError(ChatError):
    code = "invalid_token"
    status_code = 401
    default_message = "Invalid token"


class ExpiredTokenError(ChatError):
    code = "expired_token"
    status_code = 401
    default_message = "Token expired"


class InfrastructureError(ChatError):
    code = "internal_error"
    status_code = 500
    default_message = "Internal Server Error"
