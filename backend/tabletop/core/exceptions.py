"""Custom exception classes for the application

Three kinds of failure reach callers:

* ``ApplicationError`` - authentication, authorization and input problems.
* ``DomainError`` - expected business outcomes (missing entity, duplicate
  request, invalid transition).
* ``InfrastructureError`` - hashing, token encoding and database failures.
  Their messages are generic on purpose; diagnostics go to the log only.
"""

from typing import Optional, Dict, Any


class BaseAPIException(Exception):
    """Base exception for all API errors"""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ApplicationError(BaseAPIException):
    """Authentication, authorization and input errors"""


class DomainError(BaseAPIException):
    """Business rule outcomes"""


class InfrastructureError(BaseAPIException):
    """Failures of collaborators the caller cannot act on"""
    def __init__(self, message: str = "Internal server error"):
        super().__init__(message, status_code=500)


# Authentication Errors
class AuthenticationError(ApplicationError):
    """Base authentication error"""
    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, status_code=401)


class InvalidCredentialsError(AuthenticationError):
    """Unknown user, wrong password or unusable refresh token"""
    def __init__(self):
        super().__init__("Invalid credentials")


class TokenInvalidError(AuthenticationError):
    """Access token is forged, malformed or expired"""
    def __init__(self):
        super().__init__("Invalid token")


class IncorrectPasswordError(ApplicationError):
    """Current password did not match for an authenticated user"""
    def __init__(self):
        super().__init__("Incorrect password", status_code=403)


# Authorization Errors
class ForbiddenError(ApplicationError):
    """Insufficient permissions"""
    def __init__(self, message: str = "Forbidden"):
        super().__init__(message, status_code=403)


# Validation Errors
class InvalidInputError(ApplicationError):
    """Validation error"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status_code=422, details=details)


# Resource Errors
class EntityNotFoundError(DomainError):
    """Entity not found"""
    def __init__(self, entity_type: str, entity_id: Any = None):
        self.entity_type = entity_type
        self.entity_id = None if entity_id is None else str(entity_id)
        details = {"entity_type": entity_type}
        if self.entity_id is not None:
            details["entity_id"] = self.entity_id
        super().__init__(f"{entity_type} not found", status_code=404, details=details)


class TableNotFoundError(EntityNotFoundError):
    def __init__(self, table_id: Any = None):
        super().__init__("Table", table_id)


class ResourceAlreadyExistsError(DomainError):
    """Resource already exists"""
    def __init__(self, resource: str):
        super().__init__(f"{resource} already exists", status_code=409)


# Business Logic Errors
class BusinessRuleViolationError(DomainError):
    """Business rule violated"""
    def __init__(self, message: str):
        super().__init__(message, status_code=400)


class DuplicateTableRequestError(DomainError):
    """A pending request for this user and table already exists"""
    def __init__(self):
        super().__init__("A pending request for this table already exists", status_code=409)


class RefreshTokenConflictError(DomainError):
    """Another sign-in for the same user claimed the refresh token slot"""
    def __init__(self):
        super().__init__("Concurrent sign-in for this account, please retry", status_code=409)


class UserNotTableGameMasterError(DomainError):
    """Actor is not the game master of the table"""
    def __init__(self):
        super().__init__("User is not the game master of this table", status_code=403)


class RequestAlreadyProcessedError(DomainError):
    """Table request is no longer pending"""
    def __init__(self, current_status: str):
        super().__init__(
            "Table request has already been processed",
            status_code=409,
            details={"status": current_status},
        )


class InvalidStatusTransitionError(DomainError):
    """State machine does not allow this move"""
    def __init__(self, from_status: str, to_status: str):
        super().__init__(
            f"Invalid status transition from {from_status} to {to_status}",
            status_code=409,
            details={"from": from_status, "to": to_status},
        )


# System Errors
class HashingFailedError(InfrastructureError):
    """Password hashing or verification failed"""
    def __init__(self):
        super().__init__("Password processing failed")


class TokenEncodeFailedError(InfrastructureError):
    """Access token could not be signed"""
    def __init__(self):
        super().__init__("Token generation failed")


class DatabaseError(InfrastructureError):
    """Database operation failed"""
    def __init__(self, message: str = "Database operation failed"):
        super().__init__(message)
