from uuid import uuid4

from tabletop.core.exceptions import (
    ApplicationError,
    AuthenticationError,
    DatabaseError,
    DomainError,
    DuplicateTableRequestError,
    ForbiddenError,
    HashingFailedError,
    InfrastructureError,
    InvalidCredentialsError,
    InvalidStatusTransitionError,
    RefreshTokenConflictError,
    TableNotFoundError,
    UserNotTableGameMasterError,
)


def test_error_kinds_and_status_codes():
    cases = [
        (InvalidCredentialsError(), AuthenticationError, 401),
        (ForbiddenError(), ApplicationError, 403),
        (TableNotFoundError(uuid4()), DomainError, 404),
        (DuplicateTableRequestError(), DomainError, 409),
        (RefreshTokenConflictError(), DomainError, 409),
        (UserNotTableGameMasterError(), DomainError, 403),
        (InvalidStatusTransitionError("Completed", "Scheduled"), DomainError, 409),
        (HashingFailedError(), InfrastructureError, 500),
        (DatabaseError(), InfrastructureError, 500),
    ]
    for error, kind, status_code in cases:
        assert isinstance(error, kind)
        assert error.status_code == status_code


def test_not_found_details_are_serializable():
    table_id = uuid4()
    error = TableNotFoundError(table_id)
    assert error.details == {"entity_type": "Table", "entity_id": str(table_id)}
    assert error.message == "Table not found"
