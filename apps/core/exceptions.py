"""
Shared error taxonomy for the ledger apps.

Every service in the project raises one of these (or an app-specific
subclass). They are DRF ``APIException`` subclasses, so an error raised deep
inside a service surfaces with the right HTTP status without the view having
to catch it.

Exception Hierarchy:
    LedgerError (base)
    ├── ValidationError        400  kind=validation_error
    ├── AuthorizationError     403  kind=authorization_error
    ├── NotFoundError          404  kind=not_found
    ├── RangeExhaustedError    409  kind=range_exhausted
    └── DuplicateError         409  kind=duplicate

``kind`` is stable across subclasses so API clients can branch on it; the
``code`` is specific to the subclass (e.g. ``receipt_number_out_of_range``).

Usage:
    from apps.core.exceptions import NotFoundError

    class TaskNotFoundError(NotFoundError):
        default_detail = 'Task not found.'
        default_code = 'task_not_found'
"""
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler


class LedgerError(APIException):
    """Base exception for all ledger service errors."""
    kind = 'ledger_error'
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The request could not be processed.'
    default_code = 'ledger_error'


class ValidationError(LedgerError):
    """Malformed or out-of-range input."""
    kind = 'validation_error'
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid input.'
    default_code = 'invalid'


class AuthorizationError(LedgerError):
    """Role or ownership mismatch."""
    kind = 'authorization_error'
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'not_authorized'


class NotFoundError(LedgerError):
    """A referenced entity does not exist."""
    kind = 'not_found'
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


class RangeExhaustedError(LedgerError):
    """A receipt book has no remaining numbers."""
    kind = 'range_exhausted'
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'All receipt numbers in this book have been issued.'
    default_code = 'range_exhausted'


class DuplicateError(LedgerError):
    """
    Lost a uniqueness race.

    This is the one error expected during normal concurrent operation; the
    caller should refresh its state and retry.
    """
    kind = 'duplicate'
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This record already exists.'
    default_code = 'duplicate'


def ledger_exception_handler(exc, context):
    """
    Render every API error with a ``kind`` field.

    Ledger errors become ``{"kind", "code", "detail"}``. Errors raised by DRF
    itself (serializer validation, authentication) keep DRF's body and get a
    ``kind`` derived from the status code.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, LedgerError):
        response.data = {
            'kind': exc.kind,
            'code': exc.get_codes(),
            'detail': str(exc.detail),
        }
        return response

    kind = {
        400: 'validation_error',
        401: 'authentication_error',
        403: 'authorization_error',
        404: 'not_found',
    }.get(response.status_code, 'error')

    if isinstance(response.data, dict):
        response.data.setdefault('kind', kind)
    else:
        response.data = {'kind': kind, 'detail': response.data}
    return response
