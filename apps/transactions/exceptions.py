"""
Domain exceptions for transactions app.

Plain service errors signal invalid input; the APIException subclasses
carry their HTTP status and are rendered directly by DRF.
"""
from rest_framework.exceptions import APIException


class TransactionServiceError(Exception):
    """Base exception for transaction service errors."""
    pass


class InvalidTransactionError(TransactionServiceError):
    """Raised when transaction input fails validation."""
    pass


class UnknownCollectionError(TransactionServiceError):
    """Raised when counting rows of an unsupported collection."""
    pass


class TransactionNotFoundError(APIException):
    """Transaction not found."""
    status_code = 404
    default_detail = 'Transaction not found.'
    default_code = 'transaction_not_found'


class InsufficientPermissionsError(APIException):
    """User doesn't have permission for operation."""
    status_code = 403
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'insufficient_permissions'


class InvalidGroupMembershipError(APIException):
    """User is not a member of the required group."""
    status_code = 403
    default_detail = 'You must be a member of this group.'
    default_code = 'invalid_group_membership'
