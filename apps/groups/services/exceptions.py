"""
Domain-specific exceptions for groups app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class GroupsServiceError(Exception):
    """Base exception for all groups service errors."""
    pass


class GroupNotFoundError(GroupsServiceError):
    """Raised when a group does not exist or the user is not a member."""
    pass


class GroupValidationError(GroupsServiceError):
    """Raised when group input is malformed (empty name, unknown members)."""
    pass
