"""User authentication service."""

import logging

from django.contrib.auth import get_user_model
from django.utils import timezone

from .exceptions import InvalidCredentialsError, InactiveAccountError

User = get_user_model()

logger = logging.getLogger(__name__)


def authenticate_user(*, email: str, password: str) -> User:
    """
    Check an email/password pair and stamp ``last_login``.

    The email match is case-insensitive, the same way registration
    normalises it. Unknown email and wrong password give the same error.

    Raises:
        InvalidCredentialsError: If the email or password is wrong
        InactiveAccountError: If the account is deactivated
    """
    user = (
        User.objects
        .filter(email__iexact=(email or '').strip())
        .order_by('id')
        .first()
    )
    if user is None or not user.check_password(password):
        logger.warning("Failed login attempt for %s", email)
        raise InvalidCredentialsError("Invalid email or password")

    if not user.is_active:
        raise InactiveAccountError("Account is deactivated")

    user.last_login = timezone.now()
    User.objects.filter(pk=user.pk).update(last_login=user.last_login)

    logger.info("User %s logged in", user.id)
    return user
