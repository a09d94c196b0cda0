"""User registration service."""

import logging

from django.db import transaction, IntegrityError
from django.contrib.auth import get_user_model

from .exceptions import UserRegistrationError

User = get_user_model()
logger = logging.getLogger(__name__)


@transaction.atomic
def register_user(
    *,
    email: str,
    password: str,
    display_name: str = "",
    currency: str = ""
) -> User:
    """
    Register a new user.

    Args:
        email: User's email address
        password: User's password (will be hashed)
        display_name: Optional display name
        currency: Optional currency label; falls back to the project default

    Returns:
        Created User instance

    Raises:
        UserRegistrationError: If the email is already registered
    """
    extra = {'display_name': display_name}
    if currency:
        extra['currency'] = currency

    if User.objects.filter(email__iexact=(email or '').strip()).exists():
        raise UserRegistrationError("Email already registered")

    try:
        user = User.objects.create_user(email=email, password=password, **extra)
    except IntegrityError:
        raise UserRegistrationError("Email already registered")

    logger.info("Registered user %s", user.id)
    return user
