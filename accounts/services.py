"""
Account service layer - credential checks.
"""
import logging

from core.result import ErrorKind, Failure, Result, Success
from .models import Account

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = 'Invalid credentials'
ACCOUNT_INACTIVE = 'Account is inactive'


def authenticate(email: str, password: str) -> Result:
    """
    Verify an email/password pair.

    Returns:
        Success carrying the Account, or an AUTHENTICATION failure with a
        user-facing message. Unknown email and wrong password share one
        message.
    """
    account = Account.objects.filter(email__iexact=email.strip()).first()
    if account is None or not account.check_password(password):
        logger.info(f"Failed login attempt for {email}")
        return Failure(ErrorKind.AUTHENTICATION, INVALID_CREDENTIALS)

    if not account.is_active:
        logger.info(f"Login refused for inactive account #{account.id}")
        return Failure(ErrorKind.AUTHENTICATION, ACCOUNT_INACTIVE)

    logger.info(f"Account #{account.id} logged in")
    return Success(account)
