"""
Sign-in error classification.

Credential checks belong to the authentication provider; this module only
turns its outcome into a stable error code and a message for the user.
"""
import logging

logger = logging.getLogger(__name__)

USER_NOT_FOUND = 'USER_NOT_FOUND'
INVALID_PASSWORD = 'INVALID_PASSWORD'
UNKNOWN_ERROR = 'UNKNOWN'

ERROR_MESSAGES = {
    USER_NOT_FOUND: 'This account does not exist. Please sign up first.',
    INVALID_PASSWORD: 'Incorrect password. Please try again.',
    UNKNOWN_ERROR: 'Invalid email or password',
}

_INVALID_PASSWORD_MARKERS = ('invalid password', 'incorrect password', 'invalid email or password',
                             'wrong password')


def classify_sign_in_error(user_exists, error_message=None):
    """
    Classify a failed sign-in.

    Args:
        user_exists (bool): Whether a user with the email was found.
        error_message (str, optional): Message reported by the authentication provider.

    Returns:
        dict: {'success': False, 'errorCode': <code>, 'error': <user-facing message>}
    """
    if not user_exists:
        code = USER_NOT_FOUND
    elif error_message and any(marker in error_message.lower() for marker in _INVALID_PASSWORD_MARKERS):
        code = INVALID_PASSWORD
    else:
        code = UNKNOWN_ERROR
    return {'success': False, 'errorCode': code, 'error': ERROR_MESSAGES[code]}


def sign_in_with_email(store, authenticate, email, password):
    """
    Sign a user in through the authentication provider.

    Args:
        store (WatchlistStore): Used to check that the account exists.
        authenticate (callable): Provider call taking (email, password); returns a
            session dict with a 'user' key, or raises on bad credentials.
        email (str): Email address; surrounding whitespace is ignored.
        password (str): Password as typed.

    Returns:
        dict: {'success': True, 'data': session} or a classify_sign_in_error() result.
    """
    sanitized_email = (email or '').strip()
    if not store.find_user_by_email(sanitized_email):
        return classify_sign_in_error(False)

    try:
        session = authenticate(sanitized_email, password)
    except Exception as e:
        logger.error(f"Sign in failed: {e}")
        return classify_sign_in_error(True, str(e))

    if session and session.get('user'):
        return {'success': True, 'data': session}
    return classify_sign_in_error(True)
