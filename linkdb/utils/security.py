import secrets

API_KEY_PREFIX = "ldb_"


def generate_api_key() -> str:
    """Return a new random API key."""
    return API_KEY_PREFIX + secrets.token_urlsafe(32)
