"""Auth settings for secret provisioning, the username filter, and user records."""

from pydantic_settings import BaseSettings

from shared.auth.secret_store import SECRET_KEY


class AuthSettings(BaseSettings):
    model_config = {"env_prefix": "AUTH_"}

    # Env file holding the HMAC access secret under ``secret_key``
    secret_file: str = "data/secrets.env"
    secret_key: str = SECRET_KEY

    # Regenerate on every boot (invalidates all issued tokens). When False the
    # existing value is loaded and startup fails if it is missing or malformed.
    regenerate_secret: bool = True

    # One banned username term per line
    banned_terms_file: str = "data/banned_terms.txt"

    # JSON user-record store
    users_file: str = "data/users.json"
