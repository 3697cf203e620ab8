"""API authentication: bearer-token middleware and request identity accessor."""

from api.auth.identity import MissingIdentityError, attach_identity, take_identity
from api.auth.middleware import BearerTokenMiddleware

__all__ = [
    "BearerTokenMiddleware",
    "MissingIdentityError",
    "attach_identity",
    "take_identity",
]
