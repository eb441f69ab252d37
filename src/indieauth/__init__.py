"""IndieAuth token verification for the Micropub endpoint."""
from indieauth.tokens import (
    StaticTokenVerifier,
    TokenEndpointVerifier,
    TokenVerificationError,
    TokenVerifier,
    verifier_from_config,
)

__all__ = [
    "StaticTokenVerifier",
    "TokenEndpointVerifier",
    "TokenVerificationError",
    "TokenVerifier",
    "verifier_from_config",
]
