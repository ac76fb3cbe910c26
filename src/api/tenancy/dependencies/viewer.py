"""Viewer identification from the bearer token.

Storefront pages are public, so a missing or invalid token is not an error
here: the request simply runs as an anonymous viewer. Handlers that need a
signed-in user depend on ``require_viewer`` instead.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from infrastructure.settings import get_auth_settings
from shared_kernel.auth import InvalidTokenError, JWTValidator
from shared_kernel.auth.observability import DefaultJWTValidatorProbe
from tenancy.application.value_objects import Viewer
from tenancy.domain.value_objects import UserId

bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_jwt_validator() -> JWTValidator:
    """Get cached JWT validator configured from auth settings."""
    settings = get_auth_settings()
    return JWTValidator(
        secret=settings.jwt_secret.get_secret_value(),
        probe=DefaultJWTValidatorProbe(),
        algorithm=settings.jwt_algorithm,
        issuer=settings.issuer,
        audience=settings.audience,
        user_id_claim=settings.user_id_claim,
    )


def get_viewer(
    validator: Annotated[JWTValidator, Depends(get_jwt_validator)],
    credentials: Annotated[
        HTTPAuthorizationCredentials | None, Depends(bearer_scheme)
    ] = None,
) -> Viewer | None:
    """Identify the viewer, or None for anonymous requests.

    Validation failures are recorded by the validator's probe and treated
    as anonymous.
    """
    if credentials is None:
        return None
    try:
        claims = validator.validate_token(credentials.credentials)
    except InvalidTokenError:
        return None
    return Viewer(user_id=UserId(value=claims.sub), email=claims.email)


def require_viewer(
    viewer: Annotated[Viewer | None, Depends(get_viewer)],
) -> Viewer:
    """Require a signed-in viewer.

    Raises:
        HTTPException 401: If the request carries no valid bearer token
    """
    if viewer is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Sign in required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return viewer
