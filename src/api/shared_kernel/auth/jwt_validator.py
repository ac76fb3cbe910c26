"""JWT validation for viewer identification.

Storefront sessions are issued by the accounts service as signed JWTs. The
API only needs the viewer's user id from them, to decide whether the viewer
is the owner of record of the store a request resolved to.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from jose import JWTError, jwt
from jose.exceptions import ExpiredSignatureError, JWTClaimsError

if TYPE_CHECKING:
    from shared_kernel.auth.observability import JWTValidatorProbe


@dataclass(frozen=True)
class TokenClaims:
    """Validated JWT claims."""

    sub: str
    email: str | None = None


class InvalidTokenError(Exception):
    """Raised when JWT validation fails."""

    pass


class JWTValidator:
    """Validates shared-secret signed JWTs.

    Verifies signature and expiry, plus issuer and audience when configured.
    """

    def __init__(
        self,
        secret: str,
        probe: JWTValidatorProbe,
        algorithm: str = "HS256",
        issuer: str | None = None,
        audience: str | None = None,
        user_id_claim: str = "sub",
    ):
        """Initialize the JWT validator.

        Args:
            secret: Key the tokens are signed with.
            probe: Observability probe for logging events.
            algorithm: Accepted signing algorithm.
            issuer: Expected issuer claim, or None to skip the check.
            audience: Expected audience claim, or None to skip the check.
            user_id_claim: JWT claim to use for user ID (default: sub).
        """
        self._secret = secret
        self._probe = probe
        self._algorithm = algorithm
        self._issuer = issuer
        self._audience = audience
        self._user_id_claim = user_id_claim

    def validate_token(self, token: str) -> TokenClaims:
        """Validate JWT and return claims.

        Args:
            token: The JWT token string.

        Returns:
            TokenClaims containing the validated claims.

        Raises:
            InvalidTokenError: If token is invalid, expired, or verification fails.
        """
        try:
            claims = jwt.decode(
                token=token,
                key=self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
                options={
                    "verify_signature": True,
                    "verify_aud": self._audience is not None,
                    "verify_iss": self._issuer is not None,
                    "verify_exp": True,
                },
            )
        except ExpiredSignatureError as e:
            self._probe.token_validation_failed(reason="Token expired")
            raise InvalidTokenError("Token has expired") from e
        except JWTClaimsError as e:
            self._probe.token_validation_failed(reason=f"Claims error: {e}")
            raise InvalidTokenError(f"Invalid token claims: {e}") from e
        except JWTError as e:
            self._probe.token_validation_failed(reason=f"JWT error: {e}")
            raise InvalidTokenError(f"Invalid token: {e}") from e

        user_id = claims.get(self._user_id_claim)
        if user_id is None or not str(user_id).strip():
            self._probe.token_validation_failed(
                reason=f"Missing {self._user_id_claim} claim"
            )
            raise InvalidTokenError(f"Missing required claim: {self._user_id_claim}")

        self._probe.token_validated(user_id=str(user_id))

        email = claims.get("email")
        return TokenClaims(
            sub=str(user_id),
            email=str(email) if email is not None else None,
        )
