"""Domain probe for bearer-token verification.

A rejected token never fails a storefront request (the viewer just becomes
anonymous), so these events are the only trace of a bad or expired session.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class JWTValidatorProbe(Protocol):
    """Domain probe for viewer token verification."""

    def token_validated(self, user_id: str) -> None:
        """Record that a token identified ``user_id``."""
        ...

    def token_validation_failed(self, reason: str) -> None:
        """Record that a token was rejected; the viewer stays anonymous."""
        ...

    def with_context(self, context: ObservationContext) -> JWTValidatorProbe:
        ...


class DefaultJWTValidatorProbe:
    """Default implementation of JWTValidatorProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _kwargs(self, **fields: Any) -> dict[str, Any]:
        context = self._context.as_dict() if self._context is not None else {}
        return {**context, **fields}

    def with_context(self, context: ObservationContext) -> DefaultJWTValidatorProbe:
        return DefaultJWTValidatorProbe(logger=self._logger, context=context)

    def token_validated(self, user_id: str) -> None:
        self._logger.debug("viewer_token_accepted", **self._kwargs(user_id=user_id))

    def token_validation_failed(self, reason: str) -> None:
        self._logger.warning("viewer_token_rejected", **self._kwargs(reason=reason))
