"""Application-layer value objects for the tenancy context."""

from __future__ import annotations

from dataclasses import dataclass

from tenancy.domain.value_objects import UserId


@dataclass(frozen=True)
class Viewer:
    """The authenticated user behind a request.

    Anonymous requests have no Viewer at all. Tenant resolution compares
    ``user_id`` with the matched store's owner of record.
    """

    user_id: UserId
    email: str | None = None
