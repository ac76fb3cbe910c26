"""Exceptions raised by storefront repositories."""


class EntityNotFoundError(Exception):
    """Raised when an entity does not exist within the current store.

    Entities of other stores are indistinguishable from missing ones.
    """

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity.capitalize()} {entity_id} not found")


class EmptyOrderError(ValueError):
    """Raised when checkout is attempted without any items."""
