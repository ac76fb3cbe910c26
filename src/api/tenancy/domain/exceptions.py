"""Domain exceptions for the tenancy context."""


class SubdomainRemovalError(ValueError):
    """Raised when an edit would leave a store without a subdomain label."""

    pass


class CustomDomainStateError(Exception):
    """Raised when a custom-domain transition needs a binding that is absent."""

    pass
