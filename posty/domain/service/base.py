"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold logic that spans the user aggregate and its
    collaborators (hashing, tokens, codes, notifications).
    """

    pass
