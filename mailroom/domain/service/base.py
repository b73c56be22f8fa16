"""Base service class for domain services."""


class Service:
    """Base class for all domain services.

    Domain services hold the behaviour composed by the ``User`` aggregate:
    lazy loading, memoization and invalidation of its derived state.
    """

    pass
