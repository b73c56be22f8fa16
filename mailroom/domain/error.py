"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class IdentityMismatchError(DomainError):
    """Raised when a user can't be identified from the given keys."""

    def __init__(self, message: str):
        super().__init__(message)


class StaleReferenceError(DomainError):
    """Raised when a memoized object is no longer a live instance.

    Collections catch this while validating a partition and re-fetch;
    it never reaches callers of the aggregate.
    """

    def __init__(self, kind: str, resource_id: str):
        self.kind = kind
        self.resource_id = resource_id
        super().__init__(f"Stale {kind} reference: {resource_id}")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")
