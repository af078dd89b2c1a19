class ServiceOrderError(Exception):
    """Base class for business-rule failures raised by the order services."""


class NotFoundError(ServiceOrderError):
    """Order or payment row missing, or not matching a required predicate."""


class NotEligibleError(ServiceOrderError):
    """Entity exists but its current state does not allow the transition."""


class AlreadyDeletedError(ServiceOrderError):
    pass


class InvalidTransitionError(ServiceOrderError):
    """No legal next stage from the current one."""


class InvalidArgumentError(ServiceOrderError):
    pass


class ConflictError(ServiceOrderError):
    """The row changed between the read and the conditional write."""
