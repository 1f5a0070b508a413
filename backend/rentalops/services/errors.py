"""Domain exceptions raised by services; routers map them to HTTP errors."""


class ServiceError(Exception):
    """Base class for service-level failures."""


class NotFoundError(ServiceError):
    """A referenced row does not exist (or is not visible to the caller)."""


class LockPinError(ServiceError):
    """Invalid lock PIN input or rotation state."""


class GuestStayError(ServiceError):
    """A stay cannot be recorded for the booking."""


class CleanerError(ServiceError):
    """A cleaner account cannot be created or changed as requested."""
