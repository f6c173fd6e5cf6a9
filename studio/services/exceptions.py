class ServiceError(Exception):
    """Base exception for service-level errors."""


class AuthenticationError(ServiceError):
    pass


class SessionExpiredError(AuthenticationError):
    pass


class NotFoundError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class ConfigurationError(ServiceError):
    pass


class NotificationDeliveryError(ServiceError):
    pass


class DocumentGenerationError(ServiceError):
    pass
