"""
Error types raised by the registration services.

Every error derives from ``ValueError`` (through
``RegistrationDeskError``) so callers that only care about "the request
could not be served" can keep catching ``ValueError``, while the HTTP
layer picks a status code per concrete type.  None of these errors
leaves the catalog in a partially updated state.
"""


class RegistrationDeskError(ValueError):
    """Base class for recoverable registration desk errors."""


class FetchError(RegistrationDeskError):
    """The external store read did not complete."""


class StatusWriteError(RegistrationDeskError):
    """A status write to the external store did not complete."""

    def __init__(self, registration_id: str, target: str, reason: str = "") -> None:
        self.registration_id = registration_id
        self.target = target
        message = f"Failed to set registration {registration_id} to {target}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class InvalidTransitionError(RegistrationDeskError):
    """The requested status change is not an allowed transition."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot change status from {current} to {target}")


class RegistrationBusyError(RegistrationDeskError):
    """A status write for the same registration is still in flight."""

    def __init__(self, registration_id: str) -> None:
        self.registration_id = registration_id
        super().__init__(f"Registration {registration_id} has a status change in progress")


class ConfirmationRequiredError(RegistrationDeskError):
    """The operator did not confirm the status change."""


class RegistrationNotFoundError(RegistrationDeskError):
    """No registration with the given identifier is loaded."""

    def __init__(self, registration_id: str) -> None:
        self.registration_id = registration_id
        super().__init__(f"Registration {registration_id} not found")
