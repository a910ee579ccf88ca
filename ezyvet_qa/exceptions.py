from typing import Optional


class EzyVetQAError(Exception):
    """Base class for every failure raised by ezyvet_qa."""


class ProbeTimeout(EzyVetQAError, TimeoutError):
    """A bounded wait on the rendered UI expired."""

    def __init__(self, description: str, timeout: Optional[float] = None):
        self.description = description
        self.timeout = timeout
        if timeout is not None:
            super().__init__(f"Timed out after {timeout:g}s waiting for {description}")
        else:
            super().__init__(f"Timed out waiting for {description}")


class NotFoundTimeout(ProbeTimeout):
    """No search result matched the natural key within the probe window."""


class UnresolvedFieldError(ProbeTimeout):
    """An autocomplete or dropdown field never settled on a single value.

    Zero matches and several matches look the same from the client side.
    """


class CreationError(EzyVetQAError):
    """The application reported an error toast after Save."""

    def __init__(self, kind: str, natural_key: str, message: str):
        self.kind = kind
        self.natural_key = natural_key
        self.message = message
        super().__init__(f"Failed to create {kind} '{natural_key}': {message}")


class AmbiguousOutcomeError(EzyVetQAError):
    """Save produced no toast and the record could not be re-verified."""

    def __init__(self, kind: str, natural_key: str, reason: str = ""):
        self.kind = kind
        self.natural_key = natural_key
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Unable to confirm creation of {kind} '{natural_key}': no success or error toast{detail}")


class MandatoryFieldError(EzyVetQAError, ValueError):
    def __init__(self, kind: str, field: str):
        self.kind = kind
        self.field = field
        super().__init__(f"{kind} requires a non-empty '{field}'")


class LoginFailure(EzyVetQAError):
    def __init__(self, attempts: int, last_error: Optional[BaseException] = None):
        self.attempts = attempts
        self.last_error = last_error
        noun = "attempt" if attempts == 1 else "attempts"
        super().__init__(f"Login failed after {attempts} {noun}: {last_error}")
