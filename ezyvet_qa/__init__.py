from .actions import UIContext
from .config import Credentials, Settings, Timeouts, load_settings
from .exceptions import (
    AmbiguousOutcomeError,
    CreationError,
    EzyVetQAError,
    LoginFailure,
    MandatoryFieldError,
    NotFoundTimeout,
    ProbeTimeout,
    UnresolvedFieldError,
)

__all__ = [
    "UIContext",
    "Credentials",
    "Settings",
    "Timeouts",
    "load_settings",
    "EzyVetQAError",
    "ProbeTimeout",
    "NotFoundTimeout",
    "UnresolvedFieldError",
    "CreationError",
    "AmbiguousOutcomeError",
    "MandatoryFieldError",
    "LoginFailure",
]
