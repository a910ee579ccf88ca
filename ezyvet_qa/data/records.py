"""Transient records mirrored from the application's UI.

Nothing here is persisted locally; the application's database is the source
of truth and is only observed through the rendered pages.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class EntityKind(str, Enum):
    CONTACT = "Contact"
    PATIENT = "Patient"
    APPOINTMENT = "Appointment"
    WELLNESS_PLAN = "WellnessPlan"


class ContactType(str, Enum):
    """Contact classifications, valued by their checkbox labels."""

    CUSTOMER = "Customer"
    SUPPLIER = "Supplier"
    VET = "Vet"
    SYNDICATE = "Syndicate"
    STAFF_MEMBER = "Staff Member"
    PHARMACY = "Pharmacy"


class ContactRecord(BaseModel):
    first_name: str
    last_name: str
    contact_types: List[ContactType] = Field(default_factory=lambda: [ContactType.CUSTOMER])
    email: str = "test@test.com"

    @field_validator("contact_types", mode="before")
    @classmethod
    def _coerce_types(cls, value):
        if isinstance(value, (str, ContactType)):
            value = [value]
        return value

    @field_validator("contact_types")
    @classmethod
    def _non_empty_types(cls, value: List[ContactType]) -> List[ContactType]:
        if not value:
            raise ValueError("a contact needs at least one contact type")
        unique = []
        for item in value:
            if item not in unique:
                unique.append(item)
        return unique

    @property
    def natural_key(self) -> str:
        return f"{self.last_name}, {self.first_name}"

    @property
    def search_query(self) -> str:
        return f"{self.first_name} {self.last_name}"


class PatientRecord(BaseModel):
    name: str
    # "LastName, FirstName" of an existing contact
    owner_natural_key: Optional[str] = None
    age: Optional[int] = Field(default=None, ge=0)
    tags: Optional[List[str]] = None
    colour: str = "Bald"

    @property
    def natural_key(self) -> str:
        return self.name


class AppointmentRecord(BaseModel):
    # Blank values are rejected by the creator, before the form is touched.
    resource_name: str

    @property
    def natural_key(self) -> str:
        return self.resource_name


class WellnessPlanBenefit(BaseModel):
    name: str
    product: str = "Product"


class WellnessPlanRecord(BaseModel):
    name: str
    subscription_product: str = "Product"
    cancellation_product: str = "Product"
    benefits: List[WellnessPlanBenefit] = Field(default_factory=list)

    @property
    def natural_key(self) -> str:
        return self.name


class SignalKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    UNKNOWN = "unknown"


class OutcomeSignal(BaseModel):
    """Classification of what the UI reported after a Save."""

    kind: SignalKind
    message: str = ""

    @classmethod
    def success(cls, message: str) -> "OutcomeSignal":
        return cls(kind=SignalKind.SUCCESS, message=message)

    @classmethod
    def error(cls, message: str) -> "OutcomeSignal":
        return cls(kind=SignalKind.ERROR, message=message)

    @classmethod
    def unknown(cls) -> "OutcomeSignal":
        return cls(kind=SignalKind.UNKNOWN)


class ResolutionKind(str, Enum):
    RESOLVED = "resolved"
    CREATED = "created"


class Resolution(BaseModel):
    kind: EntityKind
    natural_key: str
    outcome: ResolutionKind
    message: str = ""

    @property
    def created(self) -> bool:
        return self.outcome == ResolutionKind.CREATED

    @property
    def resolved(self) -> bool:
        return self.outcome == ResolutionKind.RESOLVED
