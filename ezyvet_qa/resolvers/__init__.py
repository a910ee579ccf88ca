from .appointment import appointment_strategy, create_appointment, open_new_appointment
from .base import EntityResolver, EntityStrategy
from .contact import contact_strategy, create_contact, create_customer
from .patient import (
    contextual_patient_strategy,
    create_patient,
    create_patient_from_contact,
    open_new_patient_from_contact,
    patient_strategy,
)
from .wellness_plan import add_wellness_plan_benefit, create_wellness_plan, wellness_plan_strategy

__all__ = [
    "EntityResolver",
    "EntityStrategy",
    "contact_strategy",
    "create_contact",
    "create_customer",
    "patient_strategy",
    "contextual_patient_strategy",
    "create_patient",
    "create_patient_from_contact",
    "open_new_patient_from_contact",
    "appointment_strategy",
    "create_appointment",
    "open_new_appointment",
    "wellness_plan_strategy",
    "create_wellness_plan",
    "add_wellness_plan_benefit",
]
