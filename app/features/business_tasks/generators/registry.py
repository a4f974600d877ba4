"""
Ordered list of every task generator.

Order matters only for ties: the driver's stable sort keeps tasks with equal
scores in the order their generators appear here.
"""

from app.features.business_tasks.generators.appointments import (
    APPOINTMENT_CONFIRMATION,
    DEPOSIT_COLLECTION,
    HEALED_PHOTO_REQUEST,
    POST_APPOINTMENT_THANKYOU,
    TATTOO_ANNIVERSARY,
)
from app.features.business_tasks.generators.base import TaskGenerator
from app.features.business_tasks.generators.consultations import (
    FOLLOW_UP_RESPONDED,
    NEW_CONSULTATION,
)
from app.features.business_tasks.generators.relationships import (
    BIRTHDAY_OUTREACH,
    STALE_CONVERSATION,
)

GENERATORS: tuple[TaskGenerator, ...] = (
    NEW_CONSULTATION,
    DEPOSIT_COLLECTION,
    APPOINTMENT_CONFIRMATION,
    FOLLOW_UP_RESPONDED,
    STALE_CONVERSATION,
    BIRTHDAY_OUTREACH,
    TATTOO_ANNIVERSARY,
    HEALED_PHOTO_REQUEST,
    POST_APPOINTMENT_THANKYOU,
)
