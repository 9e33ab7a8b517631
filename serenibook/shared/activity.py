"""Mapping from the activities offered in the onboarding form to stored professional types"""

from typing import Optional

from ..models import ProfessionalType

# Activities the form offers that have no dedicated professional type
ACTIVITIES_STORED_AS_OTHER = frozenset(
    {"NATUROPATH", "NUTRITIONIST", "OSTEOPATH", "REFLEXOLOGIST", "SOPHROLOGIST", "OTHER"}
)

DIRECT_TYPES = frozenset(t.value for t in ProfessionalType if t is not ProfessionalType.OTHER)


def map_activity_type(activity: Optional[str]) -> ProfessionalType:
    """Stored type for an activity; anything unknown becomes OTHER"""
    key = (activity or "").strip().upper()
    if key in DIRECT_TYPES:
        return ProfessionalType(key)
    return ProfessionalType.OTHER


def other_type_details(activity: Optional[str], details: Optional[str]) -> Optional[str]:
    """Free-text detail kept next to an OTHER type.

    Explicit details win; otherwise an activity folded into OTHER keeps its
    name so it is not lost.
    """
    if details and details.strip():
        return details.strip()
    key = (activity or "").strip().upper()
    if key and key not in DIRECT_TYPES and key != "OTHER":
        return key
    return None
