from .enums import CompanySize, CurrentInitiatives, EmailSequence, SavingsCategory, Timeline
from .profiles import CompanyProfile, LeadProfile, parse_amount, parse_count

__all__ = [
    "CompanyProfile",
    "CompanySize",
    "CurrentInitiatives",
    "EmailSequence",
    "LeadProfile",
    "SavingsCategory",
    "Timeline",
    "parse_amount",
    "parse_count",
]
