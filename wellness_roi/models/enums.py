from enum import Enum


class CompanySize(str, Enum):
    SMALL = "50-200"
    MEDIUM = "200-500"
    LARGE = "500-1000"
    ENTERPRISE = "1000+"


class Timeline(str, Enum):
    IMMEDIATE = "Immediate"
    THREE_MONTHS = "3 months"
    SIX_MONTHS = "6 months"
    RESEARCHING = "Just researching"


class CurrentInitiatives(str, Enum):
    NONE = "None"
    BASIC_EAP = "Basic EAP"
    GYM_DISCOUNTS = "Gym Discounts"
    COMPREHENSIVE = "Comprehensive"


class SavingsCategory(str, Enum):
    SICK_DAYS = "sick_days"
    TURNOVER = "turnover"
    HEALTHCARE = "healthcare"
    PRODUCTIVITY = "productivity"


class EmailSequence(str, Enum):
    HIGH_INTENT = "high-intent"
    MEDIUM_INTENT = "medium-intent"
    NURTURE = "nurture"
