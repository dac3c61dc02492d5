"""Lead priority scoring -- firmographic and intent signals, capped at 100."""

from __future__ import annotations

from wellness_roi.models.enums import (
    CompanySize,
    CurrentInitiatives,
    EmailSequence,
    Timeline,
)
from wellness_roi.models.profiles import LeadProfile

MAX_SCORE = 100

COMPANY_SIZE_POINTS: dict[str, int] = {
    CompanySize.SMALL.value: 10,
    CompanySize.MEDIUM.value: 20,
    CompanySize.LARGE.value: 30,
    CompanySize.ENTERPRISE.value: 40,
}

TIMELINE_POINTS: dict[str, int] = {
    Timeline.IMMEDIATE.value: 40,
    Timeline.THREE_MONTHS.value: 30,
    Timeline.SIX_MONTHS.value: 20,
    Timeline.RESEARCHING.value: 10,
}

# Less existing investment means more room for the programme.
INITIATIVE_POINTS: dict[str, int] = {
    CurrentInitiatives.NONE.value: 30,
    CurrentInitiatives.BASIC_EAP.value: 20,
    CurrentInitiatives.GYM_DISCOUNTS.value: 15,
    CurrentInitiatives.COMPREHENSIVE.value: 5,
}

# (threshold, bonus), highest first; only the first match applies.
ROI_BONUS_TIERS: list[tuple[float, int]] = [
    (300, 20),
    (200, 15),
    (100, 10),
]

HIGH_INTENT_THRESHOLD = 80
MEDIUM_INTENT_THRESHOLD = 60


def roi_bonus(roi_percentage: float) -> int:
    for threshold, bonus in ROI_BONUS_TIERS:
        if roi_percentage > threshold:
            return bonus
    return 0


def score_lead(lead: LeadProfile, roi_percentage: float) -> int:
    """Score a lead 0-100 from company size, timeline, initiatives and ROI."""
    score = 0
    score += COMPANY_SIZE_POINTS.get(lead.company_size, 0)
    score += TIMELINE_POINTS.get(lead.timeline, 0)
    score += INITIATIVE_POINTS.get(lead.current_initiatives, 0)
    score += roi_bonus(roi_percentage)
    return min(score, MAX_SCORE)


def assign_email_sequence(lead_score: int) -> EmailSequence:
    """Pick the nurture sequence for a scored lead."""
    if lead_score >= HIGH_INTENT_THRESHOLD:
        return EmailSequence.HIGH_INTENT
    if lead_score >= MEDIUM_INTENT_THRESHOLD:
        return EmailSequence.MEDIUM_INTENT
    return EmailSequence.NURTURE
