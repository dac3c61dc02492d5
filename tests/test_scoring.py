"""Tests for lead scoring and email sequence assignment."""

import itertools

import pytest

from wellness_roi.models.enums import CompanySize, CurrentInitiatives, EmailSequence, Timeline
from wellness_roi.models.profiles import LeadProfile
from wellness_roi.scoring.lead_score import (
    MAX_SCORE,
    assign_email_sequence,
    roi_bonus,
    score_lead,
)


def make_lead(company_size="", timeline="", current_initiatives="") -> LeadProfile:
    return LeadProfile(
        full_name="Alex Doe",
        work_email="alex@example.com",
        company_name="Example Ltd",
        job_title="COO",
        company_size=company_size,
        timeline=timeline,
        current_initiatives=current_initiatives,
    )


class TestScoreLead:
    def test_hot_lead_is_capped(self, hot_lead):
        # 40 + 40 + 30 + 20 = 130
        assert score_lead(hot_lead, 370.33) == MAX_SCORE

    def test_components_add_up(self):
        lead = make_lead("200-500", "6 months", "Basic EAP")
        assert score_lead(lead, 150) == 20 + 20 + 20 + 10

    def test_unknown_categories_score_zero(self):
        lead = make_lead("10-20", "Someday", "Yoga")
        assert score_lead(lead, 0) == 0

    def test_blank_lead_scores_only_roi(self):
        assert score_lead(make_lead(), 250) == 15

    def test_score_always_within_bounds(self):
        combos = itertools.product(
            [s.value for s in CompanySize] + [""],
            [t.value for t in Timeline] + [""],
            [c.value for c in CurrentInitiatives] + [""],
            [-100, 0, 100, 150, 250, 1000],
        )
        for size, timeline, initiatives, roi in combos:
            score = score_lead(make_lead(size, timeline, initiatives), roi)
            assert 0 <= score <= 100


class TestRoiBonus:
    @pytest.mark.parametrize(
        "roi, bonus",
        [
            (301, 20),
            (300, 15),
            (201, 15),
            (200, 10),
            (101, 10),
            (100, 0),
            (0, 0),
            (-50, 0),
        ],
    )
    def test_thresholds_are_exclusive(self, roi, bonus):
        assert roi_bonus(roi) == bonus


class TestEmailSequence:
    @pytest.mark.parametrize(
        "score, sequence",
        [
            (100, EmailSequence.HIGH_INTENT),
            (80, EmailSequence.HIGH_INTENT),
            (79, EmailSequence.MEDIUM_INTENT),
            (60, EmailSequence.MEDIUM_INTENT),
            (59, EmailSequence.NURTURE),
            (0, EmailSequence.NURTURE),
        ],
    )
    def test_assignment(self, score, sequence):
        assert assign_email_sequence(score) == sequence
