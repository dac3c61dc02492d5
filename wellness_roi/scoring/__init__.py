from .lead_score import assign_email_sequence, roi_bonus, score_lead

__all__ = ["assign_email_sequence", "roi_bonus", "score_lead"]
