from .base import IntegrationOutcome
from .crm import CRMClient
from .mailer import ReportMailer

__all__ = ["CRMClient", "IntegrationOutcome", "ReportMailer"]
