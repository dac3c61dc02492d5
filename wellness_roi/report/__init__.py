from .formatting import apportion_percentages, format_currency, format_long_date, format_percentage
from .pdf import PdfRenderer, PdfRenderError, report_filename
from .templates import ReportRenderer, TemplateRenderError
from .variables import assemble_report_variables, savings_breakdown_percentages

__all__ = [
    "PdfRenderError",
    "PdfRenderer",
    "ReportRenderer",
    "TemplateRenderError",
    "apportion_percentages",
    "assemble_report_variables",
    "format_currency",
    "format_long_date",
    "format_percentage",
    "report_filename",
    "savings_breakdown_percentages",
]
