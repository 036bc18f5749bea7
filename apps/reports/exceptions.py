"""Domain exceptions for reports app."""
from apps.core.exceptions import NotFoundError


class ReportNotFoundError(NotFoundError):
    """No report has been published yet."""
    default_detail = 'No report has been published yet.'
    default_code = 'report_not_found'
