# app/errors.py
"""Error taxonomy for the analytics service.

Every error carries the HTTP status it maps to and a client-safe message.
"""


class AnalyticsError(Exception):
    """Base error; `message` is safe to show to API clients."""
    status_code = 500
    message = "Internal error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class InvalidMonth(AnalyticsError):
    status_code = 400
    message = "Invalid month"


class InvalidYear(AnalyticsError):
    status_code = 400
    message = "Invalid year"


class MissingParameters(AnalyticsError):
    status_code = 400
    message = "Month and Year are required"


class StoreUnavailable(AnalyticsError):
    status_code = 503
    message = "Record store unavailable"


class MalformedUpstreamPayload(AnalyticsError):
    status_code = 400
    message = "Invalid data format from API"


class UpstreamUnavailable(AnalyticsError):
    status_code = 502
    message = "Upstream data source unavailable"


class InvalidRecord(AnalyticsError):
    """An upstream record failed validation; reported as a seeding failure."""
    message = "Invalid date or missing field in one or more transactions"
