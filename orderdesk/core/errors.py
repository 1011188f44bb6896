# orderdesk/core/errors.py
"""
Pipeline error taxonomy.

Every error is an HTTPException carrying its status code, so services can
raise them directly and the app-level handler in `orderdesk.main` renders
them as `{"success": false, "error": <detail>}`.

The detail string is always safe to show to the caller. Internal failure
text (database or storage messages) is logged where it happens and never
put into `detail`.
"""

from fastapi import HTTPException, status


class PipelineError(HTTPException):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail: str = "An unexpected error occurred"

    def __init__(self, detail: str | None = None):
        super().__init__(
            status_code=self.status_code,
            detail=detail or self.default_detail,
        )


class InvalidInput(PipelineError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid request body"


class InvalidFilename(InvalidInput):
    default_detail = "Invalid filename"


class TooManyFiles(InvalidInput):
    default_detail = "Too many files for this order"


class FileTooLarge(InvalidInput):
    default_detail = "File too large"


class NotFound(PipelineError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class Forbidden(PipelineError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Forbidden"


class RateLimited(PipelineError):
    status_code = status.HTTP_429_TOO_MANY_REQUESTS
    default_detail = "Too many submissions. Please try again later."


class PaymentFailed(PipelineError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    default_detail = "Payment could not be completed"


class QuoteNotAcceptable(PipelineError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This quote can no longer be accepted"


class OrderLocked(PipelineError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Order can no longer be edited"


class StorageError(PipelineError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Something went wrong. Please try again."


class OrderCodeCollision(Exception):
    """
    Raised by the order repository when an insert loses the race for an
    order_code. Not an HTTP error: the submission service retries with a
    fresh code and only surfaces StorageError once attempts run out.
    """

    def __init__(self, order_code: str):
        super().__init__(order_code)
        self.order_code = order_code
