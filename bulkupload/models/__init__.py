"""Domain models for the bulk upload pipeline."""

from .error_record import ErrorRecord
from .records import CustomerRecord, InvoiceRecord, RawRow, StreetRecord
from .submission_result import BatchSubmissionResult, ServerRowError
from .upload_state import UploadState
from .validation_error import ValidationError

__all__ = [
    # Input / validated records
    "RawRow",
    "CustomerRecord",
    "StreetRecord",
    "InvoiceRecord",
    # Errors & results
    "ValidationError",
    "ServerRowError",
    "BatchSubmissionResult",
    "ErrorRecord",
    # Lifecycle
    "UploadState",
]
