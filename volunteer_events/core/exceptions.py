"""
Custom exception classes for unified error handling.

Every I/O failure is converted into one of these at the boundary of the
operation that issued it; raw transport errors never reach the UI.
"""


class AppBaseError(Exception):
    """Base exception for all client errors."""
    def __init__(self, message: str, detail: str | None = None):
        self.message = message
        self.detail = detail
        super().__init__(message)


# ── Event list ───────────────────────────────────────────

class NetworkUnavailable(AppBaseError):
    """Raised when the device is offline or the event API call failed."""
    def __init__(self, message: str = "Network unavailable"):
        super().__init__(
            message=message,
            detail="Cached events will be used if available.",
        )


class NoDataAvailable(AppBaseError):
    """Raised when the network failed and there is no cached event list."""
    def __init__(self, message: str = "No cached events available"):
        super().__init__(
            message=message,
            detail="Connect to the internet and refresh to load events.",
        )


class EventLoadFailed(AppBaseError):
    """Raised when a single event could not be read from the API."""
    def __init__(self, event_id: str, original_error: str):
        super().__init__(
            message=f"Failed to load event '{event_id}'",
            detail=original_error,
        )


class EventSaveFailed(AppBaseError):
    """Raised when the API rejected or never received a new event."""
    def __init__(self, original_error: str):
        super().__init__(message="Could not save event", detail=original_error)


# ── Session / signup ─────────────────────────────────────

class AuthenticationRequired(AppBaseError):
    """Raised when an operation needs a logged-in user."""
    def __init__(self, message: str = "Login required"):
        super().__init__(
            message=message,
            detail="You must log in to continue.",
        )


class SignupFailed(AppBaseError):
    """Raised when the volunteer PATCH failed. Local event is unchanged."""
    def __init__(self, event_id: str, original_error: str):
        super().__init__(
            message=f"Could not update volunteering status for event '{event_id}'",
            detail=original_error,
        )


# ── Image ingestion ──────────────────────────────────────

class PermissionDenied(AppBaseError):
    """Raised when camera or photo library permission was refused."""
    def __init__(self, refused: list[str]):
        self.refused = refused
        super().__init__(
            message="Permissions required",
            detail=f"Camera and photo library permissions are needed (refused: {', '.join(refused)}).",
        )


class EncodingFailed(AppBaseError):
    """Raised when no base64 content could be obtained for an asset."""
    def __init__(self, uri: str, original_error: str | None = None):
        super().__init__(
            message="Could not read image",
            detail=original_error or f"No image data available for {uri}",
        )


class UploadFailed(AppBaseError):
    """Raised when the image host rejected the upload or returned no URL."""
    def __init__(self, original_error: str):
        super().__init__(message="Upload failed", detail=original_error)


class UploadInProgress(AppBaseError):
    """Raised when an image is attached while another upload is running."""
    def __init__(self):
        super().__init__(
            message="An image is already uploading",
            detail="Wait for the current upload to finish.",
        )


# ── Drafts ───────────────────────────────────────────────

class ValidationFailed(AppBaseError):
    """Raised when a draft is submitted with invalid fields."""
    def __init__(self, field_errors: dict[str, str]):
        self.field_errors = field_errors
        super().__init__(
            message="Please fill out all fields correctly before saving.",
            detail="; ".join(f"{k}: {v}" for k, v in field_errors.items()),
        )


# ── Utility: convert to a UI payload ─────────────────────

def error_payload(error: AppBaseError) -> dict:
    """Convert an AppBaseError to a dict with a consistent shape for the UI."""
    payload = {
        "error": error.message,
        "detail": error.detail,
        "type": type(error).__name__,
    }
    if isinstance(error, ValidationFailed):
        payload["field_errors"] = dict(error.field_errors)
    return payload
