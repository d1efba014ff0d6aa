"""Custom exception classes for the marketplace service."""


class ConfigurationError(ValueError):
    """Raised when configuration validation fails."""


class MissingBackendKeyError(ConfigurationError):
    """Raised when the hosted backend API key is missing in production."""

    def __init__(self) -> None:
        super().__init__(
            "SUPABASE_ANON_KEY must be set in production. "
            "Set the SUPABASE_ANON_KEY environment variable to the project's public API key.",
        )


# ==================== Hosted backend ====================


class BackendError(Exception):
    """Base exception for hosted backend call failures."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.message = message
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class BackendConnectionError(BackendError):
    """Raised when the hosted backend cannot be reached."""

    def __init__(self, original_error: str) -> None:
        self.original_error = original_error
        super().__init__(f"Failed to connect to backend: {original_error}")


class BackendPermissionError(BackendError):
    """Raised when the backend rejects the caller's credentials or policies."""


class BackendNotFoundError(BackendError):
    """Raised when the backend reports the requested resource is missing."""


class MalformedRecordError(BackendError):
    """Raised when a row returned by the backend does not match its schema."""

    def __init__(self, table: str, detail: str) -> None:
        self.table = table
        self.detail = detail
        super().__init__(f"Malformed record in '{table}': {detail}")


# ==================== Validation ====================


class ValidationError(ValueError):
    """Raised when user input fails validation."""


class InvalidFileTypeError(ValidationError):
    """Raised when an uploaded file is not JSON."""

    def __init__(self) -> None:
        super().__init__("Invalid file type. Please upload a JSON file.")


class FileTooLargeError(ValidationError):
    """Raised when an uploaded file exceeds the size limit."""

    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes
        super().__init__(f"File too large. Maximum file size is {max_bytes // (1024 * 1024)}MB.")


class InvalidJsonContentError(ValidationError):
    """Raised when an uploaded file does not parse as JSON."""

    def __init__(self) -> None:
        super().__init__("Invalid JSON content. Please check your file.")


class MissingFieldsError(ValidationError):
    """Raised when required form fields are empty."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Please fill in all required fields: {', '.join(fields)}")


class InvalidPriceError(ValidationError):
    """Raised when a price is neither a non-negative number nor 'Custom'."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid price: {value!r}")


# ==================== Access control ====================


class AccessDeniedError(Exception):
    """Base exception for authorization failures."""

    status_code = 403

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthenticationRequiredError(AccessDeniedError):
    """Raised when an operation needs a signed-in user."""

    status_code = 401

    def __init__(self) -> None:
        super().__init__("Please log in to continue.")


class AdminAccessDeniedError(AccessDeniedError):
    """Raised when a non-admin reaches an admin page."""

    def __init__(self) -> None:
        super().__init__("Admin access required")


class PurchaseRequiredError(AccessDeniedError):
    """Raised when downloading an agent without a completed purchase."""

    def __init__(self) -> None:
        super().__init__("You haven't purchased this agent or the purchase is not complete.")


class ProtectedRoleError(AccessDeniedError):
    """Raised when trying to change the role of an admin user."""

    def __init__(self) -> None:
        super().__init__("Cannot modify admin")


# ==================== Purchases and downloads ====================


class PurchaseError(Exception):
    """Base exception for purchase failures."""


class InvalidPurchaseTransitionError(PurchaseError):
    """Raised when a purchase status change is not allowed."""

    def __init__(self, current: str, target: str) -> None:
        self.current = current
        self.target = target
        super().__init__(f"Cannot move purchase from '{current}' to '{target}'")


class PaymentDeclinedError(PurchaseError):
    """Raised when the payment gateway reports a failed payment."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Payment failed: {reason}")


class PaymentGatewayError(PurchaseError):
    """Raised when the payment gateway cannot confirm a payment."""


class AgentUploadError(RuntimeError):
    """Raised when an agent file could not be stored."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class RecordNotFoundError(LookupError):
    """Raised when a record id does not exist."""

    def __init__(self, kind: str, record_id: str) -> None:
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found: {record_id}")


class AgentNotFoundError(RecordNotFoundError):
    """Raised when an agent id does not exist."""

    def __init__(self, agent_id: str) -> None:
        self.agent_id = agent_id
        super().__init__("Agent", agent_id)


class AgentFileMissingError(LookupError):
    """Raised when an agent has no stored file reference."""

    def __init__(self) -> None:
        super().__init__("Could not find the agent's file information.")


class AgentDownloadError(RuntimeError):
    """Raised when the stored agent file cannot be fetched."""

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__("Could not download the agent file.")
