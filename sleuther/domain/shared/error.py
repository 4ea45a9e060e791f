"""Error hierarchy for the sleuther.

Error layers:
- SleutherError: Base class for all sleuther errors
- DomainError: Malformed records, illegal state transitions, revision conflicts
- InfrastructureError: Network, registry and configuration failures

Nothing in this hierarchy is globally fatal: the orchestrator isolates every
error to the record (or sub-computation) that raised it.
"""


class SleutherError(Exception):
    """Base class for all sleuther errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors
# =============================================================================


class DomainError(SleutherError):
    """Base class for domain errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class MalformedAspectError(ValidationError):
    """An aspect payload does not match the schema registered for its name."""

    def __init__(self, aspect: str, message: str) -> None:
        super().__init__(f"Malformed '{aspect}' aspect: {message}", field=aspect)
        self.aspect = aspect


class InvalidStateError(DomainError):
    """Operation not allowed in current state."""


class ConflictError(DomainError):
    """Write rejected because the record's revision changed underneath us."""


# =============================================================================
# Infrastructure Errors
# =============================================================================


class InfrastructureError(SleutherError):
    """Base class for infrastructure/system errors."""


class StorageUnavailableError(InfrastructureError):
    """Storage backend is unavailable."""


class RegistryUnavailableError(StorageUnavailableError):
    """The registry could not be reached or answered with a transient failure."""


class RegistryRejectedError(InfrastructureError):
    """The registry refused a request for a reason retrying will not fix."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AspectWriteError(InfrastructureError):
    """Derived aspects could not be written back; the record was left unmodified."""

    def __init__(self, record_id: str, attempts: int, reason: str) -> None:
        super().__init__(
            f"Failed to write aspects for record {record_id} after {attempts} attempt(s): {reason}"
        )
        self.record_id = record_id
        self.attempts = attempts


class ExternalServiceError(InfrastructureError):
    """External service is unavailable or failed."""


class ProbeFailedError(ExternalServiceError):
    """A link probe failed before any response status was received."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Probe of {url} failed: {reason}")
        self.url = url
        self.reason = reason


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""
