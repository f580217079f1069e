from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    field: str
    code: str
    message: str

    def as_dict(self) -> dict[str, str]:
        return {"field": self.field, "code": self.code, "message": self.message}


class ConfigurationInvalid(ValueError):
    """Raised when a schedule configuration violates one or more constraints."""

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        fields = sorted({e.field for e in self.errors})
        super().__init__(f"invalid schedule configuration ({', '.join(fields)})")


class NotConfigured(LookupError):
    """No schedule configuration exists yet for the institution."""


class Forbidden(PermissionError):
    """The caller may not read the schedule configuration."""


class AvailabilitySourceError(RuntimeError):
    """A create/update/delete/list call against the availability store failed."""

    def __init__(self, operation: str, message: str, *, status_code: int | None = None):
        self.operation = operation
        self.status_code = status_code
        super().__init__(message)


class ConfigurationSourceError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None, errors: list[FieldError] | None = None):
        self.status_code = status_code
        self.errors = list(errors or [])
        super().__init__(message)


class MutationFailed(RuntimeError):
    """A cell activation was rejected by the store."""

    def __init__(self, operation: str, time_range: str, cause: BaseException | None = None):
        self.operation = operation
        self.time_range = time_range
        self.cause = cause
        detail = f": {cause}" if cause is not None and str(cause) else ""
        super().__init__(f"{operation} failed for {time_range}{detail}")


class StaleSlotReference(LookupError):
    """A cell key that the current configuration no longer generates."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"slot {key} is not generated by the current configuration")
