"""
Domain Exceptions for roster cost allocation.

Custom exceptions enforcing business rules:
- Referential integrity (project, staff, roster lookups)
- Cost-sharing graph integrity (no cycles, valid percentages)
- Roster editing rules (edit window, one entry per staff per day)
- Store availability
"""


class DomainError(Exception):
    """Base exception for all domain errors."""

    def __init__(self, message: str, code: str = "DOMAIN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


# =============================================================================
# Not Found Exceptions
# =============================================================================

class NotFoundError(DomainError):
    """Base for missing referenced records."""


class ProjectNotFoundError(NotFoundError):
    """Raised when a project cannot be found."""

    def __init__(self, project_id):
        message = f"Project with id '{project_id}' not found"
        super().__init__(message, code="PROJECT_NOT_FOUND")
        self.project_id = project_id


class StaffNotFoundError(NotFoundError):
    """Raised when a staff member cannot be found."""

    def __init__(self, staff_id):
        message = f"Staff with id '{staff_id}' not found"
        super().__init__(message, code="STAFF_NOT_FOUND")
        self.staff_id = staff_id


class RosterNotFoundError(NotFoundError):
    """Raised when a roster cannot be found."""

    def __init__(self, roster_ref):
        message = f"Roster '{roster_ref}' not found"
        super().__init__(message, code="ROSTER_NOT_FOUND")
        self.roster_ref = roster_ref


# =============================================================================
# Cost Sharing Exceptions
# =============================================================================

class CostSharingCycleError(DomainError):
    """Raised when a new sharing edge would form a cycle."""

    def __init__(self, source_project_id, destination_project_id, path=None):
        self.path = list(path) if path else [source_project_id, destination_project_id]
        message = (
            f"Cost sharing from project '{source_project_id}' to "
            f"'{destination_project_id}' would create a cycle: "
            f"{' -> '.join(str(p) for p in self.path + [self.path[0]])}"
        )
        super().__init__(message, code="COST_SHARING_CYCLE")
        self.source_project_id = source_project_id
        self.destination_project_id = destination_project_id


class InvalidPercentageError(DomainError):
    """Raised when a sharing percentage is outside (0, 100]."""

    def __init__(self, percentage, max_percentage=100):
        message = f"Percentage {percentage} must be greater than 0 and at most {max_percentage}"
        super().__init__(message, code="INVALID_PERCENTAGE")
        self.percentage = percentage


# =============================================================================
# Roster Exceptions
# =============================================================================

class EditWindowClosedError(DomainError):
    """Raised when a roster is edited after its cutoff deadline."""

    def __init__(self, year: int, month: int, deadline):
        message = (
            f"Roster {year}-{month:02d} can no longer be edited "
            f"(deadline {deadline.isoformat()})"
        )
        super().__init__(message, code="EDIT_WINDOW_CLOSED")
        self.year = year
        self.month = month
        self.deadline = deadline


# =============================================================================
# Validation Exceptions
# =============================================================================

class ValidationError(DomainError):
    """Raised when data validation fails."""

    def __init__(self, field: str, message: str):
        super().__init__(f"Validation failed for '{field}': {message}", code="VALIDATION_ERROR")
        self.field = field


# =============================================================================
# Infrastructure Exceptions
# =============================================================================

class StoreUnavailableError(DomainError):
    """Raised when the underlying persistence layer fails."""

    def __init__(self, operation: str, reason: str = ""):
        message = f"Store unavailable during '{operation}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, code="STORE_UNAVAILABLE")
        self.operation = operation
