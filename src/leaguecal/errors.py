"""Exceptions raised by the calendar generator."""

from datetime import date


class SchedulingError(Exception):
    """Base exception for calendar generation errors."""
    pass


class InsufficientTeamsError(SchedulingError):
    """Raised when fewer than two teams are supplied."""

    def __init__(self, count: int):
        super().__init__(f"At least 2 teams are needed to build a calendar, got {count}")
        self.count = count


class NoEligibleFieldsError(SchedulingError):
    """Raised when no field is left after filtering by status."""
    pass


class MissingCategoryError(SchedulingError):
    """Raised when a fixture cannot be stamped with a category."""
    pass


class SchedulingConflictError(SchedulingError):
    """Raised when every time slot on a field is taken for a date."""

    def __init__(self, field_id: str, match_date: date):
        super().__init__(
            f"No free time slot left on field {field_id} for {match_date.isoformat()}"
        )
        self.field_id = field_id
        self.match_date = match_date


class PersistenceError(SchedulingError):
    """Raised under the abort policy when the store rejects a fixture.

    `result` holds what was created before the failure.
    """

    def __init__(self, message: str, result=None):
        super().__init__(message)
        self.result = result


class ConfigError(SchedulingError):
    """Raised when a league file is missing data or references unknown ids."""

    def __init__(self, errors: list[str]):
        super().__init__("Invalid league file:\n  " + "\n  ".join(errors))
        self.errors = errors


class InvalidOptionsError(SchedulingError, ValueError):
    """Raised when CalendarOptions cannot produce a valid calendar."""

    def __init__(self, problems: list[str]):
        super().__init__("Invalid calendar options: " + "; ".join(problems))
        self.problems = problems
