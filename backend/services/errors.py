"""
PromoterPro - Domain errors

Every error the workflow layer raises derives from PromoterProError so the
routes can translate them into HTTP responses in one place.
"""


class PromoterProError(Exception):
    """Base class for domain errors"""
    pass


class StorageFullError(PromoterProError):
    """The persistence medium refused a write (capacity exceeded)"""

    def __init__(self, key: str, detail: str = ""):
        self.key = key
        message = f"Storage full while writing '{key}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class DuplicateRecordError(PromoterProError):
    """A record with the same id already exists in the collection"""
    pass


class BackupParseError(PromoterProError):
    """A restore document could not be parsed"""
    pass


class WorkflowError(PromoterProError):
    """A workflow precondition failed (e.g. resolving without notes)"""
    pass


class InvalidTransitionError(WorkflowError):
    """The requested status transition is not allowed from the current state"""
    pass


class SubmissionError(PromoterProError):
    """A sale, feedback or complaint submission failed validation"""
    pass


class AuthError(PromoterProError):
    """Wrong credentials or password rules not met"""
    pass
