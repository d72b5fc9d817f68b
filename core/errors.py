"""
Error taxonomy for the assessment core.

None of these are fatal: callers either ask the respondent to resupply
something (ValidationError, IncompleteResponseSet, IdentityRequired),
recover with a fallback (UnknownCategory) or retry later (PersistenceFailure).
"""
from typing import List, Optional


class AssessmentError(Exception):
    """Base class for every error raised by the assessment core."""


class ValidationError(AssessmentError, ValueError):
    """An answer outside the declared range, or an unknown assessment/question id."""


class IncompleteResponseSet(AssessmentError):
    def __init__(self, assessment_id: str, missing: List[str]):
        self.assessment_id = assessment_id
        self.missing = list(missing)
        super().__init__(
            f"Assessment '{assessment_id}' is missing answers for questions: {', '.join(self.missing)}"
        )


class UnknownCategory(AssessmentError, KeyError):
    def __init__(self, assessment_id: str, category: Optional[str]):
        self.assessment_id = assessment_id
        self.category = category
        super().__init__(f"No narrative content for category '{category}' in '{assessment_id}'")

    def __str__(self):
        return self.args[0]


class PersistenceFailure(AssessmentError):
    """The response store could not be reached or rejected a write."""


class IdentityRequired(AssessmentError):
    """Collection is suspended until the respondent supplies or skips an email."""
