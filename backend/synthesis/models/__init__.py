"""SQLAlchemy models for Synthesis."""

from ..auth.models import User, RefreshToken
from .enums import CompetencyLevel
from .resource import Resource, ResourceType
from .rubric import Rubric
from .assignment import Assignment, AssignmentType, AssignmentStatus, AssignmentFormat
from .submission import Submission, SubmissionState, GradingStatus
from .report import GrowthReport

__all__ = [
    "User",
    "RefreshToken",
    "CompetencyLevel",
    "Resource",
    "ResourceType",
    "Rubric",
    "Assignment",
    "AssignmentType",
    "AssignmentStatus",
    "AssignmentFormat",
    "Submission",
    "SubmissionState",
    "GradingStatus",
    "GrowthReport",
]
