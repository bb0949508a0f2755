"""Test cases for SQLAlchemy models."""

from datetime import datetime, timedelta, UTC

import pytest
from sqlalchemy.exc import IntegrityError

from synthesis.models import (
    User, RefreshToken, CompetencyLevel,
    Resource, ResourceType, Rubric,
    Assignment, AssignmentType, AssignmentStatus, AssignmentFormat,
    Submission, SubmissionState, GradingStatus, GrowthReport,
)
from synthesis.models.assignment import rubric_id_for
from synthesis.models.rubric import CASE_STUDY_RUBRIC_ID, LONG_FORM_RUBRIC_ID


class TestUserModel:
    """Test cases for User model."""

    def test_password_hashing(self, test_user):
        assert test_user.hashed_password != "TestPass123!"
        assert test_user.verify_password("TestPass123!")
        assert not test_user.verify_password("wrong")

    def test_user_unique_email(self, db_session, test_user):
        duplicate = User(email=test_user.email, hashed_password="x")
        db_session.add(duplicate)
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_refresh_token_expiry(self, db_session, test_user):
        token = RefreshToken(
            token=RefreshToken.generate_token(),
            user_id=test_user.id,
            expires_at=datetime.now(UTC) - timedelta(minutes=1),
        )
        db_session.add(token)
        db_session.commit()
        db_session.refresh(token)
        assert token.is_expired()
        assert len(token.token) == 64


class TestResourceModel:
    def test_create_resource(self, sample_resource):
        assert sample_resource.id is not None
        assert len(sample_resource.id) == 36
        assert sample_resource.is_text
        assert sample_resource.topic_labels == ["Biology", "Photosynthesis"]
        assert sample_resource.created_at is not None

    def test_context_line(self, sample_resource):
        line = sample_resource.context_line()
        assert "Photosynthesis notes" in line
        assert "Biology" in line

    def test_hosted_file_is_not_text(self, db_session, test_user):
        resource = Resource(
            user_id=test_user.id,
            type=ResourceType.pdf,
            content_ref="https://files.example.com/notes.pdf",
            extracted_topics=["Uncategorized"],
        )
        db_session.add(resource)
        db_session.commit()
        assert not resource.is_text


class TestRubricModel:
    def test_default_rubrics_seeded(self, db_session):
        long_form = db_session.get(Rubric, LONG_FORM_RUBRIC_ID)
        case_study = db_session.get(Rubric, CASE_STUDY_RUBRIC_ID)
        assert [c["name"] for c in long_form.criteria] == ["Clarity", "Depth", "Relevance", "Structure"]
        assert [c["name"] for c in case_study.criteria] == [
            "Problem identification", "Analysis", "Recommendations", "Evidence",
        ]

    def test_gradable_criteria_skips_incomplete(self):
        rubric = Rubric(id="r", name="r", criteria=[
            {"id": "c1", "name": "Clarity", "description": "d"},
            {"id": "c2"},
            "junk",
        ])
        assert rubric.gradable_criteria() == [{"id": "c1", "name": "Clarity"}]


class TestAssignmentModel:
    def test_rubric_for_type(self):
        assert rubric_id_for(AssignmentType.case_study) == CASE_STUDY_RUBRIC_ID
        assert rubric_id_for(AssignmentType.long_form) == LONG_FORM_RUBRIC_ID
        assert rubric_id_for(AssignmentType.instant_mcq) is None

    @pytest.mark.parametrize("fmt,expected", [
        (AssignmentFormat.multiple_choice, AssignmentType.instant_mcq),
        (AssignmentFormat.mixed_format, AssignmentType.instant_mcq),
        (AssignmentFormat.short_answers, AssignmentType.instant_mcq),
        (AssignmentFormat.case_study, AssignmentType.case_study),
        (AssignmentFormat.essay, AssignmentType.long_form),
        (AssignmentFormat.project, AssignmentType.long_form),
        (AssignmentFormat.presentation, AssignmentType.long_form),
    ])
    def test_format_maps_to_type(self, fmt, expected):
        assert fmt.assignment_type == expected

    def test_quiz_context(self, quiz_assignment):
        context = quiz_assignment.quiz_context()
        assert context.startswith("Photosynthesis quiz. ")
        assert context.endswith("Photosynthesis")

    def test_defaults(self, long_form_assignment):
        assert long_form_assignment.status == AssignmentStatus.draft
        assert long_form_assignment.rubric.id == LONG_FORM_RUBRIC_ID
        assert not long_form_assignment.is_quiz


class TestSubmissionModel:
    def test_submission_defaults(self, db_session, test_user, long_form_assignment):
        submission = Submission(assignment_id=long_form_assignment.id, user_id=test_user.id, body_text="draft")
        db_session.add(submission)
        db_session.commit()
        assert submission.state == SubmissionState.draft
        assert submission.grading_status == GradingStatus.pending
        assert submission.is_draft
        assert not submission.has_report

    def test_report_unique_per_submission(self, db_session, make_submission, long_form_assignment):
        submission = make_submission(long_form_assignment)
        db_session.add(GrowthReport(
            submission_id=submission.id, score=80, competency_level=CompetencyLevel.expert, rubric_breakdown=[],
        ))
        db_session.commit()
        db_session.add(GrowthReport(
            submission_id=submission.id, score=50, competency_level=CompetencyLevel.novice, rubric_breakdown=[],
        ))
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_deleting_assignment_cascades(self, db_session, make_submission, long_form_assignment):
        submission = make_submission(long_form_assignment)
        submission_id = submission.id
        db_session.delete(long_form_assignment)
        db_session.commit()
        assert db_session.get(Submission, submission_id) is None


@pytest.mark.parametrize("score,level", [
    (0, CompetencyLevel.novice),
    (59.9, CompetencyLevel.novice),
    (60, CompetencyLevel.competent),
    (79, CompetencyLevel.competent),
    (80, CompetencyLevel.expert),
    (100, CompetencyLevel.expert),
])
def test_competency_from_score(score, level):
    assert CompetencyLevel.from_score(score) == level
