"""Test configuration and fixtures."""

import json
import os

# The app's engine is built at import time; keep it off disk
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from synthesis.ai import AIConfigurationError, get_ai_client
from synthesis.auth.models import User
from synthesis.auth.service import AuthService
from synthesis.database import Base, get_db, seed_default_rubrics
from synthesis.main import app
from synthesis.models import (
    Assignment, AssignmentType, AssignmentStatus, Resource, ResourceType,
    Submission, SubmissionState, GradingStatus,
)
from synthesis.models.rubric import CASE_STUDY_RUBRIC_ID, LONG_FORM_RUBRIC_ID

# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite:///:memory:"

TEST_PASSWORD = "TestPass123!"


class FakeAIClient:
    """Stands in for AIClient; replies with queued payloads in order."""

    def __init__(self):
        self.responses = []
        self.calls = []

    def queue(self, *responses):
        self.responses.extend(responses)
        return self

    def _next(self, system, user):
        self.calls.append({"system": system, "user": user})
        if not self.responses:
            raise AIConfigurationError("No fake AI response queued")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def complete_json(self, system, user, temperature=0.2):
        return self._next(system, user)

    def complete_text(self, system, user, temperature=0.7):
        return self._next(system, user)


@pytest.fixture
def engine():
    """Create test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    """Create test database session with the default rubrics seeded."""
    session = session_factory()
    seed_default_rubrics(session)
    yield session
    session.close()


@pytest.fixture
def fake_ai():
    return FakeAIClient()


@pytest.fixture
def client(session_factory, db_session, fake_ai):
    """TestClient bound to the test database and the fake AI client."""

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_ai_client] = lambda: fake_ai

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def _make_user(db_session, email, name):
    user = User(email=email, name=name)
    user.set_password(TEST_PASSWORD)
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


def _headers_for(db_session, user):
    token = AuthService(db_session).create_access_token_for(user)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_user(db_session):
    return _make_user(db_session, "learner@example.com", "Learner")


@pytest.fixture
def auth_headers(db_session, test_user):
    return _headers_for(db_session, test_user)


@pytest.fixture
def other_user(db_session):
    return _make_user(db_session, "other@example.com", "Other")


@pytest.fixture
def other_headers(db_session, other_user):
    return _headers_for(db_session, other_user)


@pytest.fixture
def sample_resource(db_session, test_user):
    resource = Resource(
        user_id=test_user.id,
        type=ResourceType.text,
        title="Photosynthesis notes",
        content_ref="Plants convert light energy into chemical energy stored in glucose.",
        extracted_topics=["Biology", "Photosynthesis"],
        tags=[],
    )
    db_session.add(resource)
    db_session.commit()
    db_session.refresh(resource)
    return resource


@pytest.fixture
def long_form_assignment(db_session, test_user):
    assignment = Assignment(
        user_id=test_user.id,
        type=AssignmentType.long_form,
        title="Essay on photosynthesis",
        prompt="Explain how photosynthesis stores energy.",
        topic="Photosynthesis",
        resource_ids=[],
        status=AssignmentStatus.draft,
        rubric_id=LONG_FORM_RUBRIC_ID,
    )
    db_session.add(assignment)
    db_session.commit()
    db_session.refresh(assignment)
    return assignment


@pytest.fixture
def case_study_assignment(db_session, test_user):
    assignment = Assignment(
        user_id=test_user.id,
        type=AssignmentType.case_study,
        title="Launch case study",
        prompt="Analyse the product launch.",
        resource_ids=[],
        status=AssignmentStatus.draft,
        rubric_id=CASE_STUDY_RUBRIC_ID,
    )
    db_session.add(assignment)
    db_session.commit()
    db_session.refresh(assignment)
    return assignment


@pytest.fixture
def quiz_assignment(db_session, test_user):
    assignment = Assignment(
        user_id=test_user.id,
        type=AssignmentType.instant_mcq,
        title="Photosynthesis quiz",
        prompt="Answer the questions about photosynthesis.",
        topic="Photosynthesis",
        resource_ids=[],
        status=AssignmentStatus.draft,
    )
    db_session.add(assignment)
    db_session.commit()
    db_session.refresh(assignment)
    return assignment


QUIZ_ITEMS = [
    {"id": "q1", "type": "mcq", "question": "Q1?", "options": ["a", "b", "c", "d"], "correct_index": 0},
    {"id": "q2", "type": "mcq", "question": "Q2?", "options": ["a", "b", "c", "d"], "correct_index": 1},
    {"id": "q3", "type": "mcq", "question": "Q3?", "options": ["a", "b", "c", "d"], "correct_index": 2},
    {"id": "q4", "type": "mcq", "question": "Q4?", "options": ["a", "b", "c", "d"], "correct_index": 3},
    {"id": "q5", "type": "short_answer", "question": "Explain the light reactions."},
]


@pytest.fixture
def quiz_items():
    return [dict(item) for item in QUIZ_ITEMS]


@pytest.fixture
def quiz_body(quiz_items):
    """Builds the JSON body a quiz submission stores."""

    def _body(mcq_answers, short_answers=None, items=None):
        return json.dumps({
            "type": "instant_mcq_quiz",
            "mcq_answers": [{"item_id": k, "selected_index": v} for k, v in mcq_answers.items()],
            "short_answers": short_answers or {},
            "quiz_items": items if items is not None else quiz_items,
        })

    return _body


@pytest.fixture
def make_submission(db_session, test_user):
    """Factory for submissions in any state."""

    def _make(assignment, body_text="My answer.", state=SubmissionState.submitted,
              grading_status=GradingStatus.pending):
        submission = Submission(
            assignment_id=assignment.id,
            user_id=test_user.id,
            state=state,
            grading_status=grading_status,
            body_text=body_text,
        )
        db_session.add(submission)
        db_session.commit()
        db_session.refresh(submission)
        return submission

    return _make
