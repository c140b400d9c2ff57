"""
Shared fixtures: in-memory database, API client and seeded users
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("EMAILS_ENABLED", "false")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("PAYSTACK_SECRET_KEY", "sk_test_secret")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401
from app.core.database import Base, get_db
from app.core.security import SecurityUtils, create_user_token
from app.main import app
from app.middleware.rate_limit import limiter
from app.models import QuizQuestion, User, UserProgress

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(
    autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def _reset_state():
    Base.metadata.create_all(bind=engine)
    limiter.reset()
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    return TestClient(app)


def make_user(db, email="learner@example.com", name="Learner", role="user", total_xp=0):
    user = User(
        name=name,
        email=email,
        password_hash=SecurityUtils.get_password_hash("secret123"),
        role=role,
    )
    user.progress = UserProgress(total_xp=total_xp)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def admin(db):
    return make_user(db, email="admin@example.com", name="Admin", role="admin")


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def question_bank(db):
    """Two 10-point questions for phishing-basics; the right answer is option 1"""
    questions = [
        QuizQuestion(
            question_id=f"pb-{n}",
            module_id="phishing-basics",
            question_text=f"Question {n}",
            options=[{"index": i, "text": f"Option {i}"} for i in range(4)],
            correct_answer=1,
            correct_explanation="Right, that is a red flag.",
            incorrect_explanations=[{"optionIndex": 0, "explanation": "Check the sender domain."}],
            points=10,
        )
        for n in (1, 2)
    ]
    db.add_all(questions)
    db.commit()
    return questions
