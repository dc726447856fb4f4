import os
import sys
import tempfile
import uuid

# Point the app at a throw-away SQLite file BEFORE importing database or services
_TEST_DB_DIR = tempfile.mkdtemp(prefix="gymdesk_test_")
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TEST_DB_DIR, 'test_gymdesk.db')}"
os.environ["SECRET_KEY"] = "test_secret_key"

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from fastapi.testclient import TestClient

from database import Base, engine
import models_orm  # noqa: F401
from auth import OwnerContext
from models import RegisterOwnerRequest, CreateGymRequest, CreateBranchRequest, CreateMemberRequest
from service_modules.auth_service import auth_service
from service_modules.gym_service import gym_service
from service_modules.member_service import member_service


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def client():
    from main import app
    return TestClient(app)


@pytest.fixture
def make_owner():
    def _make(username=None):
        username = username or f"owner_{uuid.uuid4().hex[:8]}"
        owner = auth_service.register_owner(RegisterOwnerRequest(
            username=username,
            email=f"{username}@example.com",
            password="password123",
            name=username.title(),
        ))
        return OwnerContext(owner_id=owner.id, username=owner.username)
    return _make


@pytest.fixture
def make_branch():
    def _make(ctx, gym_name="Iron Paradise", branch_name="Downtown"):
        gym = gym_service.create_gym(ctx, CreateGymRequest(name=gym_name))
        return gym_service.create_branch(ctx, CreateBranchRequest(name=branch_name, gym_id=gym.id))
    return _make


@pytest.fixture
def make_member():
    def _make(branch_id, name="Asha Rao", plan="monthly", start=None):
        return member_service.create_member(CreateMemberRequest(
            name=name,
            phone="9876543210",
            branch_id=branch_id,
            membership_plan=plan,
            membership_start=start,
        ))
    return _make


@pytest.fixture
def owner_setup(make_owner, make_branch):
    """One owner with one gym and one branch."""
    ctx = make_owner("alice")
    branch = make_branch(ctx)
    return ctx, branch
