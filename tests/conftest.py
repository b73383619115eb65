import pytest
from fastapi.testclient import TestClient

from main import app
from studysprint.core.dependency import get_today
from studysprint.core.storage import JsonGoalStorage
from studysprint.goals.service import GoalStore

from goal_factory import TODAY


@pytest.fixture
def data_file(tmp_path):
    return tmp_path / "data" / "goals.json"


@pytest.fixture
def storage(data_file) -> JsonGoalStorage:
    return JsonGoalStorage(str(data_file))


@pytest.fixture
def store(storage) -> GoalStore:
    return GoalStore(storage)


@pytest.fixture
def client(store):
    app.state.goal_store = store
    app.dependency_overrides[get_today] = lambda: TODAY
    yield TestClient(app)
    app.dependency_overrides.clear()
    app.state.goal_store = None
