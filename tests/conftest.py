import os
import pytest
import mongomock
from fastapi.testclient import TestClient

# === Configure env BEFORE any imports ===
os.environ.setdefault("MONGO_DB", "clientprojects_test")
os.environ["APP_ENV"] = "test"


@pytest.fixture
def mock_db():
    """Fresh in-memory MongoDB for each test."""
    return mongomock.MongoClient()[os.getenv("MONGO_DB", "clientprojects_test")]


@pytest.fixture
def app_instance(mock_db):
    """Build the app around the mock database instead of the global connection."""
    from app.main import create_app
    return create_app(db=mock_db)


@pytest.fixture
def client(app_instance):
    """Test client for making HTTP requests. Runs startup (indexes)."""
    with TestClient(app_instance) as c:
        yield c


@pytest.fixture
def gql(client):
    """POST a GraphQL document and return the decoded envelope."""
    def _run(query, variables=None):
        body = {"query": query}
        if variables is not None:
            body["variables"] = variables
        r = client.post("/graphql", json=body)
        assert r.status_code == 200, r.text
        return r.json()
    return _run


ADD_CLIENT = """
mutation($name: String!, $email: String!, $phone: String!) {
  addClient(name: $name, email: $email, phone: $phone) { id name email phone }
}
"""

ADD_PROJECT = """
mutation($name: String!, $description: String!, $clientId: ID!, $status: ProjectStatus) {
  addProject(name: $name, description: $description, clientId: $clientId, status: $status) {
    id name description status client { id name }
  }
}
"""


@pytest.fixture
def seeded_client(gql):
    """Create a demo client through the API."""
    j = gql(ADD_CLIENT, {"name": "Acme", "email": "a@x.com", "phone": "555-1"})
    assert "errors" not in j, j
    return j["data"]["addClient"]


@pytest.fixture
def make_project(gql):
    def _make(client_id, name="Site Redesign", description="desc", status=None):
        variables = {"name": name, "description": description, "clientId": client_id}
        if status is not None:
            variables["status"] = status
        return gql(ADD_PROJECT, variables)
    return _make
