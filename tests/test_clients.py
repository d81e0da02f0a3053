ADD_CLIENT = """
mutation($name: String!, $email: String!, $phone: String!) {
  addClient(name: $name, email: $email, phone: $phone) { id name email phone }
}
"""

GET_CLIENT = "query($id: ID!) { client(id: $id) { id name email phone } }"
DELETE_CLIENT = "mutation($id: ID!) { deleteClient(id: $id) { id name } }"


def test_add_client_round_trips(gql, seeded_client):
    assert seeded_client["name"] == "Acme"
    assert seeded_client["email"] == "a@x.com"
    assert seeded_client["phone"] == "555-1"

    j = gql(GET_CLIENT, {"id": seeded_client["id"]})
    assert j["data"]["client"] == seeded_client


def test_add_client_persists_document(seeded_client, mock_db):
    from bson import ObjectId
    doc = mock_db.clients.find_one({"_id": ObjectId(seeded_client["id"])})
    assert doc["name"] == "Acme"
    assert doc["created_at"] == doc["updated_at"]


def test_add_client_rejects_empty_name(gql, mock_db):
    j = gql(ADD_CLIENT, {"name": "", "email": "a@x.com", "phone": "555-1"})
    err = j["errors"][0]
    assert err["message"].startswith("Failed to add client:")
    assert err["extensions"]["code"] == "VALIDATION_ERROR"
    assert mock_db.clients.count_documents({}) == 0


def test_add_client_missing_argument_never_reaches_store(gql, mock_db):
    j = gql('mutation { addClient(name: "Acme", email: "a@x.com") { id } }')
    assert j.get("data") is None
    assert "phone" in j["errors"][0]["message"]
    assert mock_db.clients.count_documents({}) == 0


def test_list_clients(gql):
    for n in ("One", "Two"):
        gql(ADD_CLIENT, {"name": n, "email": f"{n}@x.com", "phone": "1"})
    j = gql("{ clients { name } }")
    assert sorted(c["name"] for c in j["data"]["clients"]) == ["One", "Two"]


def test_get_unknown_client_is_null(gql):
    assert gql(GET_CLIENT, {"id": "64b7f0c2a1b2c3d4e5f60718"})["data"]["client"] is None
    # Not an ObjectId at all
    assert gql(GET_CLIENT, {"id": "nope"})["data"]["client"] is None


def test_update_client_keeps_omitted_fields(gql, seeded_client):
    j = gql(
        'mutation($id: ID!) { updateClient(id: $id, phone: "555-9", email: "") { name email phone } }',
        {"id": seeded_client["id"]},
    )
    assert j["data"]["updateClient"] == {"name": "Acme", "email": "a@x.com", "phone": "555-9"}


def test_update_unknown_client_not_found(gql):
    j = gql(
        'mutation { updateClient(id: "64b7f0c2a1b2c3d4e5f60718", name: "X") { id } }'
    )
    assert j["errors"][0]["extensions"]["code"] == "NOT_FOUND"


def test_delete_client_cascades_projects(gql, seeded_client, make_project, mock_db):
    cid = seeded_client["id"]
    for i in range(3):
        assert "errors" not in make_project(cid, name=f"P{i}")
    # Another client's project must survive
    other = gql(ADD_CLIENT, {"name": "Other", "email": "o@x.com", "phone": "2"})["data"]["addClient"]
    make_project(other["id"], name="Keep")

    j = gql(DELETE_CLIENT, {"id": cid})
    assert j["data"]["deleteClient"] == {"id": cid, "name": "Acme"}

    projects = gql("{ projects { name client { id } } }")["data"]["projects"]
    assert [p["name"] for p in projects] == ["Keep"]
    assert gql(GET_CLIENT, {"id": cid})["data"]["client"] is None


def test_delete_unknown_client_has_no_side_effect(gql, seeded_client, make_project, mock_db):
    make_project(seeded_client["id"])
    j = gql(DELETE_CLIENT, {"id": "64b7f0c2a1b2c3d4e5f60718"})
    err = j["errors"][0]
    assert err["message"] == "Failed to delete client: Client not found"
    assert err["extensions"] == {"code": "NOT_FOUND", "operation": "delete client"}
    assert mock_db.clients.count_documents({}) == 1
    assert mock_db.projects.count_documents({}) == 1


def test_client_projects_field(gql, seeded_client, make_project):
    make_project(seeded_client["id"], name="A")
    make_project(seeded_client["id"], name="B")
    j = gql("query($id: ID!) { client(id: $id) { projects { name } } }", {"id": seeded_client["id"]})
    assert sorted(p["name"] for p in j["data"]["client"]["projects"]) == ["A", "B"]
