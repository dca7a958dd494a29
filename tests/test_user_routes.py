# tests/test_user_routes.py
def _add(client, email, password="s3cret"):
    response = client.post("/user/add", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    return response.json()["data"]


def test_add_user(client):
    data = _add(client, " jane@example.com ")
    assert data == {"id": data["id"], "email": "jane@example.com"}


def test_add_user_invalid_email(client):
    response = client.post("/user/add", json={"email": "nope", "password": "x"})

    assert response.status_code == 400
    assert response.json()["error"]["details"][0]["constraint"] == "isEmail"


def test_get_and_list_users(client):
    first = _add(client, "a@example.com")
    _add(client, "b@example.com")
    _add(client, "c@other.org")

    assert client.get(f"/user/{first['id']}").json()["data"]["email"] == "a@example.com"

    all_users = client.get("/user/all-users").json()["data"]
    assert [u["email"] for u in all_users] == ["a@example.com", "b@example.com", "c@other.org"]

    body = client.get("/user", params={"email": "example", "limit": 1}).json()
    assert body["meta"]["pagination"]["totalItems"] == 2
    assert body["links"]["pagination"]["next"].endswith("/user?page=2")

    found = client.get("/user/search/other").json()["data"]
    assert [u["email"] for u in found] == ["c@other.org"]


def test_update_and_delete_user(client):
    user = _add(client, "a@example.com")

    response = client.put(f"/user/{user['id']}", json={"email": "z@example.com"})
    assert response.status_code == 200
    assert response.json()["data"]["email"] == "z@example.com"

    assert client.delete(f"/user/{user['id']}").status_code == 200
    response = client.get(f"/user/{user['id']}")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOT_FOUND"


def test_add_user_rejects_consecutive_dots_in_domain(client):
    response = client.post("/user/add", json={"email": "a@b..c", "password": "x"})

    assert response.status_code == 400
    detail = response.json()["error"]["details"][0]
    assert detail["field"] == "email"
    assert detail["constraint"] == "isEmail"
