from helpers import add_user, login


def test_login_and_me(client, database):
    add_user(database, "alice", password="pw123", role="admin")

    response = client.post("/api/auth/login", json={"name": "alice", "password": "pw123"})
    assert response.status_code == 200
    assert response.json()["role"] == "admin"

    me = client.get("/api/me")
    assert me.status_code == 200
    assert me.json() == {"message": "user fetched", "user": "alice", "role": "admin"}


def test_login_wrong_password(client, database):
    add_user(database, "alice", password="pw123")

    response = client.post("/api/auth/login", json={"name": "alice", "password": "nope"})

    assert response.status_code == 401
    assert client.get("/api/me").status_code == 401


def test_logout_clears_session(admin_client):
    assert admin_client.post("/api/auth/logout").status_code == 200
    assert admin_client.get("/api/me").status_code == 401
    assert admin_client.get("/api/booking").status_code == 401


def test_me_for_deleted_account(client, database):
    user = add_user(database, "ghost")
    login(client, "ghost")
    with database.session() as session:
        session.delete(session.get(type(user), user.id))
        session.commit()

    assert client.get("/api/me").status_code == 404
    # A deleted account loses its role immediately
    assert client.get("/api/booking").status_code == 401


def test_list_users_hides_passwords(admin_client, database):
    add_user(database, "bob")

    response = admin_client.get("/api/users")

    assert response.status_code == 200
    users = response.json()["users"]
    assert {u["name"] for u in users} == {"admin", "bob"}
    assert all(set(u) == {"id", "name", "role"} for u in users)


def test_list_users_requires_login(client):
    assert client.get("/api/users").status_code == 401


def test_admin_cannot_mutate_users(admin_client, database):
    bob = add_user(database, "bob")

    assert admin_client.post("/api/users/register", json={"name": "eve", "password": "x"}).status_code == 401
    assert admin_client.put("/api/users", json={"_id": bob.id, "name": "robert"}).status_code == 401
    assert admin_client.delete("/api/users", params={"id": bob.id}).status_code == 401


def test_register_user(superadmin_client, client):
    response = superadmin_client.post("/api/users/register", json={"name": "carol", "password": "pw"})

    assert response.status_code == 200
    assert response.json() == {"message": "New user created", "name": "carol", "role": "admin"}

    # The new account can log in
    client.post("/api/auth/logout")
    login(client, "carol", "pw")
    assert client.get("/api/me").json()["role"] == "admin"


def test_register_requires_name_and_password(superadmin_client):
    response = superadmin_client.post("/api/users/register", json={"name": "carol"})
    assert response.status_code == 400


def test_register_duplicate_name(superadmin_client):
    superadmin_client.post("/api/users/register", json={"name": "carol", "password": "pw"})
    response = superadmin_client.post("/api/users/register", json={"name": "carol", "password": "pw2"})

    assert response.status_code == 400
    assert response.json()["message"] == "User name already exists"


def test_update_user(superadmin_client, client, database):
    bob = add_user(database, "bob", password="old")

    response = superadmin_client.put("/api/users", json={"_id": bob.id, "name": "robert", "password": "new"})
    assert response.status_code == 200
    assert response.json()["message"] == "User updated"

    client.post("/api/auth/logout")
    assert client.post("/api/auth/login", json={"name": "robert", "password": "old"}).status_code == 401
    login(client, "robert", "new")


def test_update_only_password_keeps_name(superadmin_client, database):
    bob = add_user(database, "bob")

    assert superadmin_client.put("/api/users", json={"_id": bob.id, "password": "fresh"}).status_code == 200

    names = {u["name"] for u in superadmin_client.get("/api/users").json()["users"]}
    assert "bob" in names


def test_update_unknown_user(superadmin_client):
    response = superadmin_client.put("/api/users", json={"_id": 999, "name": "x"})
    assert response.status_code == 404


def test_delete_user(superadmin_client, database):
    bob = add_user(database, "bob")

    response = superadmin_client.delete("/api/users", params={"id": bob.id})

    assert response.status_code == 200
    assert response.json()["message"] == "User deleted"
    names = {u["name"] for u in superadmin_client.get("/api/users").json()["users"]}
    assert "bob" not in names


def test_delete_unknown_user(superadmin_client):
    assert superadmin_client.delete("/api/users", params={"_id": 999}).status_code == 404


def test_superadmin_cannot_be_deleted(superadmin_client, database):
    other = add_user(database, "root2", role="superadmin")

    own = superadmin_client.get("/api/users").json()["users"]
    root_id = next(u["id"] for u in own if u["name"] == "root")

    for target in (root_id, other.id):
        response = superadmin_client.delete("/api/users", params={"id": target})
        assert response.status_code == 400
        assert response.json()["message"] == "Cannot delete superadmin"
