def test_get_user_profile(client, alice, bob):
    response = client.get(f"/users/{bob['id']}", headers=alice["headers"])

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == bob["id"]
    assert data["first_name"] == "Bob"
    assert "password_hash" not in data


def test_get_user_requires_auth(client, alice):
    assert client.get(f"/users/{alice['id']}").status_code == 401


def test_get_unknown_user(client, alice):
    response = client.get("/users/0123456789abcdef01234567", headers=alice["headers"])
    assert response.status_code == 404


def test_get_user_invalid_id(client, alice):
    response = client.get("/users/xyz", headers=alice["headers"])
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_follow_updates_both_sides(client, alice, bob):
    response = client.patch(f"/users/{alice['id']}/{bob['id']}", headers=alice["headers"])

    assert response.status_code == 200
    assert [f["id"] for f in response.json()] == [bob["id"]]
    assert response.json()[0]["first_name"] == "Bob"

    alice_profile = client.get(f"/users/{alice['id']}", headers=alice["headers"]).json()
    bob_profile = client.get(f"/users/{bob['id']}", headers=alice["headers"]).json()
    assert alice_profile["following"] == [bob["id"]]
    assert bob_profile["followers"] == [alice["id"]]

    followers = client.get(f"/users/{bob['id']}/followers", headers=bob["headers"]).json()
    assert [f["id"] for f in followers] == [alice["id"]]
    following = client.get(f"/users/{alice['id']}/following", headers=bob["headers"]).json()
    assert [f["id"] for f in following] == [bob["id"]]


def test_second_toggle_unfollows(client, alice, bob):
    path = f"/users/{alice['id']}/{bob['id']}"
    client.patch(path, headers=alice["headers"])
    response = client.patch(path, headers=alice["headers"])

    assert response.json() == []
    bob_profile = client.get(f"/users/{bob['id']}", headers=bob["headers"]).json()
    assert bob_profile["followers"] == []


def test_cannot_follow_on_behalf_of_someone_else(client, alice, bob):
    response = client.patch(f"/users/{bob['id']}/{alice['id']}", headers=alice["headers"])
    assert response.status_code == 403
    assert response.json()["code"] == "FORBIDDEN"


def test_cannot_follow_self(client, alice):
    response = client.patch(f"/users/{alice['id']}/{alice['id']}", headers=alice["headers"])
    assert response.status_code == 400


def test_follow_unknown_target(client, alice):
    response = client.patch(
        f"/users/{alice['id']}/0123456789abcdef01234567", headers=alice["headers"]
    )
    assert response.status_code == 404


def test_following_skips_malformed_stored_ids(client, db, alice, bob):
    import asyncio
    from bson import ObjectId

    client.patch(f"/users/{alice['id']}/{bob['id']}", headers=alice["headers"])
    asyncio.run(db.users.update_one({"_id": ObjectId(alice["id"])}, {"$push": {"following": "not-an-id"}}))

    response = client.get(f"/users/{alice['id']}/following", headers=alice["headers"])
    assert response.status_code == 200
    assert [f["id"] for f in response.json()] == [bob["id"]]
