from whisperer.core import storage


def test_update_profile_keys(auth_client):
    response = auth_client.patch("/api/profile", json={"openai_api_key": "sk-user", "has_onboarded": True})

    assert response.status_code == 200
    assert response.json()["openai_api_key"] == "sk-user"
    assert response.json()["has_onboarded"] is True


def test_role_is_not_editable(auth_client):
    response = auth_client.patch("/api/profile", json={"user_role": "admin"})

    assert response.status_code == 400


def test_profile_key_unlocks_hosted_models(auth_client):
    auth_client.patch("/api/profile", json={"mistral_api_key": "mistral-user"})

    body = auth_client.get("/api/models").json()

    assert {llm["provider"] for llm in body["hostedModels"]} == {"mistral"}
    assert body["envKeyMap"] == {"openai": False, "anthropic": False, "mistral": False}


def test_keys_route_reports_server_keys(client, settings_override):
    settings_override(OPENAI_API_KEY="sk-server")

    assert client.get("/api/keys").json() == {
        "isUsingEnvKeyMap": {"openai": True, "anthropic": False, "mistral": False}
    }


def test_upload_profile_image(auth_client, user):
    response = auth_client.post("/api/profile/image", files={"image": ("me.png", b"\x89PNG fake", "image/png")})

    assert response.status_code == 200
    path = response.json()["image_path"]
    assert path.startswith(f"profile-images/{user.id}/")
    assert storage.read_object(path) == b"\x89PNG fake"


def test_profile_image_type_is_checked(auth_client):
    response = auth_client.post("/api/profile/image", files={"image": ("me.exe", b"MZ", "application/octet-stream")})

    assert response.status_code == 400
    assert response.json() == {"message": "Unsupported image type."}
