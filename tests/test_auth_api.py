def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok"}


def test_provider_register_returns_token(client, register_provider):
    body = register_provider(email="Owner@Example.com")
    assert body["message"] == "Provider registered successfully"
    assert body["token"]
    assert body["provider"]["email"] == "owner@example.com"
    assert body["provider"]["business_name"] == "Acme Plumbing"


def test_duplicate_provider_rejected(client, register_provider):
    register_provider()
    r = client.post(
        "/api/auth/provider/register",
        json={
            "business_name": "Copycat",
            "owner_name": "Someone",
            "email": "owner@acme-plumbing.com",
            "password": "secret123",
            "phone": "5551234567",
            "service_types": ["other"],
        },
    )
    assert r.status_code == 400
    assert "already exists" in r.json()["detail"]


def test_short_password_rejected(client):
    r = client.post(
        "/api/auth/customer/register",
        json={"name": "Sam", "email": "sam@example.com", "password": "123"},
    )
    assert r.status_code == 422


def test_provider_login(client, register_provider):
    register_provider()
    r = client.post(
        "/api/auth/provider/login",
        json={"email": "owner@acme-plumbing.com", "password": "secret123"},
    )
    assert r.status_code == 200
    assert r.json()["message"] == "Login successful"
    assert r.json()["token"]


def test_provider_login_wrong_password(client, register_provider):
    register_provider()
    r = client.post(
        "/api/auth/provider/login",
        json={"email": "owner@acme-plumbing.com", "password": "wrong-password"},
    )
    assert r.status_code == 401
    assert r.json()["detail"] == "Invalid email or password"


def test_customer_cannot_log_in_as_provider(client, register_customer):
    register_customer()
    r = client.post(
        "/api/auth/provider/login",
        json={"email": "homeowner@example.com", "password": "secret123"},
    )
    assert r.status_code == 401


def test_customer_register_and_login(client, register_customer):
    body = register_customer()
    assert body["customer"]["name"] == "Sam Home"
    r = client.post(
        "/api/auth/customer/login",
        json={"email": "homeowner@example.com", "password": "secret123"},
    )
    assert r.status_code == 200
    assert r.json()["customer"]["id"] == body["customer"]["id"]


def test_profile_for_each_account_type(client, register_provider, register_customer):
    provider = register_provider()
    customer = register_customer()

    r = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {provider['token']}"})
    assert r.status_code == 200
    assert r.json()["type"] == "provider"
    assert r.json()["user"]["service_types"] == ["plumbing", "hvac"]
    assert "password_hash" not in r.json()["user"]

    r = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {customer['token']}"})
    assert r.status_code == 200
    assert r.json()["type"] == "customer"
    assert r.json()["user"]["email"] == "homeowner@example.com"


def test_profile_requires_token(client):
    assert client.get("/api/auth/profile").status_code == 401
    r = client.get("/api/auth/profile", headers={"Authorization": "Bearer garbage"})
    assert r.status_code == 401


def test_customer_token_cannot_access_provider_routes(client, register_customer):
    customer = register_customer()
    r = client.get("/api/leads", headers={"Authorization": f"Bearer {customer['token']}"})
    assert r.status_code == 403
