from src.middleware.logging import redact_sensitive


def test_redact_sensitive_keys():
    event = {"event": "login", "password": "hunter22", "token": "abc.def.ghi", "user_id": 7}
    out = redact_sensitive(None, None, event.copy())
    assert out["password"] == "REDACTED"
    assert out["token"] == "REDACTED"
    assert out["user_id"] == 7


def test_redact_bearer_in_free_text():
    event = {"event": "http_request_failed", "error": "bad header Bearer eyJhbGciOi.payload.sig"}
    out = redact_sensitive(None, None, event.copy())
    assert "eyJhbGciOi" not in out["error"]
    assert "Bearer REDACTED" in out["error"]


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"
    assert client.get("/health").headers["X-Request-ID"]


def test_request_logs_carry_user_id(client, register, create_package, auth, mailer, caplog):
    token = register(name="Kiran Rao", email="kiran@yatri.in")
    package = create_package()
    booking = client.post("/api/booking/create", headers=auth(token), json={
        "packageId": package["id"],
        "travelDate": "2030-01-01T00:00:00",
        "travelers": 1
    }).json()["data"]
    mailer.fail = True

    with caplog.at_level("WARNING"):
        client.post("/api/booking/updatePayment", headers=auth(token), json={
            "bookingId": booking["id"],
            "paymentStatus": "success"
        })

    skipped = [r.getMessage() for r in caplog.records if "booking_confirmation_email_skipped" in r.getMessage()]
    assert skipped
    assert "user_id" in skipped[0]
