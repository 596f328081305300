import pytest


def test_send_code_returns_ok_and_mails(client, outbox):
    response = client.post("/api/auth/email/send", json={"email": "Signup@Example.com"})
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert outbox.messages[0]["to"] == "signup@example.com"


def test_send_code_accepts_member_email_field(client, outbox):
    response = client.post("/api/auth/email/send", json={"memberEmail": "a@x.com"})
    assert response.status_code == 200
    assert outbox.messages[0]["to"] == "a@x.com"


def test_send_code_blank_email_still_ok(client, outbox):
    response = client.post("/api/auth/email/send", json={"email": "  "})
    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert outbox.messages == []


def test_send_code_cooldown_is_indistinguishable(client, outbox, clock):
    first = client.post("/api/auth/email/send", json={"email": "a@x.com"})
    clock.advance(seconds=3)
    second = client.post("/api/auth/email/send", json={"email": "a@x.com"})
    assert first.json() == second.json() == {"ok": True}
    assert len(outbox.messages) == 1


def test_verify_code_flow(client, outbox):
    client.post("/api/auth/email/send", json={"email": "a@x.com"})
    code = outbox.last_code()

    ok = client.post("/api/auth/email/verify", json={"email": "A@x.com ", "code": code})
    assert ok.status_code == 200
    assert ok.json() == {"ok": True}

    again = client.post("/api/auth/email/verify", json={"email": "a@x.com", "code": code})
    assert again.status_code == 400
    assert again.json() == {"ok": False}


def test_verify_wrong_code_is_400(client, outbox):
    client.post("/api/auth/email/send", json={"memberEmail": "a@x.com"})
    code = outbox.last_code()
    wrong = "000000" if code != "000000" else "111111"

    response = client.post("/api/auth/email/verify", json={"memberEmail": "a@x.com", "code": wrong})
    assert response.status_code == 400
    assert response.json() == {"ok": False}


def test_verify_missing_fields_is_400(client):
    response = client.post("/api/auth/email/verify", json={})
    assert response.status_code == 400
    assert response.json() == {"ok": False}


def test_send_code_mail_failure_is_500(client, store, monkeypatch):
    def broken_sender(to, subject, body):
        raise OSError("smtp down")

    monkeypatch.setattr(store, "_mail_sender", broken_sender)
    response = client.post("/api/auth/email/send", json={"email": "a@x.com"})
    assert response.status_code == 500
    assert response.json() == {"detail": "Failed to send verification email."}


@pytest.mark.parametrize("bad_code", ["12\x003456", "1" * 5000])
def test_verify_unhashable_code_is_400(client, outbox, bad_code):
    client.post("/api/auth/email/send", json={"email": "a@x.com"})

    response = client.post("/api/auth/email/verify", json={"email": "a@x.com", "code": bad_code})
    assert response.status_code == 400
    assert response.json() == {"ok": False}
