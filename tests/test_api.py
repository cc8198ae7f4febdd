from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from backend.app.core.time import utc_today
from backend.app.main import create_app
from backend.app.services.repository import Repository
from backend.app.storage.fallback import FallbackBackend
from backend.app.storage.kv_store import MemoryStore
from backend.app.storage.relational import RelationalBackend


@pytest.fixture(params=["relational", "fallback"])
def client(request, tmp_path):
    if request.param == "relational":
        backend = RelationalBackend(f"sqlite:///{tmp_path / 'trainerbox.db'}")
    else:
        backend = FallbackBackend(MemoryStore(), seed=False)
    repository = Repository(backend)
    repository.initialize()
    with TestClient(create_app(repository)) as test_client:
        yield test_client


def create_client(client: TestClient, name: str = "Juan Pérez", phone: str = "+54 9 11 1234-5678") -> int:
    resp = client.post("/clients/", json={"name": name, "phone": phone, "email": "juan@email.com"})
    assert resp.status_code == 201
    return resp.json()["id"]


def create_payment(client: TestClient, client_id: int, due_date: str, amount: float = 4500.0):
    return client.post("/payments/", json={"client_id": client_id, "amount": amount, "due_date": due_date})


def test_health_reports_backend(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["backend"] in ("relational", "fallback")


def test_client_crud(client):
    client_id = create_client(client)

    resp = client.get(f"/clients/{client_id}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "Juan Pérez"

    resp = client.put(f"/clients/{client_id}", json={"notes": "Entrena lunes y jueves"})
    assert resp.status_code == 200
    assert resp.json()["notes"] == "Entrena lunes y jueves"
    assert resp.json()["phone"] == "+54 9 11 1234-5678"

    assert [c["id"] for c in client.get("/clients/").json()] == [client_id]

    resp = client.delete(f"/clients/{client_id}")
    assert resp.json() == {"status": "deleted", "id": client_id}
    assert client.get(f"/clients/{client_id}").status_code == 404


def test_client_validation(client):
    assert client.post("/clients/", json={"name": "Sin teléfono"}).status_code == 422
    assert client.post("/clients/", json={"name": "Ana", "phone": "1", "email": "not-an-email"}).status_code == 422

    client_id = create_client(client)
    assert client.put(f"/clients/{client_id}", json={"name": None}).status_code == 422


def test_missing_client_returns_404(client):
    assert client.get("/clients/99").status_code == 404
    assert client.put("/clients/99", json={"name": "Nadie"}).status_code == 404
    assert client.delete("/clients/99").status_code == 404


def test_payment_for_missing_client_returns_404(client):
    assert create_payment(client, 99, "2030-01-01").status_code == 404


def test_payment_flow(client):
    client_id = create_client(client)
    yesterday = (utc_today() - timedelta(days=1)).isoformat()
    payment_id = create_payment(client, client_id, yesterday).json()["id"]

    payments = client.get("/payments/").json()
    assert payments[0]["status"] == "overdue"
    assert payments[0]["client_name"] == "Juan Pérez"
    assert [p["id"] for p in client.get("/payments/overdue").json()] == [payment_id]

    resp = client.post(f"/payments/{payment_id}/pay", json={"payment_method": "Efectivo"})
    assert resp.status_code == 200
    assert resp.json()["status"] == "paid"
    assert resp.json()["payment_method"] == "Efectivo"
    assert resp.json()["paid_date"] is not None
    assert client.get("/payments/overdue").json() == []

    resp = client.put(f"/payments/{payment_id}", json={"notes": "Pagó en recepción"})
    assert resp.json()["notes"] == "Pagó en recepción"

    assert client.delete(f"/payments/{payment_id}").json() == {"status": "deleted", "id": payment_id}
    assert client.post(f"/payments/{payment_id}/pay").status_code == 404


def test_payment_reminder_message(client):
    client_id = create_client(client)
    due = (utc_today() + timedelta(days=2)).isoformat()
    payment_id = create_payment(client, client_id, due, amount=5000.0).json()["id"]

    resp = client.get(f"/payments/{payment_id}/reminder-message")

    assert resp.status_code == 200
    body = resp.json()
    assert body["to"] == "5491112345678"
    assert "Hola Juan Pérez!" in body["message"]
    assert "$ 5.000,00" in body["message"]
    assert "Vence en 2 días" in body["message"]


def test_sessions_today_and_reminder_message(client):
    client_id = create_client(client)
    today = utc_today()
    for day, at in ((today, "10:30:00"), (today, "09:00:00"), (today + timedelta(days=3), "09:00:00")):
        resp = client.post(
            "/sessions/",
            json={"client_id": client_id, "session_date": day.isoformat(), "session_time": at, "duration": 60},
        )
        assert resp.status_code == 201

    todays = client.get("/sessions/today").json()
    assert [s["session_time"] for s in todays] == ["09:00:00", "10:30:00"]

    session_id = todays[0]["id"]
    resp = client.put(f"/sessions/{session_id}", json={"status": "completed"})
    assert resp.json()["status"] == "completed"
    assert len(client.get("/sessions/today").json()) == 1

    message = client.get(f"/sessions/{session_id}/reminder-message").json()["message"]
    assert "⏰ *Hora:* 09:00" in message

    assert client.delete(f"/sessions/{session_id}").status_code == 200
    assert client.get(f"/sessions/{session_id}/reminder-message").status_code == 404


def test_reminder_flow(client):
    client_id = create_client(client)
    resp = client.post(
        "/reminders/",
        json={
            "client_id": client_id,
            "title": "Cuota",
            "message": "Recordá la cuota",
            "reminder_date": date(2030, 1, 1).isoformat(),
            "reminder_time": "08:00:00",
            "type": "payment",
        },
    )
    assert resp.status_code == 201
    reminder_id = resp.json()["id"]

    resp = client.post(f"/reminders/{reminder_id}/sent")
    assert resp.json()["status"] == "sent"
    assert resp.json()["whatsapp_sent"] is True
    assert resp.json()["client_name"] == "Juan Pérez"

    resp = client.put(f"/reminders/{reminder_id}", json={"title": "Cuota enero"})
    assert resp.json()["title"] == "Cuota enero"

    assert client.delete(f"/reminders/{reminder_id}").json() == {"status": "deleted", "id": reminder_id}
    assert client.post(f"/reminders/{reminder_id}/sent").status_code == 404


def test_dashboard_stats(client):
    client_id = create_client(client)
    client.post(
        "/sessions/",
        json={
            "client_id": client_id,
            "session_date": utc_today().isoformat(),
            "session_time": "09:00:00",
            "duration": 60,
        },
    )

    resp = client.get("/dashboard/stats")

    assert resp.status_code == 200
    stats = resp.json()
    assert stats["total_clients"] == 1
    assert stats["active_clients"] == 1
    assert stats["today_sessions"] == 1


def test_dashboard_failure_returns_500(tmp_path):
    # Never initialized, so every query fails
    repository = Repository(RelationalBackend(f"sqlite:///{tmp_path / 'x.db'}"))
    test_client = TestClient(create_app(repository))

    resp = test_client.get("/dashboard/stats")

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Could not load dashboard statistics"}
