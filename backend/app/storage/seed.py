"""Sample data written to an empty fallback store so a first run has something to show."""

from datetime import datetime

COLLECTIONS = ("clients", "payments", "sessions", "reminders")


def empty_document() -> dict:
    return {collection: [] for collection in COLLECTIONS}


def build_seed_document(now: datetime) -> dict:
    stamp = now.isoformat()
    today = now.date().isoformat()
    return {
        "clients": [
            {
                "id": 1,
                "name": "Juan Pérez",
                "phone": "+54 9 11 1234-5678",
                "email": "juan@email.com",
                "birth_date": "1990-05-15",
                "emergency_contact": "+54 9 11 8765-4321",
                "notes": "Cliente regular, prefiere entrenamientos matutinos",
                "created_at": stamp,
                "updated_at": stamp,
            },
            {
                "id": 2,
                "name": "María García",
                "phone": "+54 9 11 2345-6789",
                "email": "maria@email.com",
                "birth_date": "1985-08-22",
                "emergency_contact": "+54 9 11 9876-5432",
                "notes": "Nueva cliente, interesada en pilates",
                "created_at": stamp,
                "updated_at": stamp,
            },
        ],
        "payments": [
            {
                "id": 1,
                "client_id": 1,
                "amount": 5000.0,
                "due_date": "2024-01-15",
                "paid_date": "2024-01-10T00:00:00+00:00",
                "status": "paid",
                "payment_method": "Efectivo",
                "notes": "Pago adelantado",
                "created_at": stamp,
            },
            {
                "id": 2,
                "client_id": 2,
                "amount": 4500.0,
                "due_date": "2024-01-20",
                "paid_date": None,
                "status": "pending",
                "payment_method": None,
                "notes": "Pendiente de pago",
                "created_at": stamp,
            },
        ],
        "sessions": [
            {
                "id": 1,
                "client_id": 1,
                "session_date": today,
                "session_time": "09:00:00",
                "duration": 60,
                "type": "personal",
                "status": "scheduled",
                "notes": "Entrenamiento de fuerza",
                "created_at": stamp,
            },
            {
                "id": 2,
                "client_id": 2,
                "session_date": today,
                "session_time": "10:30:00",
                "duration": 45,
                "type": "personal",
                "status": "scheduled",
                "notes": "Pilates básico",
                "created_at": stamp,
            },
        ],
        "reminders": [],
    }
