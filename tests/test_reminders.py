from datetime import date, time

import pytest

from backend.app.core.exceptions import ClientNotFoundError
from backend.app.schemas.client import ClientCreate
from backend.app.schemas.reminder import ReminderCreate, ReminderUpdate
from backend.app.services.repository import Repository
from backend.app.storage.fallback import FallbackBackend
from backend.app.storage.kv_store import MemoryStore
from backend.app.storage.relational import RelationalBackend


@pytest.fixture(params=["relational", "fallback"])
def repo(request, tmp_path):
    if request.param == "relational":
        backend = RelationalBackend(f"sqlite:///{tmp_path / 'trainerbox.db'}")
    else:
        backend = FallbackBackend(MemoryStore(), seed=False)
    repository = Repository(backend)
    repository.initialize()
    yield repository
    repository.close()


@pytest.fixture
def client_id(repo):
    return repo.add_client(ClientCreate(name="Juan Pérez", phone="+54 9 11 1234-5678"))


def _reminder(client_id, title="Cuota", day=date(2024, 3, 1), at=time(9, 0), **extra):
    return ReminderCreate(
        client_id=client_id,
        title=title,
        message="Recordá abonar la cuota",
        reminder_date=day,
        reminder_time=at,
        **extra,
    )


def test_add_reminder_defaults(repo, client_id):
    reminder_id = repo.add_reminder(_reminder(client_id, type="payment"))

    reminder = repo.get_reminder(reminder_id)
    assert reminder.title == "Cuota"
    assert reminder.type == "payment"
    assert reminder.status == "pending"
    assert reminder.whatsapp_sent is False
    assert reminder.client_name == "Juan Pérez"


def test_add_reminder_for_missing_client_raises(repo):
    with pytest.raises(ClientNotFoundError):
        repo.add_reminder(_reminder(8))


def test_reminders_ordered_by_date_and_time(repo, client_id):
    repo.add_reminder(_reminder(client_id, title="Second", at=time(18, 0)))
    repo.add_reminder(_reminder(client_id, title="Third", day=date(2024, 3, 2)))
    repo.add_reminder(_reminder(client_id, title="First", at=time(8, 0)))

    assert [r.title for r in repo.list_reminders()] == ["First", "Second", "Third"]


def test_mark_reminder_sent(repo, client_id):
    reminder_id = repo.add_reminder(_reminder(client_id))

    assert repo.mark_reminder_sent(reminder_id) is True

    reminder = repo.get_reminder(reminder_id)
    assert reminder.status == "sent"
    assert reminder.whatsapp_sent is True


def test_update_reminder(repo, client_id):
    reminder_id = repo.add_reminder(_reminder(client_id))

    assert repo.update_reminder(reminder_id, ReminderUpdate(title="Cuota marzo", reminder_time=time(11, 15))) is True

    reminder = repo.get_reminder(reminder_id)
    assert reminder.title == "Cuota marzo"
    assert reminder.reminder_time == time(11, 15)
    assert reminder.message == "Recordá abonar la cuota"


def test_missing_reminder_operations_return_false(repo):
    assert repo.get_reminder(1) is None
    assert repo.update_reminder(1, ReminderUpdate(title="x")) is False
    assert repo.mark_reminder_sent(1) is False
    assert repo.delete_reminder(1) is False


def test_delete_reminder(repo, client_id):
    reminder_id = repo.add_reminder(_reminder(client_id))

    assert repo.delete_reminder(reminder_id) is True
    assert repo.list_reminders() == []
