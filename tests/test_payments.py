from datetime import UTC, date, datetime

import pytest

from backend.app.core.exceptions import ClientNotFoundError
from backend.app.schemas.client import ClientCreate
from backend.app.schemas.payment import PaymentCreate, PaymentUpdate
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


def _payment(client_id, amount=4500.0, due=date(2024, 1, 20), **extra):
    return PaymentCreate(client_id=client_id, amount=amount, due_date=due, **extra)


def test_add_payment_joins_client(repo, client_id):
    payment_id = repo.add_payment(_payment(client_id, notes="Cuota enero"))

    payment = repo.get_payment(payment_id)
    assert payment.status == "pending"
    assert payment.amount == 4500.0
    assert payment.client_name == "Juan Pérez"
    assert payment.client_phone == "+54 9 11 1234-5678"
    assert payment.notes == "Cuota enero"


def test_add_payment_for_missing_client_raises(repo):
    with pytest.raises(ClientNotFoundError):
        repo.add_payment(_payment(99))


def test_listing_sweeps_pending_payments_past_due(repo, client_id):
    late_id = repo.add_payment(_payment(client_id, due=date(2024, 1, 20)))
    future_id = repo.add_payment(_payment(client_id, due=date(2024, 3, 1)))
    paid_id = repo.add_payment(
        _payment(client_id, due=date(2024, 1, 5), status="paid", paid_date=datetime(2024, 1, 4, tzinfo=UTC))
    )

    payments = {p.id: p for p in repo.list_payments(today=date(2024, 2, 1))}

    assert payments[late_id].status == "overdue"
    assert payments[future_id].status == "pending"
    assert payments[paid_id].status == "paid"


def test_due_today_is_not_overdue(repo, client_id):
    payment_id = repo.add_payment(_payment(client_id, due=date(2024, 2, 1)))

    assert repo.sweep_overdue_payments(today=date(2024, 2, 1)) == 0
    assert repo.get_payment(payment_id).status == "pending"


def test_sweep_returns_number_of_changed_payments(repo, client_id):
    repo.add_payment(_payment(client_id, due=date(2024, 1, 1)))
    repo.add_payment(_payment(client_id, due=date(2024, 1, 2)))

    assert repo.sweep_overdue_payments(today=date(2024, 2, 1)) == 2
    assert repo.sweep_overdue_payments(today=date(2024, 2, 1)) == 0


def test_payments_listed_latest_due_first(repo, client_id):
    repo.add_payment(_payment(client_id, amount=1, due=date(2030, 1, 10)))
    repo.add_payment(_payment(client_id, amount=2, due=date(2030, 3, 10)))
    repo.add_payment(_payment(client_id, amount=3, due=date(2030, 2, 10)))

    assert [p.amount for p in repo.list_payments(today=date(2024, 1, 1))] == [2, 3, 1]


def test_overdue_listing_ignores_paid_and_orders_by_due_date(repo, client_id):
    repo.add_payment(_payment(client_id, amount=1, due=date(2024, 1, 15)))
    repo.add_payment(_payment(client_id, amount=2, due=date(2024, 1, 5)))
    repo.add_payment(_payment(client_id, amount=3, due=date(2024, 1, 1), status="paid"))
    repo.add_payment(_payment(client_id, amount=4, due=date(2024, 5, 1)))

    overdue = repo.list_overdue_payments(today=date(2024, 2, 1))

    assert [p.amount for p in overdue] == [2, 1]


def test_mark_payment_as_paid(repo, client_id):
    payment_id = repo.add_payment(_payment(client_id))

    paid_at = datetime(2024, 1, 18, 15, 30, tzinfo=UTC)
    assert repo.mark_payment_as_paid(payment_id, "Efectivo", now=paid_at) is True

    payment = repo.get_payment(payment_id)
    assert payment.status == "paid"
    assert payment.payment_method == "Efectivo"
    assert payment.paid_date == paid_at


def test_mark_paid_without_method_keeps_existing_method(repo, client_id):
    payment_id = repo.add_payment(_payment(client_id, payment_method="Transferencia"))

    repo.mark_payment_as_paid(payment_id)

    payment = repo.get_payment(payment_id)
    assert payment.status == "paid"
    assert payment.payment_method == "Transferencia"
    assert payment.paid_date is not None


def test_mark_missing_payment_returns_false(repo):
    assert repo.mark_payment_as_paid(123, "Efectivo") is False


def test_naive_paid_date_is_stored_as_utc(repo, client_id):
    payment_id = repo.add_payment(_payment(client_id, status="paid", paid_date=datetime(2024, 1, 10, 12, 0)))

    assert repo.get_payment(payment_id).paid_date == datetime(2024, 1, 10, 12, 0, tzinfo=UTC)


def test_update_payment(repo, client_id):
    payment_id = repo.add_payment(_payment(client_id))

    assert repo.update_payment(payment_id, PaymentUpdate(amount=5000.0, notes="Ajuste")) is True

    payment = repo.get_payment(payment_id)
    assert payment.amount == 5000.0
    assert payment.notes == "Ajuste"
    assert payment.due_date == date(2024, 1, 20)


def test_empty_payment_update_is_a_no_op(repo, client_id):
    payment_id = repo.add_payment(_payment(client_id))

    assert repo.update_payment(payment_id, PaymentUpdate()) is False


def test_update_missing_payment_returns_false(repo):
    assert repo.update_payment(7, PaymentUpdate(amount=1.0)) is False


def test_delete_payment(repo, client_id):
    payment_id = repo.add_payment(_payment(client_id))

    assert repo.delete_payment(payment_id) is True
    assert repo.get_payment(payment_id) is None
    assert repo.delete_payment(payment_id) is False
