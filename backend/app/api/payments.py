"""Payment endpoints: listing, overdue tracking and WhatsApp reminders."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from backend.app.core.exceptions import ClientNotFoundError
from backend.app.dependencies.repository import get_repository
from backend.app.schemas.message import WhatsAppMessage
from backend.app.schemas.payment import MarkPaidRequest, PaymentCreate, PaymentRead, PaymentUpdate
from backend.app.services.messaging import format_payment_reminder, whatsapp_number
from backend.app.services.repository import Repository

router = APIRouter(prefix="/payments", tags=["payments"])


def _get_payment(repo: Repository, payment_id: int) -> PaymentRead:
    payment = repo.get_payment(payment_id)
    if payment is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return payment


@router.get("/", response_model=List[PaymentRead])
async def list_payments(repo: Repository = Depends(get_repository)):
    # Listing runs the overdue sweep first
    return repo.list_payments()


@router.get("/overdue", response_model=List[PaymentRead])
async def list_overdue_payments(repo: Repository = Depends(get_repository)):
    return repo.list_overdue_payments()


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_payment(payment_in: PaymentCreate, repo: Repository = Depends(get_repository)):
    try:
        payment_id = repo.add_payment(payment_in)
    except ClientNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return {"id": payment_id}


@router.put("/{payment_id}", response_model=PaymentRead)
async def update_payment(payment_id: int, payment_in: PaymentUpdate, repo: Repository = Depends(get_repository)):
    _get_payment(repo, payment_id)
    repo.update_payment(payment_id, payment_in)
    return _get_payment(repo, payment_id)


@router.post("/{payment_id}/pay", response_model=PaymentRead)
async def mark_payment_as_paid(
    payment_id: int,
    body: MarkPaidRequest | None = None,
    repo: Repository = Depends(get_repository),
):
    method = body.payment_method if body else None
    if not repo.mark_payment_as_paid(payment_id, method):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return _get_payment(repo, payment_id)


@router.delete("/{payment_id}")
async def delete_payment(payment_id: int, repo: Repository = Depends(get_repository)):
    if not repo.delete_payment(payment_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Payment not found")
    return {"status": "deleted", "id": payment_id}


@router.get("/{payment_id}/reminder-message", response_model=WhatsAppMessage)
async def payment_reminder_message(payment_id: int, repo: Repository = Depends(get_repository)):
    payment = _get_payment(repo, payment_id)
    client = repo.get_client(payment.client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return WhatsAppMessage(to=whatsapp_number(client.phone), message=format_payment_reminder(payment, client))
