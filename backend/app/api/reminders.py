"""Reminder endpoints for scheduled WhatsApp follow-ups."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from backend.app.core.exceptions import ClientNotFoundError
from backend.app.dependencies.repository import get_repository
from backend.app.schemas.reminder import ReminderCreate, ReminderRead, ReminderUpdate
from backend.app.services.repository import Repository

router = APIRouter(prefix="/reminders", tags=["reminders"])


def _get_reminder(repo: Repository, reminder_id: int) -> ReminderRead:
    reminder = repo.get_reminder(reminder_id)
    if reminder is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found")
    return reminder


@router.get("/", response_model=List[ReminderRead])
async def list_reminders(repo: Repository = Depends(get_repository)):
    return repo.list_reminders()


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_reminder(reminder_in: ReminderCreate, repo: Repository = Depends(get_repository)):
    try:
        reminder_id = repo.add_reminder(reminder_in)
    except ClientNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return {"id": reminder_id}


@router.put("/{reminder_id}", response_model=ReminderRead)
async def update_reminder(reminder_id: int, reminder_in: ReminderUpdate, repo: Repository = Depends(get_repository)):
    _get_reminder(repo, reminder_id)
    repo.update_reminder(reminder_id, reminder_in)
    return _get_reminder(repo, reminder_id)


@router.post("/{reminder_id}/sent", response_model=ReminderRead)
async def mark_reminder_sent(reminder_id: int, repo: Repository = Depends(get_repository)):
    if not repo.mark_reminder_sent(reminder_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found")
    return _get_reminder(repo, reminder_id)


@router.delete("/{reminder_id}")
async def delete_reminder(reminder_id: int, repo: Repository = Depends(get_repository)):
    if not repo.delete_reminder(reminder_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found")
    return {"status": "deleted", "id": reminder_id}
