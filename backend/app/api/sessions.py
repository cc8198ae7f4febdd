"""Training session endpoints."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from backend.app.core.exceptions import ClientNotFoundError
from backend.app.dependencies.repository import get_repository
from backend.app.schemas.message import WhatsAppMessage
from backend.app.schemas.session import SessionCreate, SessionRead, SessionUpdate
from backend.app.services.messaging import format_session_reminder, whatsapp_number
from backend.app.services.repository import Repository

router = APIRouter(prefix="/sessions", tags=["sessions"])


def _get_session(repo: Repository, session_id: int) -> SessionRead:
    session = repo.get_session(session_id)
    if session is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return session


@router.get("/", response_model=List[SessionRead])
async def list_sessions(repo: Repository = Depends(get_repository)):
    return repo.list_sessions()


@router.get("/today", response_model=List[SessionRead])
async def list_todays_sessions(repo: Repository = Depends(get_repository)):
    return repo.list_todays_sessions()


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_session(session_in: SessionCreate, repo: Repository = Depends(get_repository)):
    try:
        session_id = repo.add_session(session_in)
    except ClientNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return {"id": session_id}


@router.put("/{session_id}", response_model=SessionRead)
async def update_session(session_id: int, session_in: SessionUpdate, repo: Repository = Depends(get_repository)):
    _get_session(repo, session_id)
    repo.update_session(session_id, session_in)
    return _get_session(repo, session_id)


@router.delete("/{session_id}")
async def delete_session(session_id: int, repo: Repository = Depends(get_repository)):
    if not repo.delete_session(session_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Session not found")
    return {"status": "deleted", "id": session_id}


@router.get("/{session_id}/reminder-message", response_model=WhatsAppMessage)
async def session_reminder_message(session_id: int, repo: Repository = Depends(get_repository)):
    session = _get_session(repo, session_id)
    client = repo.get_client(session.client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return WhatsAppMessage(to=whatsapp_number(client.phone), message=format_session_reminder(session, client))
