"""Client endpoints for TrainerBox."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from backend.app.dependencies.repository import get_repository
from backend.app.schemas.client import ClientCreate, ClientRead, ClientUpdate
from backend.app.services.repository import Repository

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/", response_model=List[ClientRead])
async def list_clients(repo: Repository = Depends(get_repository)):
    return repo.list_clients()


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_client(client_in: ClientCreate, repo: Repository = Depends(get_repository)):
    return {"id": repo.add_client(client_in)}


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(client_id: int, repo: Repository = Depends(get_repository)):
    client = repo.get_client(client_id)
    if client is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return client


@router.put("/{client_id}", response_model=ClientRead)
async def update_client(client_id: int, client_in: ClientUpdate, repo: Repository = Depends(get_repository)):
    if repo.get_client(client_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    repo.update_client(client_id, client_in)
    return repo.get_client(client_id)


@router.delete("/{client_id}")
async def delete_client(client_id: int, repo: Repository = Depends(get_repository)):
    """Delete a client along with their payments, sessions and reminders."""
    if not repo.delete_client(client_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Client not found")
    return {"status": "deleted", "id": client_id}
