# whisperer/routers/collection.py
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from whisperer.core.access import owned_collection, owned_file, owned_workspace
from whisperer.core.assistant_flow import get_collection_files
from whisperer.core.auth import get_current_user
from whisperer.core.database import get_db
from whisperer.core.updates import collect_updates
from whisperer.models.chat import Chat
from whisperer.models.collection import Collection
from whisperer.models.links import AssistantCollection, CollectionFile, CollectionWorkspace
from whisperer.models.user import User
from whisperer.schemas.file import (
    CollectionCreate,
    CollectionFile as CollectionFileSchema,
    CollectionResponse,
    CollectionUpdate,
    LinkFileRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("", response_model=CollectionResponse)
def create_collection(payload: CollectionCreate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    collection = Collection(user_id=user.id, name=payload.name, description=payload.description)
    db.add(collection)
    db.flush()
    if payload.workspace_id:
        workspace = owned_workspace(db, user.id, payload.workspace_id)
        db.add(CollectionWorkspace(user_id=user.id, collection_id=collection.id, workspace_id=workspace.id))
    db.commit()
    db.refresh(collection)
    return collection


@router.get("", response_model=List[CollectionResponse])
def list_collections(
    workspace_id: Optional[str] = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """All of the caller's collections, or only those linked to **workspace_id**."""
    query = db.query(Collection).filter(Collection.user_id == user.id)
    if workspace_id:
        workspace = owned_workspace(db, user.id, workspace_id)
        query = query.join(CollectionWorkspace, CollectionWorkspace.collection_id == Collection.id).filter(
            CollectionWorkspace.workspace_id == workspace.id
        )
    return query.order_by(Collection.created_at.desc()).all()


@router.get("/{collection_id}", response_model=CollectionResponse)
def get_collection(collection_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return owned_collection(db, user.id, collection_id)


@router.patch("/{collection_id}", response_model=CollectionResponse)
def update_collection(
    collection_id: str,
    payload: CollectionUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    collection = owned_collection(db, user.id, collection_id)
    updates = collect_updates(payload, Collection)
    for key, value in updates.items():
        setattr(collection, key, value)
    db.commit()
    db.refresh(collection)
    return collection


@router.delete("/{collection_id}")
def delete_collection(collection_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Delete a collection and its links. The files themselves are kept; chats
    scoped to the collection lose the scope.
    """
    collection = owned_collection(db, user.id, collection_id)
    for link_model in (CollectionFile, CollectionWorkspace, AssistantCollection):
        db.query(link_model).filter(link_model.collection_id == collection.id).delete()
    db.query(Chat).filter(Chat.collection_id == collection.id).update({Chat.collection_id: None})
    db.delete(collection)
    db.commit()
    logger.info("Deleted collection %s", collection_id)
    return {"detail": "Collection deleted successfully."}


@router.get("/{collection_id}/files", response_model=List[CollectionFileSchema])
def list_collection_files(collection_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Files in the order they were added to the collection."""
    collection = owned_collection(db, user.id, collection_id)
    return get_collection_files(db, collection.id)


@router.post("/{collection_id}/files", response_model=List[CollectionFileSchema])
def add_collection_file(
    collection_id: str,
    payload: LinkFileRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    collection = owned_collection(db, user.id, collection_id)
    file_record = owned_file(db, user.id, payload.file_id)
    exists = (
        db.query(CollectionFile)
        .filter(CollectionFile.collection_id == collection.id, CollectionFile.file_id == file_record.id)
        .first()
    )
    if not exists:
        db.add(CollectionFile(user_id=user.id, collection_id=collection.id, file_id=file_record.id))
        db.commit()
    return get_collection_files(db, collection.id)


@router.delete("/{collection_id}/files/{file_id}")
def remove_collection_file(
    collection_id: str,
    file_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    collection = owned_collection(db, user.id, collection_id)
    db.query(CollectionFile).filter(
        CollectionFile.collection_id == collection.id, CollectionFile.file_id == file_id
    ).delete()
    db.commit()
    return {"detail": "File removed from collection."}
