# whisperer/routers/file.py
import logging
from typing import List
from uuid import uuid4

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import Response
from sqlalchemy.orm import Session

from whisperer.core import storage
from whisperer.core.access import owned_file, owned_workspace
from whisperer.core.auth import get_current_user
from whisperer.core.database import get_db
from whisperer.core.exceptions import ValidationFailedError
from whisperer.core.file_text import count_tokens, detect_file_type, extract_text, pdf_page_count
from whisperer.core.updates import collect_updates
from whisperer.models.file import File as FileModel  # Alias to avoid conflict with fastapi's File
from whisperer.models.file import FileItem
from whisperer.models.links import AssistantFile, ChatFile, CollectionFile, FileWorkspace
from whisperer.models.user import User
from whisperer.schemas.file import FileResponse, FileUpdate

logger = logging.getLogger(__name__)

router = APIRouter()

MAX_FILE_BYTES = 10 * 1024 * 1024


@router.post("", response_model=FileResponse)
async def upload_file(
    workspace_id: str = Form(...),
    description: str = Form(""),
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Upload a file into a workspace.

    - The bytes are stored under `<user_id>/<file_id>_<filename>`.
    - Text is extracted (PDF via PyPDF2, text types by decoding), counted
      in tokens and kept as the file's single file item.
    - PDFs get their page count filled in.
    """
    workspace = owned_workspace(db, user.id, workspace_id)

    file_bytes = await file.read()
    if not file_bytes:
        raise ValidationFailedError("File is empty.")
    if len(file_bytes) > MAX_FILE_BYTES:
        raise ValidationFailedError("File must be less than 10MB.")

    file_id = str(uuid4())
    file_path = storage.save_object(f"{user.id}/{file_id}_{file.filename}", file_bytes)

    file_type = detect_file_type(file.filename, file.content_type)
    text = extract_text(file.filename, file_bytes)
    tokens = count_tokens(text)

    new_file = FileModel(
        id=file_id,
        user_id=user.id,
        name=file.filename,
        description=description,
        file_path=file_path,
        type=file_type,
        size=len(file_bytes),
        tokens=tokens,
        page_count=pdf_page_count(file_bytes) if file_type == "pdf" else None,
    )
    db.add(new_file)
    db.add(FileWorkspace(user_id=user.id, file_id=file_id, workspace_id=workspace.id))
    if text:
        db.add(FileItem(file_id=file_id, user_id=user.id, content=text, tokens=tokens))
    db.commit()
    db.refresh(new_file)

    logger.info("Uploaded file %s (%s, %d tokens) to workspace %s", file_id, file_type, tokens, workspace.id)
    return new_file


@router.get("", response_model=List[FileResponse])
def list_files(workspace_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    workspace = owned_workspace(db, user.id, workspace_id)
    return (
        db.query(FileModel)
        .join(FileWorkspace, FileWorkspace.file_id == FileModel.id)
        .filter(FileWorkspace.workspace_id == workspace.id)
        .order_by(FileWorkspace.id.desc())
        .all()
    )


@router.get("/{file_id}", response_model=FileResponse)
def get_file(file_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return owned_file(db, user.id, file_id)


@router.get("/{file_id}/content")
def download_file(file_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    file_record = owned_file(db, user.id, file_id)
    data = storage.read_object(file_record.file_path)
    return Response(
        content=data,
        media_type="application/octet-stream",
        headers={"Content-Disposition": f'attachment; filename="{file_record.name}"'},
    )


@router.patch("/{file_id}", response_model=FileResponse)
def update_file(file_id: str, payload: FileUpdate, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Rename a file or edit its description and screenplay metadata
    (document type, logline, genre, page count). The stored object keeps its
    original path.
    """
    file_record = owned_file(db, user.id, file_id)
    updates = collect_updates(payload, FileModel)

    for key, value in updates.items():
        setattr(file_record, key, value)
    db.commit()
    db.refresh(file_record)
    return file_record


@router.delete("/{file_id}")
def delete_file(file_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Delete a file by its file_id.

    This endpoint:
      - Removes every join row and file item that references the file.
      - Deletes the record from the files table.
      - Removes the stored object.

    The object is removed after the rows are committed; a storage failure
    at that point leaves an orphaned object, not a dangling row.
    """
    file_record = owned_file(db, user.id, file_id)
    file_path = file_record.file_path

    for link_model in (AssistantFile, ChatFile, CollectionFile, FileWorkspace):
        db.query(link_model).filter(link_model.file_id == file_id).delete()
    db.query(FileItem).filter(FileItem.file_id == file_id).delete()
    db.delete(file_record)
    db.commit()

    storage.delete_object(file_path)
    return {"detail": "File deleted successfully."}
