from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from planora.schemas.note import NoteCreate, NoteUpdate, NoteOut
from planora.models.note import Note
from planora.database import get_db
from planora.utils.auth import get_current_user
from planora.utils.ownership import owned, get_owned_or_404, apply_changes

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("/", response_model=NoteOut)
def create_note(note: NoteCreate, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    new = Note(user_id=user, **note.dict())
    db.add(new)
    db.commit()
    db.refresh(new)
    return new


@router.get("/", response_model=List[NoteOut])
def list_notes(
    tag: Optional[str] = Query(None, description="Only notes carrying this tag"),
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user),
):
    notes = owned(db, Note, user).order_by(Note.pinned.desc(), Note.updated_at.desc()).all()
    if tag:
        # tags is a JSON column, so filter here rather than in SQL
        notes = [n for n in notes if tag in (n.tags or [])]
    return notes


@router.patch("/{note_id}", response_model=NoteOut)
def update_note(note_id: str, changes: NoteUpdate, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    note = get_owned_or_404(db, Note, note_id, user, label="Note")
    apply_changes(note, changes.dict(exclude_unset=True))
    db.commit()
    db.refresh(note)
    return note


@router.delete("/{note_id}")
def delete_note(note_id: str, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    note = get_owned_or_404(db, Note, note_id, user, label="Note")
    db.delete(note)
    db.commit()
    return {"detail": "deleted"}
