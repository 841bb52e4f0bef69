"""Row ownership scoping.

Every read and write on a user-owned table goes through these helpers, so a
query can never reach rows whose ``user_id`` differs from the caller's.
"""
from fastapi import HTTPException
from sqlalchemy.orm import Session


def owned(db: Session, model, user_id: str):
    return db.query(model).filter(model.user_id == user_id)


def get_owned_or_404(db: Session, model, row_id: str, user_id: str, label: str = "Row"):
    row = db.query(model).filter(model.id == row_id).first()
    if not row:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    if row.user_id != user_id:
        raise HTTPException(status_code=403, detail=f"Not allowed to modify this {label.lower()}")
    return row


def apply_changes(row, changes: dict):
    """Set the given fields on ``row``.

    A null sent for a nullable column clears it; a null for a NOT NULL
    column is skipped and the stored value stays.
    """
    columns = row.__table__.columns
    for field, value in changes.items():
        if value is None and field in columns and not columns[field].nullable:
            continue
        setattr(row, field, value)
    return row
