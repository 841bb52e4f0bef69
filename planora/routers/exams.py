from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from planora.schemas.exam import ExamCreate, ExamUpdate, ExamOut
from planora.models.exam import Exam
from planora.database import get_db
from planora.utils.auth import get_current_user
from planora.utils.ownership import owned, get_owned_or_404, apply_changes

router = APIRouter(prefix="/exams", tags=["exams"])


@router.post("/", response_model=ExamOut)
def create_exam(exam: ExamCreate, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    new = Exam(user_id=user, **exam.dict())
    db.add(new)
    db.commit()
    db.refresh(new)
    return new


@router.get("/", response_model=List[ExamOut])
def list_exams(db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    return owned(db, Exam, user).order_by(Exam.exam_date.asc()).all()


@router.patch("/{exam_id}", response_model=ExamOut)
def update_exam(exam_id: str, changes: ExamUpdate, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    exam = get_owned_or_404(db, Exam, exam_id, user, label="Exam")
    apply_changes(exam, changes.dict(exclude_unset=True))
    db.commit()
    db.refresh(exam)
    return exam


@router.delete("/{exam_id}")
def delete_exam(exam_id: str, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    exam = get_owned_or_404(db, Exam, exam_id, user, label="Exam")
    db.delete(exam)
    db.commit()
    return {"detail": "deleted"}
