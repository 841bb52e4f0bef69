from math import ceil
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from planora.schemas.task import TaskCreate, TaskUpdate, TaskOut
from planora.models.pomodoro_session import PomodoroSession
from planora.models.task import Task
from planora.database import get_db
from planora.utils.auth import get_current_user
from planora.utils.ownership import owned, get_owned_or_404, apply_changes

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post("/", response_model=TaskOut)
def create_task(task: TaskCreate, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    new = Task(user_id=user, **task.dict())
    db.add(new)
    db.commit()
    db.refresh(new)
    return new


@router.get("/")
def list_tasks(
    q: Optional[str] = Query(None, description="Search by title"),
    completed: Optional[bool] = None,
    page: Optional[int] = None,
    limit: Optional[int] = None,
    db: Session = Depends(get_db),
    user: str = Depends(get_current_user),
):
    """If page and limit are provided, return paginated result dict {items,page,limit,total,pages}.
    Otherwise return plain list ordered by position.
    """
    query = owned(db, Task, user)
    if q:
        query = query.filter(Task.title.ilike(f"%{q}%"))
    if completed is not None:
        query = query.filter(Task.completed.is_(completed))
    query = query.order_by(Task.position.asc(), Task.created_at.asc())
    if page is None or limit is None:
        return [TaskOut.model_validate(t) for t in query.all()]

    # normalize page/limit
    if page < 1:
        page = 1
    if limit < 1:
        limit = 10
    total = query.count()
    pages = ceil(total / limit) if total > 0 else 1
    items = [TaskOut.model_validate(t) for t in query.limit(limit).offset((page - 1) * limit).all()]
    return {"items": items, "page": page, "limit": limit, "total": total, "pages": pages}


@router.patch("/{task_id}", response_model=TaskOut)
def update_task(task_id: str, changes: TaskUpdate, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    task = get_owned_or_404(db, Task, task_id, user, label="Task")
    apply_changes(task, changes.dict(exclude_unset=True))
    db.commit()
    db.refresh(task)
    return task


@router.delete("/{task_id}")
def delete_task(task_id: str, db: Session = Depends(get_db), user: str = Depends(get_current_user)):
    task = get_owned_or_404(db, Task, task_id, user, label="Task")
    # sessions outlive the task they were focused on
    db.query(PomodoroSession).filter(PomodoroSession.task_id == task.id).update({PomodoroSession.task_id: None})
    db.delete(task)
    db.commit()
    return {"detail": "deleted"}
