# projecthub/routers/comment.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from projecthub.database import get_db
from projecthub.schemas.comment import CommentCreate, CommentUpdate, CommentOut
from projecthub.services.comments import CommentService
from projecthub.utils.auth import get_current_identity
from projecthub.utils.permissions import Identity

router = APIRouter(prefix="/comments", tags=["comments"])


def get_comment_service(
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
) -> CommentService:
    return CommentService(db, identity)


@router.post("/", response_model=CommentOut, status_code=status.HTTP_201_CREATED)
def create_comment(comment: CommentCreate, service: CommentService = Depends(get_comment_service)):
    return service.create(comment)


@router.get("/task/{task_id}", response_model=List[CommentOut])
def get_task_comments(task_id: int, service: CommentService = Depends(get_comment_service)):
    """Comments on a task, newest first"""
    return service.list_for_task(task_id)


@router.put("/{comment_id}", response_model=CommentOut)
def update_comment(comment_id: int, comment: CommentUpdate, service: CommentService = Depends(get_comment_service)):
    return service.update(comment_id, comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: int, service: CommentService = Depends(get_comment_service)):
    service.delete(comment_id)
