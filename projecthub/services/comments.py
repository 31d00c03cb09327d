# projecthub/services/comments.py
from typing import List

from sqlalchemy.orm import joinedload

from projecthub.models import Comment, Task
from projecthub.schemas.comment import CommentCreate, CommentUpdate
from projecthub.services.base import ServiceBase
from projecthub.services.transaction import atomic
from projecthub.utils.permissions import Action


class CommentService(ServiceBase):
    """Discussion threads attached to tasks"""

    def _load(self, comment_id: int) -> Comment:
        return self._get(Comment, comment_id, "comment", options=[joinedload(Comment.author)])

    def list_for_task(self, task_id: int) -> List[Comment]:
        """Newest first"""
        task = self._get(Task, task_id, "task")
        self._authorize(Action.VIEW, task, kind="comment")
        return (
            self.db.query(Comment)
            .options(joinedload(Comment.author))
            .filter(Comment.task_id == task.id)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .all()
        )

    def create(self, data: CommentCreate) -> Comment:
        task = self._get(Task, data.task_id, "task")
        self._authorize(Action.CREATE, task, kind="comment")
        comment = Comment(content=data.content, task_id=task.id, user_id=self.identity.id)
        with atomic(self.db):
            self.db.add(comment)
        return self._load(comment.id)

    def update(self, comment_id: int, data: CommentUpdate) -> Comment:
        comment = self._load(comment_id)
        self._authorize(Action.UPDATE, comment)
        with atomic(self.db):
            comment.content = data.content
        return comment

    def delete(self, comment_id: int) -> None:
        comment = self._load(comment_id)
        self._authorize(Action.DELETE, comment)
        with atomic(self.db):
            self.db.delete(comment)
