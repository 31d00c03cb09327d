from .user import User, UserRole
from .project import Project, ProjectStatus
from .task import Task, TaskStatus, TaskPriority, Assignment, AssignmentStatus
from .comment import Comment

__all__ = [
    "User",
    "UserRole",
    "Project",
    "ProjectStatus",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "Assignment",
    "AssignmentStatus",
    "Comment",
]
