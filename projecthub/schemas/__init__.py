from .user import UserRegister, UserCreate, UserLogin, UserSummary, UserOut, UserWithCounts, UserUpdate
from .tokens import Token
from .project import (
    ProjectCreate, ProjectUpdate, ProjectBasic, ProjectOut, ProjectStats,
    TeamTaskOut, TeamMemberOut, ProjectTeamAdd,
)
from .task import (
    TaskCreate, TaskUpdate, TaskOut, TaskBase, AssignmentOut,
    AssigneesReplace, AssigneeAdd, AssignmentStatusUpdate,
)
from .comment import CommentCreate, CommentUpdate, CommentOut
