# projecthub/utils/permissions.py
"""
Authorization engine.

Every permission decision goes through ``is_allowed``. The rules live in one
declarative table, ``POLICY``, keyed by ``(entity_kind, action)``. Each entry
lists the relationships that grant the action, optionally limited to an
allow-list of mutable fields. Admins short-circuit the table entirely.

Pure logic: no database access, no side effects. ``authorize`` is the raising
wrapper the services call before touching any row.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Set, Tuple

from projecthub.errors import Forbidden
from projecthub.models import Comment, Project, Task, User, UserRole
from projecthub.utils.security_logger import log_access_denied


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as handed over by the auth layer"""
    id: int
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_manager(self) -> bool:
        return self.role == UserRole.MANAGER

    @classmethod
    def from_user(cls, user: User) -> "Identity":
        return cls(id=user.id, role=UserRole(user.role))


class Action(str, Enum):
    VIEW = "view"
    LIST = "list"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    MOVE = "move"
    ASSIGN = "assign"
    MANAGE_TEAM = "manage_team"
    SET_ASSIGNMENT_STATUS = "set_assignment_status"


class Relation(str, Enum):
    ANY = "any"
    GLOBAL_MANAGER = "global_manager"
    SELF = "self"
    PROJECT_MANAGER = "project_manager"
    TASK_CREATOR = "task_creator"
    TASK_ASSIGNEE = "task_assignee"
    AUTHOR = "author"


@dataclass(frozen=True)
class Rule:
    relation: Relation
    # None means every field may be touched
    fields: Optional[FrozenSet[str]] = None

    def permits(self, requested: Optional[Set[str]]) -> bool:
        if self.fields is None or not requested:
            return True
        return requested <= self.fields


ASSIGNEE_TASK_FIELDS = frozenset({"status", "actual_hours"})
SELF_PROFILE_FIELDS = frozenset({"username", "email", "password"})

POLICY: Dict[Tuple[str, Action], Tuple[Rule, ...]] = {
    # Users
    ("user", Action.LIST): (Rule(Relation.GLOBAL_MANAGER),),
    ("user", Action.VIEW): (Rule(Relation.GLOBAL_MANAGER), Rule(Relation.SELF)),
    ("user", Action.CREATE): (),
    ("user", Action.UPDATE): (Rule(Relation.SELF, SELF_PROFILE_FIELDS),),
    ("user", Action.DELETE): (),
    # Projects
    ("project", Action.VIEW): (Rule(Relation.ANY),),
    ("project", Action.CREATE): (Rule(Relation.GLOBAL_MANAGER),),
    ("project", Action.UPDATE): (Rule(Relation.PROJECT_MANAGER),),
    ("project", Action.DELETE): (Rule(Relation.PROJECT_MANAGER),),
    ("project", Action.MANAGE_TEAM): (Rule(Relation.GLOBAL_MANAGER), Rule(Relation.PROJECT_MANAGER)),
    # Tasks; CREATE and MOVE are evaluated against the (destination) project
    ("task", Action.VIEW): (Rule(Relation.ANY),),
    ("task", Action.CREATE): (Rule(Relation.GLOBAL_MANAGER), Rule(Relation.PROJECT_MANAGER)),
    ("task", Action.UPDATE): (
        Rule(Relation.PROJECT_MANAGER),
        Rule(Relation.TASK_CREATOR),
        Rule(Relation.TASK_ASSIGNEE, ASSIGNEE_TASK_FIELDS),
    ),
    ("task", Action.DELETE): (Rule(Relation.PROJECT_MANAGER), Rule(Relation.TASK_CREATOR)),
    ("task", Action.MOVE): (Rule(Relation.PROJECT_MANAGER),),
    ("task", Action.ASSIGN): (
        Rule(Relation.GLOBAL_MANAGER),
        Rule(Relation.PROJECT_MANAGER),
        Rule(Relation.TASK_CREATOR),
    ),
    # The ledger then insists on the caller's own assignment
    ("task", Action.SET_ASSIGNMENT_STATUS): (Rule(Relation.ANY),),
    # Comments; CREATE and VIEW are evaluated against the task
    ("comment", Action.VIEW): (Rule(Relation.ANY),),
    ("comment", Action.CREATE): (Rule(Relation.ANY),),
    ("comment", Action.UPDATE): (Rule(Relation.AUTHOR), Rule(Relation.GLOBAL_MANAGER)),
    ("comment", Action.DELETE): (Rule(Relation.AUTHOR), Rule(Relation.GLOBAL_MANAGER)),
}

_KIND_BY_MODEL = {
    User: "user",
    Project: "project",
    Task: "task",
    Comment: "comment",
}


def entity_kind_of(target: Any) -> str:
    for model, kind in _KIND_BY_MODEL.items():
        if isinstance(target, model):
            return kind
    raise TypeError(f"No authorization rules for {type(target).__name__}")


def relations_for(identity: Identity, target: Any) -> Set[Relation]:
    """Relationships the caller holds towards ``target``"""
    relations = {Relation.ANY}
    if identity.is_manager:
        relations.add(Relation.GLOBAL_MANAGER)

    if isinstance(target, User):
        if target.id == identity.id:
            relations.add(Relation.SELF)
    elif isinstance(target, Project):
        if target.manager_id == identity.id:
            relations.add(Relation.PROJECT_MANAGER)
    elif isinstance(target, Task):
        if target.project is not None and target.project.manager_id == identity.id:
            relations.add(Relation.PROJECT_MANAGER)
        if target.creator_id == identity.id:
            relations.add(Relation.TASK_CREATOR)
        if any(assignment.user_id == identity.id for assignment in target.assignments):
            relations.add(Relation.TASK_ASSIGNEE)
    elif isinstance(target, Comment):
        if target.user_id == identity.id:
            relations.add(Relation.AUTHOR)
    return relations


def is_allowed(
    identity: Identity,
    action: Action,
    target: Any = None,
    *,
    kind: Optional[str] = None,
    fields: Optional[Iterable[str]] = None,
) -> bool:
    """
    Decide whether ``identity`` may perform ``action``.

    ``kind`` defaults to the kind of ``target``; pass it explicitly when the
    target is the parent entity (task creation checks the project). ``fields``
    are the keys present in an update request; a rule with an allow-list only
    grants the action when every requested field is on it.
    """
    if identity.is_admin:
        return True

    entity_kind = kind or entity_kind_of(target)
    rules = POLICY.get((entity_kind, Action(action)), ())
    if not rules:
        return False

    held = relations_for(identity, target) if target is not None else _role_relations(identity)
    requested = set(fields) if fields is not None else None
    return any(rule.relation in held and rule.permits(requested) for rule in rules)


def _role_relations(identity: Identity) -> Set[Relation]:
    relations = {Relation.ANY}
    if identity.is_manager:
        relations.add(Relation.GLOBAL_MANAGER)
    return relations


def authorize(
    identity: Identity,
    action: Action,
    target: Any = None,
    *,
    kind: Optional[str] = None,
    fields: Optional[Iterable[str]] = None,
    message: Optional[str] = None,
) -> None:
    """Raise ``Forbidden`` unless ``is_allowed`` approves the action"""
    if is_allowed(identity, action, target, kind=kind, fields=fields):
        return

    entity_kind = kind or entity_kind_of(target)
    entity_id = getattr(target, "id", None)
    log_access_denied(identity.id, identity.role.value, Action(action).value, entity_kind, entity_id)
    raise Forbidden(Action(action).value, entity_kind, entity_id, message=message)


def restricted_fields(identity: Identity, action: Action, target: Any) -> Optional[FrozenSet[str]]:
    """
    The field allow-list that applies to the caller, or None when unrestricted.

    Used to build helpful denial messages, e.g. for assignees editing a task.
    """
    if identity.is_admin:
        return None
    held = relations_for(identity, target)
    allow_lists = []
    for rule in POLICY.get((entity_kind_of(target), Action(action)), ()):
        if rule.relation in held:
            if rule.fields is None:
                return None
            allow_lists.append(rule.fields)
    if not allow_lists:
        return frozenset()
    return frozenset().union(*allow_lists)
