"""
Moderation lifecycle of a blog submission.

All legal moves live in TRANSITIONS; anything not listed there is an
InvalidTransitionError whoever asks. A listed move attempted by the wrong
kind of actor is an AuthorizationError.

    (none)   --create_draft------> draft       author
    (none)   --create_and_submit-> pending     author
    draft    --save_draft--------> draft       author
    draft    --submit------------> pending     author
    rejected --resubmit----------> pending     author  (feedback cleared)
    pending  --approve-----------> approved    admin   (published_at set, feedback cleared)
    pending  --reject------------> rejected    admin   (feedback stored)
    approved --hide--------------> hidden      admin
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from core.errors import AuthorizationError, InvalidTransitionError


class Status(str, Enum):
    DRAFT = 'draft'
    PENDING = 'pending'
    APPROVED = 'approved'
    REJECTED = 'rejected'
    HIDDEN = 'hidden'


class Action(str, Enum):
    CREATE_DRAFT = 'create_draft'
    CREATE_AND_SUBMIT = 'create_and_submit'
    SAVE_DRAFT = 'save_draft'
    SUBMIT = 'submit'
    RESUBMIT = 'resubmit'
    APPROVE = 'approve'
    REJECT = 'reject'
    HIDE = 'hide'


AUTHOR = 'author'
ADMIN = 'admin'

# (from, action) -> (to, role allowed to perform it)
TRANSITIONS = {
    (None, Action.CREATE_DRAFT): (Status.DRAFT, AUTHOR),
    (None, Action.CREATE_AND_SUBMIT): (Status.PENDING, AUTHOR),
    (Status.DRAFT, Action.SAVE_DRAFT): (Status.DRAFT, AUTHOR),
    (Status.DRAFT, Action.SUBMIT): (Status.PENDING, AUTHOR),
    (Status.REJECTED, Action.RESUBMIT): (Status.PENDING, AUTHOR),
    (Status.PENDING, Action.APPROVE): (Status.APPROVED, ADMIN),
    (Status.PENDING, Action.REJECT): (Status.REJECTED, ADMIN),
    (Status.APPROVED, Action.HIDE): (Status.HIDDEN, ADMIN),
}


@dataclass(frozen=True)
class Actor:
    is_author: bool = False
    is_admin: bool = False

    @classmethod
    def for_blog(cls, profile, blog=None):
        """Actor for a profile acting on blog (None when creating one)."""
        if profile is None:
            return cls()
        is_author = blog is None or blog.get('author_id') == profile['id']
        return cls(is_author=is_author, is_admin=bool(profile.get('is_admin')))

    def has_role(self, role):
        return self.is_admin if role == ADMIN else self.is_author


@dataclass
class Transition:
    new_status: Status
    side_effects: dict = field(default_factory=dict)

    def as_patch(self):
        patch = {'status': self.new_status.value}
        patch.update(self.side_effects)
        return patch


def _coerce(current, action):
    status = Status(current) if current is not None else None
    return status, Action(action)


def can_transition(current, actor, action):
    try:
        status, action = _coerce(current, action)
    except ValueError:
        return False
    rule = TRANSITIONS.get((status, action))
    return rule is not None and actor.has_role(rule[1])


def apply_transition(current, action, actor, feedback=None, now=None):
    """
    Validates the move and returns the resulting status plus the fields the
    store must write alongside it.
    """
    try:
        status, action = _coerce(current, action)
    except ValueError:
        raise InvalidTransitionError(f"Unknown status or action: {current!r}, {action!r}")

    rule = TRANSITIONS.get((status, action))
    if rule is None:
        source = status.value if status else 'new'
        raise InvalidTransitionError(f"Cannot {action.value} a {source} blog")

    new_status, role = rule
    if not actor.has_role(role):
        if role == ADMIN:
            raise AuthorizationError(f"Only administrators can {action.value} blogs")
        raise AuthorizationError(f"Only the author can {action.value} this blog")

    side_effects = {}
    if action == Action.APPROVE:
        now = now or datetime.now(timezone.utc)
        side_effects['published_at'] = now.isoformat()
        side_effects['admin_feedback'] = ''
    elif action == Action.REJECT:
        side_effects['admin_feedback'] = (feedback or '').strip()
    elif action == Action.RESUBMIT:
        side_effects['admin_feedback'] = ''

    return Transition(new_status, side_effects)
