# itam/services/activity.py
"""Appending to and reading from the activity log.

Entries are staged on the current session; the caller commits them
together with the change they describe.
"""
import logging
import math
import time
from dataclasses import dataclass, field, asdict
from typing import List, Optional

from itam import db
from itam.errors import InvalidActor, InvalidAction, ValidationError
from itam.models import ActivityLog, ActionType, TargetType, ActivityTarget, User

logger = logging.getLogger(__name__)

def generate_ticket_id(now=None):
    millis = int((time.time() if now is None else now) * 1000)
    return f"AUTO-{millis}"

def parse_id(value, label):
    """Coerce a JSON id (int or numeric string) to int; empty means no id."""
    if value is None or value == '':
        return None
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {label}")
    # 7.0 is an id, 7.9 is not
    if isinstance(value, float) and not value.is_integer():
        raise ValidationError(f"Invalid {label}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {label}")

def resolve_actor(user_id):
    try:
        actor_id = parse_id(user_id, 'performed_by_user_id')
    except ValidationError:
        raise InvalidActor()
    if actor_id is None:
        raise InvalidActor('performed_by_user_id is required')
    actor = db.session.get(User, actor_id)
    if actor is None:
        raise InvalidActor()
    return actor

# Per-action details payloads. Each serialises to a dict with a summary.

@dataclass
class CheckoutDetails:
    asset_tag: str
    assigned_to: str
    assigned_to_type: str
    performed_by: str
    location: Optional[str] = None
    notes: Optional[str] = None

    action = ActionType.ASSET_CHECKOUT

    @property
    def summary(self):
        return f"Checked out to {self.assigned_to}"

@dataclass
class CheckinDetails:
    asset_tag: str
    returned_from: Optional[str]
    performed_by: str
    location: Optional[str] = None

    action = ActionType.ASSET_CHECKIN

    @property
    def summary(self):
        if self.returned_from:
            return f"Checked in from {self.returned_from}"
        return "Checked in"

@dataclass
class TransferDetails:
    asset_tag: str
    transferred_from: Optional[str]
    transferred_to: str
    assigned_to_type: str
    performed_by: str
    location: Optional[str] = None

    action = ActionType.ASSET_TRANSFER

    @property
    def summary(self):
        return f"Transferred from {self.transferred_from or 'None'} to {self.transferred_to}"

@dataclass
class UpdateDetails:
    asset_tag: str
    performed_by: str
    changes: List[str] = field(default_factory=list)
    changed_fields: List[str] = field(default_factory=list)

    action = ActionType.ASSET_UPDATE

    @property
    def summary(self):
        return f"Updated {', '.join(self.changes)}"

def serialize_details(details):
    payload = asdict(details)
    payload['summary'] = details.summary
    return payload

def record_activity(actor, action, target, details, external_ticket_id=None):
    """Stage one audit entry on the session and return it."""
    if actor is None:
        raise InvalidActor()
    if not isinstance(action, ActionType):
        try:
            action = ActionType(action)
        except ValueError:
            raise InvalidAction(f"Unknown activity action: {action}")
    if not isinstance(target, ActivityTarget):
        target = ActivityTarget(TargetType(target[0]), target[1])

    if isinstance(details, dict):
        payload = dict(details)
        if not payload.get('summary'):
            raise ValidationError('Activity details need a summary')
    else:
        if details.action is not action:
            raise ValueError(f"{type(details).__name__} cannot describe {action.value}")
        payload = serialize_details(details)

    entry = ActivityLog(
        user_id=actor.id,
        action_type=action.value,
        target_type=target.kind.value,
        target_id=target.id,
        external_ticket_id=str(external_ticket_id) if external_ticket_id else generate_ticket_id(),
        details=payload
    )
    db.session.add(entry)
    logger.info("Activity %s on %s#%s by user %s (ticket %s)", action.value,
                target.kind.value, target.id, actor.id, entry.external_ticket_id)
    return entry

def get_activity_log(page=1, limit=50, target_type=None, target_id=None,
                     user_id=None, action_type=None):
    query = ActivityLog.query
    if target_type:
        query = query.filter_by(target_type=target_type)
    if target_id:
        query = query.filter_by(target_id=target_id)
    if user_id:
        query = query.filter_by(user_id=user_id)
    if action_type:
        query = query.filter_by(action_type=action_type)

    total = query.count()
    entries = (query.order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc())
               .offset((page - 1) * limit)
               .limit(limit)
               .all())
    return entries, {
        'page': page,
        'limit': limit,
        'total': total,
        'totalPages': math.ceil(total / limit) if limit else 0,
    }
