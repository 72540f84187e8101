# itam/models/activity_log.py
from collections import namedtuple
from datetime import datetime
from enum import Enum
from sqlalchemy import event
from itam import db
from itam.errors import ImmutableRecord

class ActionType(Enum):
    # User actions
    USER_CREATE = "USER_CREATE"
    USER_UPDATE = "USER_UPDATE"
    USER_DEACTIVATE = "USER_DEACTIVATE"
    USER_ACCESS_GRANT = "USER_ACCESS_GRANT"
    USER_ACCESS_REVOKE = "USER_ACCESS_REVOKE"

    # Asset actions
    ASSET_CREATE = "ASSET_CREATE"
    ASSET_UPDATE = "ASSET_UPDATE"
    ASSET_CHECKOUT = "ASSET_CHECKOUT"
    ASSET_CHECKIN = "ASSET_CHECKIN"
    ASSET_TRANSFER = "ASSET_TRANSFER"
    ASSET_DELETE = "ASSET_DELETE"
    ASSET_VERIFY = "ASSET_VERIFY"

    # License actions
    LICENSE_CREATE = "LICENSE_CREATE"
    LICENSE_UPDATE = "LICENSE_UPDATE"
    LICENSE_ASSIGN = "LICENSE_ASSIGN"
    LICENSE_UNASSIGN = "LICENSE_UNASSIGN"
    LICENSE_DELETE = "LICENSE_DELETE"

    # Workflow actions
    WORKFLOW_START = "WORKFLOW_START"
    WORKFLOW_COMPLETE = "WORKFLOW_COMPLETE"
    WORKFLOW_TASK_COMPLETE = "WORKFLOW_TASK_COMPLETE"

    # CMDB actions
    CI_CREATE = "CI_CREATE"
    CI_UPDATE = "CI_UPDATE"
    CI_RELATE = "CI_RELATE"
    CI_UNRELATE = "CI_UNRELATE"
    CI_DELETE = "CI_DELETE"

class TargetType(Enum):
    ASSET = "Asset"
    USER = "User"
    LICENSE = "License"

ActivityTarget = namedtuple('ActivityTarget', ['kind', 'id'])

class ActivityLog(db.Model):
    """Append-only audit trail. Rows are written once and never changed."""
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    action_type = db.Column(db.String(50), nullable=False, index=True)
    target_id = db.Column(db.Integer, nullable=False)
    target_type = db.Column(db.String(50), nullable=False)
    external_ticket_id = db.Column(db.String(100), nullable=False)
    details = db.Column(db.JSON, nullable=False, default=dict)
    timestamp = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (db.Index('ix_activity_log_target', 'target_type', 'target_id'),)

    @property
    def action(self):
        return ActionType(self.action_type)

    @property
    def target(self):
        return ActivityTarget(TargetType(self.target_type), self.target_id)

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'action_type': self.action_type,
            'target_id': self.target_id,
            'target_type': self.target_type,
            'external_ticket_id': self.external_ticket_id,
            'details': self.details or {},
            'timestamp': self.timestamp.isoformat(),
            'user': {
                'first_name': self.user.first_name,
                'last_name': self.user.last_name,
                'email': self.user.email,
            } if self.user else None,
        }

    def __repr__(self):
        return f"ActivityLog('{self.action_type}', {self.target_type}#{self.target_id}, '{self.timestamp}')"

@event.listens_for(ActivityLog, 'before_update')
def reject_activity_update(mapper, connection, target):
    raise ImmutableRecord(f"Activity log entry {target.id} cannot be modified")

@event.listens_for(ActivityLog, 'before_delete')
def reject_activity_delete(mapper, connection, target):
    raise ImmutableRecord(f"Activity log entry {target.id} cannot be deleted")
