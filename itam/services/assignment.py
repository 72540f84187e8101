# itam/services/assignment.py
"""Check-out, check-in and transfer of assets.

Each operation validates the performing user, rewrites the assignment
fields (and status label where the operation implies one) and stages a
matching activity entry. Nothing is committed here.
"""
from collections import namedtuple
from datetime import datetime

from flask import current_app

from itam import db
from itam.errors import ConfigurationMissing, InvalidAction, NotFound, ValidationError
from itam.models import Asset, ActionType, ActivityTarget, Department, Location, StatusLabel, TargetType, User
from itam.services.activity import (CheckinDetails, CheckoutDetails, TransferDetails,
                                    parse_id, record_activity, resolve_actor)

AssignmentResult = namedtuple('AssignmentResult', ['asset', 'entry', 'message', 'assignee'])

CHECK_OUT = 'check_out'
CHECK_IN = 'check_in'
TRANSFER = 'transfer'

def required_status(name):
    label = StatusLabel.find_by_name(name)
    if label is None:
        raise ConfigurationMissing(f"Status label '{name}' is not configured")
    return label

def load_asset(asset_id):
    asset = db.session.get(Asset, asset_id)
    if asset is None:
        raise NotFound('Asset not found')
    return asset

def _lookup(model, value, label):
    record_id = parse_id(value, f"{label.lower()}_id")
    if record_id is None:
        return None
    record = db.session.get(model, record_id)
    if record is None:
        raise NotFound(f"{label} not found")
    return record

def resolve_target(user_id=None, department_id=None, location_id=None):
    user = _lookup(User, user_id, 'User')
    department = _lookup(Department, department_id, 'Department')
    location = _lookup(Location, location_id, 'Location')

    if user is None and department is None:
        raise ValidationError('A user or department to assign the asset to is required')
    if user is not None and not user.is_active:
        raise ValidationError('Cannot assign asset to inactive user')
    return user, department, location

def _assign(asset, user, department, location):
    asset.assigned_to_user = user
    asset.department = department
    asset.location = location
    asset.updated_at = datetime.utcnow()

def _asset_target(asset):
    return ActivityTarget(TargetType.ASSET, asset.id)

def check_out(asset_id, performed_by_user_id, user_id=None, department_id=None,
              location_id=None, notes=None, external_ticket_id=None):
    actor = resolve_actor(performed_by_user_id)
    deployed = required_status(current_app.config['DEPLOYED_STATUS'])
    asset = load_asset(asset_id)
    user, department, location = resolve_target(user_id, department_id, location_id)

    _assign(asset, user, department, location)
    asset.status = deployed
    if notes:
        asset.notes = f"{asset.notes or ''}\n[Checkout] {notes}".strip()

    assigned_to = user.full_name if user else department.name
    details = CheckoutDetails(
        asset_tag=asset.asset_tag,
        assigned_to=assigned_to,
        assigned_to_type='user' if user else 'department',
        performed_by=actor.full_name,
        location=location.name if location else None,
        notes=notes or None
    )
    entry = record_activity(actor, ActionType.ASSET_CHECKOUT, _asset_target(asset),
                            details, external_ticket_id)
    return AssignmentResult(asset, entry, f"Asset {asset.asset_tag} checked out to {assigned_to}", user)

def check_in(asset_id, performed_by_user_id, external_ticket_id=None):
    actor = resolve_actor(performed_by_user_id)
    in_stock = required_status(current_app.config['IN_STOCK_STATUS'])
    asset = load_asset(asset_id)

    returned_from = asset.assignee_name
    # Location stays: the asset is still physically somewhere
    asset.assigned_to_user = None
    asset.department = None
    asset.status = in_stock
    asset.updated_at = datetime.utcnow()

    details = CheckinDetails(
        asset_tag=asset.asset_tag,
        returned_from=returned_from,
        performed_by=actor.full_name,
        location=asset.location.name if asset.location else None
    )
    entry = record_activity(actor, ActionType.ASSET_CHECKIN, _asset_target(asset),
                            details, external_ticket_id)
    return AssignmentResult(asset, entry, f"Asset {asset.asset_tag} checked in", None)

def transfer(asset_id, performed_by_user_id, user_id=None, department_id=None,
             location_id=None, external_ticket_id=None):
    actor = resolve_actor(performed_by_user_id)
    asset = load_asset(asset_id)
    user, department, location = resolve_target(user_id, department_id, location_id)

    transferred_from = asset.assignee_name
    _assign(asset, user, department, location)

    transferred_to = user.full_name if user else department.name
    details = TransferDetails(
        asset_tag=asset.asset_tag,
        transferred_from=transferred_from,
        transferred_to=transferred_to,
        assigned_to_type='user' if user else 'department',
        performed_by=actor.full_name,
        location=location.name if location else None
    )
    entry = record_activity(actor, ActionType.ASSET_TRANSFER, _asset_target(asset),
                            details, external_ticket_id)
    return AssignmentResult(asset, entry, f"Asset {asset.asset_tag} transferred to {transferred_to}", user)

def perform_assignment(asset_id, payload):
    """Dispatch a checkout request body to the matching operation."""
    action = payload.get('action')
    common = {
        'performed_by_user_id': payload.get('performed_by_user_id'),
        'external_ticket_id': payload.get('external_ticket_id') or None,
    }
    target = {
        'user_id': payload.get('user_id'),
        'department_id': payload.get('department_id'),
        'location_id': payload.get('location_id'),
    }

    if action == CHECK_OUT:
        return check_out(asset_id, notes=payload.get('notes'), **common, **target)
    if action == CHECK_IN:
        return check_in(asset_id, **common)
    if action == TRANSFER:
        return transfer(asset_id, **common, **target)
    raise InvalidAction(f"Invalid action: {action}")
