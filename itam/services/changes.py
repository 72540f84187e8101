# itam/services/changes.py
"""Field-level asset updates.

An update payload may carry any subset of the editable fields. Each supplied
field is normalised and compared with the stored value; only real
differences end up in the change list, and an update with no differences
is saved without an activity entry.
"""
from collections import namedtuple
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from itam import db
from itam.errors import ValidationError, NotFound
from itam.models import (Asset, AssetModel, AssetRelatedLink, ActionType, ActivityTarget,
                         Category, Department, Location, Manufacturer, StatusLabel,
                         Supplier, TargetType, User)
from itam.models.asset import normalize_asset_tag
from itam.services.activity import UpdateDetails, parse_id, record_activity, resolve_actor
from itam.services.assignment import load_asset

STRING = 'string'
TAG = 'tag'
DECIMAL = 'decimal'
INTEGER = 'integer'
DATE = 'date'
REFERENCE = 'reference'

EMPTY_DISPLAY = 'None'

# Scale of the purchase_cost column
CENTS = Decimal('0.01')

FieldSpec = namedtuple('FieldSpec', ['name', 'label', 'kind', 'model'])
FieldSpec.__new__.__defaults__ = (None,)

UPDATABLE_FIELDS = [
    FieldSpec('asset_tag', 'Asset Tag', TAG),
    FieldSpec('device_name', 'Device Name', STRING),
    FieldSpec('serial_number', 'Serial Number', STRING),
    FieldSpec('status_id', 'Status', REFERENCE, StatusLabel),
    FieldSpec('assigned_to_user_id', 'Assigned To', REFERENCE, User),
    FieldSpec('department_id', 'Department', REFERENCE, Department),
    FieldSpec('location_id', 'Location', REFERENCE, Location),
    FieldSpec('supplier_id', 'Supplier', REFERENCE, Supplier),
    FieldSpec('purchase_date', 'Purchase Date', DATE),
    FieldSpec('purchase_cost', 'Purchase Cost', DECIMAL),
    FieldSpec('warranty_expiry_date', 'Warranty Expiry', DATE),
    FieldSpec('notes', 'Notes', STRING),
    FieldSpec('cpu', 'CPU', STRING),
    FieldSpec('ram_gb', 'RAM (GB)', INTEGER),
    FieldSpec('storage_type', 'Storage Type', STRING),
    FieldSpec('storage_size_gb', 'Storage (GB)', INTEGER),
    FieldSpec('operating_system', 'Operating System', STRING),
]

# Any of these in a payload means the asset's model may have changed
MODEL_FIELDS = ('manufacturer_id', 'category_id', 'model_name', 'model_number')

# Fields a row cannot do without
REQUIRED_REFERENCES = ('status_id',)

ChangeSet = namedtuple('ChangeSet', ['changes', 'changed_fields', 'values'])
UpdateResult = namedtuple('UpdateResult', ['asset', 'entry', 'changes', 'changed_fields'])


def _is_empty(value):
    return value is None or (isinstance(value, str) and value.strip() == '')

def normalize_string(value):
    if _is_empty(value):
        return None
    return str(value)

def normalize_decimal(value, label):
    if _is_empty(value):
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{label} must be a number")
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"{label} must be a number")
    if not number.is_finite():
        raise ValidationError(f"{label} must be a number")
    return number

def normalize_money(value, label):
    number = normalize_decimal(value, label)
    if number is None:
        return None
    # Compare at the precision the column keeps
    try:
        return number.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"{label} is too large")

def normalize_integer(value, label):
    number = normalize_decimal(value, label)
    if number is None:
        return None
    if number != number.to_integral_value():
        raise ValidationError(f"{label} must be a whole number")
    return int(number)

def normalize_date(value, label):
    if _is_empty(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # Accept plain dates and full ISO timestamps; only the calendar day is kept
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        raise ValidationError(f"{label} must be a date (YYYY-MM-DD)")

def normalize(field, value):
    if field.kind == TAG:
        if _is_empty(value):
            raise ValidationError(f"{field.label} is required")
        return normalize_asset_tag(value)
    if field.kind == DECIMAL:
        return normalize_money(value, field.label)
    if field.kind == INTEGER:
        return normalize_integer(value, field.label)
    if field.kind == DATE:
        return normalize_date(value, field.label)
    if field.kind == REFERENCE:
        return parse_id(value, field.name)
    return normalize_string(value)

def display_name(record):
    if record is None:
        return None
    if isinstance(record, User):
        return record.full_name
    return record.name

def display_value(field, value):
    if value is None:
        return EMPTY_DISPLAY
    if field.kind == DECIMAL:
        return f"{value:.2f}"
    if field.kind == DATE:
        return value.isoformat()
    return str(value)

def describe_change(label, old_display, new_display):
    return f'{label}: "{old_display or EMPTY_DISPLAY}" → "{new_display or EMPTY_DISPLAY}"'


def _compare_reference(field, asset, new_id):
    old_id = getattr(asset, field.name)
    if old_id == new_id:
        return None
    if new_id is None and field.name in REQUIRED_REFERENCES:
        raise ValidationError(f"{field.label} is required")

    new_record = None
    if new_id is not None:
        new_record = db.session.get(field.model, new_id)
        if new_record is None:
            raise NotFound(f"{field.label} not found")
    old_record = db.session.get(field.model, old_id) if old_id is not None else None
    return describe_change(field.label, display_name(old_record), display_name(new_record))

def _compare_scalar(field, asset, new_value):
    old_value = normalize(field, getattr(asset, field.name))
    if old_value == new_value:
        return None
    if field.kind == TAG:
        clash = Asset.query.filter(Asset.asset_tag == new_value, Asset.id != asset.id).first()
        if clash is not None:
            raise ValidationError(f"Asset tag {new_value} is already in use")
    return describe_change(field.label, display_value(field, old_value), display_value(field, new_value))

def resolve_model(asset, payload):
    """Find or create the AssetModel the payload describes, or None if it names no complete model."""
    if not any(payload.get(name) for name in MODEL_FIELDS):
        return None

    current = asset.model
    manufacturer_id = parse_id(payload.get('manufacturer_id'), 'manufacturer_id')
    category_id = parse_id(payload.get('category_id'), 'category_id')
    if manufacturer_id is None and current is not None:
        manufacturer_id = current.manufacturer_id
    if category_id is None and current is not None:
        category_id = current.category_id
    if manufacturer_id is None or category_id is None:
        return None

    if db.session.get(Manufacturer, manufacturer_id) is None:
        raise NotFound('Manufacturer not found')
    if db.session.get(Category, category_id) is None:
        raise NotFound('Category not found')

    model_name = normalize_string(payload.get('model_name'))
    model_number = normalize_string(payload.get('model_number'))
    if model_name is None:
        model_name = current.name if current is not None else 'Unknown Model'
    if model_number is None:
        if current is not None and model_name == current.name:
            model_number = current.model_number
        else:
            model_number = model_name

    return AssetModel.find_or_create(model_name, model_number, manufacturer_id, category_id)

def diff_asset(asset, payload):
    """Compare a payload with the stored asset.

    Returns a ChangeSet: human-readable change lines, the names of the
    changed fields, and the normalised values to write for them.
    """
    changes = []
    changed_fields = []
    values = {}

    for field in UPDATABLE_FIELDS:
        if field.name not in payload:
            continue
        new_value = normalize(field, payload[field.name])
        if field.kind == REFERENCE:
            line = _compare_reference(field, asset, new_value)
        else:
            line = _compare_scalar(field, asset, new_value)
        if line is None:
            continue
        changes.append(line)
        changed_fields.append(field.name)
        values[field.name] = new_value

    model = resolve_model(asset, payload)
    if model is not None and model.id != asset.model_id:
        old_name = asset.model.name if asset.model else None
        changes.append(describe_change('Model', old_name, model.name))
        changed_fields.append('model_id')
        values['model_id'] = model.id

    return ChangeSet(changes, changed_fields, values)

def build_change_list(asset, payload):
    changeset = diff_asset(asset, payload)
    return changeset.changes, changeset.changed_fields

def parse_related_links(links):
    if not isinstance(links, list):
        raise ValidationError('related_links must be a list')
    parsed = []
    for link in links:
        if not isinstance(link, dict):
            raise ValidationError('Each related link must be an object')
        missing = [key for key in ('link_type', 'title', 'url') if _is_empty(link.get(key))]
        if missing:
            raise ValidationError(f"Related link is missing {', '.join(missing)}")
        parsed.append({
            'link_type': str(link['link_type']),
            'title': str(link['title']),
            'url': str(link['url']),
            'description': normalize_string(link.get('description')),
        })
    return parsed

def replace_related_links(asset, links):
    # delete-orphan cascade removes the links that drop out of the collection
    asset.related_links = [AssetRelatedLink(**link) for link in links]

def update_asset(asset_id, payload):
    actor = resolve_actor(payload.get('performed_by_user_id'))
    asset = load_asset(asset_id)

    links = None
    if payload.get('related_links') is not None:
        links = parse_related_links(payload['related_links'])

    changeset = diff_asset(asset, payload)
    for name, value in changeset.values.items():
        setattr(asset, name, value)
    if links is not None:
        replace_related_links(asset, links)

    entry = None
    if changeset.changes:
        asset.updated_at = datetime.utcnow()
        details = UpdateDetails(
            asset_tag=asset.asset_tag,
            performed_by=actor.full_name,
            changes=changeset.changes,
            changed_fields=changeset.changed_fields
        )
        entry = record_activity(actor, ActionType.ASSET_UPDATE, ActivityTarget(TargetType.ASSET, asset.id),
                                details, payload.get('external_ticket_id'))
    return UpdateResult(asset, entry, changeset.changes, changeset.changed_fields)
