# itam/services/status.py
"""Logical status of an asset, derived from who holds it.

The stored status label can drift from reality (an asset left on
"In-Stock" while assigned to someone). Screens and reports use the logical
status so they agree with the assignment fields.
"""
from collections import namedtuple

LogicalStatus = namedtuple('LogicalStatus', ['name', 'variant'])

DEPLOYED = 'Deployed'
AVAILABLE = 'Available'

VARIANT_DEFAULT = 'default'
VARIANT_SECONDARY = 'secondary'
VARIANT_DESTRUCTIVE = 'destructive'
VARIANT_OUTLINE = 'outline'

STATUS_VARIANTS = {
    'active': VARIANT_DEFAULT,
    'deployed': VARIANT_DEFAULT,
    'inactive': VARIANT_SECONDARY,
    'available': VARIANT_SECONDARY,
    'in repair': VARIANT_DESTRUCTIVE,
    'in-repair': VARIANT_DESTRUCTIVE,
    'retired': VARIANT_DESTRUCTIVE,
    'lost': VARIANT_DESTRUCTIVE,
    'lost/stolen': VARIANT_DESTRUCTIVE,
}

def status_variant(status_name):
    if not status_name:
        return VARIANT_OUTLINE
    return STATUS_VARIANTS.get(str(status_name).strip().lower(), VARIANT_OUTLINE)

def resolve_logical_status(is_assigned, status_name):
    stored = '' if status_name is None else str(status_name)
    is_deployed = stored.strip().lower() == DEPLOYED.lower()

    # Any holder means deployed, whatever the label says or how it is spelled
    if is_assigned:
        return LogicalStatus(DEPLOYED, VARIANT_DEFAULT)
    if is_deployed:
        return LogicalStatus(AVAILABLE, VARIANT_SECONDARY)
    return LogicalStatus(stored, status_variant(stored))
