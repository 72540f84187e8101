# itam/models/__init__.py
from itam import db

# Import models after db
from .user import User
from .organization import Department, Location, Supplier
from .status_label import StatusLabel
from .catalog import Manufacturer, Category, AssetModel
from .asset import Asset, AssetRelatedLink
from .activity_log import ActivityLog, ActionType, TargetType, ActivityTarget

__all__ = ['User', 'Department', 'Location', 'Supplier', 'StatusLabel', 'Manufacturer',
    'Category', 'AssetModel', 'Asset', 'AssetRelatedLink', 'ActivityLog', 'ActionType',
    'TargetType', 'ActivityTarget']
