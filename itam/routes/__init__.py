# itam/routes/__init__.py
from flask import Blueprint

# Create blueprints
assets_bp = Blueprint('assets', __name__, url_prefix='/assets')
activity_bp = Blueprint('activity', __name__, url_prefix='/activity')

# Import views after blueprints are created
from . import assets, activity
