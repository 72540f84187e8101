# itam/routes/assets.py
from flask import current_app, jsonify, request
from itam import db
from itam.errors import AssetError, ValidationError
from itam.models import TargetType
from itam.routes import assets_bp as bp
from itam.services.activity import get_activity_log
from itam.services.assignment import CHECK_OUT, load_asset, perform_assignment
from itam.services.changes import update_asset
from itam.services.notifications import notify_checkout
from itam.services.store import commit_changes

def json_body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError('Request body must be a JSON object')
    return payload

def error_response(error):
    db.session.rollback()
    return jsonify(error.to_dict()), error.status_code

@bp.route('/<int:id>')
def view_asset(id):
    try:
        asset = load_asset(id)
    except AssetError as e:
        return error_response(e)
    return jsonify(asset.to_dict())

@bp.route('/<int:id>', methods=['PUT'])
def edit_asset(id):
    try:
        result = update_asset(id, json_body())
        commit_changes('update asset')
    except AssetError as e:
        return error_response(e)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to update asset %s", id)
        return jsonify({'error': 'Failed to update asset'}), 500

    if result.entry is None:
        current_app.logger.info("Asset %s saved with no field changes, nothing logged", id)
    return jsonify({
        'success': True,
        'message': 'Asset updated successfully',
        'asset': result.asset.to_dict()
    })

@bp.route('/<int:id>/checkout', methods=['POST'])
def checkout_asset(id):
    try:
        payload = json_body()
        result = perform_assignment(id, payload)
        commit_changes(f"{payload.get('action', 'change').replace('_', ' ')} asset")
    except AssetError as e:
        return error_response(e)
    except Exception:
        db.session.rollback()
        current_app.logger.exception("Failed to change assignment of asset %s", id)
        return jsonify({'error': 'Failed to update asset assignment'}), 500

    if payload.get('action') == CHECK_OUT:
        notify_checkout(result.asset, result.assignee)
    return jsonify({'success': True, 'message': result.message})

@bp.route('/<int:id>/activity')
def asset_activity(id):
    entries, _ = get_activity_log(
        target_type=TargetType.ASSET.value,
        target_id=id,
        limit=current_app.config['ACTIVITY_PAGE_SIZE']
    )
    return jsonify([entry.to_dict() for entry in entries])
