# itam/routes/activity.py
from flask import current_app, jsonify, request
from itam.models import ActionType, TargetType
from itam.routes import activity_bp as bp
from itam.services.activity import get_activity_log

@bp.route('/')
def list_activity():
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', current_app.config['ACTIVITY_PAGE_SIZE'], type=int)
    target_type = request.args.get('target_type', '')
    action_type = request.args.get('action_type', '')

    if page < 1 or limit < 1:
        return jsonify({'error': 'page and limit must be positive'}), 400
    limit = min(limit, current_app.config['ACTIVITY_PAGE_SIZE_MAX'])

    if target_type and target_type not in [t.value for t in TargetType]:
        return jsonify({'error': f'Unknown target type: {target_type}'}), 400
    if action_type and action_type not in [a.value for a in ActionType]:
        return jsonify({'error': f'Unknown action type: {action_type}'}), 400

    entries, pagination = get_activity_log(
        page=page,
        limit=limit,
        target_type=target_type,
        target_id=request.args.get('target_id', type=int),
        user_id=request.args.get('user_id', type=int),
        action_type=action_type
    )
    return jsonify({'data': [entry.to_dict() for entry in entries], 'pagination': pagination})
