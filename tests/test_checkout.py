import pytest

from itam import mail
from itam.models import ActivityLog, Asset


def checkout(client, asset_id, **body):
    return client.post(f'/assets/{asset_id}/checkout', json=body)


def test_check_out_to_user(client, db, seed):
    asset = seed.asset
    response = checkout(client, asset.id, action='check_out', user_id=seed.jane.id,
                        location_id=seed.hq.id, performed_by_user_id=seed.admin.id)

    assert response.status_code == 200
    assert response.json['success'] is True
    assert 'Jane Doe' in response.json['message']

    db.session.refresh(asset)
    assert asset.assigned_to_user_id == seed.jane.id
    assert asset.department_id is None
    assert asset.location_id == seed.hq.id
    assert asset.status.name == 'Deployed'

    entries = ActivityLog.query.all()
    assert len(entries) == 1
    entry = entries[0]
    assert entry.action_type == 'ASSET_CHECKOUT'
    assert entry.target_type == 'Asset'
    assert entry.target_id == asset.id
    assert entry.user_id == seed.admin.id
    assert 'Jane Doe' in entry.details['assigned_to']
    assert entry.details['performed_by'] == 'Ada Admin'
    assert entry.details['summary'] == 'Checked out to Jane Doe'
    assert entry.external_ticket_id.startswith('AUTO-')
    assert entry.external_ticket_id[len('AUTO-'):].isdigit()


def test_check_out_to_department(client, db, seed):
    asset = seed.asset
    response = checkout(client, asset.id, action='check_out', department_id=seed.finance.id,
                        performed_by_user_id=seed.admin.id)

    assert response.status_code == 200
    db.session.refresh(asset)
    assert asset.assigned_to_user_id is None
    assert asset.department_id == seed.finance.id
    # Omitted location is cleared
    assert asset.location_id is None

    entry = ActivityLog.query.one()
    assert entry.details['assigned_to'] == 'Finance'
    assert entry.details['assigned_to_type'] == 'department'


def test_check_out_requires_a_target(client, db, seed):
    response = checkout(client, seed.asset.id, action='check_out', location_id=seed.hq.id,
                        performed_by_user_id=seed.admin.id)
    assert response.status_code == 400
    assert 'error' in response.json
    assert ActivityLog.query.count() == 0


def test_check_out_refuses_inactive_user(client, db, seed):
    response = checkout(client, seed.asset.id, action='check_out', user_id=seed.carl.id,
                        performed_by_user_id=seed.admin.id)
    assert response.status_code == 400
    assert response.json['error'] == 'Cannot assign asset to inactive user'
    db.session.refresh(seed.asset)
    assert seed.asset.assigned_to_user_id is None


def test_check_out_unknown_assignee(client, db, seed):
    response = checkout(client, seed.asset.id, action='check_out', user_id=999,
                        performed_by_user_id=seed.admin.id)
    assert response.status_code == 404
    assert response.json['error'] == 'User not found'


def test_check_out_uses_supplied_ticket_and_appends_notes(client, db, seed):
    response = checkout(client, seed.asset.id, action='check_out', user_id=seed.jane.id,
                        performed_by_user_id=seed.admin.id, external_ticket_id='INC-4711',
                        notes='Replacement laptop')
    assert response.status_code == 200

    entry = ActivityLog.query.one()
    assert entry.external_ticket_id == 'INC-4711'
    assert entry.details['notes'] == 'Replacement laptop'
    db.session.refresh(seed.asset)
    assert seed.asset.notes == 'A\n[Checkout] Replacement laptop'


def test_check_in_clears_assignment_and_keeps_location(client, db, seed):
    asset = seed.asset
    asset.assigned_to_user = seed.jane
    asset.department = seed.it_dept
    asset.location = seed.hq
    asset.status = seed.deployed
    db.session.commit()

    response = checkout(client, asset.id, action='check_in', performed_by_user_id=seed.admin.id)
    assert response.status_code == 200

    db.session.refresh(asset)
    assert asset.assigned_to_user_id is None
    assert asset.department_id is None
    assert asset.location_id == seed.hq.id
    assert asset.status.name == 'In-Stock'

    entry = ActivityLog.query.one()
    assert entry.action_type == 'ASSET_CHECKIN'
    assert entry.details['returned_from'] == 'Jane Doe'
    assert entry.details['location'] == 'Headquarters'


def test_check_out_then_check_in_round_trip(client, db, seed):
    asset = seed.asset
    before = (asset.asset_tag, asset.model_id, asset.serial_number)

    checkout(client, asset.id, action='check_out', user_id=seed.jane.id,
             department_id=seed.it_dept.id, performed_by_user_id=seed.admin.id)
    checkout(client, asset.id, action='check_in', performed_by_user_id=seed.admin.id)

    db.session.refresh(asset)
    assert asset.assigned_to_user_id is None
    assert asset.department_id is None
    assert (asset.asset_tag, asset.model_id, asset.serial_number) == before
    assert [e.action_type for e in ActivityLog.query.order_by(ActivityLog.id)] == \
        ['ASSET_CHECKOUT', 'ASSET_CHECKIN']


def test_transfer_records_previous_holder(client, db, seed):
    asset = seed.asset
    asset.assigned_to_user = seed.jane
    asset.status = seed.in_repair
    db.session.commit()

    response = checkout(client, asset.id, action='transfer', user_id=seed.bob.id,
                        location_id=seed.hq.id, performed_by_user_id=seed.admin.id)
    assert response.status_code == 200

    db.session.refresh(asset)
    assert asset.assigned_to_user_id == seed.bob.id
    assert asset.location_id == seed.hq.id
    # Transfer leaves the stored label alone
    assert asset.status.name == 'In-Repair'

    entry = ActivityLog.query.one()
    assert entry.action_type == 'ASSET_TRANSFER'
    assert entry.details['transferred_from'] == 'Jane Doe'
    assert entry.details['transferred_to'] == 'Bob Stone'
    assert entry.details['summary'] == 'Transferred from Jane Doe to Bob Stone'


def test_transfer_of_missing_asset(client, seed):
    response = checkout(client, 999, action='transfer', user_id=seed.bob.id,
                        performed_by_user_id=seed.admin.id)
    assert response.status_code == 404
    assert response.json['error'] == 'Asset not found'


def test_invalid_actor_changes_nothing(client, db, seed):
    asset = seed.asset
    response = checkout(client, asset.id, action='check_out', user_id=seed.jane.id,
                        performed_by_user_id=999)
    assert response.status_code == 400
    assert 'error' in response.json

    db.session.refresh(asset)
    assert asset.assigned_to_user_id is None
    assert asset.status.name == 'In-Stock'
    assert ActivityLog.query.count() == 0


def test_missing_actor_is_rejected(client, seed):
    response = checkout(client, seed.asset.id, action='check_in')
    assert response.status_code == 400
    assert response.json['error'] == 'performed_by_user_id is required'


def test_unknown_action(client, seed):
    response = checkout(client, seed.asset.id, action='borrow', performed_by_user_id=seed.admin.id)
    assert response.status_code == 400
    assert response.json['error'] == 'Invalid action: borrow'


def test_non_object_body(client, seed):
    response = client.post(f'/assets/{seed.asset.id}/checkout', json=['check_out'])
    assert response.status_code == 400


def test_missing_status_label_is_a_configuration_error(client, db, seed):
    db.session.delete(seed.deployed)
    db.session.commit()

    response = checkout(client, seed.asset.id, action='check_out', user_id=seed.jane.id,
                        performed_by_user_id=seed.admin.id)
    assert response.status_code == 500
    assert "Deployed" in response.json['error']

    db.session.refresh(seed.asset)
    assert seed.asset.assigned_to_user_id is None
    assert ActivityLog.query.count() == 0


def test_store_failure_rolls_back(client, db, seed, monkeypatch):
    from sqlalchemy.exc import OperationalError
    from sqlalchemy.orm import Session

    def broken_commit(self):
        raise OperationalError('UPDATE asset', {}, Exception('disk I/O error'))

    monkeypatch.setattr(Session, 'commit', broken_commit)
    response = checkout(client, seed.asset.id, action='check_out', user_id=seed.jane.id,
                        performed_by_user_id=seed.admin.id)
    monkeypatch.undo()

    assert response.status_code == 500
    assert response.json['error'] == 'Failed to check out asset'
    assert ActivityLog.query.count() == 0
    assert db.session.get(Asset, seed.asset.id).assigned_to_user_id is None


def test_concurrent_modification_is_a_conflict(client, db, seed):
    from sqlalchemy import event, text

    asset_id = seed.asset.id
    version = seed.asset.version_id

    def bump_version(mapper, connection, target):
        # Another writer saves the row between our read and our write
        connection.execute(text('UPDATE asset SET version_id = version_id + 1 WHERE id = :id'),
                           {'id': target.id})

    event.listen(Asset, 'before_update', bump_version)
    try:
        response = checkout(client, asset_id, action='check_out', user_id=seed.jane.id,
                            performed_by_user_id=seed.admin.id)
    finally:
        event.remove(Asset, 'before_update', bump_version)

    assert response.status_code == 409
    assert 'modified by another request' in response.json['error']
    assert ActivityLog.query.count() == 0
    asset = db.session.get(Asset, asset_id)
    assert asset.assigned_to_user_id is None
    assert asset.status.name == 'In-Stock'
    assert asset.version_id == version


@pytest.mark.parametrize('model, hook', [(Asset, 'after_update'), (ActivityLog, 'before_insert')])
def test_failed_write_rolls_back_flushed_asset_update(client, db, seed, model, hook):
    from sqlalchemy import event
    from sqlalchemy.exc import OperationalError

    asset_id = seed.asset.id
    flushed = []

    def record_asset_update(mapper, connection, target):
        flushed.append(target.id)

    def fail_write(mapper, connection, target):
        raise OperationalError('INSERT INTO activity_log', {}, Exception('disk I/O error'))

    # after_update fires once the asset UPDATE has been executed
    event.listen(Asset, 'after_update', record_asset_update)
    event.listen(model, hook, fail_write)
    try:
        response = checkout(client, asset_id, action='check_out', user_id=seed.jane.id,
                            location_id=seed.hq.id, performed_by_user_id=seed.admin.id)
    finally:
        event.remove(model, hook, fail_write)
        event.remove(Asset, 'after_update', record_asset_update)

    assert response.status_code == 500
    assert response.json['error'] == 'Failed to check out asset'
    if model is Asset:
        assert flushed == [asset_id]

    assert ActivityLog.query.count() == 0
    asset = db.session.get(Asset, asset_id)
    assert asset.assigned_to_user_id is None
    assert asset.location_id == seed.warehouse.id
    assert asset.status.name == 'In-Stock'


def test_fractional_ids_are_rejected(client, db, seed):
    response = checkout(client, seed.asset.id, action='check_out', user_id=seed.jane.id + 0.9,
                        performed_by_user_id=seed.admin.id)
    assert response.status_code == 400
    assert ActivityLog.query.count() == 0


def test_check_out_sends_notification(app, client, seed):
    app.config['NOTIFY_ON_CHECKOUT'] = True
    with mail.record_messages() as outbox:
        response = checkout(client, seed.asset.id, action='check_out', user_id=seed.jane.id,
                            performed_by_user_id=seed.admin.id)

    assert response.status_code == 200
    assert len(outbox) == 1
    assert outbox[0].recipients == ['jane@example.com']
    assert 'LAPTOP-001' in outbox[0].body


def test_no_notification_by_default(client, seed):
    with mail.record_messages() as outbox:
        checkout(client, seed.asset.id, action='check_out', user_id=seed.jane.id,
                 performed_by_user_id=seed.admin.id)
    assert outbox == []
