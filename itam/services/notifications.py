# itam/services/notifications.py
import logging
from flask import current_app
from flask_mail import Message
from itam import mail

logger = logging.getLogger(__name__)

def send_checkout_email(asset, user):
    msg = Message('New Asset Assignment',
                  sender=current_app.config['MAIL_DEFAULT_SENDER'],
                  recipients=[user.email])
    msg.body = f'''Dear {user.full_name},

You have been assigned a new asset:
Asset: {asset.asset_tag}
Model: {asset.model.name if asset.model else 'Unknown'}
Serial number: {asset.serial_number or 'N/A'}

Please log in to the asset management system to view the details.

Thank you,
IT Department
'''
    mail.send(msg)

def notify_checkout(asset, user):
    """Email the new holder. The assignment is already committed, so a mail failure is only logged."""
    if user is None or not current_app.config.get('NOTIFY_ON_CHECKOUT'):
        return False
    try:
        send_checkout_email(asset, user)
    except Exception:
        logger.exception("Could not send checkout email for asset %s to %s", asset.asset_tag, user.email)
        return False
    return True
