import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-key-change-this'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or \
        f'sqlite:///{BASE_DIR}/data/inventory.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Outgoing mail, only used when NOTIFY_ON_CHECKOUT is set
    MAIL_SERVER = os.environ.get('MAIL_SERVER')
    MAIL_PORT = int(os.environ.get('MAIL_PORT') or 25)
    MAIL_USE_TLS = os.environ.get('MAIL_USE_TLS') is not None
    MAIL_USERNAME = os.environ.get('MAIL_USERNAME')
    MAIL_PASSWORD = os.environ.get('MAIL_PASSWORD')
    MAIL_DEFAULT_SENDER = os.environ.get('MAIL_DEFAULT_SENDER') or 'noreply@demo.com'
    NOTIFY_ON_CHECKOUT = os.environ.get('NOTIFY_ON_CHECKOUT') is not None

    # Status labels the checkout flow writes
    DEPLOYED_STATUS = 'Deployed'
    IN_STOCK_STATUS = 'In-Stock'

    ACTIVITY_PAGE_SIZE = int(os.environ.get('ACTIVITY_PAGE_SIZE') or 50)
    ACTIVITY_PAGE_SIZE_MAX = 200

class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    MAIL_SUPPRESS_SEND = True
    NOTIFY_ON_CHECKOUT = False
