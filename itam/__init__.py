import os
import click
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_mail import Mail
from itam.config import Config

db = SQLAlchemy()
mail = Mail()

def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    db_uri = app.config['SQLALCHEMY_DATABASE_URI']
    if db_uri.startswith('sqlite:///'):
        os.makedirs(os.path.dirname(db_uri[len('sqlite:///'):]) or '.', exist_ok=True)

    db.init_app(app)
    mail.init_app(app)

    with app.app_context():
        # Import models so create_all sees every table
        from itam import models  # noqa: F401
        from itam.routes import assets_bp, activity_bp

        app.register_blueprint(assets_bp)
        app.register_blueprint(activity_bp)

        db.create_all()

    @app.cli.command('init-db')
    def init_db_command():
        """Create tables and the status labels checkout depends on."""
        from itam.models import StatusLabel
        db.create_all()
        created = StatusLabel.ensure_defaults(
            [app.config['DEPLOYED_STATUS'], app.config['IN_STOCK_STATUS']])
        db.session.commit()
        click.echo(f"Database ready ({created} status labels created).")

    return app
