import logging
from waitress import serve
from itam import create_app, db
from itam.models import StatusLabel

logging.basicConfig(level=logging.INFO)

app = create_app()

# Make sure the status labels checkout relies on exist
with app.app_context():
    StatusLabel.ensure_defaults([app.config['DEPLOYED_STATUS'], app.config['IN_STOCK_STATUS']])
    db.session.commit()

if __name__ == '__main__':
    serve(app, host="0.0.0.0", port=5000)
