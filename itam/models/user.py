# itam/models/user.py
from itam import db

class User(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    assets = db.relationship('Asset', backref='assigned_to_user', lazy=True,
                             foreign_keys='Asset.assigned_to_user_id')
    activities = db.relationship('ActivityLog', backref='user', lazy=True)

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    def to_dict(self):
        return {
            'id': self.id,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'email': self.email,
        }

    def __repr__(self):
        return f"User('{self.full_name}', '{self.email}')"
