# itam/models/organization.py
from itam import db

class Department(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)

    assets = db.relationship('Asset', backref='department', lazy=True)

    def __repr__(self):
        return f"Department('{self.name}')"

class Location(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    address = db.Column(db.String(255))

    assets = db.relationship('Asset', backref='location', lazy=True)

    def __repr__(self):
        return f"Location('{self.name}')"

class Supplier(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    contact_info = db.Column(db.String(255))

    assets = db.relationship('Asset', backref='supplier', lazy=True)

    def __repr__(self):
        return f"Supplier('{self.name}')"
