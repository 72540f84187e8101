# itam/models/status_label.py
from itam import db

class StatusLabel(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(50), unique=True, nullable=False)
    color = db.Column(db.String(20))

    assets = db.relationship('Asset', backref='status', lazy=True)

    @classmethod
    def find_by_name(cls, name):
        return cls.query.filter(db.func.lower(cls.name) == name.lower()).first()

    @classmethod
    def ensure_defaults(cls, names):
        """Create any of the named labels that are missing. Returns how many were added."""
        created = 0
        for name in names:
            if not cls.find_by_name(name):
                db.session.add(cls(name=name))
                created += 1
        return created

    def __repr__(self):
        return f"StatusLabel('{self.name}')"
