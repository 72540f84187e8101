# itam/models/catalog.py
from itam import db

class Manufacturer(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)

    models = db.relationship('AssetModel', backref='manufacturer', lazy=True)

class Category(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)

    models = db.relationship('AssetModel', backref='category', lazy=True)

class AssetModel(db.Model):
    """A make/model combination that assets are instances of."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    model_number = db.Column(db.String(100))
    manufacturer_id = db.Column(db.Integer, db.ForeignKey('manufacturer.id'), nullable=False)
    category_id = db.Column(db.Integer, db.ForeignKey('category.id'), nullable=False)

    assets = db.relationship('Asset', backref='model', lazy=True)

    @classmethod
    def find_or_create(cls, name, model_number, manufacturer_id, category_id):
        model = cls.query.filter_by(
            name=name,
            model_number=model_number,
            manufacturer_id=manufacturer_id,
            category_id=category_id
        ).first()

        if not model:
            model = cls(
                name=name,
                model_number=model_number,
                manufacturer_id=manufacturer_id,
                category_id=category_id
            )
            db.session.add(model)
            db.session.flush()
        return model

    def __repr__(self):
        return f"AssetModel('{self.name}', '{self.model_number}')"
