# itam/models/asset.py
from datetime import datetime
from sqlalchemy.orm import validates
from itam import db
from itam.services.status import resolve_logical_status

def normalize_asset_tag(asset_tag):
    # Tags are stored uppercase with surrounding whitespace removed
    return str(asset_tag).strip().upper()

class Asset(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    asset_tag = db.Column(db.String(50), unique=True, nullable=False)
    device_name = db.Column(db.String(100))
    serial_number = db.Column(db.String(100))
    model_id = db.Column(db.Integer, db.ForeignKey('asset_model.id'), nullable=False)
    status_id = db.Column(db.Integer, db.ForeignKey('status_label.id'), nullable=False)
    assigned_to_user_id = db.Column(db.Integer, db.ForeignKey('user.id'))
    department_id = db.Column(db.Integer, db.ForeignKey('department.id'))
    location_id = db.Column(db.Integer, db.ForeignKey('location.id'))
    supplier_id = db.Column(db.Integer, db.ForeignKey('supplier.id'))
    purchase_date = db.Column(db.Date)
    purchase_cost = db.Column(db.Numeric(10, 2))
    warranty_expiry_date = db.Column(db.Date)
    notes = db.Column(db.Text)

    # Hardware specs, display only
    cpu = db.Column(db.String(100))
    ram_gb = db.Column(db.Integer)
    storage_type = db.Column(db.String(50))
    storage_size_gb = db.Column(db.Integer)
    operating_system = db.Column(db.String(100))

    version_id = db.Column(db.Integer, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    related_links = db.relationship('AssetRelatedLink', backref='asset', lazy=True,
                                    cascade='all, delete-orphan',
                                    order_by='AssetRelatedLink.id')

    __mapper_args__ = {'version_id_col': version_id}

    @validates('asset_tag')
    def validate_asset_tag(self, key, asset_tag):
        if asset_tag is None or not str(asset_tag).strip():
            raise ValueError("Asset tag is required")
        return normalize_asset_tag(asset_tag)

    @property
    def is_assigned(self):
        return self.assigned_to_user_id is not None or self.department_id is not None

    @property
    def assignee_name(self):
        if self.assigned_to_user is not None:
            return self.assigned_to_user.full_name
        if self.department is not None:
            return self.department.name
        return None

    def logical_status(self):
        return resolve_logical_status(self.is_assigned, self.status.name if self.status else None)

    def to_dict(self):
        logical = self.logical_status()
        return {
            'id': self.id,
            'asset_tag': self.asset_tag,
            'device_name': self.device_name,
            'serial_number': self.serial_number,
            'model': {
                'id': self.model.id,
                'name': self.model.name,
                'model_number': self.model.model_number,
                'manufacturer': {'id': self.model.manufacturer.id, 'name': self.model.manufacturer.name},
                'category': {'id': self.model.category.id, 'name': self.model.category.name},
            } if self.model else None,
            'status': {
                'id': self.status.id,
                'name': self.status.name,
                'color': self.status.color,
            } if self.status else None,
            'logical_status': {'name': logical.name, 'variant': logical.variant},
            'assigned_to_user': self.assigned_to_user.to_dict() if self.assigned_to_user else None,
            'department': {'id': self.department.id, 'name': self.department.name} if self.department else None,
            'location': {'id': self.location.id, 'name': self.location.name} if self.location else None,
            'supplier': {'id': self.supplier.id, 'name': self.supplier.name} if self.supplier else None,
            'purchase_date': self.purchase_date.isoformat() if self.purchase_date else None,
            'purchase_cost': float(self.purchase_cost) if self.purchase_cost is not None else None,
            'warranty_expiry_date': self.warranty_expiry_date.isoformat() if self.warranty_expiry_date else None,
            'notes': self.notes,
            'cpu': self.cpu,
            'ram_gb': self.ram_gb,
            'storage_type': self.storage_type,
            'storage_size_gb': self.storage_size_gb,
            'operating_system': self.operating_system,
            'related_links': [link.to_dict() for link in self.related_links],
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def __repr__(self):
        return f'<Asset {self.asset_tag} ({self.status.name if self.status else "no status"})>'

class AssetRelatedLink(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    asset_id = db.Column(db.Integer, db.ForeignKey('asset.id'), nullable=False)
    link_type = db.Column(db.String(50), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    url = db.Column(db.String(500), nullable=False)
    description = db.Column(db.String(500))

    def to_dict(self):
        return {
            'id': self.id,
            'link_type': self.link_type,
            'title': self.title,
            'url': self.url,
            'description': self.description,
        }
