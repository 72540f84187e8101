"""
Pytest configuration and fixtures
"""
from datetime import date
from decimal import Decimal
from types import SimpleNamespace

import pytest

from itam import create_app
from itam import db as _db
from itam.config import TestConfig
from itam.models import (Asset, AssetModel, Category, Department, Location, Manufacturer,
                         StatusLabel, Supplier, User)


@pytest.fixture
def app():
    """Create Flask application for testing with a fresh in-memory database"""
    app = create_app(TestConfig)

    with app.app_context():
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


@pytest.fixture
def seed(db):
    """Reference rows plus one in-stock laptop"""
    deployed = StatusLabel(name='Deployed', color='#10b981')
    in_stock = StatusLabel(name='In-Stock', color='#3b82f6')
    in_repair = StatusLabel(name='In-Repair', color='#f59e0b')

    admin = User(first_name='Ada', last_name='Admin', email='admin@example.com')
    jane = User(first_name='Jane', last_name='Doe', email='jane@example.com')
    bob = User(first_name='Bob', last_name='Stone', email='bob@example.com')
    carl = User(first_name='Carl', last_name='Gone', email='carl@example.com', is_active=False)

    it_dept = Department(name='Information Technology')
    finance = Department(name='Finance')
    hq = Location(name='Headquarters')
    warehouse = Location(name='Warehouse')
    supplier = Supplier(name='TechSource Inc.')

    dell = Manufacturer(name='Dell Technologies')
    lenovo = Manufacturer(name='Lenovo')
    laptop = Category(name='Laptop')
    latitude = AssetModel(name='Latitude 5420', model_number='5420', manufacturer=dell, category=laptop)

    db.session.add_all([deployed, in_stock, in_repair, admin, jane, bob, carl, it_dept, finance,
                        hq, warehouse, supplier, dell, lenovo, laptop, latitude])
    db.session.flush()

    asset = Asset(
        asset_tag='laptop-001',
        device_name='LT-ACCT-01',
        serial_number='SN12345',
        model=latitude,
        status=in_stock,
        location=warehouse,
        supplier=supplier,
        purchase_date=date(2024, 1, 15),
        purchase_cost=Decimal('1200.00'),
        notes='A'
    )
    db.session.add(asset)
    db.session.commit()

    return SimpleNamespace(
        deployed=deployed, in_stock=in_stock, in_repair=in_repair,
        admin=admin, jane=jane, bob=bob, carl=carl,
        it_dept=it_dept, finance=finance, hq=hq, warehouse=warehouse, supplier=supplier,
        dell=dell, lenovo=lenovo, laptop=laptop, latitude=latitude,
        asset=asset
    )
