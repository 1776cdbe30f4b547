import json

import pytest

from merchlens.app import create_app


CATALOGUE = [
    {
        "style_number": "ST-100",
        "name": "Linen Shirt",
        "season": "SS24",
        "line": "Core",
        "category": "Tops",
        "color": ["White", "Navy"],
        "available_sizes": ["S", "M", "L"],
        "buyer": "Ana",
        "date_added": "2024-01-10",
        "quantity_sold": 10,
        "price": 50,
        "cost": 20,
        "fabric": "Linen",
        "status": "Active",
    },
    {
        "style_number": "ST-101",
        "name": "Chino Short",
        "season": "SS24",
        "line": "Core",
        "category": "Bottoms",
        "color": ["Khaki"],
        "available_sizes": ["M", "L"],
        "buyer": "Ben",
        "date_added": "2024-01-12",
        "quantity_sold": 5,
        "price": 80,
        "cost": 40,
        "fabric": "Cotton",
        "status": "Active",
    },
    {
        "style_number": "ST-200",
        "name": "Wool Coat",
        "season": "FW24",
        "line": "Premium",
        "category": "Outerwear",
        "color": ["Navy"],
        "available_sizes": ["M"],
        "buyer": "Ana",
        "date_added": "2024-06-01",
        "quantity_sold": 2,
        "price": 300,
        "cost": 120,
        "fabric": "Wool",
        "status": "Draft",
    },
    {
        "style_number": "ST-201",
        "name": "Sample Tee",
        "season": "FW24",
        "line": "Core",
        "category": "Tops",
        "color": ["White"],
        "available_sizes": ["S"],
        "buyer": "Ben",
        "date_added": "2024-06-03",
        "quantity_sold": 0,
        "price": 0,
        "cost": 10,
        "fabric": "Cotton",
        "status": "Sample",
    },
]


@pytest.fixture
def catalogue():
    return [dict(r) for r in CATALOGUE]


@pytest.fixture
def app(tmp_path):
    path = tmp_path / "catalogue.json"
    path.write_text(json.dumps(CATALOGUE), encoding="utf-8")
    app = create_app({"TESTING": True, "CATALOGUE_PATH": path, "CATALOGUE_URL": None})
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
