import os
import tempfile

# Settings are read at import time
os.environ.setdefault("API_KEY", "test-key")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("AVATAR_API_KEY", "avatar-test-key")
os.environ.setdefault("AVATAR_API_BASE", "https://avatars.test/v1")
os.environ.setdefault("RATE_LIMIT_BURST", "10000")
os.environ.setdefault("STORAGE_DIR", tempfile.mkdtemp(prefix="tryon-test-"))

import pytest
from fastapi.testclient import TestClient

from tryon.main import app
from tryon.schemas.clothing import ClothingItem
from tryon.services.avatar_store import AvatarStore
from tryon.services.catalog import Catalog


API_HEADERS = {"X-API-Key": os.environ["API_KEY"]}


@pytest.fixture
def store():
    previous = app.state.avatar_store
    app.state.avatar_store = AvatarStore()
    yield app.state.avatar_store
    app.state.avatar_store = previous


@pytest.fixture
def client(store):
    return TestClient(app)


@pytest.fixture
def api_headers():
    return dict(API_HEADERS)


@pytest.fixture
def catalog():
    items = [
        ClothingItem(id="t1", name="Classic Cotton Tee", category="tops", description="Crew-neck tee in organic cotton", price=25, sizes=["S", "M", "L"], colors=["white"], brand_name="Everyday Basics"),
        ClothingItem(id="t2", name="Silk Blouse", category="tops", description="Loose blouse with pearl buttons", price=80, colors=["ivory"], brand_name="Atelier Nine"),
        ClothingItem(id="b1", name="Slim Jeans", category="bottoms", description="Stretch denim, mid rise", price=60, colors=["indigo"], brand_name="Riveted"),
        ClothingItem(id="o1", name="Denim Jacket", category="outerwear", description="Classic trucker jacket", price=90, colors=["indigo"], brand_name="Riveted"),
        ClothingItem(id="h1", name="Chiffon Hijab", category="hijabs", description="Lightweight drape", price=18, colors=["black"], brand_name="Modest Threads"),
    ]
    previous = app.state.catalog
    app.state.catalog = Catalog(items)
    yield app.state.catalog
    app.state.catalog = previous
