import os
import tempfile
import unittest

from db import database as db_database
from db import storage
from utils.local_storage import LocalStorage


class StoreTestCase(unittest.IsolatedAsyncioTestCase):
    """Points the document store, image storage and local storage at a temp dir."""

    seed_demo_data = False

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        db_database.DB_PATH = os.path.join(self.temp_dir.name, "test.sqlite")
        db_database.SEED_DEMO_DATA = self.seed_demo_data
        db_database._initialized = False
        storage.STORAGE_DIR = os.path.join(self.temp_dir.name, "storage")
        self.local_storage = LocalStorage(
            os.path.join(self.temp_dir.name, "local_storage.json")
        )

    def tearDown(self):
        self.temp_dir.cleanup()
