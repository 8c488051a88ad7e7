import base64
import os
import unittest
from pathlib import Path
from unittest import mock
from urllib.parse import urlparse
from urllib.request import url2pathname

from db import storage
from db.documents import RemoteError
from support import StoreTestCase
from utils.validation import ValidationError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def url_to_path(url: str) -> Path:
    return Path(url2pathname(urlparse(url).path))


class StorageHelpersTestCase(unittest.TestCase):
    def test_sanitize_name(self):
        self.assertEqual(storage.sanitize_name("My Photo (1)"), "my-photo-1")
        self.assertEqual(storage.sanitize_name("***"), "image")

    def test_decode_data_url(self):
        url = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
        payload, mime = storage.decode_data_url(url)
        self.assertEqual(payload, PNG_BYTES)
        self.assertEqual(mime, "image/png")

        payload, mime = storage.decode_data_url("data:,hello")
        self.assertEqual(payload, b"hello")
        self.assertIsNone(mime)

        with self.assertRaises(ValueError):
            storage.decode_data_url("https://example.com/a.png")

    def test_object_path(self):
        self.assertEqual(
            storage.object_path("p1", "a.png", "png", 1700000000000),
            "products/p1/1700000000000",
        )
        self.assertEqual(
            storage.object_path(None, "/tmp/Front View.PNG", "png", 5),
            "products/5-front-view.png",
        )


class UploadTestCase(StoreTestCase):
    def write_file(self, name: str, payload: bytes) -> str:
        path = os.path.join(self.temp_dir.name, name)
        with open(path, "wb") as f:
            f.write(payload)
        return path

    async def test_upload_bytes(self):
        url = await storage.upload_image(PNG_BYTES, filename="front.png")
        self.assertTrue(url.startswith("file://"))
        path = url_to_path(url)
        self.assertEqual(path.read_bytes(), PNG_BYTES)
        self.assertTrue(path.name.endswith("-front.png"))
        self.assertTrue(
            path.resolve().is_relative_to(Path(storage.STORAGE_DIR).resolve())
        )

    async def test_upload_data_url_for_known_product(self):
        url = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode()
        stored = await storage.upload_image(url, product_id="p1")
        path = url_to_path(stored)
        self.assertEqual(path.parent.name, "p1")
        self.assertEqual(path.read_bytes(), PNG_BYTES)

    async def test_upload_bad_data_url(self):
        with self.assertRaises(RemoteError) as ctx:
            await storage.upload_image("data:image/png;base64,%%%")
        self.assertEqual(ctx.exception.message, "Failed to upload image")

    async def test_upload_write_failure(self):
        with mock.patch.object(storage, "_write", side_effect=OSError("disk full")):
            with self.assertRaises(RemoteError):
                await storage.upload_image(PNG_BYTES, filename="a.png")

    async def test_upload_image_file(self):
        path = self.write_file("shirt.png", PNG_BYTES)
        url = await storage.upload_image_file(path)
        self.assertEqual(url_to_path(url).read_bytes(), PNG_BYTES)

    def test_validate_image_file(self):
        with self.assertRaises(ValidationError):
            storage.validate_image_file(os.path.join(self.temp_dir.name, "nope.png"))

        text = self.write_file("notes.txt", b"hello")
        with self.assertRaises(ValidationError) as ctx:
            storage.validate_image_file(text)
        self.assertEqual(str(ctx.exception), "Please upload only image files.")

        big = self.write_file("big.png", b"\x00" * (storage.MAX_IMAGE_BYTES + 1))
        with self.assertRaises(ValidationError) as ctx:
            storage.validate_image_file(big)
        self.assertEqual(str(ctx.exception), "Image size should be less than 5MB.")

        storage.validate_image_file(self.write_file("ok.png", PNG_BYTES))


if __name__ == "__main__":
    unittest.main()
