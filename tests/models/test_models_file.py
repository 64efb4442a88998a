import os
import tempfile
import unittest

from fake_rest_adapter import FakeRestAdapter

from cloudfs.errors import InvalidArgumentError, OperationNotAllowedError
from cloudfs.models import create_item

CONTENT = b"this is some buffer till end of file"


class _FileTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.fake = FakeRestAdapter()
        file_id = self.fake.add_file("buffer.txt", CONTENT)
        self.file = create_item(self.fake, self.fake.get_file_meta(f"/{file_id}"))


class TestFileRead(_FileTestCase):
    def test_read_whole_file(self) -> None:
        self.assertEqual(self.file.read(), CONTENT)
        self.assertEqual(self.file.tell(), len(CONTENT))

    def test_sequential_reads_advance_cursor(self) -> None:
        self.assertEqual(self.file.read(4), b"this")
        self.assertEqual(self.file.read(3), b" is")
        self.assertEqual(self.file.tell(), 7)
        self.assertEqual(self.fake.calls[-1], ("download", self.file.address, 4, 3))

    def test_read_is_clamped_to_remaining_bytes(self) -> None:
        self.file.seek(-4, 2)
        self.assertEqual(self.file.read(100), b"file")
        self.assertEqual(self.fake.calls[-1][3], 4)

    def test_zero_length_and_eof_reads_make_no_request(self) -> None:
        before = len(self.fake.calls)
        self.assertEqual(self.file.read(0), b"")
        self.file.seek(0, 2)
        self.assertEqual(self.file.read(), b"")
        self.assertEqual(len(self.fake.calls), before)

    def test_negative_length(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.file.read(-1)

    def test_read_with_chunk_handler(self) -> None:
        chunks = []
        self.file.seek(5)
        self.assertEqual(self.file.read(7, chunk_handler=chunks.append), b"")
        self.assertEqual(b"".join(chunks), b"is some")
        self.assertEqual(self.file.tell(), 12)

    def test_read_rejects_trashed_file(self) -> None:
        self.assertTrue(self.file.delete())
        before = len(self.fake.calls)
        with self.assertRaises(OperationNotAllowedError):
            self.file.read()
        self.assertEqual(len(self.fake.calls), before)

    def test_read_rejects_old_version(self) -> None:
        properties = self.fake.get_file_meta(self.file.address)
        old = create_item(self.fake, properties, old_version=True)
        before = len(self.fake.calls)
        with self.assertRaises(OperationNotAllowedError):
            old.read(10)
        self.assertEqual(len(self.fake.calls), before)

    def test_seek_whence(self) -> None:
        self.assertEqual(self.file.seek(4), 4)
        self.assertEqual(self.file.seek(2, 1), 6)
        self.assertEqual(self.file.seek(-1, 2), len(CONTENT) - 1)
        self.assertEqual(self.file.rewind(), 0)

    def test_seek_invalid(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            self.file.seek(0, 3)
        with self.assertRaises(InvalidArgumentError):
            self.file.seek(-1)


class TestFileDownload(_FileTestCase):
    def test_download_to_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = self.file.download(tmp)
            self.assertEqual(target, os.path.join(tmp, "buffer.txt"))
            with open(target, "rb") as fh:
                self.assertEqual(fh.read(), CONTENT)

    def test_download_overwrites_with_custom_name(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            existing = os.path.join(tmp, "copy.txt")
            with open(existing, "wb") as fh:
                fh.write(b"old content that is longer than nothing")

            self.file.download(tmp, filename="copy.txt")

            with open(existing, "rb") as fh:
                self.assertEqual(fh.read(), CONTENT)

    def test_download_requires_directory(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(InvalidArgumentError):
                self.file.download(os.path.join(tmp, "missing"))


class TestFileVersions(_FileTestCase):
    def test_versions_are_read_only(self) -> None:
        self.file.name = "v2.txt"
        self.file.save()

        versions = self.file.versions()

        self.assertEqual(len(versions), 1)
        old = versions[0]
        self.assertTrue(old.is_old_version)
        self.assertEqual(old.name, "buffer.txt")
        self.assertEqual(old.version, 1)
        with self.assertRaises(OperationNotAllowedError):
            old.name = "nope"
        with self.assertRaises(OperationNotAllowedError):
            old.move("/")

    def test_extension_is_staged(self) -> None:
        self.file.extension = "md"
        self.assertEqual(self.file.pending_changes["extension"], "md")
        self.assertEqual(self.file.extension, "md")
