import unittest

from cloudfs.errors import InvalidArgumentError
from cloudfs.util.paths import (
    compute_address,
    normalize_destination,
    parent_address,
    resolve_folder_address,
    resolve_item_address,
    split_named_path,
)


class _Addressable:
    def __init__(self, address: str, kind: str) -> None:
        self.address = address
        self.kind = kind


class TestUtilPaths(unittest.TestCase):
    def test_compute_address(self) -> None:
        self.assertEqual(compute_address("/", "abc"), "/abc")
        self.assertEqual(compute_address(None, "abc"), "/abc")
        self.assertEqual(compute_address("", "abc"), "/abc")
        self.assertEqual(compute_address("/p1/p2", "abc"), "/p1/p2/abc")

    def test_parent_address(self) -> None:
        self.assertEqual(parent_address("/abc"), "/")
        self.assertEqual(parent_address("/p1/p2/abc"), "/p1/p2")
        self.assertEqual(parent_address("/"), "/")

    def test_resolve_folder_address(self) -> None:
        self.assertIsNone(resolve_folder_address(None))
        self.assertIsNone(resolve_folder_address(""))
        self.assertEqual(resolve_folder_address("/p1"), "/p1")
        self.assertEqual(resolve_folder_address(_Addressable("/p1/f", "folder")), "/p1/f")

    def test_resolve_folder_address_rejects_files_and_other_types(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            resolve_folder_address(_Addressable("/p1/x", "file"))
        with self.assertRaises(InvalidArgumentError):
            resolve_folder_address(42)

    def test_resolve_item_address(self) -> None:
        self.assertIsNone(resolve_item_address(None))
        self.assertEqual(resolve_item_address("/a"), "/a")
        self.assertEqual(resolve_item_address(_Addressable("/p1/x", "file")), "/p1/x")
        with self.assertRaises(InvalidArgumentError):
            resolve_item_address(3.5)

    def test_normalize_destination(self) -> None:
        self.assertEqual(normalize_destination(None), "/")
        self.assertEqual(normalize_destination(""), "/")
        self.assertEqual(normalize_destination("a/b"), "/a/b")
        self.assertEqual(normalize_destination("/a/b"), "/a/b")

    def test_split_named_path(self) -> None:
        self.assertEqual(split_named_path("/a/b/"), ["a", "b"])
        self.assertEqual(split_named_path("a//b"), ["a", "b"])
        self.assertEqual(split_named_path("/"), [])
