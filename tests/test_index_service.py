"""Tests for flat and folder-scoped photo listings."""

from __future__ import annotations

import random

import pytest

from core.models import IndexNode, PhotoRef
from core.services.index_service import (
    flatten_photos,
    folder_display_name,
    folder_names,
    photo_url,
    photos_in_folder,
    random_photo,
)


class TestFlattenPhotos:
    def test_pre_order_own_photos_first(self, sample_tree):
        paths = [ref.path for ref in flatten_photos(sample_tree)]
        assert paths == [
            "/a.jpg",
            "/b.png",
            "/Fauna/fox.jpg",
            "/Fauna/Birds/owl.webp",
            "/Fauna/Birds/robin.jpg",
            "/Flora/rose.gif",
        ]

    def test_folder_map_order_is_not_resorted(self):
        tree = IndexNode(folders={"z": IndexNode(photos=["1.jpg"]), "a": IndexNode(photos=["2.jpg"])})
        assert [r.path for r in flatten_photos(tree)] == ["/z/1.jpg", "/a/2.jpg"]

    def test_refs_carry_name_and_folder(self, sample_tree):
        refs = flatten_photos(sample_tree)
        assert refs[0] == PhotoRef(path="/a.jpg", name="a.jpg", full_path="/")
        assert refs[3] == PhotoRef(
            path="/Fauna/Birds/owl.webp", name="owl.webp", full_path="/Fauna/Birds"
        )

    def test_path_is_folder_joined_with_name(self, sample_tree):
        for ref in flatten_photos(sample_tree):
            assert ref.path == ref.full_path.rstrip("/") + "/" + ref.name
            assert ref.path.startswith("/")
            assert not ref.path.endswith("/")

    def test_idempotent(self, sample_tree):
        assert flatten_photos(sample_tree) == flatten_photos(sample_tree)

    def test_does_not_mutate_tree(self, sample_tree):
        before = sample_tree.to_dict()
        flatten_photos(sample_tree)
        assert sample_tree.to_dict() == before

    def test_empty_tree(self):
        assert flatten_photos(IndexNode()) == []

    def test_base_path_prefix(self):
        tree = IndexNode(photos=["x.jpg"])
        assert flatten_photos(tree, "Trips")[0].path == "/Trips/x.jpg"


class TestPhotosInFolder:
    @pytest.mark.parametrize("root_path", ["", "/", None])
    def test_root_lists_only_root_level(self, sample_tree, root_path):
        refs = photos_in_folder(sample_tree, root_path)
        assert [r.path for r in refs] == ["/a.jpg", "/b.png"]
        assert all(r.full_path == "/" for r in refs)

    def test_missing_folder_is_empty(self, sample_tree):
        assert photos_in_folder(sample_tree, "Missing/Path") == []
        assert photos_in_folder(sample_tree, "/Fauna/Cats") == []

    def test_single_level_not_flattened(self, sample_tree):
        refs = photos_in_folder(sample_tree, "/Fauna")
        assert [r.name for r in refs] == ["fox.jpg"]

    def test_nested_folder_paths(self, sample_tree):
        refs = photos_in_folder(sample_tree, "/Fauna/Birds/")
        assert refs == [
            PhotoRef(path="/Fauna/Birds/owl.webp", name="owl.webp", full_path="/Fauna/Birds"),
            PhotoRef(path="/Fauna/Birds/robin.jpg", name="robin.jpg", full_path="/Fauna/Birds"),
        ]

    def test_path_without_leading_slash_is_normalized(self, sample_tree):
        refs = photos_in_folder(sample_tree, "Flora")
        assert refs[0].path == "/Flora/rose.gif"
        assert refs[0].full_path == "/Flora"

    def test_empty_segments_are_ignored(self, sample_tree):
        assert photos_in_folder(sample_tree, "//Fauna//Birds") == photos_in_folder(
            sample_tree, "/Fauna/Birds"
        )

    def test_repeated_slashes_do_not_leak_into_paths(self, sample_tree):
        refs = photos_in_folder(sample_tree, "Fauna//Birds")
        assert refs[0].path == "/Fauna/Birds/owl.webp"
        assert refs[0].full_path == "/Fauna/Birds"

    @pytest.mark.parametrize("root_path", ["//", "///"])
    def test_slashes_only_lists_root(self, sample_tree, root_path):
        refs = photos_in_folder(sample_tree, root_path)
        assert [r.path for r in refs] == ["/a.jpg", "/b.png"]
        assert all(r.full_path == "/" for r in refs)

    def test_empty_folder(self, sample_tree):
        assert photos_in_folder(sample_tree, "/Empty") == []


class TestHelpers:
    def test_folder_names(self, sample_tree):
        assert folder_names(sample_tree) == ["Fauna", "Empty", "Flora"]

    @pytest.mark.parametrize(
        "folder, expected",
        [(None, "Photos"), ("", "Photos"), ("/", "Photos"), ("/Fauna", "Fauna"), ("/Fauna/Birds/", "Birds")],
    )
    def test_folder_display_name(self, folder, expected):
        assert folder_display_name(folder) == expected

    def test_random_photo(self, sample_tree):
        photos = flatten_photos(sample_tree)
        assert random_photo(photos, random.Random(3)) in photos
        assert random_photo([]) is None

    def test_photo_url(self):
        assert photo_url("/Fauna/fox.jpg") == "/photo-gallery/photos/Fauna/fox.jpg"
        assert photo_url("a.jpg", "/base") == "/base/photos/a.jpg"
