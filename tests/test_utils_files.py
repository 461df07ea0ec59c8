"""Tests for file utility functions."""

from __future__ import annotations

from pathlib import Path

from rulefinder.utils.files import find_content_file, iter_content_paths


class TestIterContentPaths:
    """Test iter_content_paths function."""

    def test_single_yaml_file(self, tmp_path: Path) -> None:
        """Should yield single YAML file."""
        path = tmp_path / "weapons.yaml"
        path.write_text("weapons: []")

        paths = list(iter_content_paths([path]))

        assert paths == [path]

    def test_directory_with_yaml(self, tmp_path: Path) -> None:
        """Should find YAML files and skip everything else."""
        (tmp_path / "armour.yaml").write_text("armour: []")
        (tmp_path / "traits.yml").write_text("trait_groups: []")
        (tmp_path / "notes.txt").write_text("text")

        paths = list(iter_content_paths([tmp_path]))

        assert {p.name for p in paths} == {"armour.yaml", "traits.yml"}

    def test_nested_directories(self, tmp_path: Path) -> None:
        """Should descend into nested directories."""
        subdir = tmp_path / "classes"
        subdir.mkdir()
        (tmp_path / "main_rules.yaml").write_text("sections: []")
        (subdir / "class_abilities.yaml").write_text("classes: {}")

        paths = list(iter_content_paths([tmp_path]))

        assert {p.name for p in paths} == {"main_rules.yaml", "class_abilities.yaml"}

    def test_empty_directory(self, tmp_path: Path) -> None:
        assert list(iter_content_paths([tmp_path])) == []

    def test_nonexistent_file(self, tmp_path: Path) -> None:
        """Should skip nonexistent files."""
        assert list(iter_content_paths([tmp_path / "missing.yaml"])) == []


class TestFindContentFile:
    """Test find_content_file function."""

    def test_prefers_yaml(self, tmp_path: Path) -> None:
        (tmp_path / "weapons.yaml").write_text("a: 1")
        (tmp_path / "weapons.yml").write_text("a: 2")

        assert find_content_file(tmp_path, "weapons") == tmp_path / "weapons.yaml"

    def test_falls_back_to_yml(self, tmp_path: Path) -> None:
        (tmp_path / "weapons.yml").write_text("a: 2")

        assert find_content_file(tmp_path, "weapons") == tmp_path / "weapons.yml"

    def test_missing(self, tmp_path: Path) -> None:
        assert find_content_file(tmp_path, "weapons") is None
