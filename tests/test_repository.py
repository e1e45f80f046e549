# tests/test_repository.py
"""
Tests for the object map repository and locator finders.
"""

import pytest
import yaml

from uiauto_finders.exceptions import ConfigError, ElementNotFoundError
from uiauto_finders.finders import ChainFinder
from uiauto_finders.node import Attribute
from uiauto_finders.repository import Repository, finder_from_locator
from uiauto_finders.snapshot import tree_from_dict

OBJECT_MAP = {
    "app": {"default_timeout": 3, "polling_interval": 0.05},
    "windows": {
        "main": {"locators": [{"title_re": "Editor$", "control_type": "Window"}]},
        "dialog": {"locators": {"auto_id": "confirmDialog"}},
    },
    "elements": {
        "save_button": {
            "window": "main",
            "locators": [{"auto_id": "saveBtn"}, {"name": "Save", "control_type": "Button"}],
        },
        "dialog_ok": {"window": "dialog", "locators": [{"name": "OK"}]},
    },
}

TREE = {
    "control_type": "Window",
    "title": "Main - Editor",
    "children": [
        {"control_type": "Button", "name": "OK", "auto_id": "toolbarOk"},
        {"control_type": "Button", "name": "Save"},
        {
            "control_type": "Pane",
            "auto_id": "confirmDialog",
            "children": [{"control_type": "Button", "name": "OK", "auto_id": "dialogOk"}],
        },
    ],
}


def write_map(tmp_path, data):
    path = tmp_path / "elements.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return str(path)


class TestFinderFromLocator:
    """Tests for locator-to-finder conversion."""

    def test_single_key(self):
        assert str(finder_from_locator({"name": "OK"})) == "ByAttribute{name equals OK}"

    def test_multiple_keys_combine_with_all_of(self):
        finder = finder_from_locator({"name": "OK", "control_type": "Button"})
        assert str(finder) == (
            "AllOf{ByAttribute{name equals OK}, ByAttribute{control_type equals Button}}"
        )

    def test_regex_keys(self):
        root = tree_from_dict(TREE)
        assert finder_from_locator({"title_re": "Editor$"}).find(root) is root

    def test_no_usable_keys(self):
        with pytest.raises(ConfigError):
            finder_from_locator({"found_index": 1})

    def test_invalid_regex(self):
        with pytest.raises(ConfigError) as exc_info:
            finder_from_locator({"name_re": "("})
        assert "invalid regex for 'name_re'" in str(exc_info.value)

    def test_non_string_regex(self):
        with pytest.raises(ConfigError):
            finder_from_locator({"title_re": 5})


class TestRepository:
    """Tests for loading and validating elements.yaml."""

    def test_loads_app_config(self, tmp_path):
        repo = Repository(write_map(tmp_path, OBJECT_MAP))

        assert repo.app.default_timeout == 3.0
        assert repo.app.polling_interval == 0.05
        assert repo.app.strict_locator_keys is True
        assert repo.list_windows() == ["dialog", "main"]
        assert repo.list_elements() == ["dialog_ok", "save_button"]

    def test_single_locator_dict_accepted(self, tmp_path):
        repo = Repository(write_map(tmp_path, OBJECT_MAP))
        spec = repo.get_window_spec("dialog")
        assert spec.locators == [{"auto_id": "confirmDialog"}]
        assert spec.window is None

    def test_element_finder_is_scoped_to_window(self, tmp_path):
        repo = Repository(write_map(tmp_path, OBJECT_MAP))
        finder = repo.get_element_finder("dialog_ok")

        assert isinstance(finder, ChainFinder)
        found = finder.find(tree_from_dict(TREE))
        assert found.get_attribute(Attribute.AUTO_ID) == "dialogOk"

    def test_multiple_locators_any_of(self, tmp_path):
        repo = Repository(write_map(tmp_path, OBJECT_MAP))
        found = repo.get_element_finder("save_button").find(tree_from_dict(TREE))

        assert found.get_attribute(Attribute.NAME) == "Save"

    def test_not_found_references_element_finder(self, tmp_path):
        repo = Repository(write_map(tmp_path, OBJECT_MAP))
        finder = repo.get_element_finder("dialog_ok")
        tree = dict(TREE, children=TREE["children"][:2])

        with pytest.raises(ElementNotFoundError) as exc_info:
            finder.find(tree_from_dict(tree))

        assert exc_info.value.finder is finder

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            Repository(str(tmp_path / "missing.yaml"))

    def test_root_must_be_mapping(self, tmp_path):
        path = tmp_path / "elements.yaml"
        path.write_text("- nope\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            Repository(str(path))

    def test_unknown_window_reference(self, tmp_path):
        data = {
            "windows": OBJECT_MAP["windows"],
            "elements": {"x": {"window": "settings", "locators": [{"name": "x"}]}},
        }
        with pytest.raises(ConfigError) as exc_info:
            Repository(write_map(tmp_path, data))
        assert "unknown window 'settings'" in str(exc_info.value)

    def test_missing_window_key(self, tmp_path):
        data = {"windows": OBJECT_MAP["windows"], "elements": {"x": {"locators": [{"name": "x"}]}}}
        with pytest.raises(ConfigError):
            Repository(write_map(tmp_path, data))

    def test_empty_locators(self, tmp_path):
        data = {"windows": {"main": {"locators": []}}}
        with pytest.raises(ConfigError):
            Repository(write_map(tmp_path, data))

    def test_strict_locator_keys(self, tmp_path):
        data = {"windows": {"main": {"locators": [{"name": "Main", "found_index": 0}]}}}
        with pytest.raises(ConfigError) as exc_info:
            Repository(write_map(tmp_path, data))
        assert "found_index" in str(exc_info.value)

    def test_lenient_locator_keys(self, tmp_path):
        data = {
            "app": {"strict_locator_keys": False},
            "windows": {"main": {"locators": [{"name": "Main", "found_index": 0}]}},
        }
        repo = Repository(write_map(tmp_path, data))
        assert str(repo.get_window_finder("main")) == "ByAttribute{name equals Main}"

    def test_unknown_names(self, tmp_path):
        repo = Repository(write_map(tmp_path, OBJECT_MAP))
        with pytest.raises(ConfigError):
            repo.get_element_finder("nope")
        with pytest.raises(ConfigError):
            repo.get_window_finder("nope")

    def test_invalid_regex_rejected_on_load(self, tmp_path):
        data = {
            "windows": {"main": {"locators": [{"title_re": "["}]}},
            "elements": {"x": {"window": "main", "locators": [{"name": "x"}]}},
        }
        with pytest.raises(ConfigError) as exc_info:
            Repository(write_map(tmp_path, data))
        assert "windows.main.locators[0]" in str(exc_info.value)
        assert "title_re" in str(exc_info.value)
