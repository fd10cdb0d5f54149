"""
Test Suite for Serialization Utilities.

Atomic JSON snapshots and YAML recipe reading/writing.
"""

import json
from unittest.mock import patch

import pytest

from mnist_learner.core import dump_recipe, load_recipe, write_json_atomic


# JSON
@pytest.mark.unit
def test_write_json_atomic_roundtrip(tmp_path):
    """Written JSON parses back to the same structure."""
    data = {"num_epochs": 3, "model": {"hidden_size": 8}}

    path = write_json_atomic(data, tmp_path / "nested" / "config.json")

    assert json.loads(path.read_text()) == data


@pytest.mark.unit
def test_write_json_atomic_leaves_no_tmp_file(tmp_path):
    """The temporary file is renamed into place."""
    write_json_atomic({"a": 1}, tmp_path / "config.json")

    assert sorted(p.name for p in tmp_path.iterdir()) == ["config.json"]


@pytest.mark.unit
def test_write_json_atomic_fsyncs(tmp_path):
    """The document is forced to disk before the rename."""
    with patch("mnist_learner.core.io.serialization.os.fsync") as mock_fsync:
        write_json_atomic({"a": 1}, tmp_path / "config.json")

    mock_fsync.assert_called_once()


@pytest.mark.unit
def test_write_json_atomic_cleans_up_on_error(tmp_path):
    """A failed rename removes the temporary file and re-raises."""
    with patch(
        "mnist_learner.core.io.serialization.os.replace", side_effect=OSError("read-only")
    ):
        with pytest.raises(OSError, match="read-only"):
            write_json_atomic({"a": 1}, tmp_path / "config.json")

    assert list(tmp_path.iterdir()) == []


# YAML
@pytest.mark.unit
def test_load_recipe(tmp_path):
    """A mapping recipe is returned as a dict."""
    path = tmp_path / "recipe.yaml"
    path.write_text("num_epochs: 2\nmodel:\n  hidden_size: 16\n")

    assert load_recipe(path) == {"num_epochs": 2, "model": {"hidden_size": 16}}


@pytest.mark.unit
def test_load_recipe_missing(tmp_path):
    """A missing recipe raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_recipe(tmp_path / "missing.yaml")


@pytest.mark.unit
def test_load_recipe_malformed(tmp_path):
    """Invalid YAML raises ValueError."""
    path = tmp_path / "recipe.yaml"
    path.write_text("model: [unclosed\n")

    with pytest.raises(ValueError, match="Malformed YAML"):
        load_recipe(path)


@pytest.mark.unit
def test_load_recipe_non_mapping(tmp_path):
    """A list at the top level is rejected."""
    path = tmp_path / "recipe.yaml"
    path.write_text("- 1\n- 2\n")

    with pytest.raises(ValueError, match="must be a mapping"):
        load_recipe(path)


@pytest.mark.unit
def test_dump_recipe_with_header(tmp_path):
    """The header precedes the YAML body and the body loads back."""
    path = dump_recipe({"seed": 7}, tmp_path / "recipe.yaml", header="# generated\n")

    assert path.read_text().startswith("# generated\n")
    assert load_recipe(path) == {"seed": 7}
