"""
Test Suite for Project Root Resolution.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from mnist_learner.core.paths import constants
from mnist_learner.core.paths.constants import get_project_root


@pytest.mark.unit
def test_project_root_found_from_checkout():
    """Test a source checkout resolves to the directory holding setup.py."""
    root = get_project_root()

    assert (root / "setup.py").exists() or (root / ".git").exists()
    assert Path(constants.__file__).resolve().is_relative_to(root)


@pytest.mark.unit
def test_project_root_falls_back_to_cwd(tmp_path, monkeypatch):
    """Test an installed package without markers resolves to the working directory."""
    monkeypatch.chdir(tmp_path)

    with patch.object(Path, "exists", return_value=False):
        root = get_project_root()

    assert root == tmp_path.resolve()


@pytest.mark.unit
def test_default_directories_live_under_project_root():
    """Test dataset and artifact defaults derive from the project root."""
    assert constants.DATASET_DIR == constants.PROJECT_ROOT / "dataset"
    assert constants.DEFAULT_ARTIFACT_DIR == constants.PROJECT_ROOT / "artifacts"
