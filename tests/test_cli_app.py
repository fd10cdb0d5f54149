"""
Test Suite for the MNIST Learner CLI (cli_app.py).

Tests the Typer-based CLI utilities: override parsing, auto-casting,
recipe generation and command wiring to the pipeline.
"""

import re
from unittest.mock import MagicMock, patch

import numpy as np
import pytest
import typer
from typer.testing import CliRunner

from mnist_learner.cli_app import _auto_cast, _build_init_dict, _parse_overrides, app
from mnist_learner.core import TrainingConfig, load_recipe

runner = CliRunner()


def _strip_ansi(text: str) -> str:
    """Remove ANSI escape sequences from Rich/Typer help output."""
    return re.sub(r"\x1b\[[0-9;]*m", "", text)


# AUTO-CAST
@pytest.mark.unit
class TestAutoCast:
    """Tests for _auto_cast string-to-Python type conversion."""

    def test_int(self):
        assert _auto_cast("42") == 42
        assert isinstance(_auto_cast("42"), int)

    def test_float(self):
        assert _auto_cast("1e-4") == pytest.approx(1e-4)
        assert isinstance(_auto_cast("1e-4"), float)

    def test_bool(self):
        assert _auto_cast("True") is True
        assert _auto_cast("false") is False

    def test_null(self):
        assert _auto_cast("none") is None

    def test_string_passthrough(self):
        assert _auto_cast("cpu") == "cpu"


# OVERRIDES
@pytest.mark.unit
class TestParseOverrides:
    """Tests for _parse_overrides key=value parsing."""

    def test_multiple(self):
        result = _parse_overrides(["num_epochs=1", "model.hidden_size=128"])
        assert result == {"num_epochs": 1, "model.hidden_size": 128}

    def test_value_with_equals(self):
        assert _parse_overrides(["a=b=c"]) == {"a": "b=c"}

    def test_strips_whitespace(self):
        assert _parse_overrides([" seed = 3 "]) == {"seed": 3}

    def test_missing_equals(self):
        with pytest.raises(typer.BadParameter, match="key=value"):
            _parse_overrides(["num_epochs"])

    def test_empty_key(self):
        with pytest.raises(typer.BadParameter, match="Empty key"):
            _parse_overrides(["=3"])


# INIT
@pytest.mark.unit
def test_build_init_dict_is_valid_config():
    """The starter recipe validates into a TrainingConfig."""
    data = _build_init_dict()

    cfg = TrainingConfig.from_dict(data)
    assert cfg.model.num_classes == 10
    assert cfg.num_epochs == 5


@pytest.mark.unit
def test_init_writes_recipe(tmp_path):
    """init creates a commented YAML recipe."""
    output = tmp_path / "recipe.yaml"

    result = runner.invoke(app, ["init", str(output)])

    assert result.exit_code == 0
    assert output.read_text().startswith("# ====")
    assert load_recipe(output)["model"]["hidden_size"] == 512


@pytest.mark.unit
def test_init_refuses_overwrite(tmp_path):
    """init does not clobber an existing file without --force."""
    output = tmp_path / "recipe.yaml"
    output.write_text("keep: me\n")

    result = runner.invoke(app, ["init", str(output)])

    assert result.exit_code == 1
    assert output.read_text() == "keep: me\n"


@pytest.mark.unit
def test_init_force_overwrites(tmp_path):
    """--force replaces an existing file."""
    output = tmp_path / "recipe.yaml"
    output.write_text("keep: me\n")

    result = runner.invoke(app, ["init", str(output), "--force"])

    assert result.exit_code == 0
    assert "model" in load_recipe(output)


# TRAIN
@pytest.mark.unit
def test_train_missing_recipe(tmp_path):
    """A missing recipe exits with code 1."""
    result = runner.invoke(app, ["train", str(tmp_path / "missing.yaml")])

    assert result.exit_code == 1


@pytest.mark.unit
def test_train_invokes_pipeline_with_overrides(tmp_path):
    """train builds the config from recipe and overrides, then runs the pipeline."""
    recipe = tmp_path / "recipe.yaml"
    runner.invoke(app, ["init", str(recipe)])
    mock_result = MagicMock()
    mock_result.model_path = tmp_path / "run" / "model.pt"

    with patch("mnist_learner.pipeline.train", return_value=mock_result) as mock_train:
        result = runner.invoke(
            app,
            [
                "train",
                str(recipe),
                "--artifact-dir",
                str(tmp_path / "run"),
                "--device",
                "cpu",
                "--set",
                "num_epochs=1",
                "--set",
                "model.hidden_size=32",
            ],
        )

    assert result.exit_code == 0, result.output
    kwargs = mock_train.call_args.kwargs
    assert kwargs["config"].num_epochs == 1
    assert kwargs["config"].model.hidden_size == 32
    assert kwargs["artifact_dir"] == tmp_path / "run"
    assert kwargs["device"].type == "cpu"
    assert kwargs["strict"] is False
    assert "Model saved" in result.output


@pytest.mark.unit
def test_train_strict_flag_reaches_pipeline(tmp_path):
    """--strict turns on deterministic algorithms for the run."""
    recipe = tmp_path / "recipe.yaml"
    runner.invoke(app, ["init", str(recipe)])

    with patch("mnist_learner.pipeline.train") as mock_train:
        result = runner.invoke(app, ["train", str(recipe), "--device", "cpu", "--strict"])

    assert result.exit_code == 0, result.output
    assert mock_train.call_args.kwargs["strict"] is True


@pytest.mark.unit
def test_train_pipeline_failure_propagates(tmp_path):
    """Pipeline errors are logged and re-raised."""
    recipe = tmp_path / "recipe.yaml"
    runner.invoke(app, ["init", str(recipe)])

    with patch("mnist_learner.pipeline.train", side_effect=RuntimeError("boom")):
        result = runner.invoke(app, ["train", str(recipe), "--device", "cpu"])

    assert result.exit_code != 0
    assert isinstance(result.exception, RuntimeError)


# INFER
@pytest.mark.unit
def test_infer_prints_prediction(tmp_path):
    """infer loads the test digit and prints predicted and expected labels."""
    dataset = MagicMock()
    dataset.__len__.return_value = 10
    dataset.__getitem__.return_value = (np.zeros((28, 28), dtype=np.uint8), 7)

    with (
        patch("mnist_learner.data_handler.DigitDataset.test", return_value=dataset),
        patch("mnist_learner.pipeline.infer", return_value=[7]) as mock_infer,
    ):
        result = runner.invoke(app, ["infer", str(tmp_path), "--index", "3", "--device", "cpu"])

    assert result.exit_code == 0, result.output
    assert "Predicted 7 | Expected 7" in result.output
    dataset.__getitem__.assert_called_once_with(3)
    mock_infer.assert_called_once()


@pytest.mark.unit
def test_infer_index_out_of_range(tmp_path):
    """An index beyond the test split exits with code 1."""
    dataset = MagicMock()
    dataset.__len__.return_value = 2

    with patch("mnist_learner.data_handler.DigitDataset.test", return_value=dataset):
        result = runner.invoke(app, ["infer", str(tmp_path), "--index", "5", "--device", "cpu"])

    assert result.exit_code == 1


@pytest.mark.unit
def test_help_lists_commands():
    """The top-level help shows every command."""
    result = runner.invoke(app, ["--help"])
    output = _strip_ansi(result.output)

    assert result.exit_code == 0
    for command in ("init", "train", "infer"):
        assert command in output
