"""
Integration Tests for the Training and Inference Entry Points.

Runs complete fits on tiny synthetic datasets and checks the artifact
directory, the call ordering of the pipeline and the inference path.
"""

from unittest.mock import MagicMock, patch

import numpy as np
import pandas as pd
import pytest
import torch

from mnist_learner.core import AdamConfig, ArtifactDirectory, Logger, ModelConfig, TrainingConfig
from mnist_learner.data_handler import create_synthetic_digits
from mnist_learner.exceptions import ConfigError, PersistenceError
from mnist_learner.pipeline import TrainingResult, infer, load_trained_model, train

CPU = torch.device("cpu")


# FIXTURES
@pytest.fixture
def config():
    return TrainingConfig(
        model=ModelConfig(num_classes=10, hidden_size=16),
        optimizer=AdamConfig(),
        num_epochs=2,
        batch_size=4,
        num_workers=0,
        seed=7,
        learning_rate=1e-3,
    )


@pytest.fixture
def datasets():
    return (
        create_synthetic_digits(samples=10, seed=1),
        create_synthetic_digits(samples=6, seed=2),
    )


@pytest.fixture(autouse=True)
def detach_log_file():
    """Release experiment.log so tmp_path can be cleaned up."""
    yield
    Logger.detach_file()


# TRAIN
@pytest.mark.integration
def test_train_writes_all_artifacts(tmp_path, config, datasets):
    """A complete run leaves config, checkpoints, metrics, log and model."""
    artifact_dir = tmp_path / "run"

    result = train(artifact_dir, config, CPU, datasets=datasets, use_tqdm=False)

    artifacts = ArtifactDirectory(root=artifact_dir)
    assert isinstance(result, TrainingResult)
    assert result.model_path == artifacts.model_path
    assert artifacts.model_path.exists()
    assert TrainingConfig.load(artifacts.config_path) == config
    assert artifacts.checkpoint_epochs() == [1, 2]
    assert (artifact_dir / "experiment.log").exists()
    assert len(pd.read_csv(artifacts.metrics_path)) == 2
    assert [s.epoch for s in result.history] == [1, 2]


@pytest.mark.integration
def test_train_wipes_previous_run(tmp_path, config, datasets):
    """Stale files of a previous run are removed at start."""
    artifact_dir = tmp_path / "run"
    (artifact_dir / "checkpoint").mkdir(parents=True)
    (artifact_dir / "checkpoint" / "model-99.pt").write_bytes(b"stale")

    train(artifact_dir, config, CPU, datasets=datasets, use_tqdm=False)

    assert ArtifactDirectory(root=artifact_dir).checkpoint_epochs() == [1, 2]


@pytest.mark.integration
def test_train_is_reproducible(tmp_path, config, datasets):
    """Two runs with the same config produce identical models."""
    first = train(tmp_path / "a", config, CPU, datasets=datasets, use_tqdm=False)
    second = train(tmp_path / "b", config, CPU, datasets=datasets, use_tqdm=False)

    for key, value in first.model.state_dict().items():
        assert torch.equal(value, second.model.state_dict()[key])
    assert first.history == second.history


@pytest.mark.unit
def test_train_order_of_operations(tmp_path, datasets):
    """Config is saved before seeding, and seeding happens before model init."""
    calls = []
    trained_model = MagicMock()
    cfg = MagicMock(seed=7, batch_size=4, num_workers=0, num_epochs=2, learning_rate=1e-3)
    cfg.optimizer.grad_clip_norm = None
    cfg.model.init.side_effect = lambda device: calls.append("model_init")
    cfg.optimizer.init.side_effect = lambda model, lr: calls.append("optimizer_init")

    with (
        patch.object(
            ArtifactDirectory, "save_config", side_effect=lambda c: calls.append("save_config")
        ),
        patch(
            "mnist_learner.pipeline.training.set_seed",
            side_effect=lambda s, strict: calls.append(f"seed:{s}"),
        ),
        patch("mnist_learner.pipeline.training.Learner") as mock_learner,
        patch.object(ArtifactDirectory, "save_metrics"),
        patch.object(ArtifactDirectory, "save_final", return_value=tmp_path / "model.pt"),
    ):
        mock_learner.return_value.fit.return_value = trained_model
        mock_learner.return_value.history = []
        result = train(tmp_path / "run", cfg, CPU, datasets=datasets, use_tqdm=False)

    assert calls == ["save_config", "seed:7", "model_init", "optimizer_init"]
    assert result.model is trained_model
    assert mock_learner.call_args.kwargs["num_epochs"] == 2
    assert mock_learner.call_args.kwargs["grad_clip_norm"] is None


@pytest.mark.unit
def test_train_config_save_failure_aborts(tmp_path, config, datasets):
    """A failed config snapshot stops the run before training."""
    with (
        patch.object(ArtifactDirectory, "save_config", side_effect=ConfigError("read-only")),
        patch("mnist_learner.pipeline.training.Learner") as mock_learner,
    ):
        with pytest.raises(ConfigError):
            train(tmp_path / "run", config, CPU, datasets=datasets, use_tqdm=False)

    mock_learner.assert_not_called()


@pytest.mark.unit
def test_train_final_save_failure_raises(tmp_path, config, datasets):
    """A failed final save is reported to the caller."""
    with patch.object(ArtifactDirectory, "save_final", side_effect=PersistenceError("disk full")):
        with pytest.raises(PersistenceError):
            train(tmp_path / "run", config, CPU, datasets=datasets, use_tqdm=False)


@pytest.mark.unit
def test_train_metrics_failure_keeps_final_model(tmp_path, config, datasets):
    """The final model is on disk even when the metrics report cannot be written."""
    artifact_dir = tmp_path / "run"

    with patch.object(
        ArtifactDirectory, "save_metrics", side_effect=PersistenceError("metrics.csv locked")
    ):
        with pytest.raises(PersistenceError):
            train(artifact_dir, config, CPU, datasets=datasets, use_tqdm=False)

    assert ArtifactDirectory(root=artifact_dir).model_path.exists()


@pytest.mark.unit
@pytest.mark.parametrize("strict", [False, True])
def test_train_forwards_strict_to_set_seed(tmp_path, config, datasets, strict):
    """Strict determinism is requested through the seeding call."""
    with (
        patch("mnist_learner.pipeline.training.set_seed") as mock_seed,
        patch("mnist_learner.pipeline.training.Learner") as mock_learner,
        patch.object(ArtifactDirectory, "save_metrics"),
        patch.object(ArtifactDirectory, "save_final", return_value=tmp_path / "model.pt"),
    ):
        mock_learner.return_value.history = []
        train(tmp_path / "run", config, CPU, datasets=datasets, use_tqdm=False, strict=strict)

    mock_seed.assert_called_once_with(config.seed, strict=strict)


@pytest.mark.unit
def test_train_loads_mnist_when_no_datasets(tmp_path, config, datasets):
    """Without explicit datasets the MNIST splits are loaded from data_root."""
    with (
        patch("mnist_learner.pipeline.training.DigitDataset") as mock_ds,
        patch("mnist_learner.pipeline.training.Learner") as mock_learner,
        patch.object(ArtifactDirectory, "save_metrics"),
        patch.object(ArtifactDirectory, "save_final", return_value=tmp_path / "model.pt"),
    ):
        mock_ds.train.return_value, mock_ds.test.return_value = datasets
        mock_learner.return_value.history = []
        train(tmp_path / "run", config, CPU, data_root=tmp_path / "data", use_tqdm=False)

    mock_ds.train.assert_called_once_with(tmp_path / "data")
    mock_ds.test.assert_called_once_with(tmp_path / "data")


# INFERENCE
@pytest.mark.integration
def test_load_trained_model_and_infer(tmp_path, config, datasets):
    """A trained run can be reloaded and used for predictions."""
    artifact_dir = tmp_path / "run"
    result = train(artifact_dir, config, CPU, datasets=datasets, use_tqdm=False)

    model = load_trained_model(artifact_dir, CPU)

    assert not model.training
    for key, value in result.model.state_dict().items():
        assert torch.equal(value, model.state_dict()[key])

    images = datasets[1].images[:3]
    predictions = infer(artifact_dir, CPU, images)
    assert len(predictions) == 3
    assert all(0 <= p < 10 for p in predictions)

    single = infer(artifact_dir, CPU, images[0])
    assert single == predictions[:1]


@pytest.mark.unit
def test_load_trained_model_without_config(tmp_path):
    """A directory without config.json cannot be loaded."""
    with pytest.raises(ConfigError):
        load_trained_model(tmp_path, CPU)


@pytest.mark.unit
def test_load_trained_model_without_weights(tmp_path, config):
    """A config without model.pt raises FileNotFoundError."""
    config.save(tmp_path / "config.json")

    with pytest.raises(FileNotFoundError):
        load_trained_model(tmp_path, CPU)


@pytest.mark.unit
def test_infer_uses_eval_mode_predictions(tmp_path, config):
    """Predictions are the arg-max of the eval-mode logits."""
    model = config.model.init(CPU)
    artifacts = ArtifactDirectory(root=tmp_path)
    config.save(artifacts.config_path)
    artifacts.save_final(model)
    images = np.random.default_rng(0).integers(0, 256, (4, 28, 28), dtype=np.uint8)

    predictions = infer(tmp_path, CPU, images)

    model.eval()
    normalized = (torch.from_numpy(images.astype(np.float32)) / 255.0 - 0.1307) / 0.3081
    with torch.no_grad():
        expected = model(normalized).argmax(dim=1).tolist()
    assert predictions == expected


@pytest.mark.integration
def test_single_epoch_scenario_counts(tmp_path):
    """1 epoch, batch size 2, 4 train and 2 valid samples: 2 train steps, 1 valid step, 1 checkpoint, 1 final save."""
    from mnist_learner.trainer import engine

    cfg = TrainingConfig(
        model=ModelConfig(num_classes=10, hidden_size=8),
        optimizer=AdamConfig(),
        num_epochs=1,
        batch_size=2,
        num_workers=0,
        seed=7,
    )
    datasets = (
        create_synthetic_digits(samples=4, seed=1),
        create_synthetic_digits(samples=2, seed=2),
    )

    with (
        patch("mnist_learner.trainer.learner.train_step", wraps=engine.train_step) as mock_train,
        patch("mnist_learner.trainer.learner.valid_step", wraps=engine.valid_step) as mock_valid,
        patch.object(
            ArtifactDirectory, "checkpoint", autospec=True, side_effect=ArtifactDirectory.checkpoint
        ) as mock_checkpoint,
        patch.object(
            ArtifactDirectory, "save_final", autospec=True, side_effect=ArtifactDirectory.save_final
        ) as mock_final,
    ):
        train(tmp_path / "run", cfg, CPU, datasets=datasets, use_tqdm=False)

    assert mock_train.call_count == 2
    assert mock_valid.call_count == 1
    assert mock_checkpoint.call_count == 1
    assert mock_final.call_count == 1
    assert (tmp_path / "run" / "model.pt").exists()
