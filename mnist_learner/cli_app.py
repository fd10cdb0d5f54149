"""
MNIST Learner Command-Line Interface.

Provides the ``mnist-learner`` entry point with three commands:

- ``mnist-learner init``  : generate a starter recipe YAML with all defaults
- ``mnist-learner train`` : train a classifier from a YAML recipe
- ``mnist-learner infer`` : predict one MNIST test digit with a trained model

Usage:
    mnist-learner init
    mnist-learner train recipe.yaml --artifact-dir artifacts/mnist
    mnist-learner train recipe.yaml --set num_epochs=1 --set model.hidden_size=128
    mnist-learner infer artifacts/mnist --index 42
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import typer

app = typer.Typer(
    name="mnist-learner",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)


# ── App callback ────────────────────────────────────────────────────────────


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from importlib.metadata import version as pkg_version

        typer.echo(f"mnist-learner {pkg_version('mnist-learner')}")
        raise typer.Exit()


@app.callback()
def main(
    _: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
) -> None:
    """MNIST Learner: reproducible digit classifier training."""
    ...  # pragma: no cover


# ── Commands ────────────────────────────────────────────────────────────────


@app.command()
def init(
    output: Annotated[
        Path,
        typer.Argument(help="Output YAML file path."),
    ] = Path("recipe.yaml"),
    force: Annotated[
        bool,
        typer.Option("--force", "-f", help="Overwrite existing file."),
    ] = False,
) -> None:
    """Generate a starter recipe with all config fields and defaults."""
    from .core import dump_recipe

    if output.exists() and not force:
        typer.echo(f"Error: '{output}' already exists. Use --force to overwrite.", err=True)
        raise typer.Exit(code=1)

    dump_recipe(_build_init_dict(), output, header=_INIT_HEADER.format(filename=output.name))
    typer.echo(f"Recipe created: {output}")
    typer.echo(f"Run it with:   mnist-learner train {output}")


@app.command()
def train(
    recipe: Annotated[
        Path,
        typer.Argument(help="Path to YAML recipe file."),
    ],
    artifact_dir: Annotated[
        Path | None,
        typer.Option("--artifact-dir", "-o", help="Artifact directory (wiped at start)."),
    ] = None,
    device: Annotated[
        str,
        typer.Option("--device", "-d", help="auto, cpu, cuda, cuda:N or mps."),
    ] = "auto",
    data_root: Annotated[
        Path | None,
        typer.Option("--data-root", help="MNIST download/cache directory."),
    ] = None,
    set_: Annotated[
        list[str] | None,
        typer.Option(
            "--set",
            help="Override config value (repeatable): key.path=value",
        ),
    ] = None,
    strict: Annotated[
        bool,
        typer.Option("--strict", help="Enforce deterministic torch algorithms."),
    ] = False,
) -> None:
    """Train a classifier from a YAML recipe."""
    from .core import (
        DATASET_DIR,
        DEFAULT_ARTIFACT_DIR,
        LOGGER_NAME,
        LogStyle,
        TrainingConfig,
        to_device_obj,
    )
    from .pipeline import train as run_training

    if not recipe.exists():
        typer.echo(f"Error: recipe not found: {recipe}", err=True)
        raise typer.Exit(code=1)

    overrides = _parse_overrides(set_ or [])
    cfg = TrainingConfig.from_recipe(recipe, overrides=overrides or None)
    logger = logging.getLogger(LOGGER_NAME)

    try:
        result = run_training(
            artifact_dir=artifact_dir or DEFAULT_ARTIFACT_DIR,
            config=cfg,
            device=to_device_obj(device),
            data_root=data_root or DATASET_DIR,
            strict=strict,
        )
    except KeyboardInterrupt:
        logger.warning(f"{LogStyle.WARNING} Interrupted by user.")
        raise SystemExit(1)

    except Exception as e:  # top-level catch-all for logging; re-raises
        logger.error(f"{LogStyle.WARNING} Training failed: {e}", exc_info=True)
        raise

    typer.echo(f"Model saved: {result.model_path}")


@app.command()
def infer(
    artifact_dir: Annotated[
        Path,
        typer.Argument(help="Artifact directory of a completed training run."),
    ],
    index: Annotated[
        int,
        typer.Option("--index", "-i", min=0, help="Index into the MNIST test split."),
    ] = 0,
    device: Annotated[
        str,
        typer.Option("--device", "-d", help="auto, cpu, cuda, cuda:N or mps."),
    ] = "auto",
    data_root: Annotated[
        Path | None,
        typer.Option("--data-root", help="MNIST download/cache directory."),
    ] = None,
) -> None:
    """Predict the label of one MNIST test digit."""
    from .core import DATASET_DIR, to_device_obj
    from .data_handler import DigitDataset
    from .pipeline import infer as run_inference

    dataset = DigitDataset.test(data_root or DATASET_DIR)
    if index >= len(dataset):
        typer.echo(f"Error: index {index} out of range (0..{len(dataset) - 1})", err=True)
        raise typer.Exit(code=1)

    image, label = dataset[index]
    (predicted,) = run_inference(artifact_dir, to_device_obj(device), image)
    typer.echo(f"Predicted {predicted} | Expected {label}")


# ── Private helpers ─────────────────────────────────────────────────────────

_INIT_HEADER = """\
# ==============================================================================
# MNIST Learner: Starter Recipe (generated by `mnist-learner init`)
# ==============================================================================
# Usage:   mnist-learner train {filename}
#
# Edit the values you need. Set optimizer.grad_clip_norm to enable clipping.
# ==============================================================================

"""

_DEFAULT_NUM_CLASSES = 10
_DEFAULT_HIDDEN_SIZE = 512


def _auto_cast(value: str) -> Any:
    """
    Cast a CLI string to the appropriate Python scalar type.

    Args:
        value: Raw string from the command line.

    Returns:
        Converted bool, None, int, float, or the original string.
    """
    low = value.lower()
    if low in ("true", "false"):
        return low == "true"
    if low in ("null", "none"):
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value


def _parse_overrides(raw: list[str]) -> dict[str, Any]:
    """
    Parse ``key.path=value`` strings into a flat override dict.

    Raises:
        typer.BadParameter: If an item has no ``=`` or an empty key.
    """
    overrides: dict[str, Any] = {}
    for item in raw:
        if "=" not in item:
            raise typer.BadParameter(f"Override must use key=value format, got: '{item}'")
        key, _, val = item.partition("=")
        key = key.strip()
        if not key:
            raise typer.BadParameter(f"Empty key in override: '{item}'")
        overrides[key] = _auto_cast(val.strip())
    return overrides


def _build_init_dict() -> dict[str, Any]:
    """Complete config dict with every default, via ``model_dump(mode="json")``."""
    from .core.config import AdamConfig, ModelConfig, TrainingConfig

    cfg = TrainingConfig(
        model=ModelConfig(num_classes=_DEFAULT_NUM_CLASSES, hidden_size=_DEFAULT_HIDDEN_SIZE),
        optimizer=AdamConfig(),
    )
    return cfg.to_dict()
