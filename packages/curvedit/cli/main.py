"""Command-line interface for curvedit.

Evaluates the stock demo curve without a host UI.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
import sys

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from curvedit.core.config.loader import configure_logging, load_editor_config
from curvedit.core.config.models import EditorConfig, LoggingConfig
from curvedit.core.curves import splines
from curvedit.core.curves.model import CurveModel
from curvedit.core.curves.models import ControlPoint, CurveType
from curvedit.core.utils.json import dumps

console = Console()
logger = logging.getLogger(__name__)

DEMO_POINTS = ((0.0, 0.0), (0.5, 30.0), (0.8, 50.0), (1.0, 60.0))
DEMO_MIN_VALUE = 0.0
DEMO_MAX_VALUE = 100.0


def build_demo_model(
    config: EditorConfig,
    curve_type: CurveType | str | None = None,
    clamp: bool = False,
) -> CurveModel:
    """Stock four-point curve over [0, 100], using the config's curve settings."""
    settings = config.curve.model_copy(
        update={"min_value": DEMO_MIN_VALUE, "max_value": DEMO_MAX_VALUE}
    )
    if curve_type is not None:
        settings = settings.model_copy(update={"curve_type": CurveType(curve_type)})
    if clamp:
        settings = settings.model_copy(update={"clamp_enabled": True})

    points = [ControlPoint(t, v) for t, v in DEMO_POINTS]
    return CurveModel.from_settings(settings, points=points)


def run_scan(args: argparse.Namespace, config: EditorConfig) -> int:
    """Print the curve value at one normalized time."""
    model = build_demo_model(config, args.type, args.clamp)
    value = model.value_at(args.time)

    if args.json:
        console.print_json(
            dumps({"curve_type": model.curve_type.value, "time": args.time, "value": value})
        )
    else:
        console.print(
            f"[bold]{model.curve_type.value}[/bold] (v={value:.2f},t={args.time:.2f})"
        )
    return 0


def run_tessellate(args: argparse.Namespace, config: EditorConfig) -> int:
    """Print the tessellated samples of the demo curve."""
    divisions = args.divisions if args.divisions is not None else config.render.divisions
    model = build_demo_model(config, args.type, args.clamp)

    values = splines.tessellate(
        model.curve_type, divisions, [p.value for p in model.points], model.clamp_range
    )
    times = splines.tessellate_times(divisions, [p.time for p in model.points])
    logger.debug(f"Tessellated {len(values)} samples at {divisions} divisions")

    samples = list(zip(times.tolist(), values.tolist(), strict=True))

    if args.json:
        payload = {
            "curve_type": model.curve_type.value,
            "divisions": divisions,
            "samples": [{"time": t, "value": v} for t, v in samples],
        }
        console.print_json(dumps(payload))
        return 0

    table = Table(title=f"{model.curve_type.value} ({divisions} divisions)")
    table.add_column("#", justify="right")
    table.add_column("time", justify="right")
    table.add_column("value", justify="right")
    for i, (t, v) in enumerate(samples):
        table.add_row(str(i), f"{t:.4f}", f"{v:.4f}")
    console.print(table)
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for CLI."""
    p = argparse.ArgumentParser(
        prog="curvedit",
        description="curvedit - evaluate and tessellate the demo control curve",
    )
    p.add_argument("--config", default=None, help="Path to editor config (YAML or JSON)")
    p.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        help="Override the configured log level (DEBUG, INFO, ...)",
    )
    p.add_argument("--json", action="store_true", help="Print results as JSON")

    curve_args = argparse.ArgumentParser(add_help=False)
    curve_args.add_argument(
        "--type",
        choices=[t.value for t in CurveType],
        default=None,
        help="Interpolation mode (default: from config)",
    )
    curve_args.add_argument("--clamp", action="store_true", help="Clamp output to [0, 100]")

    sub = p.add_subparsers(dest="cmd", required=True)

    scan = sub.add_parser("scan", parents=[curve_args], help="Evaluate the curve at a time")
    scan.add_argument("--time", type=float, required=True, help="Normalized time in [0, 1]")

    tess = sub.add_parser("tessellate", parents=[curve_args], help="Sample the whole curve")
    tess.add_argument(
        "--divisions",
        type=int,
        default=None,
        help="Samples per segment (default: from config)",
    )

    return p


def _load_config(args: argparse.Namespace) -> EditorConfig:
    if args.config is not None and not Path(args.config).exists():
        raise FileNotFoundError(f"Config file does not exist: {args.config}")

    config = load_editor_config(args.config)
    if args.log_level:
        config.logging = LoggingConfig.model_validate(
            {**config.logging.model_dump(), "level": args.log_level}
        )
    return config


def main(argv: list[str] | None = None) -> int:
    """Main entry point for CLI.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    p = build_arg_parser()
    args = p.parse_args(argv)

    try:
        config = _load_config(args)
    except (FileNotFoundError, ValueError, ValidationError) as e:
        console.print(f"[red]ERROR: Could not load config: {e}[/red]")
        return 1

    configure_logging(config)

    try:
        if args.cmd == "scan":
            return run_scan(args, config)
        return run_tessellate(args, config)
    except (ValueError, NotImplementedError) as e:
        logger.debug(f"Command {args.cmd} failed: {e}")
        console.print(f"[red]ERROR: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
