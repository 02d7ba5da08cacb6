"""Command-line interface for imagechain.

Lists the available treatments, runs a treatment chain over an image
file, or captures a stabilized webcam frame (optionally processed) and
saves the result.
"""

from __future__ import annotations

import argparse
import logging
import re
import sys
from datetime import datetime
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_step(text: str):
    """Parse ``key[:name=value,...]`` into a TreatmentStep.

    Example: ``gaussian_blur:kernel_size=5,sigma_x=1.0``
    """
    from imagechain.domain.models import TreatmentStep

    key, _, rest = text.partition(":")
    key = key.strip()
    if not key:
        raise argparse.ArgumentTypeError(f"missing treatment name in {text!r}")
    params: dict[str, str] = {}
    for item in filter(None, (part.strip() for part in rest.split(","))):
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise argparse.ArgumentTypeError(f"expected name=value, got {item!r}")
        params[name.strip()] = value.strip()
    return TreatmentStep(treatment=key, params=params)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="imagechain",
        description="Composable image treatment chains with stabilized capture",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/imagechain.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("treatments", help="List available treatments and their parameters")

    step_help = "Treatment step as key[:name=value,...]; repeatable (default: chain from config)"

    process_parser = subparsers.add_parser("process", help="Run a treatment chain over an image file")
    process_parser.add_argument("input", type=Path, help="Image file to process")
    process_parser.add_argument("-t", "--treatment", dest="steps", action="append", type=parse_step, help=step_help)
    process_parser.add_argument("-o", "--output", type=Path, default=None, help="Output file path")
    process_parser.add_argument(
        "--save-intermediates", action="store_true",
        help="Also save the result of every stage",
    )

    capture_parser = subparsers.add_parser("capture", help="Capture a stabilized webcam frame")
    capture_parser.add_argument("--device", type=int, default=None, help="Camera device index")
    capture_parser.add_argument("--stable", action="store_true", help="Use the longer warm-up preset")
    capture_parser.add_argument(
        "--no-validate", action="store_true",
        help="Accept the first non-empty frame even if it is black",
    )
    capture_parser.add_argument("--skip-frames", type=int, default=None, help="Warm-up frames to discard")
    capture_parser.add_argument("--retries", type=int, default=None, help="Validated read attempts")
    capture_parser.add_argument("-t", "--treatment", dest="steps", action="append", type=parse_step, help=step_help)
    capture_parser.add_argument("-o", "--output", type=Path, default=None, help="Output file path")
    capture_parser.add_argument(
        "--save-intermediates", action="store_true",
        help="Also save the result of every stage",
    )

    return parser.parse_args(argv)


def _list_treatments() -> int:
    from imagechain.treatments import TREATMENTS

    for key, cls in TREATMENTS.items():
        print(f"{key:<14} {cls.name} -- {cls.description}")
        for name, info in cls().get_parameter_info().items():
            print(f"    {name}: {info}")
    return 0


def _output_path(settings, prefix: str, explicit: Path | None) -> Path:
    if explicit is not None:
        path = explicit
    else:
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        path = Path(settings.output.directory) / f"{prefix}_{stamp}.{settings.output.extension}"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


def _slug(label: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", label.lower()).strip("_")


def _write(path: Path, image) -> bool:
    import cv2

    if not cv2.imwrite(str(path), image):
        logger.error("Failed to write %s", path)
        return False
    logger.info("Saved %s (%dx%d)", path, image.shape[1], image.shape[0])
    return True


def _run_chain(settings, args, image, prefix: str) -> int:
    """Run the requested chain over ``image`` and save the outputs."""
    from imagechain.chain import ChainError
    from imagechain.treatments import TreatmentConfigError, build_chain

    steps = args.steps if args.steps else settings.chain.steps
    try:
        chain = build_chain(steps)
    except TreatmentConfigError as e:
        logger.error("%s", e)
        return 1

    try:
        result = chain.run(image)
    except ChainError as e:
        logger.error("Chain failed: %s", e)
        return 1

    print(f"Chain: {' -> '.join(chain.names()) or '(empty)'}")
    for index, (label, stage) in enumerate(chain.stages()):
        print(f"  [{index}] {label} ({stage.shape[1]}x{stage.shape[0]})")

    output = _output_path(settings, prefix, args.output)
    if not _write(output, result):
        return 1

    if args.save_intermediates or settings.output.save_intermediates:
        for index, (label, stage) in enumerate(chain.stages()):
            stage_path = output.with_name(f"{output.stem}_stage{index}_{_slug(label)}{output.suffix}")
            if not _write(stage_path, stage):
                return 1
    print(f"Result saved to {output}")
    return 0


def _process(settings, args) -> int:
    """Load an image file and run the chain over it."""
    from imagechain.capture.file import FileImageSource

    source = FileImageSource(args.input)
    if not source.is_available():
        logger.error("Cannot load image %s (missing file or unsupported format)", args.input)
        return 1
    image = source.get_image()
    print(f"Loaded {source.description} ({image.shape[1]}x{image.shape[0]})")
    return _run_chain(settings, args, image, prefix="result")


def _capture(settings, args) -> int:
    """Capture a stabilized webcam frame and run the chain over it."""
    from imagechain.capture.base import DegenerateFrameError, SourceUnavailableError
    from imagechain.capture.stabilize import is_black_frame
    from imagechain.capture.webcam import WebcamImageSource
    from imagechain.utils.imaging import is_empty

    capture = settings.capture
    overrides: dict[str, object] = {}
    if args.stable:
        overrides["stable"] = True
    if args.no_validate:
        overrides["validate_non_black"] = False
    if args.skip_frames is not None:
        overrides["skip_frames"] = args.skip_frames
    if args.retries is not None:
        overrides["retries"] = args.retries
    if args.device is not None:
        overrides["device_index"] = args.device
    if overrides:
        capture = capture.model_copy(update=overrides)

    webcam = WebcamImageSource(
        device_index=capture.device_index,
        resolution=capture.resolution(),
        read_retries=capture.read_retries,
    )
    try:
        with webcam:
            frame = webcam.read_stable(capture.policy())
    except SourceUnavailableError as e:
        logger.error("%s", e)
        webcam.release()
        return 1
    except DegenerateFrameError as e:
        logger.error("%s", e)
        return 1

    if is_empty(frame):
        logger.error("Could not capture a frame from %s", webcam.description)
        return 1
    if capture.validate_non_black and is_black_frame(frame, capture.black_threshold):
        logger.warning("Captured frame is black; the camera may still be warming up")
    print(f"Captured {webcam.description} ({frame.shape[1]}x{frame.shape[0]})")
    return _run_chain(settings, args, frame, prefix="webcam_result")


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the imagechain CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return 0

    from imagechain.config.settings import load_settings
    from imagechain.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"

    setup_logging(settings.logging)

    if args.command == "treatments":
        return _list_treatments()

    if args.command == "process":
        logger.info("Processing %s", args.input)
        return _process(settings, args)

    if args.command == "capture":
        logger.info("Capturing from webcam")
        return _capture(settings, args)

    return 1


if __name__ == "__main__":
    sys.exit(main())
