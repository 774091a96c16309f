"""Command-line interface: ``tinypress FILE [FILE ...]``."""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import requests

from tinypress import __version__
from tinypress.core.config import UNSET, ResizeMethod, ReturnPath, resolve_options
from tinypress.core.defaults import TinifyDefaults
from tinypress.core.exceptions import TinifyError
from tinypress.core.image_compressor import ImageCompressor
from tinypress.services.statistics import StatisticsTracker
from tinypress.utils.file_processor import MIME_TYPES
from tinypress.utils.logger import get_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinypress",
        description="Shrink PNG and JPEG images with the TinyPNG API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tinypress example.png
  tinypress photos/ --recursive --overwrite
  tinypress example.png --suffix _small --return-path all
  tinypress example.png --resize-method fit --width 300 --height 150
  tinypress --show-defaults

The API key is read from --key, or else the TINY_API environment variable.
""",
    )
    parser.add_argument("files", nargs="*", type=Path, help="Image files or directories to shrink")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    options = parser.add_argument_group("tinify options")
    options.add_argument(
        "--overwrite", action="store_const", const=True, default=None, help="Replace the original files"
    )
    options.add_argument(
        "--no-overwrite",
        dest="overwrite",
        action="store_const",
        const=False,
        help="Write a new file even if the defaults say to overwrite",
    )
    options.add_argument("--suffix", default=None, help="Suffix for new file names (default: _tiny)")
    options.add_argument("--quiet", action="store_const", const=True, default=None, help="No per-file summary")
    options.add_argument(
        "--no-quiet", dest="quiet", action="store_const", const=False, help="Show the per-file summary"
    )
    options.add_argument(
        "--return-path",
        choices=[p.value for p in ReturnPath],
        default=None,
        help="Print the path of each shrunk file in this form",
    )
    options.add_argument("--resize-method", choices=[m.value for m in ResizeMethod], default=None)
    options.add_argument("--width", type=int, default=None, help="Target width in pixels")
    options.add_argument("--height", type=int, default=None, help="Target height in pixels")
    options.add_argument("--key", default=None, help="TinyPNG API key")
    options.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with default options (default: tinify.yml at the project root)",
    )

    parser.add_argument("--recursive", action="store_true", help="Descend into sub-directories")
    parser.add_argument("--show-defaults", action="store_true", help="Show the default options and exit")

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )
    logging_group.add_argument("--log-dir", default="logs", help="Directory for log files (default: logs)")
    logging_group.add_argument("--no-log-file", action="store_true", help="Only log to the console")
    return parser


def collect_files(paths: Sequence[Path], recursive: bool = False) -> List[Path]:
    """Expand directories into the supported images they contain; files are kept as given."""
    files: List[Path] = []
    for path in paths:
        if path.is_dir():
            candidates = path.rglob("*") if recursive else path.iterdir()
            files.extend(sorted(f for f in candidates if f.is_file() and f.suffix.lower() in MIME_TYPES))
        else:
            files.append(path)
    return files


def _call_options(args: argparse.Namespace, parser: argparse.ArgumentParser) -> Dict[str, Any]:
    resize: Any = UNSET
    if args.resize_method is not None:
        resize = {"method": args.resize_method, "width": args.width, "height": args.height}
    elif args.width is not None or args.height is not None:
        parser.error("--width/--height need --resize-method")

    def given(value: Any) -> Any:
        return UNSET if value is None else value

    return {
        "overwrite": given(args.overwrite),
        "suffix": given(args.suffix),
        "quiet": given(args.quiet),
        "return_path": given(args.return_path),
        "resize": resize,
    }


def _print_path(paths: Any) -> None:
    if paths is None:
        return
    if isinstance(paths, dict):
        for label, value in paths.items():
            print(f"  {label}: {value if value is not None else 'NA'}")
    else:
        print(f"  {paths}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logger = get_logger()
    logger.configure(log_level=args.log_level, log_dir=args.log_dir, enable_file=not args.no_log_file)

    defaults = TinifyDefaults()
    if args.config is not None:
        defaults.load_file(args.config)
    else:
        defaults.load_project_file()

    if args.show_defaults:
        defaults.describe()
        return 0

    if not args.files:
        parser.error("at least one file or directory is required")

    try:
        options = resolve_options(_call_options(args, parser), defaults.as_dict())
    except TinifyError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    files = collect_files(args.files, recursive=args.recursive)
    if not files:
        print("No PNG or JPEG files found.")
        return 0

    tracker = StatisticsTracker()

    with requests.Session() as session:
        compressor = ImageCompressor(options, session=session)
        for file in files:
            try:
                result = compressor.compress(file, key=args.key, defaults=defaults)
            except TinifyError as e:
                logger.debug(f"Failed to shrink {file}", exc_info=True)
                print(f"Error: {file}: {e}", file=sys.stderr)
                tracker.add_error(str(file), e)
                continue
            tracker.add_result(result)
            _print_path(result.paths)

    print("\nCompression Complete!")
    for line in tracker.summary_lines():
        print(line)

    return 1 if tracker.get_stats()["errors"] else 0
