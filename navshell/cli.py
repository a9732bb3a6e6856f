"""Command-line front door for navshell.

Parses options, resolves durable storage and logging, then either answers a
one-shot query (``--classify``, ``--state``, ``--reset``) or launches the
interactive terminal shell.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from .host import CONTENT_SCROLL_ID, Document, ScrollContainer, Window
from .motion import MOTION_LEVELS, motion_policy
from .navigation import NavigationStateMachine
from .preferences import DemoModeStore, MotionLevelStore, SidebarPreferenceStore
from .runtime.geometry import CellGeometry, parse_cell_size, parse_dimensions
from .scheduler import ManualScheduler
from .storage import JsonFileStorage, KeyValueStore
from .viewport import classify_viewport

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _dimensions(value: str) -> tuple[int, int]:
    """argparse type for ``WIDTHxHEIGHT`` values."""
    try:
        return parse_dimensions(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def _cell_size(value: str) -> CellGeometry:
    try:
        return parse_cell_size(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def configure_logging(log_file: Path | None, verbose: bool) -> None:
    """Attach a handler to the ``navshell`` logger.

    The interactive shell draws on the terminal, so records only go to
    stderr for one-shot commands; otherwise they need ``--log-file``.
    """
    if log_file is None and not verbose:
        return
    handler: logging.Handler
    if log_file is not None:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger = logging.getLogger("navshell")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)


def describe_state(storage: KeyValueStore, width: int, height: int) -> dict[str, object]:
    """Return what a freshly mounted shell would expose at ``width``x``height`` px."""
    window = Window(width, height)
    document = Document()
    document.add_element(ScrollContainer(CONTENT_SCROLL_ID))
    preferences = SidebarPreferenceStore(storage)
    motion_level = MotionLevelStore(storage).read()
    machine = NavigationStateMachine(
        window,
        document,
        preferences,
        ManualScheduler(),
        motion_level=motion_level,
    )
    context = machine.mount()
    machine.unmount()
    tokens = motion_policy(motion_level, reduced_motion=context.reduced_motion)
    return {
        "viewport": {"width": width, "height": height},
        **context.as_dict(),
        "stored_preference": preferences.read(),
        "motion_level": motion_level,
        "topbar_blur_px": tokens.topbar_blur_px,
        "demo": DemoModeStore(storage).is_demo(),
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Responsive navigation shell for the terminal.",
    )
    parser.add_argument("path", nargs="?", default=None, help="File to show in the content pane.")
    parser.add_argument("--classify", metavar="WxH", type=_dimensions, help="Print the device mode for a viewport and exit.")
    parser.add_argument("--state", metavar="WxH", type=_dimensions, help="Print the navigation state for a viewport and exit.")
    parser.add_argument("--reset", action="store_true", help="Forget the stored sidebar preference and exit.")
    demo = parser.add_mutually_exclusive_group()
    demo.add_argument("--demo", dest="demo", action="store_const", const=True, default=None, help="Turn demo mode on.")
    demo.add_argument("--no-demo", dest="demo", action="store_const", const=False, help="Turn demo mode off.")
    parser.add_argument("--motion", choices=MOTION_LEVELS, default=None, help="Persist the motion level.")
    parser.add_argument(
        "--cell-size",
        metavar="WxH",
        type=_cell_size,
        default=CellGeometry(),
        help="Pixel size of one terminal cell (default: 10x20).",
    )
    parser.add_argument("--storage", type=Path, default=None, help="Preference file (default: user config dir).")
    parser.add_argument("--style", default="monokai", help="Pygments style name for content and --state output.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument("--log-file", type=Path, default=None, help="Write log records to this file.")
    parser.add_argument("--verbose", action="store_true", help="Log debug records.")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and run the requested command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_file, args.verbose)
    storage = JsonFileStorage(args.storage)

    if args.demo is not None:
        demo = DemoModeStore(storage)
        if args.demo:
            demo.enable()
        else:
            demo.disable()
    if args.motion is not None:
        MotionLevelStore(storage).write(args.motion)

    if args.classify is not None:
        if args.state is not None:
            raise SystemExit("Cannot combine --classify with --state.")
        width, height = args.classify
        sys.stdout.write(classify_viewport(width, height) + "\n")
        return

    if args.reset:
        SidebarPreferenceStore(storage).remove()
        if args.state is None:
            return

    if args.state is not None:
        from .runtime.highlight import colorize_json

        width, height = args.state
        text = json.dumps(describe_state(storage, width, height), indent=2) + "\n"
        no_color = args.no_color or not sys.stdout.isatty()
        sys.stdout.write(colorize_json(text, style=args.style, no_color=no_color))
        return

    content_path = None
    if args.path is not None:
        content_path = Path(args.path)
        if not content_path.is_file():
            raise SystemExit(f"Not a file: {content_path}")

    from .runtime import run_shell
    from .runtime.session import SessionOptions

    run_shell(
        storage,
        content_path=content_path,
        options=SessionOptions(no_color=args.no_color, geometry=args.cell_size),
        style=args.style,
    )


if __name__ == "__main__":
    main()
