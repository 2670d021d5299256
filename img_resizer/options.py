import argparse

from dataclasses import dataclass
from img_resizer import PROGRAM_NAME
from typing import Optional, Sequence
from img_resizer.settings import Settings
from img_resizer.utils.exceptions import OptionError

DEFAULT_WIDTH = 100
DEFAULT_HEIGHT = 0

USAGE_TEXT = f"""Usage Examples:

Single Image:
{PROGRAM_NAME} -s {{PATH_TO_SOURCE_IMG}} -o {{PATH_FOR_RESIZED_IMG}} -w {{INT_WIDTH}} -h {{INT_HEIGHT}}

Watch a directory:
{PROGRAM_NAME} -wm true -wid {{DIR_TO_WATCH}} -wod {{OUTPUT_DIR}} -w {{INT_WIDTH}} -h {{INT_HEIGHT}}

Notes:
If no height or width is specified, {DEFAULT_WIDTH} width by {DEFAULT_HEIGHT} height is used for the resize. Pass 0 in for either width or height to maintain aspect ratio.

If no watch directory is defined, it will create 'in' and 'out' directories where {PROGRAM_NAME} is run.
"""


@dataclass(frozen=True)
class Configuration:
    source_path: str = ""
    output_path: str = ""
    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    watch_mode: bool = False
    watch_in_dir: str = ""
    watch_out_dir: str = ""
    show_help: bool = False


class OptionParser(argparse.ArgumentParser):
    """ArgumentParser, который не завершает процесс при ошибке"""

    def error(self, message):
        raise OptionError(message)


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a valid integer")
    if number < 0:
        raise argparse.ArgumentTypeError(f"'{value}' must not be negative")
    return number


def boolean(value: str) -> bool:
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise argparse.ArgumentTypeError(f"'{value}' is not a valid boolean")


def build_parser(settings: Optional[Settings] = None) -> OptionParser:
    settings = settings or Settings()

    # -h занят под высоту, поэтому справка только через --help
    parser = OptionParser(
        prog=PROGRAM_NAME,
        usage=argparse.SUPPRESS,
        add_help=False,
        allow_abbrev=False,
    )
    parser.add_argument(
        "-s",
        "--imageSource",
        dest="source_path",
        metavar="PATH",
        default="",
        help="image file path to transform.",
    )
    parser.add_argument(
        "-o",
        "--imageOut",
        dest="output_path",
        metavar="PATH",
        default="",
        help="new resized image path",
    )
    parser.add_argument(
        "-w",
        "--imageWidth",
        dest="width",
        metavar="INT",
        type=non_negative_int,
        default=DEFAULT_WIDTH,
        help="width for new image, must be an integer",
    )
    parser.add_argument(
        "-h",
        "--imageHeight",
        dest="height",
        metavar="INT",
        type=non_negative_int,
        default=DEFAULT_HEIGHT,
        help="height for new image, must be an integer",
    )
    parser.add_argument(
        "-wm",
        "--watchMode",
        dest="watch_mode",
        metavar="BOOL",
        type=boolean,
        default=False,
        help="use watch mode, only valid option is true",
    )
    parser.add_argument(
        "-wid",
        "--watchInDir",
        dest="watch_in_dir",
        metavar="DIR",
        default=settings.WATCH_IN_DIR,
        help="directory to watch for changes",
    )
    parser.add_argument(
        "-wod",
        "--watchOutDir",
        dest="watch_out_dir",
        metavar="DIR",
        default=settings.WATCH_OUT_DIR,
        help="directory where files being watched output to",
    )
    parser.add_argument(
        "--help",
        dest="show_help",
        action="store_true",
        help="show this message and exit",
    )
    return parser


def parse_options(
    argv: Sequence[str], settings: Optional[Settings] = None
) -> Configuration:
    """Разбирает аргументы. При ошибке бросает OptionError."""
    parser = build_parser(settings)
    args = parser.parse_args(list(argv))
    return Configuration(**vars(args))


def format_help(parser: Optional[OptionParser] = None) -> str:
    parser = parser or build_parser()
    return f"{USAGE_TEXT}\n{parser.format_help()}"
