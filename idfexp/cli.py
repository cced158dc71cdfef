"""
idfexp command-line interface.

Usage:
    idfexp <iniFile> <outPath> [options]
    python -m idfexp <iniFile> <outPath> [options]
"""

import argparse
import pathlib
from typing import List, Optional

import numpy as np

import idfexp
from idfexp.errors import QuietAbort
from idfexp.interpreter import Interpreter
from idfexp.logging import LoggerType, LogLevel, logger
from idfexp.settings import Extent, InterpreterSettings, QuietMode

_QUIET_MODES = {"exit": QuietMode.SILENT_EXIT, "skip": QuietMode.SILENT_SKIP}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="idfexp",
        description="Evaluate scripts with expressions of IDF-files.",
    )
    parser.add_argument("ini_file", type=pathlib.Path, help="Script file (.ini)")
    parser.add_argument(
        "out_path",
        type=str,
        help='Output directory, "" for the directory of the script',
    )
    parser.add_argument(
        "-e",
        "--extent",
        type=str,
        default=None,
        help="Extent of expressions: xll,yll,xur,yur or an IDF-file",
    )
    parser.add_argument(
        "-v",
        "--nodata-value",
        type=float,
        nargs="?",
        const=np.nan,
        default=None,
        help="Use NoData as value; without a value, the NoData value of each file",
    )
    parser.add_argument(
        "-d", "--debug", action="store_true", help="Log and write debug information"
    )
    parser.add_argument(
        "-i",
        "--intermediate",
        action="store_true",
        help="Write intermediate results to <outPath>/debug",
    )
    parser.add_argument(
        "-m", "--metadata", action="store_true", help="Write metadata files for results"
    )
    parser.add_argument(
        "-q",
        "--quiet",
        choices=sorted(_QUIET_MODES),
        nargs="?",
        const="exit",
        default=None,
        help="Quiet mode for missing files or variables: stop (exit) or skip the line",
    )
    parser.add_argument(
        "-r",
        "--round",
        type=int,
        default=None,
        dest="decimal_count",
        help="Round results to this number of decimals",
    )
    parser.add_argument(
        "--log-level",
        choices=[level.name for level in LogLevel],
        default=LogLevel.INFO.name,
    )
    parser.add_argument(
        "--logger",
        choices=[logger_type.name.lower() for logger_type in LoggerType],
        default=LoggerType.PYTHON.name.lower(),
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write the log to this file",
    )
    parser.add_argument("--version", action="version", version=idfexp.__version__)
    return parser


def settings_from_args(args: argparse.Namespace) -> InterpreterSettings:
    """Convert parsed command-line arguments to settings of a script run."""
    ini_file = args.ini_file
    if not ini_file.is_file():
        raise ValueError(f"Script file not found: {ini_file}")
    base_path = ini_file.resolve().parent
    output_path = base_path if args.out_path == "" else pathlib.Path(args.out_path)
    extent = None
    if args.extent is not None:
        extent = Extent.parse(args.extent, base_path)
    quiet_mode = QuietMode.OFF if args.quiet is None else _QUIET_MODES[args.quiet]
    return InterpreterSettings(
        base_path=base_path,
        output_path=output_path,
        quiet_mode=quiet_mode,
        decimal_count=args.decimal_count,
        add_metadata=args.metadata,
        debug=args.debug,
        write_intermediate_results=args.intermediate,
        nodata_as_value=args.nodata_value is not None,
        nodata_value=np.nan if args.nodata_value is None else args.nodata_value,
        extent=extent,
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point, returns the exit code."""
    args = build_parser().parse_args(argv)
    idfexp.logging.configure(
        LoggerType[args.logger.upper()],
        LogLevel[args.log_level],
        add_default_file_handler=args.log_file is not None,
        log_file=args.log_file or "idfexp.log",
    )

    try:
        settings = settings_from_args(args)
        settings.output_path.mkdir(parents=True, exist_ok=True)
        Interpreter(settings).process_file(args.ini_file)
    except QuietAbort as e:
        logger.info(str(e))
        logger.info("Stopping quietly ...")
        return 0
    except Exception as e:
        logger.error(str(e))
        return 1
    return 0
