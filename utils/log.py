"""
Color-coded console output for the screening scripts.

Uses colorama for cross-platform terminal colors. Library code logs through
the standard logging module; these helpers are for human-facing CLI output.
"""

import datetime
import logging
import os
import sys

from colorama import Fore, Style, init

init(autoreset=True)

LOG_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "logs")


class C:
    """Color shortcuts for CLI output."""
    HEADER = Fore.CYAN + Style.BRIGHT
    STEP = Fore.BLUE + Style.BRIGHT
    OK = Fore.GREEN + Style.BRIGHT
    WARN = Fore.YELLOW + Style.BRIGHT
    ERR = Fore.RED + Style.BRIGHT
    DIM = Style.DIM
    CODE = Fore.MAGENTA + Style.BRIGHT
    SECTOR = Fore.CYAN
    VALUE = Fore.GREEN
    RESET = Style.RESET_ALL


def _ts() -> str:
    return datetime.datetime.now().strftime("%H:%M:%S")


def header(msg: str) -> None:
    """Print a bold section header."""
    print(f"\n{C.HEADER}{'=' * 60}")
    print(f"  {msg}")
    print(f"{'=' * 60}{C.RESET}\n")


def step(msg: str) -> None:
    print(f"{C.STEP}[{_ts()}] >> {msg}{C.RESET}")


def ok(msg: str) -> None:
    print(f"{C.OK}[{_ts()}] OK {msg}{C.RESET}")


def err(msg: str) -> None:
    print(f"{C.ERR}[{_ts()}] ERR {msg}{C.RESET}")


def code_msg(code: str, msg: str) -> None:
    """Print a line scoped to one security code."""
    print(f"{C.DIM}[{_ts()}]{C.RESET} {C.CODE}{code}{C.RESET} {msg}")


def summary_table(title: str, rows: list[tuple[str, str]]) -> None:
    """Print label-value pairs under a title."""
    print(f"\n{C.HEADER}{title}{C.RESET}")
    width = max((len(label) for label, _ in rows), default=0)
    for label, value in rows:
        print(f"  {label:<{width}}  {C.VALUE}{value}{C.RESET}")
    print()


def setup_verbose_logging(name: str, level: int = logging.DEBUG) -> logging.Logger:
    """
    Attach console (INFO+) and file (DEBUG+, logs/<name>.log) handlers to a logger.

    Safe to call more than once; handlers are only added the first time.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)
    if logger.handlers:
        return logger

    fmt = logging.Formatter(
        "[%(asctime)s] %(levelname)-8s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stdout)
    ch.setLevel(logging.INFO)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    os.makedirs(LOG_DIR, exist_ok=True)
    fh = logging.FileHandler(os.path.join(LOG_DIR, f"{name}.log"))
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    return logger
