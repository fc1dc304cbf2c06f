"""Command line entry point: headless build or the Qt build console."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Sequence

from dotenv import load_dotenv

# Ensure repository paths are available when running from source checkout
_ROOT = Path(__file__).resolve().parents[1]
_SRC = _ROOT / "src"
for candidate in (_ROOT, _SRC):
    candidate_str = str(candidate)
    if candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

# Load environment variables from project .env if present
load_dotenv(_ROOT / ".env", override=False)

from config import AppSettings, parse_flags  # noqa: E402  (import after sys.path setup)
from utils.logger import setup_logging  # noqa: E402

from .headless import run_headless  # noqa: E402


def main(argv: Sequence[str] | None = None) -> int:
    """Package an application; ``--headless`` skips the console window."""

    args = list(argv) if argv is not None else sys.argv[1:]
    flags = parse_flags(args)
    if not flags.headless:
        from ui.main import main as launch_ui

        return launch_ui(args)

    settings = AppSettings.from_env()
    setup_logging(
        console_level=flags.log_level or settings.log_level,
        log_directory=settings.log_directory,
    )
    return run_headless(flags, settings)


if __name__ == "__main__":  # pragma: no cover - manual invocation
    raise SystemExit(main())
