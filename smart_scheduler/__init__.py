"""Smart Scheduler - Find and book a meeting slot every participant can attend

Philosophy:
    Picking a meeting time is a search problem, not a guessing game.
    The engine walks the requested window in fixed steps, drops every slot
    where someone is busy, scores what is left, and books the winner for
    everyone at once or not at all.

Components:
    config_models.py: Validated YAML configuration
    logging_config.py: structlog setup
    calendar/: Calendar store, entry models, calendar reads
    scheduling/: Availability, scoring, search, booking, public operations
    cli.py: Command line entry point
"""

from pathlib import Path

# Path constants
PROJECT_ROOT = Path(__file__).parent.parent
ARGS_DIR = PROJECT_ROOT / "args"
DATA_DIR = PROJECT_ROOT / "data"

__version__ = "0.1.0"

__all__ = ["PROJECT_ROOT", "ARGS_DIR", "DATA_DIR", "__version__"]
