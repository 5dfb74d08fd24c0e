"""
Centralized logging module with Rich formatting and file output.
Provides console logging, configuration panels and recommendation tables.
"""
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.theme import Theme

# Custom theme for the project
CUSTOM_THEME = Theme({
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "bold green",
    "metric": "bold magenta",
    "step": "bold blue",
})

# Global console instance
console = Console(theme=CUSTOM_THEME)

# Logger instances cache
_loggers: Dict[str, logging.Logger] = {}

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent.parent
LOG_DIR = PROJECT_ROOT / "logs"
DEFAULT_LOG_FILE = "cinematch.log"


def setup_file_handler(logger: logging.Logger, log_file: str) -> None:
    """Setup file handler for a logger without size limit."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(
        LOG_DIR / log_file,
        mode='a',
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)

    # Detailed format for file
    file_formatter = logging.Formatter(
        '%(asctime)s | %(name)-28s | %(levelname)-8s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    file_handler.setFormatter(file_formatter)
    logger.addHandler(file_handler)


def get_logger(
    name: str = "cinematch",
    log_file: Optional[str] = None,
    level: int = logging.DEBUG
) -> logging.Logger:
    """
    Get or create a logger with Rich console output and file logging.

    Args:
        name: Logger name (usually module name)
        log_file: Optional specific log file name. Defaults to 'cinematch.log'
        level: Logging level

    Returns:
        Configured logger instance
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    # Clear existing handlers
    logger.handlers.clear()

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(logging.INFO)
    logger.addHandler(rich_handler)

    setup_file_handler(logger, log_file or DEFAULT_LOG_FILE)

    _loggers[name] = logger
    return logger


def log_header(title: str, logger: Optional[logging.Logger] = None):
    """Display a prominent header for major sections."""
    logger = logger or get_logger()
    console.print()
    console.print(Panel(f"[bold white]{title}[/bold white]", style="blue", expand=False))
    logger.info(f"{'='*60}")
    logger.info(f"  {title}")
    logger.info(f"{'='*60}")


def log_config(config: Dict[str, Any], title: str = "Configuration", logger: Optional[logging.Logger] = None):
    """Display configuration in a formatted panel."""
    logger = logger or get_logger()

    from rich.pretty import Pretty
    console.print(Panel(Pretty(config), title=f"⚙️ {title}", expand=False))

    # Log to file
    logger.info(f"--- {title} ---")
    _log_dict_recursive(config, logger, indent=0)


def _log_dict_recursive(d: Dict, logger: logging.Logger, indent: int = 0):
    """Recursively log dictionary to file."""
    prefix = "  " * indent
    for key, value in d.items():
        if isinstance(value, dict):
            logger.info(f"{prefix}{key}:")
            _log_dict_recursive(value, logger, indent + 1)
        else:
            logger.info(f"{prefix}{key}: {value}")


def log_recommendations_table(
    result,
    title: str = "Top Recommendations",
    logger: Optional[logging.Logger] = None
):
    """Display a RecommendationResult as a summary panel and a movie table."""
    logger = logger or get_logger()

    summary = result.summary
    summary_table = Table(title="🎯 User Preferences Summary", show_header=True, header_style="bold blue")
    summary_table.add_column("Preference", style="cyan")
    summary_table.add_column("Understood as", style="yellow")
    for label, value in summary.labelled_items():
        summary_table.add_row(label, value or "Not specified")
    console.print(summary_table)

    table = Table(title=f"🎬 {title}", show_header=True, header_style="bold magenta")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Title", style="bold white")
    table.add_column("Year", style="cyan", justify="right")
    table.add_column("Genre", style="green")
    table.add_column("Why Recommended")
    table.add_column("Similar To", style="italic")

    for idx, movie in enumerate(result.recommendations, start=1):
        table.add_row(
            str(idx), movie.title, movie.year, movie.genre,
            movie.why_recommended, movie.similar_to,
        )

    console.print(table)

    logger.info(f"--- {title} ({len(result.recommendations)} curated picks) ---")
    for movie in result.recommendations:
        logger.info(f"  {movie.title} ({movie.year}) | {movie.genre} | similar to {movie.similar_to}")


def log_success(message: str, logger: Optional[logging.Logger] = None):
    """Log success message with checkmark."""
    logger = logger or get_logger()
    console.print(f"[success]✅ {message}[/success]")
    logger.info(f"SUCCESS: {message}")


def log_warning(message: str, logger: Optional[logging.Logger] = None):
    """Log warning message."""
    logger = logger or get_logger()
    console.print(f"[warning]⚠️ {message}[/warning]")
    logger.warning(message)


def log_error(message: str, logger: Optional[logging.Logger] = None):
    """Log error message."""
    logger = logger or get_logger()
    console.print(f"[error]❌ {message}[/error]")
    logger.error(message)
