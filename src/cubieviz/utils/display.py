"""
User-friendly console output for cubieviz.
"""

import time
from collections import deque
from typing import Any, Deque, Dict, List, Optional, Sequence, Tuple
from datetime import datetime


class ProgressDisplay:
    """Single-line progress bar, used while assets load."""

    def __init__(self, total_steps: int = 100, label: str = "Progress"):
        self.total_steps = max(total_steps, 1)
        self.label = label
        self.current_step = 0
        self.start_time = time.time()

    def update(self, step: int, description: str = ""):
        """Update progress display."""
        self.current_step = step
        progress = min(step / self.total_steps, 1.0)
        elapsed = time.time() - self.start_time

        bar_length = 30
        filled_length = int(bar_length * progress)
        bar = "█" * filled_length + "░" * (bar_length - filled_length)

        line = f"\r⏳ {self.label}: [{bar}] {progress:.0%} ({step}/{self.total_steps}) | {self._format_time(elapsed)}"
        if description:
            line += f" | {description}"

        print(line, end="", flush=True)

    def finish(self, success: bool = True):
        """Finish progress display."""
        total_time = self._format_time(time.time() - self.start_time)
        if success:
            print(f"\n✅ Done in {total_time}")
        else:
            print(f"\n❌ Stopped after {total_time}")

    def _format_time(self, seconds: float) -> str:
        if seconds < 60:
            return f"{seconds:.1f}s"
        minutes = int(seconds // 60)
        secs = int(seconds % 60)
        return f"{minutes}m {secs}s"


class StatusDisplay:
    """Formatted console sections, tables and status lines."""

    ICONS = {
        "info": "ℹ️",
        "success": "✅",
        "warning": "⚠️",
        "error": "❌",
        "loading": "⏳",
        "processing": "🔄",
    }

    @staticmethod
    def print_header(title: str, width: int = 72):
        """Print a formatted header."""
        print("\n" + "=" * width)
        print(f"{title:^{width}}")
        print("=" * width)

    @staticmethod
    def print_section(title: str, width: int = 60):
        """Print a section header."""
        print(f"\n📋 {title}")
        print("-" * width)

    @staticmethod
    def print_config(config_dict: Dict[str, Any], title: str = "Configuration"):
        """Print configuration in a nice format."""
        StatusDisplay.print_section(title)
        for key, value in config_dict.items():
            print(f"  {key:<20} : {value}")

    @staticmethod
    def print_status(message: str, status: str = "info"):
        """Print a status message with appropriate emoji."""
        icon = StatusDisplay.ICONS.get(status, StatusDisplay.ICONS["info"])
        timestamp = datetime.now().strftime("%H:%M:%S")
        print(f"{icon} [{timestamp}] {message}")

    @staticmethod
    def print_results(results: Dict[str, Any], title: str = "Results"):
        """Print results in a nice format."""
        StatusDisplay.print_section(title)
        for key, value in results.items():
            if isinstance(value, bool):
                icon = "✅" if value else "❌"
                print(f"  {key:<20} : {icon} {value}")
            elif isinstance(value, float):
                print(f"  {key:<20} : {value:.3f}")
            else:
                print(f"  {key:<20} : {value}")

    @staticmethod
    def print_table(headers: Sequence[str], rows: List[Tuple[Any, ...]], width: int = 10):
        """Print rows as fixed-width columns."""
        print("  " + "".join(f"{h:>{width}}" for h in headers))
        print("  " + "-" * (width * len(headers)))
        for row in rows:
            print("  " + "".join(f"{str(v):>{width}}" for v in row))

    @staticmethod
    def print_separator(char: str = "-", length: int = 60):
        """Print a separator line."""
        print(char * length)

    @staticmethod
    def ask_confirmation(message: str) -> bool:
        """Ask for user confirmation."""
        response = input(f"❓ {message} (y/N): ").strip().lower()
        return response in ['y', 'yes']


class LiveLogger:
    """
    Verbose-gated status logging.

    The most recent ``history_limit`` messages are kept in ``history`` as
    ``(level, message)`` regardless of verbosity so callers can inspect the
    diagnostics later.
    """

    def __init__(self, verbose: bool = True, history_limit: int = 1000):
        self.verbose = verbose
        self.history: Deque[Tuple[str, str]] = deque(maxlen=history_limit)

    def _emit(self, level: str, message: str, status: Optional[str] = None):
        self.history.append((level, message))
        if self.verbose:
            StatusDisplay.print_status(message, status or level)

    def log_action(self, action_name: str, details: str = ""):
        """Log an action being performed."""
        message = f"Executing: {action_name}"
        if details:
            message += f" - {details}"
        self._emit("action", message, "processing")

    def log_result(self, message: str, success: bool = True):
        """Log a result."""
        self._emit("result", message, "success" if success else "error")

    def log_info(self, message: str):
        self._emit("info", message)

    def log_warning(self, message: str):
        self._emit("warning", message)

    def log_error(self, message: str):
        self._emit("error", message)

    def messages(self, level: Optional[str] = None) -> List[str]:
        """Return logged messages, optionally only those of one level."""
        return [msg for lvl, msg in self.history if level is None or lvl == level]
