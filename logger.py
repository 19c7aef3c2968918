"""
Status logger - keeps the status line and a bounded history of queue steps.
"""

from datetime import datetime
from typing import List, Sequence
from dataclasses import dataclass


@dataclass
class LogEntry:
    """A single log line."""
    timestamp: datetime
    message: str
    level: str = "INFO"

    def __str__(self) -> str:
        time_str = self.timestamp.strftime("%H:%M:%S")
        return f"[{time_str}] {self.level}: {self.message}"


class StatusLogger:
    """
    Records status updates and step invocations for the CLI and the step panel.
    """

    def __init__(self, max_entries: int = 100):
        """
        Args:
            max_entries: Maximum number of log entries to keep in memory
        """
        self._log_entries: List[LogEntry] = []
        self._max_entries = max(1, max_entries)
        self._current_status = "Ready"
        self._steps_run = 0

    def log_info(self, message: str) -> None:
        self._add_entry(message, "INFO")

    def log_warning(self, message: str) -> None:
        self._add_entry(message, "WARNING")

    def log_error(self, message: str) -> None:
        self._add_entry(message, "ERROR")

    def log_step(self, path: Sequence[int], label: str) -> LogEntry:
        """
        Record that the leaf at ``path`` was invoked.

        Returns:
            The entry that was added
        """
        self._steps_run += 1
        location = "/".join(str(i) for i in path) or "-"
        return self._add_entry(f"step {self._steps_run}: {location} {label}", "STEP")

    def update_status(self, status: str) -> None:
        self._current_status = status
        self.log_info(status)

    def get_current_status(self) -> str:
        return self._current_status

    def get_steps_run(self) -> int:
        return self._steps_run

    def get_recent_logs(self, count: int = 10) -> List[LogEntry]:
        """Return the ``count`` most recent entries, oldest first."""
        if count <= 0:
            return []
        return self._log_entries[-count:]

    def get_all_logs(self) -> List[LogEntry]:
        return self._log_entries.copy()

    def clear_logs(self) -> None:
        self._log_entries.clear()
        self.log_info("Log history cleared")

    def _add_entry(self, message: str, level: str) -> LogEntry:
        entry = LogEntry(timestamp=datetime.now(), message=message, level=level)
        self._log_entries.append(entry)

        if len(self._log_entries) > self._max_entries:
            self._log_entries = self._log_entries[-self._max_entries:]
        return entry

    def export_logs_to_file(self, filepath: str) -> bool:
        """
        Export all logs to a text file.

        Args:
            filepath: Path where the log file should be saved

        Returns:
            bool: True if export was successful
        """
        try:
            with open(filepath, 'w', encoding='utf-8') as f:
                f.write("Action Queue - Log Export\n")
                f.write(f"Generated: {datetime.now()}\n")
                f.write("=" * 50 + "\n\n")

                for entry in self._log_entries:
                    time_str = entry.timestamp.strftime("%Y-%m-%d %H:%M:%S")
                    f.write(f"[{time_str}] {entry.level}: {entry.message}\n")

            return True
        except OSError as e:
            print(f"Failed to export logs: {e}")
            return False
