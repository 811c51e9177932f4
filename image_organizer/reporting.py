import csv
import logging
from pathlib import Path
from typing import Iterable, List, Tuple

from .models import Action, Decision

ACTION_LOGGER = "image_organizer.actions"

_LEVELS = {
    Action.ERROR: logging.ERROR,
    Action.WARNING: logging.WARNING,
}


class ActionLog:
    """
    Append-only record of what a run did, one timestamped line per action:

        2024-01-01 10:00:00 [MOVED] a.jpg -> Organized Photos/...

    Entries go to the log file, to the console logger at a matching level,
    and are kept in memory for the summary. With write_file off only the
    last two happen.
    """

    def __init__(self, log_path: Path, append: bool = True, write_file: bool = True):
        self.log_path = log_path
        self.append = append
        self.write_file = write_file
        self.entries: List[Tuple[Action, str]] = []
        self._logger = logging.getLogger(ACTION_LOGGER)
        self._logger.setLevel(logging.INFO)
        self._handler = None

    def __enter__(self):
        if not self.write_file:
            return self
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._handler = logging.FileHandler(self.log_path, mode='a' if self.append else 'w', encoding='utf-8')
        self._handler.setFormatter(logging.Formatter("%(asctime)s [%(action)s] %(message)s",
                                                     datefmt="%Y-%m-%d %H:%M:%S"))
        self._logger.addHandler(self._handler)
        return self

    def __exit__(self, exc_type, exc, tb):
        if self._handler is not None:
            self._logger.removeHandler(self._handler)
            self._handler.close()
            self._handler = None
        return False

    def record(self, action: Action, message: str):
        self.entries.append((action, message))
        self._logger.log(_LEVELS.get(action, logging.INFO), message, extra={'action': action.value})


class ReportGenerator:
    HEADERS = ["Source Path", "Action", "Destination Path", "Timestamp", "Date Source", "Notes"]

    def write_decisions_csv(self, decisions: Iterable[Decision], output_csv: Path):
        """Writes one CSV row per decision taken during a run."""
        count = 0
        with open(output_csv, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(self.HEADERS)
            for d in decisions:
                writer.writerow([
                    str(d.path),
                    d.action.value,
                    str(d.destination) if d.destination else "",
                    d.timestamp.isoformat(sep=' ') if d.timestamp else "",
                    d.date_source or "",
                    d.reason,
                ])
                count += 1
        logging.info(f"Report complete. Wrote {count} rows to {output_csv}")
