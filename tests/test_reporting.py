import csv
import re
from datetime import datetime
from pathlib import Path

from image_organizer.models import Action, Decision
from image_organizer.reporting import ActionLog, ReportGenerator


def test_action_log_format(tmp_path):
    log_path = tmp_path / "run.log"
    with ActionLog(log_path) as log:
        log.record(Action.MOVED, "a.jpg -> b.jpg")
        log.record(Action.ERROR, "broken.jpg: cannot decode")

    lines = log_path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert re.match(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} \[MOVED\] a\.jpg -> b\.jpg$", lines[0])
    assert "[ERROR] broken.jpg" in lines[1]
    assert log.entries[0] == (Action.MOVED, "a.jpg -> b.jpg")


def test_action_log_appends_by_default(tmp_path):
    log_path = tmp_path / "run.log"
    with ActionLog(log_path) as log:
        log.record(Action.INFO, "first")
    with ActionLog(log_path) as log:
        log.record(Action.INFO, "second")
    assert len(log_path.read_text(encoding="utf-8").splitlines()) == 2

    with ActionLog(log_path, append=False) as log:
        log.record(Action.INFO, "third")
    assert log_path.read_text(encoding="utf-8").count("[INFO]") == 1


def test_decisions_csv(tmp_path):
    out = tmp_path / "report.csv"
    decisions = [
        Decision(Path("/src/a.jpg"), Action.MOVED, destination=Path("/dst/x.jpg"),
                 timestamp=datetime(2023, 6, 15, 14, 30, 22), date_source="filename"),
        Decision(Path("/src/b.jpg"), Action.SKIPPED, reason="no valid date"),
    ]

    ReportGenerator().write_decisions_csv(decisions, out)

    with open(out, newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert rows[0]["Action"] == "MOVED"
    assert rows[0]["Timestamp"] == "2023-06-15 14:30:22"
    assert rows[1]["Destination Path"] == ""
    assert rows[1]["Notes"] == "no valid date"


def test_action_log_without_file(tmp_path):
    log_path = tmp_path / "run.log"
    with ActionLog(log_path, write_file=False) as log:
        log.record(Action.MOVED, "a.jpg -> b.jpg")

    assert not log_path.exists()
    assert log.entries == [(Action.MOVED, "a.jpg -> b.jpg")]
