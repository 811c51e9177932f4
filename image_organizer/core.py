import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from tqdm import tqdm

from .config import OrganizerSettings
from .exceptions import FileHashError, FileOperationError, ImageLoadError
from .metadata.extract import DateExtractor, MetadataExtractor
from .models import Action, CandidateFile, Decision
from .organization.duplicates import DuplicateDetector, SignatureTable
from .organization.mover import FileMover
from .organization.rules import DestinationPlanner, format_timestamp
from .reporting import ActionLog
from .scanning.filesystem import ImageScanner


def ask_user(prompt: str) -> bool:
    answer = input(f"{prompt} [y/N] ")
    return answer.strip().lower() in ('y', 'yes')


@dataclass
class RunSummary:
    decisions: List[Decision] = field(default_factory=list)

    @property
    def counts(self) -> Counter:
        return Counter(d.action for d in self.decisions)

    def describe(self) -> str:
        c = self.counts
        return (f"{len(self.decisions)} files: {c[Action.MOVED]} moved, {c[Action.DELETED]} deleted, "
                f"{c[Action.SKIPPED]} skipped, {c[Action.ERROR]} errors, {c[Action.INFO]} already in place")


class ImageOrganizerApp:
    def __init__(self, settings: OrganizerSettings, confirm_fn: Optional[Callable[[str], bool]] = None):
        self.settings = settings
        self.confirm_fn = confirm_fn or ask_user

    def organize(self) -> RunSummary:
        """
        Executes the organization pipeline over every image under the root.
        1. Enumerate images (skipping the output folders)
        2. Extract a capture date (metadata, then filename)
        3. Detect duplicates by (date, content hash)
        4. Place: move into the organized/thumbnail folder, or delete duplicates

        Raises ConfigurationError before touching anything if the settings are
        unusable. Per-file failures are logged and the run continues.
        """
        s = self.settings
        s.validate()
        tz = s.resolve_timezone()

        # Run-scoped state; discarded when this method returns
        self.metadata = MetadataExtractor()
        self.dates = DateExtractor(tz)
        self.detector = DuplicateDetector(SignatureTable())
        self.planner = DestinationPlanner(s.organized_dir, s.thumbnail_dir, s.thumbnail_max_dimension)
        self.mover = FileMover(dry_run=s.dry_run)

        # A dry run must leave the tree under root untouched, log file included
        write_log = not (s.dry_run and s.root in s.log_path.parents)

        summary = RunSummary()
        with ActionLog(s.log_path, append=s.append_log, write_file=write_log) as log:
            self.log = log
            log.record(Action.INFO, f"Run started: root={s.root} dry_run={s.dry_run} timezone={s.timezone}")
            if not write_log:
                log.record(Action.INFO, f"Dry run: not writing {s.log_path} inside the organized tree")
            self.mover.ensure_dirs(s.organized_dir, s.thumbnail_dir)

            scanner = ImageScanner(exclude_dirs=[s.organized_dir, s.thumbnail_dir])
            candidates = list(scanner.scan(s.root))
            logging.info(f"Found {len(candidates)} images under {s.root}")

            for candidate in tqdm(candidates, desc="Organizing", disable=s.confirm):
                try:
                    decision = self._process(candidate)
                except Exception as e:
                    log.record(Action.ERROR, f"{candidate.path}: unexpected failure: {e}")
                    logging.debug("Traceback for %s", candidate.path, exc_info=True)
                    decision = Decision(candidate.path, Action.ERROR, reason=str(e))
                summary.decisions.append(decision)

            log.record(Action.INFO, f"Run finished: {summary.describe()}")
        return summary

    def _process(self, candidate: CandidateFile) -> Decision:
        path = candidate.path

        # --- Stage 2: Date ---
        try:
            info = self.metadata.read_image(path)
        except ImageLoadError as e:
            self.log.record(Action.ERROR, str(e))
            return Decision(path, Action.ERROR, reason=str(e))

        extracted = self.dates.extract(path, info)
        for warning in info.warnings:
            self.log.record(Action.WARNING, warning)
        if extracted is None:
            self.log.record(Action.SKIPPED, f"{path}: no valid date in metadata or filename")
            return Decision(path, Action.SKIPPED, reason="no valid date")

        ts = extracted.timestamp
        self.log.record(Action.PROCESSED,
                        f"{path}: {info.width}x{info.height}, {format_timestamp(ts)} from {extracted.source}")

        # --- Stage 3: Duplicates ---
        try:
            detection = self.detector.detect(path, ts)
        except FileHashError as e:
            self.log.record(Action.ERROR, str(e))
            return Decision(path, Action.ERROR, timestamp=ts, date_source=extracted.source, reason=str(e))

        # --- Stage 4: Placement ---
        if detection.is_duplicate:
            return self._remove_duplicate(path, detection.duplicate_of, ts, extracted.source)

        placement = self.planner.plan(candidate, ts, info.width, info.height)
        dest = placement.destination
        decision = Decision(path, Action.MOVED, destination=dest, timestamp=ts, date_source=extracted.source)

        if placement.in_place:
            self.mover.move(path, dest)
            self.detector.register(detection.signature, dest)
            self.log.record(Action.INFO, f"{path}: already in place")
            decision.action = Action.INFO
            decision.reason = "already in place"
            return decision

        if not self._confirm(f"Move {path} -> {dest}?"):
            self.planner.release(dest)
            self.detector.register(detection.signature, path)
            self.log.record(Action.SKIPPED, f"{path}: move declined by user")
            decision.action = Action.SKIPPED
            decision.reason = "declined"
            return decision

        try:
            self.mover.move(path, dest)
        except FileOperationError as e:
            self.planner.release(dest)
            self.log.record(Action.ERROR, str(e))
            decision.action = Action.ERROR
            decision.reason = str(e)
            return decision

        self.detector.register(detection.signature, dest)
        self.log.record(Action.MOVED, f"{path} -> {dest}")
        return decision

    def _remove_duplicate(self, path, original, ts, source) -> Decision:
        decision = Decision(path, Action.DELETED, destination=original, timestamp=ts, date_source=source,
                            reason=f"duplicate of {original}")
        if not self._confirm(f"Delete {path} (duplicate of {original})?"):
            self.log.record(Action.SKIPPED, f"{path}: delete declined by user")
            decision.action = Action.SKIPPED
            decision.reason = "declined"
            return decision

        try:
            self.mover.delete(path)
        except FileOperationError as e:
            self.log.record(Action.ERROR, str(e))
            decision.action = Action.ERROR
            decision.reason = str(e)
            return decision

        self.log.record(Action.DELETED, f"{path}: duplicate of {original}")
        return decision

    def _confirm(self, prompt: str) -> bool:
        # Dry runs change nothing, so there is nothing to confirm
        if self.settings.dry_run or not self.settings.confirm:
            return True
        return self.confirm_fn(prompt)
