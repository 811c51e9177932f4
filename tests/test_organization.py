import pytest
from datetime import datetime
from pathlib import Path

from image_organizer.exceptions import FileHashError, FileOperationError
from image_organizer.models import CandidateFile
from image_organizer.organization.duplicates import DuplicateDetector, SignatureTable
from image_organizer.organization.mover import FileMover
from image_organizer.organization.rules import DestinationPlanner, format_timestamp

DT = datetime(2023, 6, 15, 14, 30, 22)


def _candidate(path: Path) -> CandidateFile:
    return CandidateFile(path=path, ext=path.suffix.lower(), size_bytes=1)


@pytest.fixture
def planner(tmp_path):
    return DestinationPlanner(tmp_path / "Organized Photos", tmp_path / "Thumbnails")


def test_format_timestamp_uses_safe_colon():
    name = format_timestamp(DT)
    assert name == "2023-06-15 14꞉30꞉22"
    assert ":" not in name


@pytest.mark.parametrize("w,h,thumb", [
    (100, 100, True), (599, 599, True), (600, 100, False), (100, 600, False), (800, 600, False),
])
def test_thumbnail_routing(planner, tmp_path, w, h, thumb):
    placement = planner.plan(_candidate(tmp_path / "a.jpg"), DT, w, h)
    expected = tmp_path / ("Thumbnails" if thumb else "Organized Photos")
    assert placement.destination.parent == expected
    assert placement.is_thumbnail is thumb


def test_collision_suffixes_follow_first_seen_order(planner, tmp_path):
    names = [planner.plan(_candidate(tmp_path / f"src{i}.jpg"), DT, 800, 600).destination.name
             for i in range(4)]
    base = format_timestamp(DT)
    assert names == [f"{base}.jpg", f"{base} (1).jpg", f"{base} (2).jpg", f"{base} (3).jpg"]


def test_collision_with_existing_file_on_disk(planner, tmp_path):
    organized = tmp_path / "Organized Photos"
    organized.mkdir()
    (organized / f"{format_timestamp(DT)}.jpg").write_bytes(b"old")

    dest = planner.plan(_candidate(tmp_path / "new.jpg"), DT, 800, 600).destination
    assert dest.name == f"{format_timestamp(DT)} (1).jpg"


def test_file_already_in_place(planner, tmp_path):
    organized = tmp_path / "Organized Photos"
    organized.mkdir()
    existing = organized / f"{format_timestamp(DT)}.png"
    existing.write_bytes(b"me")

    placement = planner.plan(_candidate(existing), DT, 800, 600)
    assert placement.destination == existing
    assert placement.in_place


def test_release_frees_a_claimed_name(planner, tmp_path):
    first = planner.plan(_candidate(tmp_path / "a.jpg"), DT, 800, 600).destination
    planner.release(first)
    again = planner.plan(_candidate(tmp_path / "b.jpg"), DT, 800, 600).destination
    assert again == first


def test_detector_first_seen_wins(tmp_path):
    a = tmp_path / "a.jpg"
    b = tmp_path / "b.jpg"
    c = tmp_path / "c.jpg"
    a.write_bytes(b"same")
    b.write_bytes(b"same")
    c.write_bytes(b"different")

    detector = DuplicateDetector(SignatureTable())
    first = detector.detect(a, DT)
    assert not first.is_duplicate
    detector.register(first.signature, Path("/dest/a.jpg"))

    second = detector.detect(b, DT)
    assert second.duplicate_of == Path("/dest/a.jpg")
    assert not detector.detect(c, DT).is_duplicate
    # Same bytes, different timestamp: not the same signature
    assert not detector.detect(b, datetime(2020, 1, 1)).is_duplicate


def test_signature_table_keeps_first_destination():
    table = SignatureTable()
    sig = (DT, "abc")
    table.register(sig, Path("first"))
    table.register(sig, Path("second"))
    assert table.lookup(sig) == Path("first")
    assert sig in table
    assert len(table) == 1


def test_detector_hash_failure_propagates(tmp_path):
    detector = DuplicateDetector(SignatureTable())
    with pytest.raises(FileHashError):
        detector.detect(tmp_path / "missing.jpg", DT)


def test_mover_moves_and_creates_parent(tmp_path):
    src = tmp_path / "a.jpg"
    src.write_bytes(b"content")
    dest = tmp_path / "out" / "b.jpg"

    FileMover().move(src, dest)

    assert not src.exists()
    assert dest.read_bytes() == b"content"


def test_mover_refuses_overwrite(tmp_path):
    src = tmp_path / "a.jpg"
    dest = tmp_path / "b.jpg"
    src.write_bytes(b"new")
    dest.write_bytes(b"old")

    with pytest.raises(FileOperationError):
        FileMover().move(src, dest)
    assert dest.read_bytes() == b"old"


def test_mover_dry_run_changes_nothing(tmp_path):
    src = tmp_path / "a.jpg"
    src.write_bytes(b"content")
    mover = FileMover(dry_run=True)

    mover.ensure_dirs(tmp_path / "out")
    mover.move(src, tmp_path / "out" / "b.jpg")
    mover.delete(src)

    assert src.exists()
    assert not (tmp_path / "out").exists()


def test_mover_delete(tmp_path):
    p = tmp_path / "dup.jpg"
    p.write_bytes(b"x")
    FileMover().delete(p)
    assert not p.exists()
    with pytest.raises(FileOperationError):
        FileMover().delete(p)
