"""
Small directory helpers that ship alongside the organizer.

    copy-dir-contents DIR   -> every file's text, concatenated, on the clipboard
    list-by-size DIR        -> entries of DIR, largest first
"""
import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Tuple

import pyperclip


def iter_dir_files(directory: Path, recursive: bool = False) -> List[Path]:
    entries = directory.rglob("*") if recursive else directory.iterdir()
    return sorted((p for p in entries if p.is_file()), key=lambda p: str(p).lower())


def concat_files(directory: Path, recursive: bool = False) -> str:
    """Text of every regular file in ``directory`` joined by newlines."""
    parts = []
    for p in iter_dir_files(directory, recursive):
        try:
            parts.append(p.read_text(encoding="utf-8", errors="replace"))
        except OSError as e:
            logging.warning(f"Skipping unreadable file {p}: {e}")
    return "\n".join(parts)


def copy_directory_to_clipboard(directory: Path, recursive: bool = False) -> int:
    text = concat_files(directory, recursive)
    pyperclip.copy(text)
    return len(text)


def tree_size(path: Path) -> int:
    total = 0
    for dirpath, _, filenames in os.walk(path):
        for name in filenames:
            try:
                total += os.path.getsize(os.path.join(dirpath, name))
            except OSError:
                pass  # vanished or unreadable
    return total


def entries_by_size(directory: Path) -> List[Tuple[str, int, bool]]:
    """
    (name, size, is_dir) for each entry of ``directory``, largest first.

    Directories are sized by everything below them; ties sort by name.
    """
    rows = []
    with os.scandir(directory) as it:
        for e in it:
            if e.is_dir(follow_symlinks=False):
                rows.append((e.name, tree_size(Path(e.path)), True))
            else:
                rows.append((e.name, e.stat(follow_symlinks=False).st_size, False))
    rows.sort(key=lambda r: (-r[1], r[0].lower()))
    return rows


def format_size(num: int) -> str:
    size = float(num)
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if size < 1024 or unit == "TB":
            return f"{int(size)} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024


def copy_main(argv=None):
    p = argparse.ArgumentParser(description="Copy the concatenated contents of a directory's files to the clipboard")
    p.add_argument("directory", type=Path, nargs="?", default=Path.cwd())
    p.add_argument("-r", "--recursive", action="store_true", help="Include files in subdirectories")
    args = p.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

    try:
        n = copy_directory_to_clipboard(args.directory, args.recursive)
    except pyperclip.PyperclipException as e:
        logging.error(f"Clipboard unavailable: {e}")
        sys.exit(1)
    logging.info(f"Copied {n} characters from {args.directory}")


def size_main(argv=None):
    p = argparse.ArgumentParser(description="List directory entries sorted by size")
    p.add_argument("directory", type=Path, nargs="?", default=Path.cwd())
    args = p.parse_args(argv)

    for name, size, is_dir in entries_by_size(args.directory):
        print(f"{format_size(size):>10}  {name}{'/' if is_dir else ''}")
