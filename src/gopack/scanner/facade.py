import os
from pathlib import Path
from typing import List

import pathspec

from gopack.logging_config import logger
from gopack.parser import extract_imports, is_remote_import
from gopack.schemas import ImportStats, ProjectStats
from .config import DEFAULT_IGNORE_PATTERNS, GO_SOURCE_SUFFIX, GO_TEST_SUFFIX


def _load_ignore_spec(directory: Path, respect_gitignore: bool) -> pathspec.PathSpec:
    all_patterns: List[str] = list(DEFAULT_IGNORE_PATTERNS)
    if respect_gitignore:
        gitignore_path = directory / ".gitignore"
        if gitignore_path.is_file():
            try:
                gitignore_patterns = gitignore_path.read_text().splitlines()
                all_patterns.extend(gitignore_patterns)
                logger.debug(f"Loaded {len(gitignore_patterns)} patterns from '{gitignore_path}'")
            except OSError as e:
                logger.warning(f"Could not read .gitignore file at '{gitignore_path}'. Error: {e}")
    return pathspec.PathSpec.from_lines("gitwildmatch", all_patterns)


def analyze_source_tree(directory: Path, respect_gitignore: bool = True) -> ProjectStats:
    """
    Walk a Go source tree and report where each import path is used.

    Args:
        directory: Project (or dependency checkout) root.
        respect_gitignore: Also skip paths listed in the root .gitignore.

    Returns:
        ProjectStats keyed by import path.
    """
    directory = Path(directory)
    stats = ProjectStats(root=str(directory))
    if not directory.is_dir():
        logger.debug(f"Nothing to scan at '{directory}'")
        return stats

    spec = _load_ignore_spec(directory, respect_gitignore)

    for root, dirs, files in os.walk(directory):
        root_path = Path(root)
        rel_root = root_path.relative_to(directory)

        # Prune ignored directories in place so os.walk skips them
        dirs[:] = [
            d for d in sorted(dirs)
            if not spec.match_file(f"{(rel_root / d).as_posix()}/")
        ]

        for name in sorted(files):
            if not name.endswith(GO_SOURCE_SUFFIX):
                continue
            rel_path = (rel_root / name).as_posix()
            if spec.match_file(rel_path):
                continue

            file_path = root_path / name
            try:
                content = file_path.read_text(encoding="utf-8", errors="replace")
            except OSError as e:
                logger.warning(f"Skipping unreadable file '{file_path}': {e}")
                continue

            test_file = name.endswith(GO_TEST_SUFFIX)
            stats.files_scanned += 1
            if test_file:
                stats.test_files_scanned += 1

            for ref in extract_imports(Path(rel_path), content):
                entry = stats.imports_by_path.get(ref.module)
                if entry is None:
                    entry = ImportStats(path=ref.module, remote=is_remote_import(ref.module))
                    stats.imports_by_path[ref.module] = entry
                entry.add_location(ref.file_path, ref.line, test_file)

    logger.debug(
        f"Scanned {stats.files_scanned} Go files in '{directory}', "
        f"{len(stats.imports_by_path)} distinct imports"
    )
    return stats
