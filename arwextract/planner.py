# Job Planner module
"""Discover raw files in a folder and plan one extraction job per file."""

from pathlib import Path
from typing import List

from .config import OUTPUT_EXTENSION, RAW_SUFFIX
from .utils import get_output_name, is_raw_name


def find_raw_files(inpath: Path, suffix: str = RAW_SUFFIX) -> List[Path]:
    """
    List the raw files directly inside a folder.

    Entries come back in directory listing order, which is not sorted and
    differs across filesystems. Only the name is checked: a directory or a
    broken symlink named '*.ARW' is still returned and fails when opened.

    Args:
        inpath: Input directory (not searched recursively)
        suffix: Case-sensitive filename suffix to match

    Returns:
        List of matching entry paths
    """
    if not inpath.is_dir():
        raise ValueError(f"Input path does not exist or is not a directory: {inpath}")

    return [item for item in inpath.iterdir() if is_raw_name(item.name, suffix)]


def create_extraction_jobs(
    raw_files: List[Path],
    extension: str = OUTPUT_EXTENSION,
) -> List[dict]:
    """
    Create extraction job definitions, one per raw file.

    Returns:
        List of job dicts with 'raw_file' and 'output_name'
    """
    return [
        {
            'raw_file': raw_file,
            'output_name': get_output_name(raw_file.name, extension),
        }
        for raw_file in raw_files
    ]
