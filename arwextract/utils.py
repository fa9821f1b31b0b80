# Utility functions
"""Helpers for raw filename selection and output name generation."""

from .config import OUTPUT_EXTENSION, RAW_SUFFIX


def is_raw_name(filename: str, suffix: str = RAW_SUFFIX) -> bool:
    """
    Check whether a directory entry name looks like a raw container.

    The match is case-sensitive: 'DSC00001.ARW' matches, 'DSC00001.arw' and
    'DSC00001.ARWX' do not.
    """
    return len(filename) >= len(suffix) and filename.endswith(suffix)


def get_output_name(filename: str, extension: str = OUTPUT_EXTENSION) -> str:
    """
    Generate the output filename for an extracted preview.

    Strips the last '.'-delimited extension, if any, and appends `extension`.

    Examples:
        'DSC00001.ARW'     -> 'DSC00001.jpg'
        'trip.day1.ARW'    -> 'trip.day1.jpg'
        'DSC00001'         -> 'DSC00001.jpg'
    """
    stem, dot, _ = filename.rpartition('.')
    if not dot:
        stem = filename
    return f"{stem}{extension}"
