# Extractor module
"""Extract the embedded preview JPEG from a Sony ARW container."""

import mmap
import os
import struct
from pathlib import Path
from typing import BinaryIO, NamedTuple, Optional

from .config import LENGTH_POSITION, OFFSET_POSITION, OUTPUT_EXTENSION
from .utils import get_output_name


JPEG_SOI = b'\xff\xd8'

_U32_LE = struct.Struct('<I')


class ExtractionError(Exception):
    """Base class for a container that cannot yield a valid preview."""

    error_type = 'extraction'

    def __init__(self, message: str, filename: str = ''):
        super().__init__(message)
        self.filename = filename


class BoundsError(ExtractionError):
    """Header fields or the preview range fall outside the file."""

    error_type = 'bounds'


class SignatureError(ExtractionError):
    """The preview range does not start with a JPEG SOI marker."""

    error_type = 'signature'


class ShortWriteError(ExtractionError):
    """Fewer bytes reached the output file than the preview length."""

    error_type = 'short_write'


class PreviewLocation(NamedTuple):
    offset: int
    length: int


def read_preview_location(
    buf,
    offset_position: int = OFFSET_POSITION,
    length_position: int = LENGTH_POSITION,
) -> PreviewLocation:
    """
    Read the preview (offset, length) pair from a container buffer.

    Both fields are unsigned 32-bit little-endian integers at fixed absolute
    positions.

    Raises:
        BoundsError: if the buffer is too short to hold either field
    """
    size = len(buf)
    for position in (offset_position, length_position):
        if position + _U32_LE.size > size:
            raise BoundsError(
                f"header field at {position:#x} is past end of file ({size} bytes)"
            )

    offset = _U32_LE.unpack_from(buf, offset_position)[0]
    length = _U32_LE.unpack_from(buf, length_position)[0]
    return PreviewLocation(offset, length)


def validate_preview(buf, location: PreviewLocation) -> None:
    """
    Check that the preview range fits the buffer and starts with SOI.

    Raises:
        BoundsError: if offset + length exceeds the buffer size
        SignatureError: if the first two bytes are not FF D8
    """
    size = len(buf)
    # Python ints do not overflow, so two u32 values add safely
    if location.offset + location.length > size:
        raise BoundsError(
            f"preview {location.offset:#x}+{location.length} exceeds file size {size}"
        )

    signature = bytes(buf[location.offset:location.offset + len(JPEG_SOI)])
    if signature != JPEG_SOI:
        raise SignatureError(
            f"no JPEG SOI marker at {location.offset:#x} (found {signature.hex() or 'nothing'})"
        )


def _write_preview(buf, location: PreviewLocation, output_file: Path) -> None:
    """Write the preview bytes to output_file, replacing it atomically."""
    part_file = output_file.with_name(output_file.name + '.part')
    try:
        with open(part_file, 'wb') as f:
            written = f.write(buf[location.offset:location.offset + location.length])
        if written != location.length:
            raise ShortWriteError(
                f"wrote {written} of {location.length} bytes to {part_file}"
            )
        os.replace(part_file, output_file)
    except BaseException:
        part_file.unlink(missing_ok=True)
        raise


def extract_jpeg(
    raw_fh: BinaryIO,
    filename: str,
    output_dir: Path,
    offset_position: int = OFFSET_POSITION,
    length_position: int = LENGTH_POSITION,
    extension: str = OUTPUT_EXTENSION,
    output_name: Optional[str] = None,
) -> Path:
    """
    Extract the embedded preview of one open container into output_dir.

    Args:
        raw_fh: Container opened in binary read mode
        filename: Entry name of the container, used for the output name
        output_dir: Directory receiving '<stem><extension>'
        offset_position: File offset of the preview start field
        length_position: File offset of the preview length field
        extension: Output file extension
        output_name: Output filename; derived from filename and extension
            when not given

    Returns:
        Path of the written preview

    Raises:
        BoundsError, SignatureError, ShortWriteError: invalid container or
            incomplete write; no output file is left behind
        OSError: on any stat, map, read or write failure
    """
    file_size = os.fstat(raw_fh.fileno()).st_size
    # mmap refuses empty files, and such a file cannot hold the header anyway
    if file_size < max(offset_position, length_position) + _U32_LE.size:
        raise BoundsError(
            f"file is too small ({file_size} bytes) to hold the preview header",
            filename,
        )

    with mmap.mmap(raw_fh.fileno(), 0, access=mmap.ACCESS_READ) as buf:
        try:
            location = read_preview_location(buf, offset_position, length_position)
            validate_preview(buf, location)
        except ExtractionError as e:
            e.filename = filename
            raise

        output_file = Path(output_dir) / (output_name or get_output_name(filename, extension))
        try:
            _write_preview(buf, location, output_file)
        except ExtractionError as e:
            e.filename = filename
            raise

    return output_file
