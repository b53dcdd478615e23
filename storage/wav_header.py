"""
Canonical 44-byte RIFF/WAVE header for linear PCM.

Layout (all integers little-endian):
    RIFF <riff_size:u32> WAVE
    fmt  <16:u32> <format=1:u16> <channels:u16> <sample_rate:u32>
         <byte_rate:u32> <block_align:u16> <bits_per_sample:u16>
    data <data_size:u32>
"""
import struct

from pipeline.errors import HeaderOverflowError, UnsupportedFormatError
from pipeline.models import SUPPORTED_BIT_DEPTHS, AudioParameters

HEADER_STRUCT = struct.Struct("<4sI4s4sIHHIIHH4sI")
HEADER_SIZE = HEADER_STRUCT.size  # 44
RIFF_OVERHEAD = HEADER_SIZE - 8   # 36: everything after the RIFF size field, minus the payload
FMT_BLOCK_SIZE = 16
WAVE_FORMAT_PCM = 1

U16_MAX = 0xFFFF
U32_MAX = 0xFFFFFFFF


def build_wav_header(params: AudioParameters, data_length: int, path: str | None = None) -> bytes:
    if params.bits_per_sample not in SUPPORTED_BIT_DEPTHS:
        raise UnsupportedFormatError(
            f"cannot encode {params.bits_per_sample}-bit samples, supported: {SUPPORTED_BIT_DEPTHS}",
            stage="header",
            path=path,
        )
    if params.channels <= 0 or params.channels > U16_MAX:
        raise UnsupportedFormatError(f"cannot encode {params.channels} channels", stage="header", path=path)
    if params.sample_rate <= 0:
        raise UnsupportedFormatError(f"invalid sample rate {params.sample_rate}", stage="header", path=path)
    if data_length < 0:
        raise ValueError("data_length must not be negative")

    riff_size = RIFF_OVERHEAD + data_length
    if riff_size > U32_MAX:
        raise HeaderOverflowError(
            f"chunk payload of {data_length} bytes does not fit a 32-bit RIFF size field",
            stage="header",
            path=path,
        )
    if params.byte_rate > U32_MAX or params.block_align > U16_MAX or params.sample_rate > U32_MAX:
        raise HeaderOverflowError(
            f"format fields overflow for {params.sample_rate} Hz x {params.channels} channels",
            stage="header",
            path=path,
        )

    return HEADER_STRUCT.pack(
        b"RIFF",
        riff_size,
        b"WAVE",
        b"fmt ",
        FMT_BLOCK_SIZE,
        WAVE_FORMAT_PCM,
        params.channels,
        params.sample_rate,
        params.byte_rate,
        params.block_align,
        params.bits_per_sample,
        b"data",
        data_length,
    )


def parse_wav_header(header: bytes) -> tuple[AudioParameters, int]:
    """
    Read back a canonical header written by build_wav_header.
    Returns the audio parameters and the declared data length.
    """
    if len(header) < HEADER_SIZE:
        raise UnsupportedFormatError(f"header is {len(header)} bytes, expected {HEADER_SIZE}", stage="header")

    (
        riff_tag,
        riff_size,
        wave_tag,
        fmt_tag,
        fmt_size,
        format_tag,
        channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
        data_tag,
        data_length,
    ) = HEADER_STRUCT.unpack(header[:HEADER_SIZE])

    if (riff_tag, wave_tag, fmt_tag, data_tag) != (b"RIFF", b"WAVE", b"fmt ", b"data"):
        raise UnsupportedFormatError("not a canonical RIFF/WAVE header", stage="header")
    if fmt_size != FMT_BLOCK_SIZE or format_tag != WAVE_FORMAT_PCM:
        raise UnsupportedFormatError(
            f"unexpected format block (size={fmt_size}, tag={format_tag})",
            stage="header",
        )
    if riff_size != RIFF_OVERHEAD + data_length:
        raise UnsupportedFormatError(
            f"RIFF size {riff_size} does not match data size {data_length}",
            stage="header",
        )

    params = AudioParameters(
        sample_rate=sample_rate,
        channels=channels,
        bits_per_sample=bits_per_sample,
    )
    if byte_rate != params.byte_rate or block_align != params.block_align:
        raise UnsupportedFormatError("byte rate or block align inconsistent with format", stage="header")

    return params, data_length
