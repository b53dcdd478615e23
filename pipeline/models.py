from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from fractions import Fraction
from pathlib import Path

import config
from pipeline.errors import InvalidConfigError

SUPPORTED_BIT_DEPTHS = (8, 16, 24, 32)


def to_seconds(value: timedelta | int | float | Decimal | Fraction) -> Fraction:
    """Convert a duration-like value into an exact number of seconds."""
    if isinstance(value, timedelta):
        whole = value.days * 86400 + value.seconds
        return Fraction(whole) + Fraction(value.microseconds, 1_000_000)
    if isinstance(value, bool):
        raise InvalidConfigError("chunk duration must be a number of seconds", stage="config")
    try:
        if isinstance(value, (int, Fraction, Decimal)):
            return Fraction(value)
        if isinstance(value, float):
            # decimal repr of the float, not its binary expansion
            return Fraction(repr(value))
    except (ValueError, OverflowError) as exc:
        raise InvalidConfigError(f"chunk duration is not finite: {value!r}", stage="config") from exc
    raise InvalidConfigError(
        f"unsupported chunk duration type: {type(value).__name__}",
        stage="config",
    )


def minutes_to_duration(minutes: int) -> timedelta:
    return timedelta(minutes=minutes)


@dataclass(frozen=True)
class AudioParameters:
    sample_rate: int
    channels: int
    bits_per_sample: int

    @property
    def bytes_per_sample(self) -> int:
        return self.bits_per_sample // 8

    @property
    def block_align(self) -> int:
        return self.channels * self.bytes_per_sample

    @property
    def byte_rate(self) -> int:
        return self.sample_rate * self.block_align


@dataclass(frozen=True)
class PacketRecord:
    index: int
    start_frame: int
    frame_count: int
    byte_length: int


@dataclass
class PacketIndex:
    parameters: AudioParameters
    records: list[PacketRecord] = field(default_factory=list)
    total_frames: int = 0
    total_bytes: int = 0

    def __len__(self) -> int:
        return len(self.records)

    def seconds(self, frames: int) -> Fraction:
        return Fraction(frames, self.parameters.sample_rate)

    @property
    def total_duration(self) -> Fraction:
        return self.seconds(self.total_frames)


@dataclass(frozen=True)
class ChunkPlan:
    start_packet: int      # inclusive
    end_packet: int        # exclusive
    start_frame: int
    frame_count: int
    byte_length: int

    @property
    def packet_count(self) -> int:
        return self.end_packet - self.start_packet


@dataclass(frozen=True)
class SplitOptions:
    input_path: str | Path
    chunk_duration: timedelta | int | float | Decimal | Fraction
    output_dir: str | Path = config.DEFAULT_OUTPUT_DIR
    prefix: str = config.DEFAULT_OUTPUT_PREFIX
    packet_frames: int = config.DEFAULT_PACKET_FRAMES
    overwrite: bool = False
    verbose: bool = False

    def validate(self) -> Fraction:
        """
        Check the options before anything touches the filesystem.
        Returns the chunk duration as exact seconds.
        """
        if not str(self.input_path or "").strip():
            raise InvalidConfigError("input path is required", stage="config")
        if not str(self.output_dir or "").strip():
            raise InvalidConfigError("output directory is required", stage="config")

        prefix = self.prefix or ""
        if not prefix.strip():
            raise InvalidConfigError("output prefix is required", stage="config")
        if "/" in prefix or "\\" in prefix:
            raise InvalidConfigError(f"output prefix must not contain a path separator: {prefix!r}", stage="config")

        seconds = to_seconds(self.chunk_duration)
        if seconds <= 0:
            raise InvalidConfigError(f"chunk duration must be positive, got {float(seconds)}s", stage="config")

        if isinstance(self.packet_frames, bool) or not isinstance(self.packet_frames, int) or self.packet_frames <= 0:
            raise InvalidConfigError(f"packet size must be a positive frame count, got {self.packet_frames!r}", stage="config")

        return seconds


@dataclass
class ChunkInfo:
    index: int
    path: Path
    start_time: Fraction
    end_time: Fraction
    byte_length: int
    packet_count: int

    @property
    def duration(self) -> Fraction:
        return self.end_time - self.start_time


@dataclass
class SplitResult:
    chunk_count: int
    total_duration: Fraction
    chunks: list[ChunkInfo] = field(default_factory=list)

    @property
    def output_files(self) -> list[Path]:
        return [chunk.path for chunk in self.chunks]
