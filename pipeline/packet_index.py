from typing import Iterable

from pipeline.errors import DecodeError
from pipeline.models import AudioParameters, PacketIndex, PacketRecord
from sources.audio_packet import AudioPacket


def build_packet_index(
    packets: Iterable[AudioPacket],
    params: AudioParameters,
    source_path: str | None = None,
) -> PacketIndex:
    """
    Materialize packet metadata (never payload bytes) in stream order.

    Durations are kept as frame counts; seconds are derived on demand as
    frames / sample_rate so nothing accumulates floating point error.
    Any malformed packet aborts the whole index.
    """
    index = PacketIndex(parameters=params)
    block_align = params.block_align

    for packet in packets:
        position = len(index.records)

        if packet.frame_count <= 0:
            raise DecodeError(
                f"packet {position} has no frames",
                stage="index",
                path=source_path,
            )
        if packet.start_frame != index.total_frames:
            raise DecodeError(
                f"packet {position} starts at frame {packet.start_frame}, expected {index.total_frames}",
                stage="index",
                path=source_path,
            )

        expected_bytes = packet.frame_count * block_align
        if len(packet.data) != expected_bytes:
            raise DecodeError(
                f"packet {position} carries {len(packet.data)} bytes, expected {expected_bytes} "
                f"for {packet.frame_count} frames",
                stage="index",
                path=source_path,
            )

        index.records.append(
            PacketRecord(
                index=position,
                start_frame=index.total_frames,
                frame_count=packet.frame_count,
                byte_length=expected_bytes,
            )
        )
        index.total_frames += packet.frame_count
        index.total_bytes += expected_bytes

    return index
