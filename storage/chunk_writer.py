from pathlib import Path
from typing import Iterator

from pipeline.errors import DecodeError, SplitIOError
from pipeline.models import AudioParameters, ChunkPlan, PacketIndex
from sources.audio_packet import AudioPacket
from storage.wav_header import build_wav_header


class ChunkWriter:
    def __init__(self, index: PacketIndex, overwrite: bool = False):
        self.index = index
        self.overwrite = overwrite

    @property
    def params(self) -> AudioParameters:
        return self.index.parameters

    def write(self, plan: ChunkPlan, output_path: str | Path, packets: Iterator[AudioPacket]) -> int:
        """
        Write one chunk: header first, then the payload of exactly the planned
        packets, pulled from the shared forward-only packet iterator.
        Returns the number of payload bytes written.
        """
        output_path = Path(output_path)
        header = build_wav_header(self.params, plan.byte_length, path=str(output_path))
        mode = "wb" if self.overwrite else "xb"

        written = 0
        try:
            with open(output_path, mode) as out:
                out.write(header)

                for position in range(plan.start_packet, plan.end_packet):
                    packet = self._next_packet(packets, position, output_path)
                    out.write(packet.data)
                    written += len(packet.data)

                out.flush()
        except OSError as exc:
            raise SplitIOError(f"failed to write chunk: {exc}", stage="write", path=str(output_path)) from exc

        if written != plan.byte_length:
            raise DecodeError(
                f"wrote {written} payload bytes, header declares {plan.byte_length}",
                stage="write",
                path=str(output_path),
            )

        return written

    def _next_packet(self, packets: Iterator[AudioPacket], position: int, output_path: Path) -> AudioPacket:
        record = self.index.records[position]
        packet = next(packets, None)

        if packet is None:
            raise DecodeError(
                f"source ended before packet {position}",
                stage="write",
                path=str(output_path),
            )
        if packet.start_frame != record.start_frame or len(packet.data) != record.byte_length:
            raise DecodeError(
                f"packet {position} changed since indexing "
                f"(frame {packet.start_frame}/{record.start_frame}, bytes {len(packet.data)}/{record.byte_length})",
                stage="write",
                path=str(output_path),
            )

        return packet
