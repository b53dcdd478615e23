from pathlib import Path
from typing import Iterator

import numpy as np
import soundfile as sf

import config
from pipeline.errors import DecodeError, SplitIOError, UnsupportedFormatError
from pipeline.models import AudioParameters
from sources.audio_packet import AudioPacket
from sources.audio_source import PacketSource

# libsndfile subtype -> bits per sample of the linear PCM payload
PCM_SUBTYPES = {
    "PCM_U8": 8,
    "PCM_S8": 8,
    "PCM_16": 16,
    "PCM_24": 24,
    "PCM_32": 32,
}


class WavPacketSource(PacketSource):
    """
    Decodes a PCM container with soundfile and hands it out as fixed-size packets.

    libsndfile reads every integer subtype as left-justified int32, so the top
    bytes of each little-endian sample are exactly the original PCM bytes.
    8-bit WAV is unsigned on disk, so the sign bit is flipped on the way out.
    """

    def __init__(self, audio_path: str | Path, packet_frames: int = config.DEFAULT_PACKET_FRAMES):
        self.audio_path = str(audio_path)
        self.packet_frames = int(packet_frames)

        self._file: sf.SoundFile | None = None
        self._params: AudioParameters | None = None
        self._unsigned_bytes = False

    def open(self) -> None:
        if self._file is not None:
            return

        if not Path(self.audio_path).is_file():
            raise SplitIOError("input file not found", stage="decode", path=self.audio_path)

        try:
            snd = sf.SoundFile(self.audio_path)
        except sf.LibsndfileError as exc:
            raise DecodeError(f"cannot decode container: {exc}", stage="decode", path=self.audio_path) from exc
        except OSError as exc:
            raise SplitIOError(f"cannot open input: {exc}", stage="decode", path=self.audio_path) from exc

        bits = PCM_SUBTYPES.get(snd.subtype)
        if bits is None:
            snd.close()
            raise UnsupportedFormatError(
                f"unsupported sample format {snd.subtype}; only linear PCM can be split",
                stage="decode",
                path=self.audio_path,
            )
        if snd.samplerate <= 0 or snd.channels <= 0:
            snd.close()
            raise DecodeError(
                f"invalid stream parameters: {snd.samplerate} Hz, {snd.channels} channels",
                stage="decode",
                path=self.audio_path,
            )

        self._file = snd
        # 8-bit WAV samples are unsigned whatever the source container used
        self._unsigned_bytes = bits == 8
        self._params = AudioParameters(
            sample_rate=int(snd.samplerate),
            channels=int(snd.channels),
            bits_per_sample=bits,
        )

    def parameters(self) -> AudioParameters:
        if self._params is None:
            raise RuntimeError("source is not open")
        return self._params

    def packets(self) -> Iterator[AudioPacket]:
        if self._file is None or self._params is None:
            raise RuntimeError("source is not open")

        snd = self._file
        width = self._params.bytes_per_sample
        offset = 0

        try:
            snd.seek(0)
            while True:
                block = snd.read(self.packet_frames, dtype="int32", always_2d=True)
                frames = len(block)
                if frames == 0:
                    break

                yield AudioPacket(
                    start_frame=offset,
                    frame_count=frames,
                    data=self._pack(block, width),
                )
                offset += frames
        except sf.LibsndfileError as exc:
            raise DecodeError(
                f"malformed packet at frame {offset}: {exc}",
                stage="decode",
                path=self.audio_path,
            ) from exc

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    def _pack(self, block: np.ndarray, width: int) -> bytes:
        # (frames, channels) int32 -> interleaved bytes, top `width` bytes of each sample
        samples = np.ascontiguousarray(block, dtype="<i4")
        raw = samples.view(np.uint8).reshape(-1, 4)[:, 4 - width:]
        if self._unsigned_bytes:
            raw = raw ^ np.uint8(0x80)
        return raw.tobytes()
