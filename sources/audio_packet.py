# sources/audio_packet.py
from dataclasses import dataclass

@dataclass
class AudioPacket:
    start_frame: int     # frame offset of the first frame in the stream
    frame_count: int     # frames in this packet
    data: bytes          # interleaved little-endian PCM payload
