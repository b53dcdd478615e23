# sources/audio_source.py
from abc import ABC, abstractmethod
from typing import Iterator

from pipeline.models import AudioParameters
from sources.audio_packet import AudioPacket


class PacketSource(ABC):
    @abstractmethod
    def open(self) -> None:
        """Open the underlying container and read its audio parameters."""
        pass

    @abstractmethod
    def parameters(self) -> AudioParameters:
        """
        Audio parameters of the whole stream.
        Only valid after open().
        """
        pass

    @abstractmethod
    def packets(self) -> Iterator[AudioPacket]:
        """
        Lazy, finite, forward-only sequence of packets in stream order.
        Each call starts again from the first packet.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the underlying file handle."""
        pass

    def __enter__(self) -> "PacketSource":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
