from pathlib import Path
from typing import Callable

from tqdm import tqdm

import config
from pipeline.boundary_planner import plan_chunks
from pipeline.errors import SplitIOError
from pipeline.models import ChunkInfo, ChunkPlan, PacketIndex, SplitOptions, SplitResult
from pipeline.packet_index import build_packet_index
from sources.audio_source import PacketSource
from sources.wav_source import WavPacketSource
from storage.chunk_writer import ChunkWriter


def chunk_filename(prefix: str, number: int) -> str:
    return f"{prefix}_{number:0{config.INDEX_WIDTH}d}.{config.OUTPUT_EXTENSION}"


class SplitSession:
    def __init__(
        self,
        options: SplitOptions,
        source_factory: Callable[[SplitOptions], PacketSource] | None = None,
    ):
        self.options = options
        self.source_factory = source_factory or self._default_source

    def run(self) -> SplitResult:
        """
        Three strictly sequential passes: index, plan, write.
        The first failure aborts the split; chunks already on disk are left as is.
        """
        opts = self.options
        target_seconds = opts.validate()
        input_path = str(opts.input_path)
        output_dir = Path(opts.output_dir)

        self._log(f"🎧 Processing file: {input_path}")
        self._log(f"⏱️  Target chunk duration: {float(target_seconds):.2f} seconds ({float(target_seconds) / 60:.2f} minutes)")

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SplitIOError(f"cannot create output directory: {exc}", stage="setup", path=str(output_dir)) from exc

        # ---- PASS 1: INDEX ----
        self._log("🔎 First pass: reading packets and calculating timestamps...")
        with self.source_factory(opts) as source:
            index = build_packet_index(source.packets(), source.parameters(), source_path=input_path)

        self._log(
            f"📊 Found {len(index)} packets, total duration: "
            f"{float(index.total_duration):.2f} seconds ({float(index.total_duration) / 60:.2f} minutes)"
        )

        # ---- PASS 2: PLAN ----
        self._log("🧮 Second pass: determining chunk boundaries...")
        plans = plan_chunks(index, target_seconds)
        self._log(f"✂️  Splitting into {len(plans)} chunks:")
        for number, plan in enumerate(plans, start=1):
            seconds = float(index.seconds(plan.frame_count))
            self._log(f"   Chunk {number} duration: {seconds / 60:.2f} minutes ({seconds:.2f} seconds), packets: {plan.packet_count}")

        result = SplitResult(chunk_count=0, total_duration=index.total_duration)
        if not plans:
            self._log("🔇 No audio packets found, nothing to write")
            return result

        # ---- PASS 3: WRITE ----
        chunks = self._write_chunks(index, plans, output_dir)

        result.chunks = chunks
        result.chunk_count = len(chunks)
        self._log(f"✅ Split into {result.chunk_count} chunks in directory: {output_dir}")
        return result

    def _write_chunks(self, index: PacketIndex, plans: list[ChunkPlan], output_dir: Path) -> list[ChunkInfo]:
        opts = self.options
        writer = ChunkWriter(index, overwrite=opts.overwrite)
        chunks: list[ChunkInfo] = []

        with self.source_factory(opts) as source:
            packets = iter(source.packets())

            for number, plan in enumerate(
                tqdm(plans, unit="chunk", disable=not opts.verbose),
                start=1,
            ):
                output_path = output_dir / chunk_filename(opts.prefix, number)
                start_time = index.seconds(plan.start_frame)
                end_time = index.seconds(plan.start_frame + plan.frame_count)

                self._log(
                    f"💾 Writing chunk {number}/{len(plans)}: {output_path.name} "
                    f"(duration: {float(end_time - start_time) / 60:.2f} minutes, {plan.packet_count} packets)"
                )
                byte_length = writer.write(plan, output_path, packets)

                chunks.append(
                    ChunkInfo(
                        index=number,
                        path=output_path,
                        start_time=start_time,
                        end_time=end_time,
                        byte_length=byte_length,
                        packet_count=plan.packet_count,
                    )
                )

        return chunks

    def _log(self, message: str) -> None:
        if self.options.verbose:
            tqdm.write(message)

    @staticmethod
    def _default_source(options: SplitOptions) -> PacketSource:
        return WavPacketSource(options.input_path, packet_frames=options.packet_frames)


def split_wav(options: SplitOptions) -> SplitResult:
    """
    Split a PCM audio file into numbered WAV chunks of roughly
    options.chunk_duration each.
    """
    return SplitSession(options).run()
