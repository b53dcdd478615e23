from fractions import Fraction

from pipeline.errors import InvalidConfigError
from pipeline.models import ChunkPlan, PacketIndex


def plan_chunks(index: PacketIndex, target_seconds: Fraction) -> list[ChunkPlan]:
    """
    Partition the packet index into contiguous groups of whole packets.

    A group closes on the packet whose inclusion makes it reach or exceed the
    target. The trailing group takes whatever is left, so the plan never ends
    with an empty chunk, even when the stream is an exact multiple of the target.
    """
    target_seconds = Fraction(target_seconds)
    if target_seconds <= 0:
        raise InvalidConfigError(
            f"chunk duration must be positive, got {float(target_seconds)}s",
            stage="plan",
        )

    # compare in frames: frames / rate >= target  <=>  frames >= target * rate
    target_frames = target_seconds * index.parameters.sample_rate

    plans: list[ChunkPlan] = []
    start_packet = 0
    start_frame = 0
    frames = 0
    byte_length = 0

    for record in index.records:
        frames += record.frame_count
        byte_length += record.byte_length

        if frames >= target_frames:
            plans.append(
                ChunkPlan(
                    start_packet=start_packet,
                    end_packet=record.index + 1,
                    start_frame=start_frame,
                    frame_count=frames,
                    byte_length=byte_length,
                )
            )
            start_packet = record.index + 1
            start_frame += frames
            frames = 0
            byte_length = 0

    if start_packet < len(index.records):
        plans.append(
            ChunkPlan(
                start_packet=start_packet,
                end_packet=len(index.records),
                start_frame=start_frame,
                frame_count=frames,
                byte_length=byte_length,
            )
        )

    return plans
