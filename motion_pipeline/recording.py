"""CSV recordings of motion streams.

File layout, one frame per row:

    timestamp_ms,stream,x,y,z
    1000.0,accel,0.01,-9.80,0.12
    1002.5,gyro,0.001,0.002,-0.003
"""

import csv
from pathlib import Path
from typing import Iterable, List, Union

from motion_pipeline.frames import MotionFrame, StreamType


RECORDING_HEADER = ['timestamp_ms', 'stream', 'x', 'y', 'z']


def load_motion_recording(path: Union[str, Path]) -> List[MotionFrame]:
    """Read motion frames from a CSV recording.

    Args:
        path: Recording file path

    Returns:
        Frames in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the header or a row is malformed
    """
    frames: List[MotionFrame] = []
    with open(path, 'r', newline='') as csv_file:
        reader = csv.reader(csv_file)
        header = next(reader, None)
        if header is None or [h.strip() for h in header] != RECORDING_HEADER:
            raise ValueError(
                f"{path}: expected header {','.join(RECORDING_HEADER)}, got {header}"
            )

        for line_number, row in enumerate(reader, start=2):
            if not row:
                continue
            if len(row) != len(RECORDING_HEADER):
                raise ValueError(
                    f"{path}:{line_number}: expected {len(RECORDING_HEADER)} "
                    f"columns, got {len(row)}"
                )
            timestamp, stream_name, x, y, z = (value.strip() for value in row)
            try:
                stream = StreamType(stream_name.lower())
            except ValueError:
                raise ValueError(
                    f"{path}:{line_number}: unknown stream '{stream_name}'"
                ) from None
            try:
                frames.append(MotionFrame(
                    stream=stream,
                    data=[float(x), float(y), float(z)],
                    timestamp_ms=float(timestamp),
                ))
            except ValueError as e:
                raise ValueError(f"{path}:{line_number}: {e}") from e

    return frames


def save_motion_recording(
    path: Union[str, Path],
    frames: Iterable[MotionFrame],
) -> None:
    """Write motion frames to a CSV recording.

    Args:
        path: Output file path
        frames: Frames to write, in delivery order
    """
    with open(path, 'w', newline='') as csv_file:
        writer = csv.writer(csv_file)
        writer.writerow(RECORDING_HEADER)
        for frame in frames:
            writer.writerow([
                repr(float(frame.timestamp_ms)),
                frame.stream.value,
                repr(float(frame.data[0])),
                repr(float(frame.data[1])),
                repr(float(frame.data[2])),
            ])
