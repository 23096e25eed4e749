"""Motion pipeline module for the rotation estimator.

This module connects the estimator to its collaborators: the producer side
that demultiplexes motion frames and feeds them in from a background thread,
and the consumer side that polls the estimate at display rate.

Public API:
    - StreamType, StreamCapability, MotionFrame: Typed motion samples
    - detect_stream_capability: Choose IMU fusion or pose pass-through
    - dispatch_frame: Route a frame to the matching ingestion operation
    - load_motion_recording, save_motion_recording: CSV recordings
    - generate_motion_frames: Synthetic interleaved IMU streams
    - MotionFrameProducer: Background frame delivery
    - OrientationMonitor, MonitorStats, OrientationHistory: Polling consumer
"""

from motion_pipeline.frames import (
    StreamType,
    StreamCapability,
    MotionFrame,
    detect_stream_capability,
    dispatch_frame,
)
from motion_pipeline.recording import (
    load_motion_recording,
    save_motion_recording,
)
from motion_pipeline.synthetic import generate_motion_frames
from motion_pipeline.producer import MotionFrameProducer
from motion_pipeline.consumer import (
    OrientationMonitor,
    MonitorStats,
    OrientationHistory,
)

__all__ = [
    'StreamType',
    'StreamCapability',
    'MotionFrame',
    'detect_stream_capability',
    'dispatch_frame',
    'load_motion_recording',
    'save_motion_recording',
    'generate_motion_frames',
    'MotionFrameProducer',
    'OrientationMonitor',
    'MonitorStats',
    'OrientationHistory',
]
