#!/usr/bin/env python3
"""Main entry point to run the IMU rotation estimator.

Replays a motion recording (or a synthetic IMU stream) through the
estimator on a background producer thread while the main thread polls the
estimate at display rate, like a rendering loop would.

Examples:
    # Synthetic camera rolling at 0.5 rad/s, paced in real time
    python run_estimator.py --roll-rate 0.5 --realtime --duration 5

    # Replay a recording as fast as possible
    python run_estimator.py --recording data/d435i_motion.csv

    # Replay at 2x speed and save a plot of the estimate
    python run_estimator.py --recording data/d435i_motion.csv --realtime --speed 2 --plot theta.png

    # Use custom estimator parameters
    python run_estimator.py --estimator-params config/estimator_params.yaml
"""

import argparse
import logging
import sys

from state_estimation import RotationEstimator, RotationEstimatorConfig
from motion_pipeline import (
    MotionFrameProducer,
    OrientationMonitor,
    StreamCapability,
    detect_stream_capability,
    generate_motion_frames,
    load_motion_recording,
)


def parse_args(argv=None):
    """Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        description='IMU Rotation Estimator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Input source
    parser.add_argument(
        '--recording',
        type=str,
        default=None,
        help='CSV recording (timestamp_ms,stream,x,y,z); synthetic stream if omitted'
    )
    parser.add_argument(
        '--roll-rate',
        type=float,
        default=0.5,
        help='Synthetic roll rate in rad/s (default: 0.5)'
    )
    parser.add_argument(
        '--noise',
        type=float,
        default=0.05,
        help='Synthetic accelerometer noise std in m/s^2 (default: 0.05)'
    )
    parser.add_argument(
        '--seed',
        type=int,
        default=0,
        help='Synthetic noise seed (default: 0)'
    )

    # Playback
    parser.add_argument(
        '--realtime',
        action='store_true',
        help='Pace frame delivery by timestamps'
    )
    parser.add_argument(
        '--speed',
        type=float,
        default=1.0,
        help='Playback speed multiplier with --realtime (default: 1.0)'
    )

    # Monitor loop parameters
    parser.add_argument(
        '--frequency',
        type=float,
        default=60.0,
        help='Display poll frequency in Hz (default: 60.0)'
    )
    parser.add_argument(
        '--duration',
        type=float,
        default=None,
        help='Run duration in seconds (default: until the stream ends)'
    )

    # Configuration paths
    parser.add_argument(
        '--estimator-params',
        type=str,
        default='config/estimator_params.yaml',
        help='Path to estimator parameters YAML'
    )

    # Output
    parser.add_argument(
        '--plot',
        type=str,
        default=None,
        help='Save a plot of the estimate history to this path'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )
    parser.add_argument(
        '--quiet',
        action='store_true',
        help='Disable progress logging'
    )

    return parser.parse_args(argv)


def load_frames(args):
    """Load frames from the recording or generate a synthetic stream.

    Args:
        args: Parsed command-line arguments

    Returns:
        List of MotionFrame in delivery order
    """
    if args.recording is not None:
        return load_motion_recording(args.recording)

    return generate_motion_frames(
        duration_s=args.duration if args.duration else 5.0,
        roll_rate_radps=args.roll_rate,
        accel_noise_std_mps2=args.noise,
        seed=args.seed,
    )


def main(argv=None):
    """Main entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.WARNING if args.quiet else getattr(logging, args.log_level),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    print("=" * 60)
    print("IMU ROTATION ESTIMATOR")
    print("=" * 60)
    print(f"Source:         {args.recording or 'synthetic'}")
    print(f"Playback:       {'realtime x%.1f' % args.speed if args.realtime else 'as fast as possible'}")
    print(f"Frequency:      {args.frequency:.1f} Hz")
    print(f"Duration:       {args.duration if args.duration else 'until stream ends'}")
    print("=" * 60)
    print()

    try:
        config = RotationEstimatorConfig.from_yaml(args.estimator_params)
        print(f"✓ Estimator parameters loaded (alpha={config.complementary_filter_alpha:.3f})")
    except Exception as e:
        print(f"✗ Failed to load estimator parameters: {e}")
        sys.exit(1)

    try:
        frames = load_frames(args)
        print(f"✓ {len(frames)} motion frames ready")
    except Exception as e:
        print(f"✗ Failed to load motion frames: {e}")
        sys.exit(1)

    capability = detect_stream_capability([{frame.stream for frame in frames}])
    if capability is StreamCapability.POSE:
        print("✗ Source carries a pose stream (pre-fused transform); pass-through is not handled")
        sys.exit(1)
    if capability is not StreamCapability.IMU:
        print("✗ Source has no gyro and accel streams to fuse")
        sys.exit(1)
    print("✓ IMU streams found (gyro + accel)")

    estimator = RotationEstimator(config)
    producer = MotionFrameProducer(
        estimator, frames, realtime=args.realtime, speed=args.speed
    )
    monitor = OrientationMonitor(
        estimator,
        target_frequency_hz=args.frequency,
        log_every=0 if args.quiet else int(args.frequency),
        history_length=None if args.plot else 0,
    )

    producer.start()
    try:
        stats = monitor.run(
            duration_s=args.duration,
            should_continue=lambda: producer.is_running,
        )
    except KeyboardInterrupt:
        print("\n\nStopped by user")
        stats = monitor.stats
    finally:
        producer.stop()

    theta = estimator.get_theta()
    pitch_deg, yaw_deg, roll_deg = theta.as_degrees()
    counters = estimator.statistics()

    print()
    print("-" * 60)
    print(f"Phase:          {estimator.phase.value}")
    print(f"Theta (rad):    pitch={theta.pitch_rad:+.4f} yaw={theta.yaw_rad:+.4f} roll={theta.roll_rad:+.4f}")
    print(f"Theta (deg):    pitch={pitch_deg:+.2f} yaw={yaw_deg:+.2f} roll={roll_deg:+.2f}")
    print(f"Samples:        gyro={counters.gyro_samples} (primed {counters.primed_gyro_samples}) "
          f"accel={counters.accel_samples} (rejected {counters.rejected_accel_samples})")
    print(f"Frames:         {producer.frames_delivered} delivered, {producer.frames_ignored} ignored")
    print(f"Polls:          {stats.polls} (avg read {stats.avg_read_time_ms:.3f} ms, "
          f"{stats.timing_violations} timing violations)")

    if args.plot:
        from debug import plot_orientation_history

        plot_orientation_history(
            monitor.history.time_array(),
            monitor.history.theta_array(),
            save_path=args.plot,
        )
        print(f"✓ Plot saved to {args.plot}")


if __name__ == '__main__':
    main()
