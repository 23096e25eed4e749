"""Unit tests for motion pipeline module."""

import threading

import numpy as np
import pytest

from state_estimation import RotationEstimator, Theta
from motion_pipeline import (
    StreamType,
    StreamCapability,
    MotionFrame,
    detect_stream_capability,
    dispatch_frame,
    load_motion_recording,
    save_motion_recording,
    generate_motion_frames,
    MotionFrameProducer,
    OrientationMonitor,
    OrientationHistory,
)
from motion_pipeline.synthetic import gravity_vector


class TestMotionFrame:
    """Tests for MotionFrame dataclass."""

    def test_creation_from_list(self):
        """Test list data becomes a float array."""
        frame = MotionFrame(StreamType.GYRO, [1, 2, 3], timestamp_ms=10.0)
        assert frame.data.shape == (3,)
        assert frame.data.dtype == float

    def test_stream_from_string(self):
        """Test stream name coerced to StreamType."""
        frame = MotionFrame('accel', [0.0, 0.0, 9.81])
        assert frame.stream is StreamType.ACCEL

    def test_wrong_shape_raises(self):
        """Test that wrong data shape raises."""
        with pytest.raises(ValueError, match="data must have shape"):
            MotionFrame(StreamType.GYRO, [0.0, 0.0])


class TestDetectStreamCapability:
    """Tests for detect_stream_capability."""

    def test_gyro_and_accel_on_one_device(self):
        """Test IMU capability."""
        devices = [[StreamType.ACCEL, StreamType.GYRO]]
        assert detect_stream_capability(devices) is StreamCapability.IMU

    def test_pose_wins(self):
        """Test pose stream selects pass-through."""
        devices = [[StreamType.GYRO, StreamType.ACCEL, StreamType.POSE]]
        assert detect_stream_capability(devices) is StreamCapability.POSE

    def test_pose_on_later_device_after_partial_imu(self):
        """Test a device with only gyro does not stop the search."""
        devices = [[StreamType.GYRO], [StreamType.POSE]]
        assert detect_stream_capability(devices) is StreamCapability.POSE

    def test_streams_split_across_devices(self):
        """Test gyro and accel must share a device."""
        devices = [[StreamType.GYRO], [StreamType.ACCEL]]
        assert detect_stream_capability(devices) is StreamCapability.NONE

    def test_no_devices(self):
        """Test empty device list."""
        assert detect_stream_capability([]) is StreamCapability.NONE


class TestDispatchFrame:
    """Tests for dispatch_frame."""

    def test_routes_accel_and_gyro(self, estimator):
        """Test frames reach the matching ingestion operation."""
        assert dispatch_frame(
            estimator, MotionFrame(StreamType.GYRO, [0.0, 0.0, 0.0], 100.0)
        )
        assert estimator.last_gyro_timestamp_ms == 100.0

        assert dispatch_frame(
            estimator, MotionFrame(StreamType.ACCEL, [0.0, 0.0, 1.0])
        )
        assert estimator.is_initialized

    def test_pose_not_consumed(self, estimator):
        """Test pose frames are ignored."""
        consumed = dispatch_frame(
            estimator, MotionFrame(StreamType.POSE, [1.0, 2.0, 3.0], 5.0)
        )
        assert not consumed
        assert estimator.get_theta() == Theta()
        assert estimator.last_gyro_timestamp_ms is None


class TestMotionRecording:
    """Tests for CSV recordings."""

    def test_load(self, tmp_path):
        """Test parsing a small recording."""
        path = tmp_path / 'motion.csv'
        path.write_text(
            "timestamp_ms,stream,x,y,z\n"
            "0.0,gyro,0.0,0.0,0.0\n"
            "1.5,ACCEL,0.0,0.0,9.81\n"
            "\n"
            "2.5,pose,1.0,2.0,3.0\n"
        )
        frames = load_motion_recording(path)

        assert [f.stream for f in frames] == [
            StreamType.GYRO, StreamType.ACCEL, StreamType.POSE
        ]
        assert frames[1].timestamp_ms == 1.5
        assert np.array_equal(frames[1].data, [0.0, 0.0, 9.81])

    def test_save_then_load_preserves_frames(self, tmp_path):
        """Test written recordings read back unchanged."""
        frames = generate_motion_frames(0.05, roll_rate_radps=0.3, seed=1,
                                        accel_noise_std_mps2=0.1)
        path = tmp_path / 'motion.csv'
        save_motion_recording(path, frames)
        loaded = load_motion_recording(path)

        assert len(loaded) == len(frames)
        for original, restored in zip(frames, loaded):
            assert restored.stream is original.stream
            assert restored.timestamp_ms == original.timestamp_ms
            assert np.array_equal(restored.data, original.data)

    def test_bad_header_raises(self, tmp_path):
        """Test header validation."""
        path = tmp_path / 'motion.csv'
        path.write_text("t,s,a,b,c\n0,gyro,0,0,0\n")
        with pytest.raises(ValueError, match="expected header"):
            load_motion_recording(path)

    def test_unknown_stream_raises(self, tmp_path):
        """Test unknown stream names report the line."""
        path = tmp_path / 'motion.csv'
        path.write_text("timestamp_ms,stream,x,y,z\n0,magnetometer,0,0,0\n")
        with pytest.raises(ValueError, match=":2: unknown stream 'magnetometer'"):
            load_motion_recording(path)

    def test_short_row_raises(self, tmp_path):
        """Test column count validation."""
        path = tmp_path / 'motion.csv'
        path.write_text("timestamp_ms,stream,x,y,z\n0,gyro,0,0\n")
        with pytest.raises(ValueError, match="expected 5 columns"):
            load_motion_recording(path)


class TestSyntheticFrames:
    """Tests for generate_motion_frames."""

    def test_rates_and_ordering(self):
        """Test sample counts and timestamp order."""
        frames = generate_motion_frames(1.0, gyro_rate_hz=200.0, accel_rate_hz=50.0)
        gyro = [f for f in frames if f.stream is StreamType.GYRO]
        accel = [f for f in frames if f.stream is StreamType.ACCEL]

        assert len(gyro) == 200
        assert len(accel) == 50
        timestamps = [f.timestamp_ms for f in frames]
        assert timestamps == sorted(timestamps)
        assert frames[0].stream is StreamType.ACCEL

    def test_seed_is_deterministic(self):
        """Test same seed gives identical noise."""
        a = generate_motion_frames(0.1, gyro_noise_std_radps=0.1, seed=7)
        b = generate_motion_frames(0.1, gyro_noise_std_radps=0.1, seed=7)
        assert all(np.array_equal(x.data, y.data) for x, y in zip(a, b))

    def test_gravity_vector_inverts_tilt(self, estimator):
        """Test gravity_vector yields the requested tilt."""
        estimator.process_accel(gravity_vector(0.2, -0.4))
        theta = estimator.get_theta()
        assert np.isclose(theta.pitch_rad, 0.2)
        assert np.isclose(theta.roll_rad, -0.4)

    def test_invalid_duration_raises(self):
        """Test duration validation."""
        with pytest.raises(ValueError, match="duration_s must be positive"):
            generate_motion_frames(0.0)

    def test_estimator_tracks_constant_roll(self, estimator):
        """Test noise-free replay follows the commanded roll."""
        roll_rate = 0.5
        frames = generate_motion_frames(2.0, roll_rate_radps=roll_rate,
                                        initial_pitch_rad=0.1)
        for frame in frames:
            dispatch_frame(estimator, frame)

        last_ms = frames[-1].timestamp_ms
        theta = estimator.get_theta()
        assert np.isclose(theta.roll_rad, roll_rate * last_ms / 1000.0, atol=0.02)
        assert np.isclose(theta.pitch_rad, 0.1, atol=1e-6)
        assert theta.yaw_rad == np.pi


class TestMotionFrameProducer:
    """Tests for MotionFrameProducer."""

    def test_delivers_all_frames(self, estimator):
        """Test background delivery of a finite stream."""
        frames = generate_motion_frames(0.5, roll_rate_radps=0.2)
        frames.append(MotionFrame(StreamType.POSE, [0.0, 0.0, 0.0], 1000.0))

        producer = MotionFrameProducer(estimator, frames)
        producer.start()
        producer.join(timeout=10.0)

        assert not producer.is_running
        assert producer.frames_delivered == len(frames) - 1
        assert producer.frames_ignored == 1
        assert estimator.is_initialized

    def test_start_twice_raises(self, estimator):
        """Test producer threads are single-use."""
        producer = MotionFrameProducer(estimator, [])
        producer.start()
        producer.join(timeout=5.0)
        with pytest.raises(RuntimeError, match="already started"):
            producer.start()

    def test_stop_interrupts_realtime_playback(self, estimator):
        """Test stop() ends a paced stream early."""
        frames = generate_motion_frames(60.0)
        producer = MotionFrameProducer(estimator, frames, realtime=True)
        producer.start()
        producer.stop(timeout=5.0)

        assert not producer.is_running
        assert producer.frames_delivered < len(frames)

    def test_invalid_speed_raises(self, estimator):
        """Test speed validation."""
        with pytest.raises(ValueError, match="speed must be positive"):
            MotionFrameProducer(estimator, [], speed=0.0)


class TestOrientationMonitor:
    """Tests for OrientationMonitor."""

    def test_polls_for_duration(self, estimator):
        """Test history and stats after a short run."""
        estimator.process_accel([0.0, 0.0, 1.0])
        monitor = OrientationMonitor(estimator, target_frequency_hz=200.0, log_every=0)

        stats = monitor.run(duration_s=0.1)

        assert stats.polls > 0
        assert len(monitor.history) == stats.polls
        assert monitor.history.theta_array().shape == (stats.polls, 3)
        assert all(theta == Theta(0.0, np.pi, 0.0) for theta in monitor.history.thetas)
        assert stats.max_read_time_ms >= stats.avg_read_time_ms >= 0.0

    def test_stop_event(self, estimator):
        """Test pre-set stop event ends the loop immediately."""
        stop_event = threading.Event()
        stop_event.set()
        monitor = OrientationMonitor(estimator)

        stats = monitor.run(stop_event=stop_event)
        assert stats.polls == 0

    def test_should_continue(self, estimator):
        """Test callback-controlled loop."""
        remaining = iter([True, True, True, False])
        monitor = OrientationMonitor(estimator, target_frequency_hz=1000.0)

        stats = monitor.run(should_continue=lambda: next(remaining))
        assert stats.polls == 3

    def test_no_stop_condition_raises(self, estimator):
        """Test run() refuses to loop forever."""
        with pytest.raises(ValueError, match="needs duration_s"):
            OrientationMonitor(estimator).run()

    def test_invalid_frequency_raises(self, estimator):
        """Test frequency validation."""
        with pytest.raises(ValueError, match="target_frequency_hz must be positive"):
            OrientationMonitor(estimator, target_frequency_hz=0.0)

    def test_concurrent_with_producer(self, estimator):
        """Test monitor reads while a producer thread writes."""
        frames = generate_motion_frames(0.5, roll_rate_radps=1.0)
        producer = MotionFrameProducer(estimator, frames, realtime=True, speed=5.0)
        monitor = OrientationMonitor(estimator, target_frequency_hz=500.0, log_every=0)

        producer.start()
        monitor.run(duration_s=5.0, should_continue=lambda: producer.is_running)
        producer.stop()

        rolls = monitor.history.theta_array()[:, 2]
        assert len(rolls) > 0
        assert producer.frames_delivered == len(frames)
        # Roll only grows for a positive roll rate with noise-free input
        assert np.all(np.diff(rolls) >= -1e-9)


class TestOrientationHistory:
    """Tests for OrientationHistory."""

    def test_empty_arrays(self):
        """Test shapes of an empty history."""
        history = OrientationHistory()
        assert history.time_array().shape == (0,)
        assert history.theta_array().shape == (0, 3)

    def test_max_samples_keeps_most_recent(self):
        """Test a bounded history drops the oldest polls."""
        history = OrientationHistory(max_samples=3)
        for i in range(10):
            history.append(float(i), Theta(pitch_rad=float(i)))

        assert len(history) == 3
        np.testing.assert_allclose(history.time_array(), [7.0, 8.0, 9.0])
        np.testing.assert_allclose(history.theta_array()[:, 0], [7.0, 8.0, 9.0])

    def test_zero_max_samples_records_nothing(self):
        """Test history can be switched off."""
        history = OrientationHistory(max_samples=0)
        history.append(0.0, Theta())
        assert len(history) == 0
        assert history.theta_array().shape == (0, 3)

    def test_negative_max_samples_raises(self):
        """Test negative bound is rejected."""
        with pytest.raises(ValueError, match="max_samples"):
            OrientationHistory(max_samples=-1)

    def test_monitor_history_length(self, estimator):
        """Test monitor history stays within its bound over a run."""
        estimator.process_accel([0.0, 0.0, 9.81])
        monitor = OrientationMonitor(
            estimator, target_frequency_hz=500.0, log_every=0, history_length=5
        )

        stats = monitor.run(duration_s=0.1)

        assert stats.polls > 5
        assert len(monitor.history) == 5
