"""End-to-end tests for the run_estimator entry point."""

import matplotlib
matplotlib.use('Agg')

import pytest

import run_estimator
from motion_pipeline import (
    MotionFrame,
    StreamType,
    generate_motion_frames,
    save_motion_recording,
)


class TestRunEstimator:
    """Tests for run_estimator.main."""

    def test_replays_recording(self, tmp_path, estimator_params_path, capsys):
        """Test replay of a recording prints the final estimate."""
        recording = tmp_path / 'motion.csv'
        save_motion_recording(recording, generate_motion_frames(0.5, roll_rate_radps=0.2))
        plot_path = tmp_path / 'theta.png'

        run_estimator.main([
            '--recording', str(recording),
            '--estimator-params', str(estimator_params_path),
            '--realtime', '--speed', '5',
            '--frequency', '100',
            '--plot', str(plot_path),
            '--quiet',
        ])

        output = capsys.readouterr().out
        assert 'Phase:          tracking' in output
        assert plot_path.exists()

    def test_synthetic_stream(self, estimator_params_path, capsys):
        """Test synthetic source with a duration limit."""
        run_estimator.main([
            '--estimator-params', str(estimator_params_path),
            '--duration', '0.2',
            '--quiet',
        ])

        assert 'Theta (rad):' in capsys.readouterr().out

    def test_missing_params_exits(self, tmp_path, capsys):
        """Test configuration errors exit with status 1."""
        with pytest.raises(SystemExit) as excinfo:
            run_estimator.main([
                '--estimator-params', str(tmp_path / 'missing.yaml'),
                '--quiet',
            ])

        assert excinfo.value.code == 1
        assert 'Failed to load estimator parameters' in capsys.readouterr().out

    def test_pose_recording_exits(self, tmp_path, estimator_params_path, capsys):
        """Test a pose-only source is reported as not handled."""
        recording = tmp_path / 'pose.csv'
        frames = [
            MotionFrame(StreamType.POSE, [0.0, 0.0, 0.0], timestamp_ms=10.0 * i)
            for i in range(10)
        ]
        save_motion_recording(recording, frames)

        with pytest.raises(SystemExit) as excinfo:
            run_estimator.main([
                '--recording', str(recording),
                '--estimator-params', str(estimator_params_path),
                '--quiet',
            ])

        assert excinfo.value.code == 1
        output = capsys.readouterr().out
        assert '✗' in output
        assert 'pose stream' in output
        assert 'Theta (rad):' not in output

    def test_gyro_only_recording_exits(self, tmp_path, estimator_params_path, capsys):
        """Test a source without accelerometer frames is rejected."""
        recording = tmp_path / 'gyro.csv'
        frames = [
            MotionFrame(StreamType.GYRO, [0.1, 0.0, 0.0], timestamp_ms=5.0 * i)
            for i in range(10)
        ]
        save_motion_recording(recording, frames)

        with pytest.raises(SystemExit) as excinfo:
            run_estimator.main([
                '--recording', str(recording),
                '--estimator-params', str(estimator_params_path),
                '--quiet',
            ])

        assert excinfo.value.code == 1
        assert 'no gyro and accel' in capsys.readouterr().out
