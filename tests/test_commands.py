"""
Unit tests for dashboard command writes
"""
import pytest
from core.rover_data import MotionState, UltrasonicServoSettings
from rtdb.commands import ERROR, INFO, SUCCESS, CommandWriter, parse_motion
from rtdb.firebase_client import FirebaseError


class RecordingClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.writes = []

    def set(self, path, value):
        if self.fail:
            raise FirebaseError("offline", path=path)
        self.writes.append((path, value))


class TestParseMotion:
    """Test parse_motion"""

    def test_accepts_strings_and_enums(self):
        """Test case-insensitive names and enum members"""
        assert parse_motion("forward") == MotionState.FORWARD
        assert parse_motion(MotionState.LEFT) == MotionState.LEFT

    def test_unknown(self):
        """Test unknown commands raise ValueError"""
        with pytest.raises(ValueError):
            parse_motion("JUMP")


class TestCommandWriter:
    """Test writes against the store"""

    def test_motion_command(self):
        """Test the motion request node is written"""
        client = RecordingClient()
        result = CommandWriter(client).send_motion_command("FORWARD")
        assert client.writes == [("motion_command/request", "FORWARD")]
        assert result.success
        assert result.level == SUCCESS
        assert result.message == "Motion command sent: FORWARD"

    def test_servo_command_clamped(self):
        """Test servo requests are clamped to 0-180"""
        client = RecordingClient()
        result = CommandWriter(client).send_servo_command(200)
        assert client.writes == [("servo/request", 180)]
        assert result.message == "Servo command sent: 180°"

    def test_emergency_stop(self):
        """Test emergency stop sets the flag then requests STOP"""
        client = RecordingClient()
        result = CommandWriter(client).send_emergency_stop()
        assert client.writes == [("emergency_stop", True), ("motion_command/request", "STOP")]
        assert result.success
        assert result.message == "Emergency stop activated!"
        assert result.level == ERROR

    def test_ultrasonic_settings(self):
        """Test Apply Settings writes all three values"""
        client = RecordingClient()
        settings = UltrasonicServoSettings(threshold=30, motor_speed=200, rotation_duration=700)
        results = CommandWriter(client).apply_ultrasonic_settings(settings)
        assert client.writes == [
            ("ultrasonic_servo/threshold", 30),
            ("ultrasonic_servo/motor_speed", 200),
            ("ultrasonic_servo/rotation_duration", 700),
        ]
        assert all(r.success for r in results)
        assert results[0].message == "UltrasonicServo threshold updated"

    def test_unknown_ultrasonic_setting(self):
        """Test unknown setting names are rejected"""
        with pytest.raises(ValueError):
            CommandWriter(RecordingClient()).send_ultrasonic_setting("color", 1)

    def test_reset(self):
        """Test reset sets the reset flag"""
        client = RecordingClient()
        result = CommandWriter(client).reset_ultrasonic_servo()
        assert client.writes == [("ultrasonic_servo/reset", True)]
        assert result.message == "UltrasonicServo reset"

    def test_failures_become_results(self):
        """Test store failures are reported, not raised"""
        writer = CommandWriter(RecordingClient(fail=True))
        result = writer.send_motion_command("LEFT")
        assert not result.success
        assert result.level == ERROR
        assert result.message == "Failed to send motion command"
        assert not writer.send_servo_command(90).success
        assert not writer.send_emergency_stop().success
        assert not writer.reset_ultrasonic_servo().success


class TestDemoMode:
    """Test writes without a configured store"""

    def test_demo_results(self):
        """Test demo mode simulates every command"""
        writer = CommandWriter(None)
        assert writer.demo_mode
        result = writer.send_motion_command("STOP")
        assert result.success
        assert result.level == INFO
        assert result.message == "Demo mode: Motion command simulated"
        assert writer.send_servo_command(45).level == INFO
        assert writer.send_emergency_stop().level == INFO
        assert writer.reset_ultrasonic_servo().level == INFO
        assert len(writer.apply_ultrasonic_settings(UltrasonicServoSettings())) == 3

    def test_to_dict(self):
        """Test result serialization"""
        assert CommandWriter(None).send_servo_command(10).to_dict() == {
            "success": True,
            "message": "Demo mode: Servo command simulated",
            "level": "info",
        }
