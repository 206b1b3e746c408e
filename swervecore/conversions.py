"""
A collection of methods for converting between motor controller encoder units and standard units, like metres and
radians.
"""

import math

DEGREES_PER_ROTATION = 360
RADS_PER_ROTATION = 2 * math.pi
SECONDS_PER_MINUTE = 60


def drive_position_conversion_factor(circumference: float, gear_ratio: float) -> float:
    """Metres of wheel travel per motor rotation"""
    return circumference / gear_ratio


def drive_velocity_conversion_factor(circumference: float, gear_ratio: float) -> float:
    """Metres/sec of wheel travel per motor RPM"""
    return drive_position_conversion_factor(circumference, gear_ratio) / SECONDS_PER_MINUTE


def azimuth_position_conversion_factor(gear_ratio: float) -> float:
    """Radians of wheel rotation per motor rotation"""
    return RADS_PER_ROTATION / gear_ratio


def azimuth_velocity_conversion_factor(gear_ratio: float) -> float:
    """Radians/sec of wheel rotation per motor RPM"""
    return azimuth_position_conversion_factor(gear_ratio) / SECONDS_PER_MINUTE


def duty_cycle_to_degrees(position: float) -> float:
    # Duty cycle encoders report 0.0 <= pos < 1.0 rotations
    return position * DEGREES_PER_ROTATION


def speed_to_voltage(speed: float, max_speed: float, nominal_voltage: float) -> float:
    """
    Scale a wheel speed to an open-loop voltage. The result is not clamped.

    :param speed: Desired speed in m/s
    :param max_speed: Speed reached at nominal voltage in m/s
    :param nominal_voltage: Supply voltage that corresponds to max_speed
    """
    return speed / max_speed * nominal_voltage
