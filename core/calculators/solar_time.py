#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
真太阳时与时辰换算

真太阳时 = 北京时间 + 经度时差 + 均时差
经度时差 = (经度 - 120) * 4 分钟（120°E 为东八区标准经线，每度 4 分钟）
均时差   = 9.87*sin(2B) - 7.53*cos(B) - 1.5*sin(B)，B = 360*(n-81)/365 度，n 为年内日序
"""

import math
import numbers
from datetime import datetime, timedelta

from core.calculators.ziwei_errors import InvalidInputError, InvalidTimeSlotError
from core.data.stems_branches import TIME_SLOT_NAMES, TIME_SLOT_RANGES

STANDARD_MERIDIAN = 120.0
MINUTES_PER_DEGREE = 4.0


def longitude_correction(longitude: float) -> float:
    """经度时差（分钟），东正西负"""
    return (longitude - STANDARD_MERIDIAN) * MINUTES_PER_DEGREE


def equation_of_time(day_of_year: int) -> float:
    """均时差（分钟）"""
    b = math.radians(360.0 * (day_of_year - 81) / 365.0)
    return 9.87 * math.sin(2 * b) - 7.53 * math.cos(b) - 1.5 * math.sin(b)


def _validate_longitude(longitude) -> float:
    if isinstance(longitude, bool) or not isinstance(longitude, numbers.Real):
        raise InvalidInputError("经度必须为数字，范围 -180 ~ 180", field="longitude")
    if math.isnan(longitude) or longitude < -180 or longitude > 180:
        raise InvalidInputError(f"经度超出范围: {longitude}，应为 -180 ~ 180", field="longitude")
    return float(longitude)


def calculate_true_solar_time(dt: datetime, longitude: float = STANDARD_MERIDIAN) -> datetime:
    """
    计算真太阳时

    Args:
        dt: 北京时间（东八区标准时）的出生时间
        longitude: 出生地经度，东经为正，西经为负，默认 120

    Returns:
        新的 datetime 对象（不修改入参）

    Raises:
        InvalidInputError: 日期无效或经度超出 [-180, 180]
    """
    if not isinstance(dt, datetime):
        raise InvalidInputError(f"无效的日期时间: {dt!r}", field="date")
    longitude = _validate_longitude(longitude)

    day_of_year = dt.timetuple().tm_yday
    total_minutes = longitude_correction(longitude) + equation_of_time(day_of_year)
    return dt + timedelta(minutes=total_minutes)


def get_time_index_from_date(dt: datetime) -> int:
    """
    时刻 -> 时辰序号（0-12）

    0 点为早子时（0），23 点为晚子时（12），其余 floor((hour + 1) / 2)。
    """
    hour = dt.hour
    if hour == 0:
        return 0
    if hour == 23:
        return 12
    return (hour + 1) // 2


def validate_time_index(time_index) -> int:
    """校验时辰序号，返回 int"""
    if isinstance(time_index, bool) or not isinstance(time_index, int):
        raise InvalidTimeSlotError(f"时辰序号必须为整数 0-12，收到: {time_index!r}")
    if time_index < 0 or time_index > 12:
        raise InvalidTimeSlotError(f"时辰序号错误，应为 0-12，收到: {time_index}")
    return time_index


def get_time_slot_name(time_index: int) -> str:
    return TIME_SLOT_NAMES[validate_time_index(time_index)]


def get_time_slot_range(time_index: int) -> str:
    return TIME_SLOT_RANGES[validate_time_index(time_index)]
