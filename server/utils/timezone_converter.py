#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
时区转换工具类
提供时区识别、本地时间转北京时间（夏令时处理）、经度解析和真太阳时计算功能
"""

from datetime import datetime
from typing import Optional, Tuple

import pytz

from core.calculators.solar_time import STANDARD_MERIDIAN, calculate_true_solar_time
from core.calculators.ziwei_errors import InvalidInputError
from server.utils.timezone_mapping import match_city_longitude, match_location_to_timezone

DEFAULT_TIMEZONE = "Asia/Shanghai"

# 北京时间按东八区标准时处理（不含 1986-1991 年夏令时）
BEIJING_STANDARD_TZ = pytz.FixedOffset(8 * 60)


def get_timezone(location: Optional[str] = None,
                 timezone: Optional[str] = None,
                 default: str = DEFAULT_TIMEZONE) -> str:
    """
    获取时区（优先级：显式时区 > location > 默认）

    Returns:
        时区字符串（如 "Asia/Shanghai"）
    """
    if timezone:
        return timezone

    if location:
        matched = match_location_to_timezone(location)
        if matched:
            return matched

    return default


def resolve_longitude(longitude: Optional[float] = None,
                      location: Optional[str] = None,
                      default: float = STANDARD_MERIDIAN) -> Tuple[float, str]:
    """
    解析出生地经度（优先级：显式经度 > 城市表 > 默认 120）

    Returns:
        (longitude, source) - source 为 explicit / city / default
    """
    if longitude is not None:
        return longitude, "explicit"

    if location:
        city_longitude = match_city_longitude(location)
        if city_longitude is not None:
            return city_longitude, "city"

    return default, "default"


def convert_to_beijing_time(local_dt: datetime, timezone_str: str) -> Tuple[datetime, str]:
    """
    将本地时间转换为北京标准时间（自动处理夏令时）

    Args:
        local_dt: 出生地本地时间（naive datetime）
        timezone_str: 时区字符串（如 "Europe/Berlin"）

    Returns:
        (beijing_datetime, timezone_info) - naive 北京时间和时区信息字符串

    Raises:
        InvalidInputError: 未知时区
    """
    try:
        tz = pytz.timezone(timezone_str)
    except pytz.UnknownTimeZoneError as e:
        raise InvalidInputError(f"未知时区: {timezone_str}", field="timezone") from e

    # 本地化（自动处理夏令时）
    localized_dt = tz.localize(local_dt)
    beijing_dt = localized_dt.astimezone(BEIJING_STANDARD_TZ).replace(tzinfo=None)

    timezone_info = f"{timezone_str} ({localized_dt.strftime('%Z')})"
    return beijing_dt, timezone_info


def convert_local_to_solar_time(local_dt: datetime,
                                location: Optional[str] = None,
                                longitude: Optional[float] = None,
                                timezone: Optional[str] = None,
                                default_longitude: float = STANDARD_MERIDIAN,
                                default_timezone: str = DEFAULT_TIMEZONE) -> dict:
    """
    本地时间 -> 北京时间 -> 真太阳时

    Returns:
        dict: beijing_time、true_solar_time、longitude、longitude_source、timezone、timezone_info
    """
    timezone_str = get_timezone(location, timezone, default_timezone)
    beijing_dt, timezone_info = convert_to_beijing_time(local_dt, timezone_str)
    resolved_longitude, source = resolve_longitude(longitude, location, default_longitude)
    true_solar = calculate_true_solar_time(beijing_dt, resolved_longitude)

    return {
        'beijing_time': beijing_dt,
        'true_solar_time': true_solar,
        'longitude': resolved_longitude,
        'longitude_source': source,
        'timezone': timezone_str,
        'timezone_info': timezone_info,
    }
