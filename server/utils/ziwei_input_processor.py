#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微输入处理工具类 - 统一处理农历转换、时区转换与经度解析
"""

import logging
import re
from datetime import datetime
from typing import Optional, Tuple

from core.calculators.LunarConverter import LunarConverter
from core.calculators.solar_time import STANDARD_MERIDIAN
from core.calculators.ziwei_errors import InvalidDateFormatError, InvalidInputError
from server.utils.timezone_converter import DEFAULT_TIMEZONE, convert_local_to_solar_time

logger = logging.getLogger(__name__)

_DATE_PATTERN = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})$')
_TIME_PATTERN = re.compile(r'^(\d{1,2}):(\d{2})(?::(\d{2}))?$')
_LUNAR_TEXT_MARKS = ('年', '月', '初', '廿', '卅')


class ZiweiInputProcessor:
    """紫微输入处理工具类"""

    @staticmethod
    def parse_time(time_str: str) -> Tuple[int, int]:
        match = _TIME_PATTERN.match((time_str or '').strip())
        if not match:
            raise InvalidInputError(f"时间格式错误，应为 HH:MM，收到: {time_str!r}", field="time")
        hour, minute = int(match.group(1)), int(match.group(2))
        second = int(match.group(3) or 0)
        if hour > 23 or minute > 59 or second > 59:
            raise InvalidInputError(f"时间超出范围: {time_str}", field="time")
        return hour, minute

    @staticmethod
    def to_solar_date(date_str: str, calendar_type: str = "solar", is_leap_month: bool = False) -> Tuple[str, Optional[dict]]:
        """
        统一转换为公历日期字符串

        Returns:
            (solar_date, lunar_to_solar) - 农历输入时附带换算明细
        """
        text = (date_str or '').strip()
        if calendar_type == "lunar":
            if any(mark in text for mark in _LUNAR_TEXT_MARKS):
                # 字符串格式（如 "2024年正月初一"）
                result = LunarConverter.lunar_to_solar_from_string(text)
            else:
                match = _DATE_PATTERN.match(text)
                if not match:
                    raise InvalidDateFormatError(f"无法解析农历日期: {date_str!r}")
                year, month, day = (int(g) for g in match.groups())
                result = LunarConverter.lunar_to_solar(year, month, day, is_leap_month)
            return result['solar_date'], result

        if calendar_type != "solar":
            raise InvalidInputError(f"历法类型必须为 solar 或 lunar，收到: {calendar_type!r}", field="calendar_type")
        if not _DATE_PATTERN.match(text):
            raise InvalidDateFormatError(f"日期格式错误，应为 YYYY-MM-DD，收到: {date_str!r}")
        return text, None

    @staticmethod
    def process_input(
        date_str: str,
        time_str: str,
        calendar_type: Optional[str] = "solar",
        is_leap_month: bool = False,
        location: Optional[str] = None,
        longitude: Optional[float] = None,
        timezone: Optional[str] = None,
        default_longitude: float = STANDARD_MERIDIAN,
        default_timezone: str = DEFAULT_TIMEZONE,
    ) -> Tuple[datetime, float, dict]:
        """
        处理紫微排盘输入（农历转换 + 时区转换 + 经度解析）

        Args:
            date_str: 日期字符串（公历或农历）
            time_str: 出生地本地时间 HH:MM
            calendar_type: 历法类型（solar/lunar），默认 solar
            is_leap_month: 农历数字日期是否为闰月
            location: 出生地（城市名，用于匹配经度与时区）
            longitude: 出生地经度（优先于城市表）
            timezone: 出生地时区（优先于 location 匹配）

        Returns:
            (beijing_datetime, longitude, conversion_info) - 北京标准时间、经度和转换信息；
            真太阳时校正由排盘入口完成，conversion_info 中给出预览
        """
        calendar_type = calendar_type or "solar"
        conversion_info = {
            'original_date': date_str,
            'original_time': time_str,
            'calendar_type': calendar_type,
            'location': location,
            'longitude': longitude,
            'timezone': timezone,
            'converted': False,
        }

        # 步骤1：农历 -> 公历
        solar_date, lunar_result = ZiweiInputProcessor.to_solar_date(date_str, calendar_type, is_leap_month)
        if lunar_result is not None:
            conversion_info['converted'] = True
            conversion_info['lunar_to_solar'] = lunar_result

        # 步骤2：组装本地时间
        year, month, day = (int(part) for part in solar_date.split('-'))
        hour, minute = ZiweiInputProcessor.parse_time(time_str)
        try:
            local_dt = datetime(year, month, day, hour, minute)
        except ValueError as e:
            raise InvalidDateFormatError(f"日期不存在: {solar_date}") from e

        # 步骤3：时区 -> 北京时间，经度解析，真太阳时预览
        solar = convert_local_to_solar_time(
            local_dt,
            location=location,
            longitude=longitude,
            timezone=timezone,
            default_longitude=default_longitude,
            default_timezone=default_timezone,
        )
        logger.debug(
            f"输入处理: {date_str} {time_str} ({calendar_type}) -> 北京时间 {solar['beijing_time']}, "
            f"经度 {solar['longitude']} ({solar['longitude_source']})"
        )

        conversion_info.update({
            'solar_date': solar_date,
            'beijing_time': solar['beijing_time'].strftime('%Y-%m-%d %H:%M'),
            'true_solar_time': solar['true_solar_time'].strftime('%Y-%m-%d %H:%M'),
            'longitude': solar['longitude'],
            'longitude_source': solar['longitude_source'],
            'timezone': solar['timezone'],
            'timezone_info': solar['timezone_info'],
        })
        return solar['beijing_time'], solar['longitude'], conversion_info
