#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import re
from datetime import date

from lunar_python import Lunar, Solar

from core.calculators.ziwei_errors import LunarConversionError

_CN_MONTHS = {
    '正': 1, '一': 1, '二': 2, '三': 3, '四': 4, '五': 5, '六': 6,
    '七': 7, '八': 8, '九': 9, '十': 10, '冬': 11, '十一': 11, '腊': 12, '十二': 12,
}

_CN_DAY_TENS = {'初': 0, '十': 10, '廿': 20, '卅': 30}
_CN_DIGITS = {'一': 1, '二': 2, '三': 3, '四': 4, '五': 5, '六': 6, '七': 7, '八': 8, '九': 9, '十': 10}

_LUNAR_CN_PATTERN = re.compile(r'^(\d{4})年(闰)?(正|冬|腊|十[一二]?|[一二三四五六七八九])月(.+)$')
_LUNAR_NUM_PATTERN = re.compile(r'^(\d{4})-(\d{1,2})-(\d{1,2})$')


class LunarConverter:
    """农历转换工具类 - 紫微排盘前的历法校验与农历/公历互转"""

    @staticmethod
    def solar_to_lunar(solar_date):
        """
        公历转农历，同时作为公历日期合法性的校验

        Args:
            solar_date: 公历日期，格式 'YYYY-M-D' 或 'YYYY-MM-DD'

        Returns:
            dict: 农历年月日、干支年、中文描述

        Raises:
            LunarConversionError: 日期不存在或历法库无法换算
        """
        try:
            year, month, day = (int(part) for part in solar_date.split('-'))
            # 先用标准库拦截 2 月 30 日这类不存在的日期
            date(year, month, day)
            lunar = Solar.fromYmd(year, month, day).getLunar()
        except Exception as e:
            raise LunarConversionError(f"公历转农历失败: {solar_date}, {e}") from e

        if lunar is None:
            raise LunarConversionError(f"公历转农历失败: {solar_date}")

        is_leap_month = lunar.getMonth() < 0
        month_name = lunar.getMonthInChinese()
        return {
            'year': lunar.getYear(),
            'month': abs(lunar.getMonth()),
            'day': lunar.getDay(),
            'is_leap_month': is_leap_month,
            'year_ganzhi': lunar.getYearInGanZhi(),
            'month_name': month_name,
            'day_name': lunar.getDayInChinese(),
            'text': f"{lunar.getYearInGanZhi()}年{month_name}月{lunar.getDayInChinese()}",
        }

    @staticmethod
    def lunar_to_solar(lunar_year, lunar_month, lunar_day, is_leap_month=False):
        """
        农历转公历

        Args:
            lunar_year: 农历年
            lunar_month: 农历月（1-12）
            lunar_day: 农历日
            is_leap_month: 是否闰月

        Returns:
            dict: 公历日期字符串及年月日
        """
        month = -abs(lunar_month) if is_leap_month else abs(lunar_month)
        try:
            solar = Lunar.fromYmd(lunar_year, month, lunar_day).getSolar()
        except Exception as e:
            raise LunarConversionError(
                f"农历转公历失败: {lunar_year}年{'闰' if is_leap_month else ''}{lunar_month}月{lunar_day}日, {e}"
            ) from e

        return {
            'solar_date': f"{solar.getYear():04d}-{solar.getMonth():02d}-{solar.getDay():02d}",
            'solar_year': solar.getYear(),
            'solar_month': solar.getMonth(),
            'solar_day': solar.getDay(),
            'original_lunar': {
                'year': lunar_year,
                'month': lunar_month,
                'day': lunar_day,
                'is_leap_month': is_leap_month,
            },
        }

    @staticmethod
    def _parse_cn_day(day_str):
        if day_str in ('二十', '三十'):
            return _CN_DIGITS[day_str[0]] * 10
        if day_str == '初十':
            return 10
        if len(day_str) != 2 or day_str[0] not in _CN_DAY_TENS or day_str[1] not in _CN_DIGITS:
            raise LunarConversionError(f"无法解析农历日: {day_str}")
        return _CN_DAY_TENS[day_str[0]] + _CN_DIGITS[day_str[1]]

    @staticmethod
    def lunar_to_solar_from_string(lunar_date_str):
        """
        从字符串解析农历日期并转换为公历

        支持 "2024年正月初一"、"2024年闰二月十五"、"2024-01-01"（农历年月日）
        """
        text = (lunar_date_str or '').strip()

        match = _LUNAR_CN_PATTERN.match(text)
        if match:
            year = int(match.group(1))
            is_leap = match.group(2) == '闰'
            month = _CN_MONTHS[match.group(3)]
            day = LunarConverter._parse_cn_day(match.group(4))
            return LunarConverter.lunar_to_solar(year, month, day, is_leap)

        match = _LUNAR_NUM_PATTERN.match(text)
        if match:
            year, month, day = (int(g) for g in match.groups())
            return LunarConverter.lunar_to_solar(year, month, day, False)

        raise LunarConversionError(f"无法解析农历日期字符串: {lunar_date_str}")
