#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微斗数排盘计算

流程：输入校验 -> 农历换算校验 -> iztro 安星 -> 本命十二宫整理 -> 流年十二宫整理。
排盘一次完成，任一步骤失败都抛出 ZiweiError 子类，不返回半成品命盘。

注意：星曜安放算法由 iztro 完成，本模块不重新推算，只负责校验与整理。
"""

from __future__ import annotations

import calendar
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Union

from core.calculators.LunarConverter import LunarConverter
from core.calculators.solar_time import (
    STANDARD_MERIDIAN,
    calculate_true_solar_time,
    get_time_index_from_date,
    validate_time_index,
)
from core.calculators.ziwei_core.flying_stars import get_flying_stars
from core.calculators.ziwei_core.oracle import IztroOracle, get_default_oracle
from core.calculators.ziwei_core.palace_extractor import extract_palaces, extract_yearly_palaces, read_field
from core.calculators.ziwei_core.star_locator import find_flying_star_targets, find_stars_location
from core.calculators.ziwei_errors import (
    ExtractionError,
    InvalidDateFormatError,
    InvalidInputError,
    YearlyDataMissingError,
)
from core.calculators.ziwei_logging import safe_log
from core.calculators.ziwei_models import ZiWeiChart
from core.data.ziwei_constants import GENDER_LABELS

SOLAR_DATE_PATTERN = re.compile(r'^\d{4}-\d{1,2}-\d{1,2}$')


class ZiWeiCalculator:
    """紫微排盘计算器"""

    def __init__(self, oracle: Optional[IztroOracle] = None) -> None:
        self.oracle = oracle or get_default_oracle()

    # === 公开方法 ==================================================================================

    def get_ziwei_chart(
        self,
        solar_date_str: str,
        time_index: int,
        gender: str,
        year: Optional[int] = None,
    ) -> ZiWeiChart:
        """
        按公历日期与时辰排盘

        Args:
            solar_date_str: 公历日期 YYYY-M-D / YYYY-MM-DD
            time_index: 时辰序号 0-12（0 早子，12 晚子）
            gender: male / female
            year: 流年年份，默认取出生日期所在年

        Returns:
            ZiWeiChart
        """
        if not isinstance(solar_date_str, str) or not SOLAR_DATE_PATTERN.match(solar_date_str):
            raise InvalidDateFormatError(f"日期格式错误，应为 YYYY-MM-DD，收到: {solar_date_str!r}")
        validate_time_index(time_index)
        if gender not in GENDER_LABELS:
            raise InvalidInputError(f"性别必须为 male 或 female，收到: {gender!r}", field="gender")

        lunar_info = LunarConverter.solar_to_lunar(solar_date_str)

        y, m, d = (int(part) for part in solar_date_str.split('-'))
        target_year = y if year is None else year
        if isinstance(target_year, bool) or not isinstance(target_year, int) or target_year <= 0:
            raise InvalidInputError(f"流年年份无效: {year!r}", field="year")

        astrolabe = self.oracle.by_solar(solar_date_str, time_index, GENDER_LABELS[gender])
        palaces = extract_palaces(astrolabe)

        yearly = self._get_yearly_palaces(astrolabe, target_year, m, d, time_index)

        chart = ZiWeiChart(
            five_elements=read_field(astrolabe, 'five_elements_class', 'fiveElementsClass', default=''),
            life_owner=read_field(astrolabe, 'soul', default=''),
            body_owner=read_field(astrolabe, 'body', default=''),
            palaces=tuple(palaces),
            yearly=tuple(yearly),
            solar_date_str=solar_date_str,
            time_index=time_index,
            gender=gender,
            flow_year=target_year,
            lunar_date=lunar_info['text'],
        )
        safe_log('debug', f"排盘完成: {solar_date_str} 时辰{time_index} {gender} 流年{target_year} {chart.five_elements}")
        return chart

    def get_ziwei_chart_by_date(
        self,
        date: datetime,
        longitude: float = STANDARD_MERIDIAN,
        gender: str = 'male',
        year: Optional[int] = None,
    ) -> ZiWeiChart:
        """
        真太阳时校正后排盘（推荐入口）

        Args:
            date: 北京时间的出生时刻
            longitude: 出生地经度
            gender: male / female
            year: 流年年份
        """
        true_solar = calculate_true_solar_time(date, longitude)
        solar_date_str = f"{true_solar.year}-{true_solar.month:02d}-{true_solar.day:02d}"
        time_index = get_time_index_from_date(true_solar)
        safe_log('debug', f"真太阳时: {date.isoformat()} @ {longitude} -> {true_solar.isoformat()} (时辰{time_index})")
        return self.get_ziwei_chart(solar_date_str, time_index, gender, year)

    # === 内部计算步骤 ===============================================================================

    def _get_yearly_palaces(self, astrolabe: Any, target_year: int, month: int, day: int,
                            time_index: int) -> list:
        # 流年取目标年的同月同日；闰年 2 月 29 日在平年落到 2 月 28 日
        if month == 2 and day == 29 and not calendar.isleap(target_year):
            day = 28
        target_date_str = f"{target_year}-{month}-{day}"
        try:
            horoscope = self.oracle.horoscope(astrolabe, target_date_str, time_index)
        except Exception as e:
            safe_log('error', f"❌ 获取流年运限失败: {target_date_str}, 错误: {e}", exc_info=e)
            raise ExtractionError(f"获取流年运限失败: {e}", cause=e) from e
        if horoscope is None:
            raise YearlyDataMissingError("流年数据缺失: 排盘库未返回运限数据")
        return extract_yearly_palaces(astrolabe, horoscope)

    @staticmethod
    def get_flying_stars(stem: str) -> Dict[str, str]:
        return get_flying_stars(stem)

    @staticmethod
    def find_stars_location(chart: ZiWeiChart, star_names: Sequence[str]) -> List[int]:
        return find_stars_location(chart, star_names)

    @staticmethod
    def find_flying_star_targets(chart: ZiWeiChart, palace_index: int) -> List[dict]:
        return find_flying_star_targets(chart, palace_index)


def get_chart(
    date_or_str: Union[datetime, str],
    longitude_or_time_index: Union[float, int, None] = None,
    gender: str = 'male',
    flow_year: Optional[int] = None,
    oracle: Optional[Any] = None,
) -> ZiWeiChart:
    """
    统一排盘入口

    - get_chart(datetime, longitude, gender, flow_year)：先做真太阳时校正
    - get_chart("YYYY-MM-DD", time_index, gender, flow_year)：直接按时辰排盘
    """
    calculator = ZiWeiCalculator(oracle)
    if isinstance(date_or_str, datetime):
        longitude = STANDARD_MERIDIAN if longitude_or_time_index is None else longitude_or_time_index
        return calculator.get_ziwei_chart_by_date(date_or_str, longitude, gender, flow_year)
    if longitude_or_time_index is None:
        raise InvalidInputError("按日期字符串排盘时必须提供时辰序号", field="time_index")
    return calculator.get_ziwei_chart(date_or_str, longitude_or_time_index, gender, flow_year)
