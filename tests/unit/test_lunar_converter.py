#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""农历转换单元测试（lunar_python）"""

import pytest

from core.calculators.LunarConverter import LunarConverter
from core.calculators.ziwei_errors import LunarConversionError, OracleError


class TestSolarToLunar:
    def test_spring_festival_2024(self):
        result = LunarConverter.solar_to_lunar('2024-02-10')
        assert result['year'] == 2024
        assert result['month'] == 1
        assert result['day'] == 1
        assert result['is_leap_month'] is False
        assert result['year_ganzhi'] == '甲辰'
        assert result['text'] == '甲辰年正月初一'

    def test_single_digit_format(self):
        assert LunarConverter.solar_to_lunar('2024-2-10') == LunarConverter.solar_to_lunar('2024-02-10')

    def test_leap_month_detected(self):
        # 2023 年闰二月初一为公历 3 月 22 日
        result = LunarConverter.solar_to_lunar('2023-03-22')
        assert result['is_leap_month'] is True
        assert result['month'] == 2

    @pytest.mark.parametrize("date_str", ['2023-02-30', '2023-13-01', '2023-00-10', 'abc'])
    def test_nonexistent_date(self, date_str):
        with pytest.raises(LunarConversionError) as exc_info:
            LunarConverter.solar_to_lunar(date_str)
        assert exc_info.value.error_type == 'calendar_conversion_failed'
        assert not isinstance(exc_info.value, OracleError)


class TestLunarToSolar:
    def test_first_day_of_year(self):
        result = LunarConverter.lunar_to_solar(2024, 1, 1)
        assert result['solar_date'] == '2024-02-10'
        assert result['original_lunar']['is_leap_month'] is False

    def test_leap_month(self):
        result = LunarConverter.lunar_to_solar(2023, 2, 1, True)
        assert result['solar_date'] == '2023-03-22'

    def test_missing_leap_month(self):
        with pytest.raises(LunarConversionError):
            LunarConverter.lunar_to_solar(2024, 3, 1, True)

    @pytest.mark.parametrize("text,expected", [
        ('2024年正月初一', '2024-02-10'),
        ('2023年闰二月初一', '2023-03-22'),
        ('2024-01-01', '2024-02-10'),
    ])
    def test_from_string(self, text, expected):
        assert LunarConverter.lunar_to_solar_from_string(text)['solar_date'] == expected

    @pytest.mark.parametrize("text", ['2024年正月', '2024年正月四十', 'tomorrow', ''])
    def test_from_string_invalid(self, text):
        with pytest.raises(LunarConversionError):
            LunarConverter.lunar_to_solar_from_string(text)
