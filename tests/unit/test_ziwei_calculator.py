#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""紫微排盘计算单元测试（替身排盘器）"""

import logging
from datetime import datetime
from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from core.calculators.ziwei_calculator import ZiWeiCalculator, get_chart
from core.calculators.ziwei_core.oracle import IztroOracle
from core.calculators.ziwei_errors import (
    ExtractionError,
    InvalidDateFormatError,
    InvalidInputError,
    InvalidTimeSlotError,
    LunarConversionError,
    OracleError,
    YearlyDataIncompleteError,
    YearlyDataMissingError,
    ZiweiError,
)
from core.calculators.ziwei_models import Star
from core.data.stems_branches import EARTHLY_BRANCHES
from tests.fixtures.sample_data import (
    JIANGQIAN12,
    SUIQIAN12,
    FakeAstrolabe,
    FakeOracle,
    natal_palaces_with,
    yearly_with,
)


def _calculator(**astrolabe_kwargs) -> ZiWeiCalculator:
    return ZiWeiCalculator(FakeOracle(FakeAstrolabe(**astrolabe_kwargs)))


class TestNatalChart:
    def test_basic_fields(self, chart):
        assert chart.five_elements == '火六局'
        assert chart.life_owner == '廉贞'
        assert chart.body_owner == '天相'
        assert chart.solar_date_str == '2026-03-15'
        assert chart.time_index == 6
        assert chart.gender == 'male'
        assert chart.flow_year == 2026
        assert chart.lunar_date

    def test_twelve_palaces_each_branch_once(self, chart):
        assert len(chart.palaces) == 12
        assert len(chart.yearly) == 12
        assert sorted(p.branch for p in chart.palaces) == sorted(EARTHLY_BRANCHES)

    def test_palace_order_follows_oracle(self, chart):
        assert chart.palaces[0].palace_name == '命宫'
        assert chart.palaces[0].stem_branch == '丙寅'
        assert [s.name for s in chart.palaces[0].major_stars] == ['紫微', '七杀']
        assert chart.palaces[0].major_stars[0].brightness == '旺'

    def test_natal_transformations_from_major_stars(self, chart):
        assert chart.palaces[1].transformations == ('忌',)
        assert chart.palaces[5].transformations == ('禄',)
        assert chart.palaces[8].transformations == ('科',)
        assert chart.palaces[0].transformations == ()
        assert not chart.palaces[0].is_yearly

    def test_empty_mutagen_becomes_none(self, chart):
        assert chart.palaces[0].major_stars[0].mutagen is None

    def test_valid_input_has_twelve_palaces(self, calculator):
        chart = calculator.get_ziwei_chart('1990-01-01', 4, 'male')
        assert len(chart.palaces) == 12
        assert all(p.palace_name for p in chart.palaces + chart.yearly)

    def test_oracle_call_arguments(self, calculator, fake_oracle):
        calculator.get_ziwei_chart('1990-1-5', 0, 'female')
        assert fake_oracle.calls == [('1990-1-5', 0, '女')]

    def test_missing_star_name_becomes_placeholder(self):
        palaces = natal_palaces_with(0, majorStars=[{'name': None, 'mutagen': '', 'brightness': ''}])
        chart = _calculator(palaces=palaces).get_ziwei_chart('2024-01-01', 0, 'male', 2024)
        assert chart.palaces[0].major_stars[0].name == '未知'
        assert chart.yearly[0].major_stars[0].name == '未知'

    def test_missing_palace_is_oracle_error(self):
        palaces = natal_palaces_with(0)[:11]
        with pytest.raises(OracleError):
            _calculator(palaces=palaces).get_ziwei_chart('2024-01-01', 0, 'male')

    def test_oracle_failure_wrapped(self):
        oracle = IztroOracle()
        oracle._astro = Mock(by_solar=Mock(side_effect=RuntimeError("boom")))
        with pytest.raises(OracleError) as exc_info:
            ZiWeiCalculator(oracle).get_ziwei_chart('2024-01-01', 0, 'male')
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert exc_info.value.code == 502

    def test_duplicate_branch_is_oracle_error(self, caplog):
        palaces = natal_palaces_with(1, earthlyBranch='寅')
        with caplog.at_level(logging.ERROR, logger='core.calculators.ziwei'):
            with pytest.raises(OracleError) as exc_info:
                _calculator(palaces=palaces).get_ziwei_chart('2024-01-01', 0, 'male')
        assert '地支异常' in str(exc_info.value)
        assert "'寅', '寅'" in str(exc_info.value)
        assert '地支异常' in caplog.text

    def test_missing_branch_is_oracle_error(self):
        palaces = natal_palaces_with(11, earthlyBranch='')
        with pytest.raises(OracleError):
            _calculator(palaces=palaces).get_ziwei_chart('2024-01-01', 0, 'male')

    def test_brightness_out_of_domain_is_oracle_error(self):
        palaces = natal_palaces_with(0, majorStars=[{'name': '紫微', 'brightness': '极亮', 'mutagen': ''}])
        with pytest.raises(OracleError) as exc_info:
            _calculator(palaces=palaces).get_ziwei_chart('2024-01-01', 0, 'male')
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_traditional_mutagen_and_brightness_normalized(self):
        palaces = natal_palaces_with(1, majorStars=[{'name': '太阳', 'brightness': '廟', 'mutagen': '祿'}])
        chart = _calculator(palaces=palaces).get_ziwei_chart('2024-01-01', 0, 'male')
        assert chart.palaces[1].major_stars[0].brightness == '庙'
        assert chart.palaces[1].transformations == ('禄',)

    def test_chart_is_immutable(self, chart):
        with pytest.raises(Exception):
            chart.flow_year = 2000

    def test_to_dict_camel_case(self, chart):
        data = chart.to_dict()
        assert data['fiveElements'] == '火六局'
        assert data['palaces'][0]['palaceName'] == '命宫'
        assert data['palaces'][0]['stemBranch'] == '丙寅'
        assert data['palaces'][0]['majorStars'][0] == {'name': '紫微', 'mutagen': None, 'brightness': '旺'}
        assert data['yearly'][0]['isYearly'] is True


class TestYearlyPalaces:
    def test_yearly_names_and_flag(self, chart):
        assert chart.yearly[0].palace_name == '兄弟'
        assert chart.yearly[1].palace_name == '命宫'
        assert chart.yearly[6].palace_name == '交友'
        assert all(p.is_yearly for p in chart.yearly)

    def test_yearly_keeps_natal_stem_branch(self, chart):
        for natal, yearly in zip(chart.palaces, chart.yearly):
            assert natal.stem_branch == yearly.stem_branch

    def test_yearly_mutagens_replace_natal(self, chart):
        # 天同禄 天机权 文昌科 廉贞忌
        assert chart.yearly[2].major_stars[0].mutagen == '禄'
        assert chart.yearly[11].major_stars[0].mutagen == '权'
        assert chart.yearly[0].minor_stars[0].mutagen == '科'
        assert chart.yearly[5].major_stars[0].mutagen == '忌'
        assert chart.yearly[1].major_stars[0].mutagen is None

    def test_yearly_transformations_include_minor_stars(self, chart):
        assert chart.yearly[0].transformations == ('科',)
        assert chart.yearly[5].transformations == ('忌',)
        assert chart.yearly[8].transformations == ()

    def test_misc_stars_merged(self, chart):
        names = [s.name for s in chart.yearly[0].misc_stars]
        assert names == ['天刑', '流年星0', JIANGQIAN12[0], SUIQIAN12[0]]
        names = [s.name for s in chart.yearly[11].misc_stars]
        assert names == ['流年星11', JIANGQIAN12[11], SUIQIAN12[11]]

    def test_horoscope_date_uses_target_year(self, calculator, fake_astrolabe):
        calculator.get_ziwei_chart('1990-05-15', 3, 'male', 2025)
        assert fake_astrolabe.horoscope_calls == [('2025-5-15', 3)]

    def test_horoscope_defaults_to_birth_year(self, calculator, fake_astrolabe):
        chart = calculator.get_ziwei_chart('1990-05-15', 3, 'male')
        assert chart.flow_year == 1990
        assert fake_astrolabe.horoscope_calls == [('1990-5-15', 3)]

    def test_leap_day_in_common_year(self, calculator, fake_astrolabe):
        calculator.get_ziwei_chart('2000-02-29', 3, 'male', 2025)
        assert fake_astrolabe.horoscope_calls == [('2025-2-28', 3)]

    def test_missing_yearly(self):
        with pytest.raises(YearlyDataMissingError) as exc_info:
            _calculator(horoscope_data={}).get_ziwei_chart('2024-01-01', 0, 'male', 2024)
        assert '流年数据缺失' in str(exc_info.value)
        assert isinstance(exc_info.value, ZiweiError)

    def test_astrolabe_without_horoscope(self):
        class NoHoroscopeAstrolabe:
            fiveElementsClass = '水二局'
            soul = '贪狼'
            body = '文昌'

            def __init__(self):
                self.palaces = FakeAstrolabe()._palaces

        calculator = ZiWeiCalculator(FakeOracle(NoHoroscopeAstrolabe()))
        with pytest.raises(YearlyDataMissingError):
            calculator.get_ziwei_chart('2024-01-01', 0, 'male')

    def test_yearly_stars_wrong_length(self):
        with pytest.raises(YearlyDataIncompleteError) as exc_info:
            _calculator(horoscope_data=yearly_with(stars=[])).get_ziwei_chart('2024-01-01', 0, 'male', 2024)
        assert '流年星曜数据不完整' in str(exc_info.value)
        assert exc_info.value.received == {'stars': 0}

    def test_yearly_palace_names_wrong_length(self):
        horoscope = yearly_with(palaceNames=['命宫'] * 11)
        with pytest.raises(YearlyDataIncompleteError) as exc_info:
            _calculator(horoscope_data=horoscope).get_ziwei_chart('2024-01-01', 0, 'male', 2024)
        assert '流年宫位数据不完整' in str(exc_info.value)
        assert exc_info.value.received == {'palace_names': 11}

    def test_horoscope_failure_becomes_extraction_error(self):
        cause = RuntimeError("iztro exploded")
        with pytest.raises(ExtractionError) as exc_info:
            _calculator(horoscope_data=cause).get_ziwei_chart('2024-01-01', 0, 'male')
        assert exc_info.value.cause is not None
        assert exc_info.value.__cause__ is not None

    def test_malformed_yearly_star_becomes_extraction_error(self):
        horoscope = yearly_with(mutagen=None, stars=[[{'name': '流年星', 'brightness': 123}]] * 12)
        with pytest.raises(ExtractionError) as exc_info:
            _calculator(horoscope_data=horoscope).get_ziwei_chart('2024-01-01', 0, 'male')
        assert exc_info.value.cause is not None


class TestInputValidation:
    @pytest.mark.parametrize("date_str", ['invalid-date', '2024/01/01', '20240101', '24-1-1', '', None, 20240101])
    def test_bad_date_format_before_oracle(self, calculator, fake_oracle, date_str):
        with pytest.raises(InvalidDateFormatError):
            calculator.get_ziwei_chart(date_str, 0, 'male')
        assert fake_oracle.calls == []

    def test_nonexistent_date_is_calendar_error(self, calculator, fake_oracle):
        with pytest.raises(LunarConversionError):
            calculator.get_ziwei_chart('2023-02-30', 0, 'male')
        assert fake_oracle.calls == []

    @pytest.mark.parametrize("time_index", [-1, 13, '1', 2.0])
    def test_bad_time_index(self, calculator, time_index):
        with pytest.raises(InvalidTimeSlotError):
            calculator.get_ziwei_chart('2024-01-01', time_index, 'male')

    def test_bad_gender(self, calculator):
        with pytest.raises(InvalidInputError) as exc_info:
            calculator.get_ziwei_chart('2024-01-01', 0, 'unknown')
        assert exc_info.value.field == 'gender'

    @pytest.mark.parametrize("year", [0, -1, True, '2025'])
    def test_bad_flow_year(self, calculator, fake_oracle, year):
        with pytest.raises(InvalidInputError) as exc_info:
            calculator.get_ziwei_chart('1990-1-1', 4, 'male', year)
        assert exc_info.value.field == 'year'
        assert fake_oracle.calls == []


class TestChartByDate:
    def test_true_solar_time_shifts_slot(self, calculator, fake_oracle):
        # 乌鲁木齐 2000-01-01 00:10 校正后为 1999-12-31 亥时
        calculator.get_ziwei_chart_by_date(datetime(2000, 1, 1, 0, 10), 87.68, 'male')
        assert fake_oracle.calls == [('1999-12-31', 11, '男')]

    def test_standard_meridian(self, calculator, fake_oracle):
        chart = calculator.get_ziwei_chart_by_date(datetime(2026, 3, 15, 12, 30), 120, 'female', 2026)
        assert fake_oracle.calls == [('2026-03-15', 6, '女')]
        assert chart.flow_year == 2026

    def test_get_chart_dispatch(self, fake_oracle):
        get_chart(datetime(2026, 3, 15, 12, 30), oracle=fake_oracle)
        get_chart('2026-03-15', 6, 'female', oracle=fake_oracle)
        assert fake_oracle.calls == [('2026-03-15', 6, '男'), ('2026-03-15', 6, '女')]

    def test_get_chart_string_requires_time_index(self, fake_oracle):
        with pytest.raises(InvalidInputError):
            get_chart('2026-03-15', oracle=fake_oracle)


class TestStarModel:
    @pytest.mark.parametrize("field,value", [('mutagen', '煞'), ('brightness', '极亮')])
    def test_out_of_domain_rejected(self, field, value):
        with pytest.raises(ValidationError):
            Star(name='紫微', **{field: value})

    def test_traditional_forms_normalized(self):
        star = Star(name='武曲', mutagen='權', brightness='廟')
        assert (star.mutagen, star.brightness) == ('权', '庙')

    def test_empty_values_become_none(self):
        star = Star(name='天机', mutagen='', brightness=None)
        assert star.mutagen is None and star.brightness is None
