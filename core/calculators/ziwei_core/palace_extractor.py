#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
宫位数据整理

把排盘库返回的星盘对象（pydantic 模型、字典或带 palace(i) 方法的对象）
整理为 PalaceData。所有字段读取都做缺省处理：
- 星名缺失时使用占位名"未知"
- 四化、亮度缺失时为 None
- 流年数组长度不足 12 时直接抛出，不做补齐
"""

from typing import Any, Iterable, List, Optional, Sequence

from pydantic import ValidationError

from core.calculators.ziwei_errors import (
    ExtractionError,
    OracleError,
    YearlyDataIncompleteError,
    YearlyDataMissingError,
    ZiweiError,
)
from core.calculators.ziwei_logging import safe_log
from core.calculators.ziwei_models import PalaceData, Star
from core.data.stems_branches import EARTHLY_BRANCHES
from core.data.ziwei_constants import MUTAGENS, UNKNOWN_STAR_NAME

PALACE_COUNT = 12


def read_field(obj: Any, *names: str, default: Any = None) -> Any:
    """按候选字段名依次读取（属性或字典键），值为 None 时继续尝试下一个"""
    if obj is None:
        return default
    for name in names:
        if isinstance(obj, dict):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
        if value is not None:
            return value
    return default


def _as_list(value: Any) -> list:
    if value is None or isinstance(value, (str, bytes, dict)):
        return []
    try:
        return list(value)
    except TypeError:
        return []


def to_star(raw: Any, mutagen: Optional[str] = None, override_mutagen: bool = False) -> Star:
    """单颗星曜防御式复制"""
    if isinstance(raw, str):
        return Star(name=raw or UNKNOWN_STAR_NAME, mutagen=mutagen if override_mutagen else None)
    name = read_field(raw, 'name')
    return Star(
        name=name if isinstance(name, str) and name else UNKNOWN_STAR_NAME,
        mutagen=mutagen if override_mutagen else read_field(raw, 'mutagen'),
        brightness=read_field(raw, 'brightness'),
    )


def to_stars(raw_stars: Any) -> tuple:
    return tuple(to_star(s) for s in _as_list(raw_stars) if s is not None)


def get_raw_palace(astrolabe: Any, index: int) -> Any:
    """读取第 index 个宫位：优先 palace(i)，其次 palaces 列表"""
    palace_func = getattr(astrolabe, 'palace', None)
    if callable(palace_func):
        return palace_func(index)
    palaces = _as_list(read_field(astrolabe, 'palaces'))
    return palaces[index] if index < len(palaces) else None


def _raw_palace_parts(raw_palace: Any):
    return (
        read_field(raw_palace, 'name', default=''),
        read_field(raw_palace, 'heavenly_stem', 'heavenlyStem', default=''),
        read_field(raw_palace, 'earthly_branch', 'earthlyBranch', default=''),
        read_field(raw_palace, 'major_stars', 'majorStars'),
        read_field(raw_palace, 'minor_stars', 'minorStars'),
        read_field(raw_palace, 'adjective_stars', 'adjectiveStars'),
    )


def extract_palaces(astrolabe: Any) -> List[PalaceData]:
    """整理本命十二宫"""
    palaces: List[PalaceData] = []
    for i in range(PALACE_COUNT):
        raw_palace = get_raw_palace(astrolabe, i)
        if raw_palace is None:
            raise OracleError(f"本命宫位数据不完整: 第 {i} 宫缺失")

        name, stem, branch, majors, minors, adjectives = _raw_palace_parts(raw_palace)
        try:
            major_stars = to_stars(majors)
            palaces.append(PalaceData(
                palace_name=name or UNKNOWN_STAR_NAME,
                stem=stem,
                branch=branch,
                major_stars=major_stars,
                minor_stars=to_stars(minors),
                misc_stars=to_stars(adjectives),
                transformations=tuple(s.mutagen for s in major_stars if s.mutagen),
                is_yearly=False,
            ))
        except ValidationError as e:
            raise OracleError(f"本命第 {i} 宫星曜数据异常: {e}") from e

    branches = [p.branch for p in palaces]
    if sorted(branches) != sorted(EARTHLY_BRANCHES):
        safe_log('error', f"❌ 本命宫位地支异常: {branches}")
        raise OracleError(f"本命宫位地支异常，应覆盖十二地支各一次，收到: {branches}")
    return palaces


def _yearly_dec_star_names(dec_star: Any, index: int) -> List[str]:
    """流年岁前/将前十二神（每宫一个名字或名字列表）"""
    names: List[str] = []
    for key in ('jiangqian12', 'suiqian12'):
        values = _as_list(read_field(dec_star, key))
        if index >= len(values):
            continue
        value = values[index]
        if isinstance(value, str):
            if value:
                names.append(value)
        else:
            names.extend(n for n in _as_list(value) if isinstance(n, str) and n)
    return names


def _validate_yearly(yearly: Any) -> tuple:
    if yearly is None:
        raise YearlyDataMissingError("流年数据缺失: 排盘库未返回 yearly")

    stars = read_field(yearly, 'stars')
    palace_names = read_field(yearly, 'palace_names', 'palaceNames')
    stars_list = _as_list(stars)
    names_list = _as_list(palace_names)

    if stars is None or len(stars_list) != PALACE_COUNT:
        raise YearlyDataIncompleteError(
            f"流年星曜数据不完整: 期望 {PALACE_COUNT} 宫，实际 {len(stars_list) if stars is not None else 'None'}",
            received={'stars': None if stars is None else len(stars_list)},
        )
    if palace_names is None or len(names_list) != PALACE_COUNT:
        raise YearlyDataIncompleteError(
            f"流年宫位数据不完整: 期望 {PALACE_COUNT} 宫，实际 {len(names_list) if palace_names is not None else 'None'}",
            received={'palace_names': None if palace_names is None else len(names_list)},
        )
    return stars_list, names_list


def _apply_yearly_mutagens(raw_stars: Iterable[Any], mutagen_by_star: dict) -> tuple:
    return tuple(
        to_star(s, mutagen=mutagen_by_star.get(read_field(s, 'name') if not isinstance(s, str) else s),
                override_mutagen=True)
        for s in _as_list(raw_stars) if s is not None
    )


def extract_yearly_palaces(astrolabe: Any, horoscope: Any) -> List[PalaceData]:
    """
    整理流年十二宫

    - 宫名取流年 palaceNames
    - 流年四化数组 [禄, 权, 科, 忌] 按星名匹配本宫主星、辅星
    - 流年星曜与岁前/将前诸星并入杂曜

    Raises:
        YearlyDataMissingError / YearlyDataIncompleteError: 流年数据不满足 12 宫约束
        ExtractionError: 其他整理异常（保留原始异常）
    """
    try:
        yearly = read_field(horoscope, 'yearly')
        stars_list, names_list = _validate_yearly(yearly)

        mutagen_names: Sequence[Any] = _as_list(read_field(yearly, 'mutagen'))
        mutagen_by_star = {}
        for idx, star_name in enumerate(mutagen_names[:len(MUTAGENS)]):
            if isinstance(star_name, str) and star_name:
                mutagen_by_star[star_name] = MUTAGENS[idx]

        dec_star = read_field(yearly, 'yearly_dec_star', 'yearlyDecStar')

        palaces: List[PalaceData] = []
        for i in range(PALACE_COUNT):
            raw_palace = get_raw_palace(astrolabe, i)
            if raw_palace is None:
                raise OracleError(f"本命宫位数据不完整: 第 {i} 宫缺失")
            _, stem, branch, majors, minors, adjectives = _raw_palace_parts(raw_palace)

            major_stars = _apply_yearly_mutagens(majors, mutagen_by_star)
            minor_stars = _apply_yearly_mutagens(minors, mutagen_by_star)
            misc_stars = (
                to_stars(adjectives)
                + to_stars(stars_list[i])
                + tuple(Star(name=n) for n in _yearly_dec_star_names(dec_star, i))
            )
            palace_name = names_list[i] if isinstance(names_list[i], str) and names_list[i] else UNKNOWN_STAR_NAME

            palaces.append(PalaceData(
                palace_name=palace_name,
                stem=stem,
                branch=branch,
                major_stars=major_stars,
                minor_stars=minor_stars,
                misc_stars=misc_stars,
                transformations=tuple(s.mutagen for s in major_stars + minor_stars if s.mutagen),
                is_yearly=True,
            ))
        return palaces
    except ZiweiError:
        raise
    except Exception as e:
        safe_log('error', f"❌ 流年宫位整理失败: {e}", exc_info=e)
        raise ExtractionError(f"流年宫位整理失败: {e}", cause=e) from e
