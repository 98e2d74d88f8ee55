#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
星曜定位模块

在命盘十二宫（主星、辅星、杂曜）中查找星曜所在宫位序号，供飞星连线使用。
"""

from typing import Dict, List, Sequence

from core.calculators.ziwei_errors import InvalidInputError
from core.calculators.ziwei_models import ZiWeiChart
from core.data.ziwei_constants import MUTAGEN_KEYS
from .flying_stars import get_flying_stars_tuple


def find_stars_location(chart: ZiWeiChart, star_names: Sequence[str]) -> List[int]:
    """
    查找每个星名所在的本命宫位序号

    一次遍历十二宫；同名星出现在多个宫位时以遍历顺序中最后一个为准。
    找不到的星返回 -1，重复的星名每个位置都会填充。

    Args:
        chart: 命盘
        star_names: 星名列表（可重复）

    Returns:
        List[int]: 与 star_names 等长的宫位序号列表
    """
    locations = [-1] * len(star_names)
    positions: Dict[str, List[int]] = {}
    for i, name in enumerate(star_names):
        positions.setdefault(name, []).append(i)

    for palace_index, palace in enumerate(chart.palaces):
        for star in palace.all_stars:
            for pos in positions.get(star.name, ()):
                locations[pos] = palace_index

    return locations


def find_flying_star_targets(chart: ZiWeiChart, palace_index: int) -> List[dict]:
    """
    以某宫宫干起飞四化，返回落宫信息

    Returns:
        [{'type': 'Lu', 'star': '廉贞', 'index': 3}, ...]，落空的四化不返回
    """
    if isinstance(palace_index, bool) or not isinstance(palace_index, int) \
            or not 0 <= palace_index < len(chart.palaces):
        raise InvalidInputError(f"宫位序号错误，应为 0-{len(chart.palaces) - 1}，收到: {palace_index!r}",
                                field="palace_index")
    palace = chart.palaces[palace_index]
    star_names = get_flying_stars_tuple(palace.stem)
    if not any(star_names):
        return []

    locations = find_stars_location(chart, star_names)
    return [
        {'type': mutagen_type, 'star': star, 'index': index}
        for mutagen_type, star, index in zip(MUTAGEN_KEYS, star_names, locations)
        if index != -1
    ]
