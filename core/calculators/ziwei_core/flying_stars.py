#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
飞星四化模块

根据宫干查十干四化表，得到化禄、化权、化科、化忌的目标星。
"""

from typing import Dict, Tuple

from core.data.ziwei_constants import FLYING_STAR_TABLE, MUTAGEN_KEYS

_EMPTY = ('', '', '', '')


def get_flying_stars_tuple(stem: str) -> Tuple[str, str, str, str]:
    """
    宫干 -> (禄, 权, 科, 忌) 星名

    未知天干返回四个空字符串，由调用方保证天干来自真实宫位。
    """
    return FLYING_STAR_TABLE.get(stem, _EMPTY)


def get_flying_stars(stem: str) -> Dict[str, str]:
    """
    宫干 -> {'Lu': 禄, 'Quan': 权, 'Ke': 科, 'Ji': 忌}

    Args:
        stem: 天干（甲乙丙丁戊己庚辛壬癸）

    Returns:
        Dict[str, str]: 四化类型到星名的映射
    """
    return dict(zip(MUTAGEN_KEYS, get_flying_stars_tuple(stem)))
