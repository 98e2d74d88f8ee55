#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微排盘核心模块

提供：
- 排盘库适配（py_iztro）
- 本命/流年宫位整理
- 飞星四化查表
- 星曜定位
"""

from .flying_stars import get_flying_stars, get_flying_stars_tuple
from .oracle import IztroOracle, get_default_oracle
from .palace_extractor import extract_palaces, extract_yearly_palaces
from .star_locator import find_flying_star_targets, find_stars_location

__all__ = [
    'get_flying_stars',
    'get_flying_stars_tuple',
    'IztroOracle',
    'get_default_oracle',
    'extract_palaces',
    'extract_yearly_palaces',
    'find_flying_star_targets',
    'find_stars_location',
]
