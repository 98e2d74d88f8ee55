#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
天干地支基础数据

紫微排盘各模块共用的十天干、十二地支常量。
"""

HEAVENLY_STEMS = ('甲', '乙', '丙', '丁', '戊', '己', '庚', '辛', '壬', '癸')

EARTHLY_BRANCHES = ('子', '丑', '寅', '卯', '辰', '巳', '午', '未', '申', '酉', '戌', '亥')

# 时辰序号（0-12），0 为早子时，12 为晚子时
TIME_SLOT_NAMES = (
    '早子时', '丑时', '寅时', '卯时', '辰时', '巳时', '午时',
    '未时', '申时', '酉时', '戌时', '亥时', '晚子时',
)

TIME_SLOT_RANGES = (
    '00:00~01:00', '01:00~03:00', '03:00~05:00', '05:00~07:00', '07:00~09:00',
    '09:00~11:00', '11:00~13:00', '13:00~15:00', '15:00~17:00', '17:00~19:00',
    '19:00~21:00', '21:00~23:00', '23:00~00:00',
)
