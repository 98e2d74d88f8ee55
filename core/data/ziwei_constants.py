#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微斗数静态数据表

包含：宫名别名、四化、亮度、十干四化（飞星）表、对宫关系。
所有表在模块加载时构建，之后只读。
"""

from types import MappingProxyType

# 宫名别名 -> 标准宫名
PALACE_ALIASES = MappingProxyType({
    '交友': '仆役',
    '事业': '官禄',
    '身宫': '命宫',
})

# 四化顺序：禄、权、科、忌
MUTAGENS = ('禄', '权', '科', '忌')

MUTAGEN_KEYS = ('Lu', 'Quan', 'Ke', 'Ji')

BRIGHTNESS_LEVELS = ('庙', '旺', '得', '利', '平', '不', '陷')

# zh-TW 输出的四化、亮度用字
TRADITIONAL_TO_SIMPLIFIED = MappingProxyType({'祿': '禄', '權': '权', '廟': '庙'})

GENDER_LABELS = MappingProxyType({'male': '男', 'female': '女'})

# 未知星名的占位
UNKNOWN_STAR_NAME = '未知'

# 十干四化（禄、权、科、忌）
FLYING_STAR_TABLE = MappingProxyType({
    '甲': ('廉贞', '破军', '武曲', '太阳'),
    '乙': ('天机', '天梁', '紫微', '太阴'),
    '丙': ('天同', '天机', '文昌', '廉贞'),
    '丁': ('太阴', '天同', '天机', '巨门'),
    '戊': ('贪狼', '太阴', '右弼', '天机'),
    '己': ('武曲', '贪狼', '天梁', '文曲'),
    '庚': ('太阳', '武曲', '太阴', '天同'),
    '辛': ('巨门', '太阳', '文曲', '文昌'),
    '壬': ('天梁', '紫微', '左辅', '武曲'),
    '癸': ('破军', '巨门', '太阴', '贪狼'),
})

# 对宫
OPPOSITE_PALACES = MappingProxyType({
    '命宫': '迁移', '迁移': '命宫',
    '兄弟': '仆役', '仆役': '兄弟',
    '夫妻': '官禄', '官禄': '夫妻',
    '子女': '田宅', '田宅': '子女',
    '财帛': '福德', '福德': '财帛',
    '疾厄': '父母', '父母': '疾厄',
})

# 喂给大模型的杂曜白名单
PRIORITY_MISC_STARS = ('天刑', '天姚', '红鸾', '天喜', '天马', '禄存')


def normalize_palace_name(name: str) -> str:
    """宫名标准化：去掉"宫"后缀（命宫除外）并处理别名"""
    if not name:
        return name
    name = name.strip()
    if name != '命宫' and len(name) > 2 and name.endswith('宫'):
        name = name[:-1]
    return PALACE_ALIASES.get(name, name)


def get_opposite_palace_name(name: str) -> str:
    """返回对宫宫名，未知宫名返回空字符串"""
    return OPPOSITE_PALACES.get(normalize_palace_name(name), '')
