#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
格局检测

每条规则接收 (宫名, 本宫星名集合, 宫支)，成立时返回格局名，否则返回 None。
格局名对应知识库中 palace="格局" 的条目。
"""

from typing import AbstractSet, Callable, List, Optional, Tuple

PatternRule = Callable[[str, AbstractSet[str], str], Optional[str]]


def _huo_ling_tan(palace_name, stars, branch):
    """火贪格 / 铃贪格：贪狼会火星或铃星，同见时取火贪"""
    if '贪狼' in stars and ('火星' in stars or '铃星' in stars):
        return '火贪格' if '火星' in stars else '铃贪格'
    return None


def _star_in_branches(pattern_name: str, star: str, branches: Tuple[str, ...]) -> PatternRule:
    def rule(palace_name, stars, branch):
        if star in stars and branch in branches:
            return pattern_name
        return None
    rule.__name__ = f"_rule_{pattern_name}"
    return rule


def _ming_li_feng_kong(palace_name, stars, branch):
    """命里逢空：命宫见地空或地劫"""
    if palace_name == '命宫' and ('地空' in stars or '地劫' in stars):
        return '命里逢空'
    return None


PATTERN_RULES: Tuple[PatternRule, ...] = (
    _huo_ling_tan,
    _star_in_branches('月朗天门', '太阴', ('亥',)),
    _star_in_branches('日出扶桑', '太阳', ('卯',)),
    _star_in_branches('石中隐玉', '巨门', ('子', '午')),
    _star_in_branches('马头带箭', '擎羊', ('午',)),
    _ming_li_feng_kong,
)


def detect_patterns(palace_name: str, star_names: AbstractSet[str], branch: str) -> List[str]:
    """按规则表顺序返回成立的格局名"""
    matched = []
    for rule in PATTERN_RULES:
        name = rule(palace_name, star_names, branch)
        if name:
            matched.append(name)
    return matched
