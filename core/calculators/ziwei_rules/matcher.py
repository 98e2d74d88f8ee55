#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
宫位断语匹配

按以下顺序匹配知识库：
0. 格局（火贪、月朗天门等）
A. 双星组合，未命中再逐颗主星
B. 四化（主星、辅星带化者查 "化X"）
C. 辅星、杂曜
D. 以上皆空时补一条"平稳"兜底断语
"""

from typing import Any, Iterable, List, Mapping, Optional

from core.calculators.ziwei_models import PalaceInterpretations, Star, StarInterpretation
from core.calculators.ziwei_rules.knowledge_base import find_interpretation, get_interpretation_index
from core.calculators.ziwei_rules.patterns import detect_patterns
from core.data.ziwei_constants import normalize_palace_name

PATTERN_PALACE = '格局'
BORROWED_PREFIX = '(借星) '
BORROWED_TAG = '#借星'


def _fallback_interpretation(palace_name: str) -> StarInterpretation:
    return StarInterpretation(
        star='平稳',
        palace=palace_name,
        summary='星曜平淡，无风无浪',
        detail='此宫位内无强力主星或吉煞激荡，主该方面运势平稳，受对宫及三方四正影响较大。宜静守，顺其自然。',
        tags=('#平稳', '#静守'),
    )


def _as_star(raw: Any) -> Star:
    if isinstance(raw, Star):
        return raw
    if isinstance(raw, str):
        return Star(name=raw)
    return Star(name=raw.get('name') or '', mutagen=raw.get('mutagen'), brightness=raw.get('brightness'))


def _as_stars(raw_stars: Optional[Iterable[Any]]) -> List[Star]:
    return [_as_star(s) for s in (raw_stars or ()) if s is not None]


def _mark_borrowed(item: StarInterpretation) -> StarInterpretation:
    return item.model_copy(update={
        'summary': f"{BORROWED_PREFIX}{item.summary}",
        'tags': tuple(item.tags) + (BORROWED_TAG,),
    })


def get_palace_interpretations(
    palace_name: str,
    major_stars: Optional[Iterable[Any]],
    minor_stars: Optional[Iterable[Any]],
    misc_stars: Optional[Iterable[Any]] = None,
    stem_branch: str = '',
    is_borrowed: bool = False,
    index: Optional[Mapping[str, StarInterpretation]] = None,
) -> PalaceInterpretations:
    """
    智能解盘：根据星曜组合、四化、格局进行多维度匹配

    Args:
        palace_name: 宫名，如 "命宫"
        major_stars: 主星（Star 或含 name/mutagen 的字典）
        minor_stars: 辅星
        misc_stars: 杂曜
        stem_branch: 宫位干支，如 "甲子"，第二个字用于判断地支方位
        is_borrowed: 空宫借对宫主星时为 True，主星断语加借星标记
        index: 断语索引，默认使用进程级知识库

    Returns:
        PalaceInterpretations: patterns / main / transformations / minors 四组断语
    """
    if index is None:
        index = get_interpretation_index()

    majors = _as_stars(major_stars)
    minors = _as_stars(minor_stars)
    miscs = _as_stars(misc_stars)

    lookup_palace = normalize_palace_name(palace_name)
    all_names = frozenset(s.name for s in majors + minors + miscs)
    branch = stem_branch[1] if len(stem_branch) > 1 else ''

    patterns: List[StarInterpretation] = []
    main: List[StarInterpretation] = []
    transformations: List[StarInterpretation] = []
    minor_items: List[StarInterpretation] = []

    # 格局：按原始宫名判断，身宫不视为命宫
    for pattern_name in detect_patterns((palace_name or '').strip(), all_names, branch):
        item = find_interpretation(pattern_name, PATTERN_PALACE, index)
        if item:
            patterns.append(item)

    # 主星 / 双星
    found_dual = False
    if len(majors) == 2:
        combo_name = f"{majors[0].name},{majors[1].name}"
        item = find_interpretation(combo_name, lookup_palace, index)
        if item:
            main.append(_mark_borrowed(item) if is_borrowed else item)
            found_dual = True

    if not found_dual:
        for star in majors:
            item = find_interpretation(star.name, lookup_palace, index)
            if item:
                main.append(_mark_borrowed(item) if is_borrowed else item)

    # 四化
    for star in majors + minors:
        if star.mutagen:
            item = find_interpretation(star.name, f"化{star.mutagen}", index)
            if item:
                transformations.append(item)

    # 辅星、杂曜
    for star in minors + miscs:
        item = find_interpretation(star.name, lookup_palace, index)
        if item:
            minor_items.append(item)

    # 兜底
    if not main and not transformations and not minor_items:
        minor_items.append(_fallback_interpretation(palace_name))

    return PalaceInterpretations(
        patterns=patterns,
        main=main,
        transformations=transformations,
        minors=minor_items,
    )
