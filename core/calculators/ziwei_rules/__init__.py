#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微断语匹配模块

提供知识库索引、格局检测和宫位断语匹配功能。
"""

from .knowledge_base import (
    build_interpretation_index,
    find_interpretation,
    get_interpretation_index,
    load_interpretations,
    reload_knowledge_base,
)
from .matcher import get_palace_interpretations
from .patterns import PATTERN_RULES, detect_patterns

__all__ = [
    'build_interpretation_index',
    'find_interpretation',
    'get_interpretation_index',
    'load_interpretations',
    'reload_knowledge_base',
    'get_palace_interpretations',
    'PATTERN_RULES',
    'detect_patterns',
]
