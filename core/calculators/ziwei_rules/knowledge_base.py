#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
断语知识库索引

知识库为只读 JSON 数组，每条记录 {star, palace, summary, detail, tags}。
首次使用时构建 "{星名}_{宫名}" -> 记录 的索引；双星组合同时登记反序键，
但不覆盖知识库中显式存在的反序条目。索引构建后只读。
"""

import json
import logging
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Union

from core.calculators.ziwei_models import StarInterpretation

logger = logging.getLogger(__name__)

DEFAULT_KNOWLEDGE_BASE_PATH = Path(__file__).resolve().parent.parent.parent / 'data' / 'star_interpretations.json'

_index: Optional[Mapping[str, StarInterpretation]] = None
_index_lock = threading.Lock()


def make_key(star_name: str, palace_name: str) -> str:
    return f"{star_name}_{palace_name}"


def load_interpretations(path: Union[str, Path, None] = None) -> List[StarInterpretation]:
    """从 JSON 文件加载断语记录"""
    kb_path = Path(path) if path else DEFAULT_KNOWLEDGE_BASE_PATH
    with open(kb_path, 'r', encoding='utf-8') as f:
        raw_records = json.load(f)
    if not isinstance(raw_records, list):
        raise ValueError(f"知识库格式错误，应为数组: {kb_path}")
    return [StarInterpretation.model_validate(item) for item in raw_records]


def build_interpretation_index(records: Iterable[StarInterpretation]) -> Mapping[str, StarInterpretation]:
    """
    构建只读索引

    显式条目优先：先登记全部直接键，再补反序双星键。
    """
    records = list(records)
    index = {}
    for item in records:
        index[make_key(item.star, item.palace)] = item

    for item in records:
        parts = item.star.split(',')
        if len(parts) != 2:
            continue
        reverse_key = make_key(f"{parts[1]},{parts[0]}", item.palace)
        if reverse_key not in index:
            index[reverse_key] = item

    return MappingProxyType(index)


def get_interpretation_index() -> Mapping[str, StarInterpretation]:
    """获取进程级索引（首次调用时构建）"""
    global _index
    if _index is None:
        with _index_lock:
            if _index is None:
                records = load_interpretations()
                _index = build_interpretation_index(records)
                logger.info(f"断语知识库已加载: {len(records)} 条记录, {len(_index)} 个索引键")
    return _index


def reload_knowledge_base(path: Union[str, Path, None] = None) -> Mapping[str, StarInterpretation]:
    """从指定文件重建索引（启动时按配置切换知识库）"""
    global _index
    records = load_interpretations(path)
    new_index = build_interpretation_index(records)
    with _index_lock:
        _index = new_index
    logger.info(f"断语知识库已重载: {path or DEFAULT_KNOWLEDGE_BASE_PATH}, {len(records)} 条记录")
    return new_index


def find_interpretation(star_name: str, palace_name: str,
                        index: Optional[Mapping[str, StarInterpretation]] = None) -> Optional[StarInterpretation]:
    """O(1) 查找断语"""
    if index is None:
        index = get_interpretation_index()
    return index.get(make_key(star_name, palace_name))
