#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
排盘库适配层（py_iztro）

py_iztro 在进程内调用 iztro 完成星盘安星，这里只做调用与异常归类，
返回的星盘对象视为不可信的外部数据，由 palace_extractor 负责防御式读取。

iztro 运行在进程内唯一的 JS 运行时上：Astro 全进程只创建一次，
对运行时的调用（by_solar / horoscope）串行执行。
"""

import logging
import threading
from typing import Any, Optional

from core.calculators.ziwei_errors import OracleError

logger = logging.getLogger(__name__)

_runtime_lock = threading.RLock()
_shared_astro: Optional[Any] = None


def get_shared_astro():
    """获取进程级 py_iztro.Astro（首次调用时创建）"""
    global _shared_astro
    if _shared_astro is None:
        with _runtime_lock:
            if _shared_astro is None:
                from py_iztro import Astro  # 延迟导入，避免启动时加载 JS 运行时
                _shared_astro = Astro()
                logger.info("iztro 运行时已初始化")
    return _shared_astro


class IztroOracle:
    """py_iztro 星盘生成器（实例可复用，共享进程级 Astro）"""

    def __init__(self, language: str = 'zh-CN', fix_leap: bool = True) -> None:
        self.language = language
        self.fix_leap = fix_leap
        self._astro: Optional[Any] = None

    def _get_astro(self):
        if self._astro is None:
            self._astro = get_shared_astro()
        return self._astro

    def by_solar(self, solar_date_str: str, time_index: int, gender_label: str):
        """
        按公历生成星盘

        Args:
            solar_date_str: 公历日期 YYYY-M-D
            time_index: 时辰序号 0-12
            gender_label: 男 / 女
        """
        try:
            astro = self._get_astro()
            with _runtime_lock:
                return astro.by_solar(solar_date_str, time_index, gender_label, self.fix_leap, self.language)
        except Exception as e:
            logger.error(f"iztro 排盘失败: {solar_date_str} {time_index} {gender_label}, 错误: {e}")
            raise OracleError(f"排盘失败: {e}") from e

    @staticmethod
    def horoscope(astrolabe, target_date_str: str, time_index: int):
        """
        获取运限（含流年）数据

        星盘对象不提供 horoscope 方法时返回 None，由调用方按流年缺失处理。
        """
        horoscope_func = getattr(astrolabe, 'horoscope', None)
        if not callable(horoscope_func):
            return None
        with _runtime_lock:
            return horoscope_func(target_date_str, time_index)


_default_oracle: Optional[IztroOracle] = None
_default_oracle_lock = threading.Lock()


def get_default_oracle() -> IztroOracle:
    """获取进程级默认排盘器"""
    global _default_oracle
    if _default_oracle is None:
        with _default_oracle_lock:
            if _default_oracle is None:
                _default_oracle = IztroOracle()
    return _default_oracle
