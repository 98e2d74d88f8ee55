#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微斗数服务层
负责把请求参数交给核心排盘/解盘逻辑，并组织输出
"""

import logging
import threading
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from core.calculators.ziwei_calculator import ZiWeiCalculator
from core.calculators.ziwei_core import IztroOracle, find_flying_star_targets, find_stars_location, get_flying_stars
from core.calculators.ziwei_errors import InvalidInputError
from core.calculators.ziwei_models import PalaceInterpretations, ZiWeiChart
from core.calculators.ziwei_rules import get_palace_interpretations, reload_knowledge_base
from core.data.ziwei_constants import get_opposite_palace_name
from server.config.app_config import ZiweiConfig, get_config
from server.utils.prompt_builders import build_system_prompt, simplify_chart_data
from server.utils.ziwei_input_processor import ZiweiInputProcessor

logger = logging.getLogger(__name__)


class ZiweiService:
    """紫微斗数服务类"""

    def __init__(self, calculator: Optional[ZiWeiCalculator] = None, config: Optional[ZiweiConfig] = None):
        self.config = config or get_config().ziwei
        if calculator is None:
            calculator = ZiWeiCalculator(IztroOracle(language=self.config.language, fix_leap=self.config.fix_leap))
        self.calculator = calculator

    # === 排盘 ==================================================================================

    def build_chart(
        self,
        date_str: str,
        time_str: str,
        gender: str,
        calendar_type: str = "solar",
        is_leap_month: bool = False,
        location: Optional[str] = None,
        longitude: Optional[float] = None,
        timezone: Optional[str] = None,
        flow_year: Optional[int] = None,
    ) -> Tuple[ZiWeiChart, dict]:
        """
        按出生信息排盘（农历转换、时区、真太阳时）

        Returns:
            (chart, conversion_info)
        """
        beijing_dt, resolved_longitude, conversion_info = ZiweiInputProcessor.process_input(
            date_str,
            time_str,
            calendar_type=calendar_type,
            is_leap_month=is_leap_month,
            location=location,
            longitude=longitude,
            timezone=timezone,
            default_longitude=self.config.default_longitude,
            default_timezone=self.config.default_timezone,
        )
        chart = self.calculator.get_ziwei_chart_by_date(beijing_dt, resolved_longitude, gender, flow_year)
        logger.info(f"排盘完成: {chart.solar_date_str} 时辰{chart.time_index} {gender} {chart.five_elements}")
        return chart, conversion_info

    def build_chart_by_index(self, solar_date: str, time_index: int, gender: str,
                             flow_year: Optional[int] = None) -> ZiWeiChart:
        """按公历日期与时辰序号直接排盘（不做真太阳时校正）"""
        return self.calculator.get_ziwei_chart(solar_date, time_index, gender, flow_year)

    # === 解盘 ==================================================================================

    @staticmethod
    def interpret_palace(
        palace_name: str,
        major_stars: Iterable[Any],
        minor_stars: Iterable[Any],
        misc_stars: Optional[Iterable[Any]] = None,
        stem_branch: str = '',
        is_borrowed: bool = False,
    ) -> PalaceInterpretations:
        return get_palace_interpretations(palace_name, major_stars, minor_stars, misc_stars, stem_branch, is_borrowed)

    @staticmethod
    def interpret_chart_palace(chart: ZiWeiChart, palace_name: str, borrow: bool = False,
                               yearly: bool = False) -> PalaceInterpretations:
        """
        解读命盘中的某一宫

        borrow=True 时以对宫主星代入本宫（借星），主星断语带借星标记；
        是否借星由调用方决定。
        """
        palace = chart.palace_by_name(palace_name, yearly)
        if palace is None:
            raise InvalidInputError(f"命盘中没有该宫位: {palace_name}", field="palace_name")

        major_stars = palace.major_stars
        if borrow:
            opposite = chart.palace_by_name(get_opposite_palace_name(palace.palace_name), yearly)
            if opposite is None:
                raise InvalidInputError(f"找不到对宫: {palace.palace_name}", field="palace_name")
            major_stars = opposite.major_stars

        return get_palace_interpretations(
            palace.palace_name,
            major_stars,
            palace.minor_stars,
            palace.misc_stars,
            palace.stem_branch,
            is_borrowed=borrow,
        )

    # === 飞星 / 定位 ==============================================================================

    @staticmethod
    def get_flying_stars(stem: str) -> dict:
        return get_flying_stars(stem)

    @staticmethod
    def locate_stars(chart: ZiWeiChart, star_names: Sequence[str]) -> List[int]:
        return find_stars_location(chart, star_names)

    @staticmethod
    def flying_star_targets(chart: ZiWeiChart, palace_index: int) -> List[dict]:
        return find_flying_star_targets(chart, palace_index)

    # === 对话上下文 =============================================================================

    @staticmethod
    def build_context(chart: ZiWeiChart, mode: str = "chat") -> dict:
        return {
            'context': simplify_chart_data(chart, include_yearly=(mode == "report")),
            'system_prompt': build_system_prompt(chart, mode),
            'mode': mode,
        }


_service: Optional[ZiweiService] = None
_service_lock = threading.Lock()


def get_ziwei_service() -> ZiweiService:
    """获取全局服务实例（单例），首次创建时按配置切换知识库"""
    global _service
    if _service is None:
        with _service_lock:
            if _service is None:
                config = get_config().ziwei
                if config.knowledge_base_path:
                    reload_knowledge_base(config.knowledge_base_path)
                _service = ZiweiService(config=config)
    return _service


def set_ziwei_service(service: Optional[ZiweiService]) -> None:
    """替换全局服务实例（测试注入用）"""
    global _service
    _service = service
