#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微斗数 API 接口

ZiweiError 由全局异常处理器转换为对应 HTTP 状态码；
排盘为同步计算，接口使用 def 由 FastAPI 放入线程池执行。
"""

import logging
from typing import Tuple

from fastapi import APIRouter

from core.calculators.ziwei_models import ZiWeiChart
from core.data.stems_branches import HEAVENLY_STEMS
from server.api.v1.models.ziwei_base_models import (
    ChartInterpretationRequest,
    ContextRequest,
    FlyingStarTargetsRequest,
    InterpretationRequest,
    StarLocationRequest,
    ZiweiBaseRequest,
    ZiweiChartByIndexRequest,
    ZiweiResponse,
)
from server.services.ziwei_service import get_ziwei_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _build_chart(request: ZiweiBaseRequest) -> Tuple[ZiWeiChart, dict]:
    return get_ziwei_service().build_chart(
        request.solar_date,
        request.solar_time,
        request.gender,
        calendar_type=request.calendar_type or "solar",
        is_leap_month=request.is_leap_month,
        location=request.location,
        longitude=request.longitude,
        timezone=request.timezone,
        flow_year=request.flow_year,
    )


@router.post("/ziwei/chart", response_model=ZiweiResponse, summary="紫微斗数排盘")
def calculate_chart(request: ZiweiBaseRequest):
    """
    紫微斗数排盘（农历转换 + 时区 + 真太阳时）

    - **solar_date**: 公历日期 (YYYY-MM-DD) 或农历日期（calendar_type=lunar）
    - **solar_time**: 出生地本地时间 (HH:MM)
    - **gender**: male / female
    - **location / longitude / timezone**: 出生地信息（可选）
    - **flow_year**: 流年年份（可选）
    """
    chart, conversion_info = _build_chart(request)
    return ZiweiResponse(
        success=True,
        data={'chart': chart.to_dict(), 'conversion_info': conversion_info},
    )


@router.post("/ziwei/chart/by-index", response_model=ZiweiResponse, summary="按时辰序号排盘")
def calculate_chart_by_index(request: ZiweiChartByIndexRequest):
    """按公历日期与时辰序号直接排盘，不做真太阳时校正"""
    chart = get_ziwei_service().build_chart_by_index(
        request.solar_date, request.time_index, request.gender, request.flow_year
    )
    return ZiweiResponse(success=True, data={'chart': chart.to_dict()})


@router.get("/ziwei/flying-stars/{stem}", response_model=ZiweiResponse, summary="天干飞化四星")
def flying_stars(stem: str):
    stars = get_ziwei_service().get_flying_stars(stem)
    if stem not in HEAVENLY_STEMS:
        return ZiweiResponse(success=False, data={'stem': stem, 'stars': stars}, message=f"未知天干: {stem}")
    return ZiweiResponse(success=True, data={'stem': stem, 'stars': stars})


@router.post("/ziwei/flying-stars/targets", response_model=ZiweiResponse, summary="宫干飞化落宫")
def flying_star_targets(request: FlyingStarTargetsRequest):
    service = get_ziwei_service()
    chart, _ = _build_chart(request)
    targets = service.flying_star_targets(chart, request.palace_index)
    return ZiweiResponse(
        success=True,
        data={
            'palace_index': request.palace_index,
            'stem': chart.palaces[request.palace_index].stem,
            'targets': targets,
        },
    )


@router.post("/ziwei/stars/location", response_model=ZiweiResponse, summary="星曜定位")
def locate_stars(request: StarLocationRequest):
    service = get_ziwei_service()
    chart, _ = _build_chart(request)
    locations = service.locate_stars(chart, request.star_names)
    return ZiweiResponse(
        success=True,
        data={'star_names': request.star_names, 'locations': locations},
    )


@router.post("/ziwei/interpretation", response_model=ZiweiResponse, summary="宫位解盘")
def interpret_palace(request: InterpretationRequest):
    """按宫位星曜组成匹配断语（格局 / 主星 / 四化 / 辅星杂曜）"""
    result = get_ziwei_service().interpret_palace(
        request.palace_name,
        [s.model_dump() for s in request.major_stars],
        [s.model_dump() for s in request.minor_stars],
        [s.model_dump() for s in request.misc_stars],
        request.stem_branch,
        request.is_borrowed,
    )
    return ZiweiResponse(success=True, data=result.to_dict())


@router.post("/ziwei/chart/interpretation", response_model=ZiweiResponse, summary="命盘宫位解盘")
def interpret_chart_palace(request: ChartInterpretationRequest):
    service = get_ziwei_service()
    chart, _ = _build_chart(request)
    result = service.interpret_chart_palace(chart, request.palace_name, request.borrow, request.yearly)
    return ZiweiResponse(success=True, data=result.to_dict())


@router.post("/ziwei/context", response_model=ZiweiResponse, summary="命盘对话上下文")
def chart_context(request: ContextRequest):
    """生成供大模型使用的精简命盘文本与系统提示词"""
    service = get_ziwei_service()
    chart, _ = _build_chart(request)
    return ZiweiResponse(success=True, data=service.build_context(chart, request.mode))
