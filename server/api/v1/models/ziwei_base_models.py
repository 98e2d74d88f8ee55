#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微斗数请求/响应模型 - 公共字段和验证器
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from core.calculators.ziwei_errors import InvalidInputError
from core.data.ziwei_constants import BRIGHTNESS_LEVELS, MUTAGENS
from server.utils.ziwei_input_processor import ZiweiInputProcessor


class ZiweiResponse(BaseModel):
    """紫微接口统一响应"""
    success: bool
    data: Optional[dict] = None
    message: Optional[str] = None


def _check_gender(v: str) -> str:
    if v not in ['male', 'female']:
        raise ValueError('性别必须为 male 或 female')
    return v


class ZiweiBaseRequest(BaseModel):
    """紫微排盘基础请求模型 - 出生信息"""
    solar_date: str = Field(..., description="公历日期 YYYY-MM-DD（calendar_type=lunar 时为农历日期）", examples=["1990-05-15"])
    solar_time: str = Field(..., description="出生地本地时间 HH:MM（可带秒）", examples=["14:30"])
    gender: str = Field(..., description="性别：male(男) 或 female(女)", examples=["male"])
    calendar_type: Optional[str] = Field("solar", description="历法类型：solar 或 lunar", examples=["solar"])
    is_leap_month: bool = Field(False, description="农历数字日期是否为闰月")
    location: Optional[str] = Field(None, description="出生城市（匹配经度与时区）", examples=["北京"])
    longitude: Optional[float] = Field(None, ge=-180, le=180, description="出生地经度（优先于城市）", examples=[116.40])
    timezone: Optional[str] = Field(None, description="出生地时区（优先于城市匹配）", examples=["Asia/Shanghai"])
    flow_year: Optional[int] = Field(None, gt=0, description="流年年份，默认出生年", examples=[2025])

    @field_validator('solar_date', mode='before')
    @classmethod
    def validate_date(cls, v):
        """只检查非空，格式与农历解析在 ZiweiInputProcessor 中处理"""
        if not v:
            raise ValueError('日期不能为空')
        return v

    @field_validator('solar_time')
    @classmethod
    def validate_time(cls, v):
        """与输入处理共用同一解析规则（HH:MM，可带秒）"""
        try:
            ZiweiInputProcessor.parse_time(v)
        except InvalidInputError as e:
            raise ValueError(e.message)
        return v

    @field_validator('gender')
    @classmethod
    def validate_gender(cls, v):
        return _check_gender(v)

    @field_validator('calendar_type')
    @classmethod
    def validate_calendar_type(cls, v):
        if v and v not in ['solar', 'lunar']:
            raise ValueError('历法类型必须为 solar 或 lunar')
        return v or "solar"


class ZiweiChartByIndexRequest(BaseModel):
    """按公历日期 + 时辰序号排盘"""
    solar_date: str = Field(..., description="公历日期 YYYY-MM-DD", examples=["2000-08-16"])
    time_index: int = Field(..., description="时辰序号 0-12（0 早子时，12 晚子时）", examples=[2])
    gender: str = Field(..., description="性别：male 或 female", examples=["female"])
    flow_year: Optional[int] = Field(None, gt=0, description="流年年份", examples=[2025])

    @field_validator('gender')
    @classmethod
    def validate_gender(cls, v):
        return _check_gender(v)


class StarLocationRequest(ZiweiBaseRequest):
    star_names: List[str] = Field(..., min_length=1, description="待定位的星名", examples=[["紫微", "天机"]])


class FlyingStarTargetsRequest(ZiweiBaseRequest):
    palace_index: int = Field(..., ge=0, le=11, description="起飞宫位序号 0-11", examples=[0])


class StarInput(BaseModel):
    name: str = Field(..., description="星名", examples=["紫微"])
    mutagen: Optional[str] = Field(None, description="四化：禄/权/科/忌")
    brightness: Optional[str] = Field(None, description="亮度")

    @field_validator('mutagen')
    @classmethod
    def validate_mutagen(cls, v):
        if v and v not in MUTAGENS:
            raise ValueError(f"四化必须为 {'/'.join(MUTAGENS)}")
        return v or None

    @field_validator('brightness')
    @classmethod
    def validate_brightness(cls, v):
        if v and v not in BRIGHTNESS_LEVELS:
            raise ValueError(f"亮度必须为 {'/'.join(BRIGHTNESS_LEVELS)}")
        return v or None


class InterpretationRequest(BaseModel):
    """按宫位星曜组成解盘"""
    palace_name: str = Field(..., description="宫名", examples=["命宫"])
    major_stars: List[StarInput] = Field(default_factory=list)
    minor_stars: List[StarInput] = Field(default_factory=list)
    misc_stars: List[StarInput] = Field(default_factory=list)
    stem_branch: str = Field('', description="宫位干支", examples=["甲子"])
    is_borrowed: bool = Field(False, description="是否为借对宫主星")


class ChartInterpretationRequest(ZiweiBaseRequest):
    """排盘后解读指定宫位"""
    palace_name: str = Field(..., description="宫名", examples=["命宫"])
    borrow: bool = Field(False, description="是否借对宫主星")
    yearly: bool = Field(False, description="是否解读流年宫位")


class ContextRequest(ZiweiBaseRequest):
    mode: str = Field("chat", description="chat 或 report", examples=["chat"])

    @field_validator('mode')
    @classmethod
    def validate_mode(cls, v):
        if v not in ['chat', 'report']:
            raise ValueError('mode 必须为 chat 或 report')
        return v
