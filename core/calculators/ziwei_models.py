#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微排盘数据模型 - 星曜、宫位、命盘、断语

全部为不可变模型（frozen），排盘完成后不再修改。
序列化使用 camelCase 别名，与前端/对话层约定的字段一致。
"""

from typing import List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from core.data.ziwei_constants import BRIGHTNESS_LEVELS, MUTAGENS, TRADITIONAL_TO_SIMPLIFIED, normalize_palace_name


class _FrozenModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


class Star(_FrozenModel):
    """星曜"""
    name: str = Field(..., description="星名", examples=["紫微"])
    mutagen: Optional[str] = Field(None, description="四化：禄/权/科/忌", examples=["禄"])
    brightness: Optional[str] = Field(None, description="亮度：庙/旺/得/利/平/不/陷", examples=["庙"])

    @field_validator('mutagen', 'brightness', mode='before')
    @classmethod
    def _empty_to_none(cls, v):
        if not v:
            return None
        return TRADITIONAL_TO_SIMPLIFIED.get(v, v) if isinstance(v, str) else v

    @field_validator('mutagen')
    @classmethod
    def _check_mutagen(cls, v):
        if v is not None and v not in MUTAGENS:
            raise ValueError(f"四化必须为 {'/'.join(MUTAGENS)}，收到: {v}")
        return v

    @field_validator('brightness')
    @classmethod
    def _check_brightness(cls, v):
        if v is not None and v not in BRIGHTNESS_LEVELS:
            raise ValueError(f"亮度必须为 {'/'.join(BRIGHTNESS_LEVELS)}，收到: {v}")
        return v


class PalaceData(_FrozenModel):
    """宫位数据（本命或流年）"""
    palace_name: str = Field(..., description="宫名", examples=["命宫"])
    stem: str = Field(..., description="宫干", examples=["甲"])
    branch: str = Field(..., description="宫支", examples=["子"])
    major_stars: Tuple[Star, ...] = ()
    minor_stars: Tuple[Star, ...] = ()
    misc_stars: Tuple[Star, ...] = ()
    transformations: Tuple[str, ...] = ()
    is_yearly: bool = False

    @property
    def stem_branch(self) -> str:
        return f"{self.stem}{self.branch}"

    @property
    def all_stars(self) -> Tuple[Star, ...]:
        return self.major_stars + self.minor_stars + self.misc_stars

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['stemBranch'] = self.stem_branch
        return data


class ZiWeiChart(_FrozenModel):
    """
    命盘

    palaces 为本命十二宫，yearly 为流年十二宫，顺序均为排盘库内部索引顺序。
    """
    five_elements: str = Field(..., description="五行局", examples=["木三局"])
    life_owner: str = Field(..., description="命主", examples=["贪狼"])
    body_owner: str = Field(..., description="身主", examples=["文昌"])
    palaces: Tuple[PalaceData, ...]
    yearly: Tuple[PalaceData, ...]
    solar_date_str: str
    time_index: int
    gender: str
    flow_year: int
    lunar_date: Optional[str] = Field(None, description="农历日期（中文）", examples=["己巳年腊月初五"])

    def palace_index(self, palace_name: str, yearly: bool = False) -> int:
        """按宫名查找宫位序号（兼容 "财帛宫"、"事业" 等写法），找不到返回 -1"""
        target = normalize_palace_name(palace_name)
        for index, palace in enumerate(self.yearly if yearly else self.palaces):
            if normalize_palace_name(palace.palace_name) == target:
                return index
        return -1

    def palace_by_name(self, palace_name: str, yearly: bool = False) -> Optional[PalaceData]:
        index = self.palace_index(palace_name, yearly)
        if index == -1:
            return None
        return (self.yearly if yearly else self.palaces)[index]

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['palaces'] = [p.to_dict() for p in self.palaces]
        data['yearly'] = [p.to_dict() for p in self.yearly]
        return data


class StarInterpretation(_FrozenModel):
    """断语记录（知识库条目）"""
    star: str = Field(..., description="星名，双星组合以逗号连接", examples=["紫微,贪狼"])
    palace: str = Field(..., description="宫名，或 格局 / 化X", examples=["命宫"])
    summary: str
    detail: str
    tags: Tuple[str, ...] = ()


class PalaceInterpretations(_FrozenModel):
    """单宫解盘结果"""
    patterns: List[StarInterpretation] = Field(default_factory=list)
    main: List[StarInterpretation] = Field(default_factory=list)
    transformations: List[StarInterpretation] = Field(default_factory=list)
    minors: List[StarInterpretation] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.patterns or self.main or self.transformations or self.minors)
