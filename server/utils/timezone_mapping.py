#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
地点映射配置
- 城市 -> 经度（真太阳时校正用，东经为正）
- Location 字符串 -> 时区（支持中英文）
"""

from typing import Optional

# 城市经度表（省会、直辖市、计划单列市）
CITY_LONGITUDE_MAP = {
    # 直辖市
    "北京": 116.40,
    "上海": 121.47,
    "天津": 117.20,
    "重庆": 106.55,
    # 特别行政区
    "香港": 114.17,
    "澳门": 113.54,
    # 华北
    "石家庄": 114.48,
    "太原": 112.53,
    "呼和浩特": 111.65,
    # 东北
    "沈阳": 123.38,
    "大连": 121.61,
    "长春": 125.35,
    "哈尔滨": 126.63,
    # 华东
    "南京": 118.78,
    "苏州": 120.62,
    "杭州": 120.19,
    "宁波": 121.56,
    "合肥": 117.27,
    "福州": 119.30,
    "厦门": 118.10,
    "南昌": 115.89,
    "济南": 117.00,
    "青岛": 120.33,
    # 华中
    "郑州": 113.65,
    "武汉": 114.31,
    "长沙": 113.00,
    # 华南
    "广州": 113.26,
    "深圳": 114.05,
    "南宁": 108.33,
    "海口": 110.35,
    # 西南
    "成都": 104.06,
    "贵阳": 106.71,
    "昆明": 102.71,
    "拉萨": 91.11,
    # 西北
    "西安": 108.95,
    "兰州": 103.73,
    "西宁": 101.74,
    "银川": 106.27,
    "乌鲁木齐": 87.68,
    # 台湾
    "台北": 121.50,
}

# Location 字符串到时区的映射表
# 优先级：精确匹配 > 部分匹配 > 默认时区
LOCATION_TIMEZONE_MAP = {
    # 中国
    "中国": "Asia/Shanghai",
    "China": "Asia/Shanghai",
    "Beijing": "Asia/Shanghai",
    "Shanghai": "Asia/Shanghai",
    "香港": "Asia/Hong_Kong",
    "Hong Kong": "Asia/Hong_Kong",
    "澳门": "Asia/Macau",
    "Macau": "Asia/Macau",
    "台北": "Asia/Taipei",
    "台湾": "Asia/Taipei",
    "Taipei": "Asia/Taipei",

    # 亚洲
    "日本": "Asia/Tokyo",
    "Japan": "Asia/Tokyo",
    "东京": "Asia/Tokyo",
    "Tokyo": "Asia/Tokyo",
    "新加坡": "Asia/Singapore",
    "Singapore": "Asia/Singapore",

    # 欧洲
    "英国": "Europe/London",
    "UK": "Europe/London",
    "伦敦": "Europe/London",
    "London": "Europe/London",
    "德国": "Europe/Berlin",
    "Germany": "Europe/Berlin",
    "柏林": "Europe/Berlin",
    "Berlin": "Europe/Berlin",
    "法国": "Europe/Paris",
    "France": "Europe/Paris",
    "巴黎": "Europe/Paris",
    "Paris": "Europe/Paris",

    # 北美
    "纽约": "America/New_York",
    "New York": "America/New_York",
    "洛杉矶": "America/Los_Angeles",
    "Los Angeles": "America/Los_Angeles",
    "温哥华": "America/Vancouver",
    "Vancouver": "America/Vancouver",

    # 大洋洲
    "悉尼": "Australia/Sydney",
    "Sydney": "Australia/Sydney",
}


def match_location_to_timezone(location: str) -> Optional[str]:
    """
    根据 Location 字符串匹配时区

    中国大陆城市（在经度表中）统一为 Asia/Shanghai。

    Returns:
        时区字符串（如 "Asia/Shanghai"），无法匹配返回 None
    """
    if not location:
        return None

    location_clean = location.strip()

    # 精确匹配
    if location_clean in LOCATION_TIMEZONE_MAP:
        return LOCATION_TIMEZONE_MAP[location_clean]
    if location_clean in CITY_LONGITUDE_MAP:
        return "Asia/Shanghai"

    # 部分匹配（包含关系）
    location_lower = location_clean.lower()
    for key, timezone in LOCATION_TIMEZONE_MAP.items():
        if location_lower in key.lower() or key.lower() in location_lower:
            return timezone
    if match_city_longitude(location_clean) is not None:
        return "Asia/Shanghai"

    return None


def match_city_longitude(location: str) -> Optional[float]:
    """
    根据城市名匹配经度，支持 "广东省广州市" 这类包含城市名的写法

    Returns:
        经度，无法匹配返回 None
    """
    if not location:
        return None
    location_clean = location.strip()
    if location_clean in CITY_LONGITUDE_MAP:
        return CITY_LONGITUDE_MAP[location_clean]
    # 长名优先，避免短名误配
    for city in sorted(CITY_LONGITUDE_MAP, key=len, reverse=True):
        if city in location_clean:
            return CITY_LONGITUDE_MAP[city]
    return None
