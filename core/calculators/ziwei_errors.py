#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微排盘异常定义

所有排盘相关错误都继承 ZiweiError，调用方只需处理一套异常体系。
code 字段与 HTTP 状态码对应，由 server 层映射为响应。
"""

from typing import Any, Dict, Optional


class ZiweiError(Exception):
    """紫微排盘异常基类"""

    def __init__(self, message: str, code: int = 500, error_type: str = "ziwei_error"):
        self.message = message
        self.code = code
        self.error_type = error_type
        super().__init__(message)


class InvalidInputError(ZiweiError):
    """输入参数错误（日期、经度、时辰、性别等）"""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        error_type = f"invalid_input:{field}" if field else "invalid_input"
        super().__init__(message, code=400, error_type=error_type)


class InvalidDateFormatError(InvalidInputError):
    """日期字符串格式错误"""

    def __init__(self, message: str = "日期格式错误，应为 YYYY-MM-DD"):
        super().__init__(message, field="solar_date")


class InvalidTimeSlotError(InvalidInputError):
    """时辰序号越界"""

    def __init__(self, message: str = "时辰序号错误，应为 0-12"):
        super().__init__(message, field="time_index")


class LunarConversionError(ZiweiError):
    """公历无法换算为农历（日期不存在等）"""

    def __init__(self, message: str):
        super().__init__(message, code=400, error_type="calendar_conversion_failed")


class OracleError(ZiweiError):
    """排盘库（iztro）调用失败"""

    def __init__(self, message: str):
        super().__init__(message, code=502, error_type="oracle_failed")


class YearlyDataMissingError(ZiweiError):
    """排盘库未返回流年数据"""

    def __init__(self, message: str = "流年数据缺失"):
        super().__init__(message, code=500, error_type="yearly_data_missing")


class YearlyDataIncompleteError(ZiweiError):
    """流年数据不满足 12 宫约束"""

    def __init__(self, message: str, received: Optional[Dict[str, Any]] = None):
        self.received = dict(received or {})
        super().__init__(message, code=500, error_type="yearly_data_incomplete")


class ExtractionError(ZiweiError):
    """流年宫位整理过程中的其他异常，保留原始异常"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message, code=500, error_type="extraction_failed")
