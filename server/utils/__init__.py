# -*- coding: utf-8 -*-
"""
服务器工具模块
"""

from .exception_handler import ExceptionHandlerMiddleware, register_exception_handlers
from .prompt_builders import build_system_prompt, simplify_chart_data
from .timezone_converter import convert_local_to_solar_time, get_timezone, resolve_longitude
from .ziwei_input_processor import ZiweiInputProcessor

__all__ = [
    'ExceptionHandlerMiddleware',
    'register_exception_handlers',
    'build_system_prompt',
    'simplify_chart_data',
    'convert_local_to_solar_time',
    'get_timezone',
    'resolve_longitude',
    'ZiweiInputProcessor',
]
