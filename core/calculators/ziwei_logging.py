#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
紫微排盘模块共享日志工具

- 宿主（FastAPI 服务、测试）已配置根日志时，直接沿用根日志输出
- 独立调用排盘库时，自带一个忽略 Broken pipe 的 StreamHandler
- 日志级别可由环境变量 ZIWEI_LOG_LEVEL 覆盖
"""

import logging
import os
import threading

ZIWEI_LOGGER_NAME = "core.calculators.ziwei"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

_LEVELS = {
    'debug': logging.DEBUG,
    'info': logging.INFO,
    'warning': logging.WARNING,
    'error': logging.ERROR,
}

logger = logging.getLogger(ZIWEI_LOGGER_NAME)
_configured = False
_configure_lock = threading.Lock()


class SafeStreamHandler(logging.StreamHandler):
    """客户端断开后写日志不再抛 Broken pipe"""
    def emit(self, record):
        try:
            super().emit(record)
        except (BrokenPipeError, OSError):
            pass


def get_ziwei_logger() -> logging.Logger:
    """首次使用时决定输出方式，之后直接返回"""
    global _configured
    if _configured:
        return logger
    with _configure_lock:
        if not _configured:
            level_name = os.getenv('ZIWEI_LOG_LEVEL', '').lower()
            if level_name in _LEVELS:
                logger.setLevel(_LEVELS[level_name])
            if not logging.getLogger().handlers and not logger.handlers:
                handler = SafeStreamHandler()
                handler.setFormatter(logging.Formatter(LOG_FORMAT))
                logger.addHandler(handler)
                logger.propagate = False
                if logger.level == logging.NOTSET:
                    logger.setLevel(logging.INFO)
            _configured = True
    return logger


def safe_log(level, message, exc_info=None):
    """
    按级别名输出日志（未知级别按 info），输出失败不影响排盘
    """
    try:
        get_ziwei_logger().log(_LEVELS.get(level, logging.INFO), message, exc_info=exc_info)
    except (BrokenPipeError, OSError):
        pass
