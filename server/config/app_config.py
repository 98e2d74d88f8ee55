#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
统一应用配置管理
所有配置统一从这里读取，避免配置分散
"""

from dataclasses import dataclass, field
from typing import List, Optional

from server.config.env_config import get_env_config, reset_env_config


@dataclass
class ZiweiConfig:
    """排盘配置"""
    default_longitude: float = 120.0
    language: str = 'zh-CN'
    fix_leap: bool = True
    knowledge_base_path: Optional[str] = None
    default_timezone: str = 'Asia/Shanghai'

    @classmethod
    def from_env(cls) -> 'ZiweiConfig':
        """从环境变量创建配置"""
        env_config = get_env_config()
        return cls(
            default_longitude=env_config.get_float_config('ZIWEI_DEFAULT_LONGITUDE', default=120.0),
            language=env_config.get_config('ZIWEI_LANGUAGE', default='zh-CN'),
            fix_leap=env_config.get_bool_config('ZIWEI_FIX_LEAP', default=True),
            knowledge_base_path=env_config.get_config('ZIWEI_KNOWLEDGE_BASE_PATH'),
            default_timezone=env_config.get_config('ZIWEI_DEFAULT_TIMEZONE', default='Asia/Shanghai'),
        )


@dataclass
class AppConfig:
    """应用配置"""
    env: str = 'local'
    debug: bool = False
    log_level: str = 'INFO'
    cors_origins: List[str] = field(default_factory=lambda: ['*'])
    ziwei: ZiweiConfig = field(default_factory=ZiweiConfig)

    @classmethod
    def from_env(cls) -> 'AppConfig':
        """从环境变量创建完整配置"""
        env_config = get_env_config()
        origins = env_config.get_config('CORS_ORIGINS', default='*')
        return cls(
            env=env_config.env,
            debug=env_config.get_bool_config('DEBUG', default=False),
            log_level=env_config.get_config('LOG_LEVEL', default='INFO').upper(),
            cors_origins=[o.strip() for o in origins.split(',') if o.strip()],
            ziwei=ZiweiConfig.from_env(),
        )


# 全局配置实例（单例模式）
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """获取全局配置实例（单例）"""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def reload_config() -> AppConfig:
    """重新读取环境变量并加载配置"""
    global _config
    reset_env_config()
    _config = AppConfig.from_env()
    return _config
