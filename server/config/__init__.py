# -*- coding: utf-8 -*-
"""
配置模块
"""

from .app_config import AppConfig, ZiweiConfig, get_config, reload_config
from .env_config import get_env_config, is_local_dev, is_production

__all__ = ['AppConfig', 'ZiweiConfig', 'get_config', 'reload_config',
           'get_env_config', 'is_local_dev', 'is_production']
