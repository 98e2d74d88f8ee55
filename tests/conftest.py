#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Pytest 全局配置

提供：
- 替身排盘器与固定星盘
- 应用与测试客户端
- 示例请求数据
"""

import os
import sys
from typing import Any, Dict

import pytest

# 添加项目根目录到路径
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, project_root)

from tests.fixtures.sample_data import FakeAstrolabe, FakeOracle  # noqa: E402


# ==================== 排盘 Fixtures ====================

@pytest.fixture(scope="function")
def fake_astrolabe() -> FakeAstrolabe:
    return FakeAstrolabe()


@pytest.fixture(scope="function")
def fake_oracle(fake_astrolabe) -> FakeOracle:
    return FakeOracle(fake_astrolabe)


@pytest.fixture(scope="function")
def calculator(fake_oracle):
    """
    使用替身排盘器的计算器

    Returns:
        ZiWeiCalculator 实例
    """
    from core.calculators.ziwei_calculator import ZiWeiCalculator
    return ZiWeiCalculator(fake_oracle)


@pytest.fixture(scope="function")
def chart(calculator):
    """固定星盘排出的命盘（2026 年流年）"""
    return calculator.get_ziwei_chart('2026-03-15', 6, 'male')


# ==================== 应用和客户端 Fixtures ====================

@pytest.fixture(scope="session")
def app():
    from server.main import app
    return app


@pytest.fixture(scope="function")
def ziwei_service(fake_oracle):
    """
    注入替身排盘器的服务实例（同时替换全局实例）

    Yields:
        ZiweiService 实例
    """
    from core.calculators.ziwei_calculator import ZiWeiCalculator
    from server.config.app_config import ZiweiConfig
    from server.services.ziwei_service import ZiweiService, set_ziwei_service

    service = ZiweiService(calculator=ZiWeiCalculator(fake_oracle), config=ZiweiConfig())
    set_ziwei_service(service)
    yield service
    set_ziwei_service(None)


@pytest.fixture(scope="function")
def client(app, ziwei_service):
    """
    创建测试客户端（服务已注入替身排盘器）

    Returns:
        TestClient 实例
    """
    from fastapi.testclient import TestClient
    return TestClient(app)


# ==================== 数据 Fixtures ====================

@pytest.fixture(scope="function")
def sample_ziwei_request() -> Dict[str, Any]:
    """
    示例排盘请求（北京出生，真太阳时校正后仍在午时）

    Returns:
        排盘请求字典
    """
    return {
        "solar_date": "2026-03-15",
        "solar_time": "12:30",
        "gender": "male",
        "location": "北京",
    }
