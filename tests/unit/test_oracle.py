#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""排盘库适配层单元测试（并发初始化与调用串行）"""

import sys
import threading
import time
import types

import pytest

from core.calculators.ziwei_core import oracle as oracle_module
from core.calculators.ziwei_core.oracle import IztroOracle, get_default_oracle
from core.calculators.ziwei_errors import OracleError


class _SlowAstro:
    """模拟 py_iztro.Astro：构造与排盘都较慢，记录创建次数与并发数"""

    created = 0
    active = 0
    max_active = 0
    counter_lock = threading.Lock()

    def __init__(self):
        with _SlowAstro.counter_lock:
            _SlowAstro.created += 1
        time.sleep(0.05)

    def by_solar(self, date_str, time_index, gender, fix_leap, language):
        with _SlowAstro.counter_lock:
            _SlowAstro.active += 1
            _SlowAstro.max_active = max(_SlowAstro.max_active, _SlowAstro.active)
        time.sleep(0.01)
        with _SlowAstro.counter_lock:
            _SlowAstro.active -= 1
        return {'date': date_str}


@pytest.fixture
def slow_iztro(monkeypatch):
    _SlowAstro.created = 0
    _SlowAstro.active = 0
    _SlowAstro.max_active = 0
    fake_module = types.ModuleType('py_iztro')
    fake_module.Astro = _SlowAstro
    monkeypatch.setitem(sys.modules, 'py_iztro', fake_module)
    monkeypatch.setattr(oracle_module, '_shared_astro', None)
    monkeypatch.setattr(oracle_module, '_default_oracle', None)
    return _SlowAstro


def _run_in_threads(target, count=4):
    barrier = threading.Barrier(count)
    results = [None] * count

    def worker(i):
        barrier.wait()
        results[i] = target()

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(count)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return results


class TestIztroOracleConcurrency:
    def test_astro_created_once(self, slow_iztro):
        results = _run_in_threads(lambda: IztroOracle().by_solar('2000-8-16', 2, '女'))
        assert slow_iztro.created == 1
        assert results == [{'date': '2000-8-16'}] * 4

    def test_runtime_calls_serialized(self, slow_iztro):
        oracle = IztroOracle()
        _run_in_threads(lambda: oracle.by_solar('2000-8-16', 2, '女'), count=6)
        assert slow_iztro.max_active == 1

    def test_default_oracle_singleton(self, slow_iztro):
        results = _run_in_threads(get_default_oracle)
        assert all(r is results[0] for r in results)


class TestIztroOracleErrors:
    def test_import_failure_is_oracle_error(self, monkeypatch):
        monkeypatch.setitem(sys.modules, 'py_iztro', None)
        monkeypatch.setattr(oracle_module, '_shared_astro', None)
        with pytest.raises(OracleError):
            IztroOracle().by_solar('2000-8-16', 2, '女')

    def test_horoscope_missing_method(self):
        assert IztroOracle.horoscope(object(), '2025-8-16', 2) is None
