# -*- coding: utf-8 -*-
"""
紫微斗数静态数据模块
"""
