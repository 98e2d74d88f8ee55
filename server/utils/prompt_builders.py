#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Prompt 构建工具模块

把命盘精简为文本上下文，并填充对话/报告两类系统提示词。
只依赖核心模型，不依赖 FastAPI，可以在评测脚本中安全导入。
"""

from typing import Optional

from core.calculators.ziwei_errors import InvalidInputError
from core.calculators.ziwei_models import PalaceData, ZiWeiChart
from core.data.ziwei_constants import PRIORITY_MISC_STARS

PROMPT_MODES = ("chat", "report")

GENDER_TEXT = {'male': '男', 'female': '女'}

EMPTY_PALACE_TEXT = "无核心星曜"
NO_CHART_TEXT = "无命盘数据"

CHAT_SYSTEM_PROMPT_TEMPLATE = """
你是 PurpleStar 命理助手，一位精通紫微斗数的命理师，擅长结合流年运势、宫位星曜进行深入浅出的命运解析。
回答要求：
1. 专业且有古韵，但解释要通俗易懂。
2. 可以引用古籍断语（如《紫微斗数全书》）佐证观点。
3. 客观中肯，既指出吉凶，也给出趋吉避凶的建议。
4. 语气温和，富有同理心。

以下是用户的命盘上下文（已精简为文本）：
{chart_context}

请根据以上命盘信息和用户的提问，进行专业的紫微斗数分析。
"""

REPORT_SYSTEM_PROMPT_TEMPLATE = """
你是 PurpleStar 系统的首席命理师，精通紫微斗数。文笔古雅而不晦涩，专业而不迷信。

任务：根据用户命盘撰写《{flow_year}年度命理报告》，使用 Markdown，包含以下章节：

# 命造总纲
（分析命宫、身宫、福德宫，定性命主的性格底色）

# 事业与财富
（官禄宫、财帛宫：给出 3 个适合的行业标签与理财风险指数 1-5 星）

# 情感与关系
（夫妻宫、子女宫：给出具体的相处建议）

# 流年运势
（结合流年命宫与流年四化，列出本年度 3 个关键月份并标注吉凶）

# 大师寄语
（综合全盘给出建议，以一句古文作结）

以下是用户的命盘上下文（已精简为文本）：
{chart_context}
"""


def _format_palace(palace: PalaceData) -> str:
    """宫名(地支): 主星(亮度)(四化), 辅星(四化), 重要杂曜."""
    stars = []
    for star in palace.major_stars:
        text = star.name
        if star.brightness:
            text += f"({star.brightness})"
        if star.mutagen:
            text += f"({star.mutagen})"
        stars.append(text)

    for star in palace.minor_stars:
        stars.append(f"{star.name}({star.mutagen})" if star.mutagen else star.name)

    for star in palace.misc_stars:
        if star.mutagen or star.name in PRIORITY_MISC_STARS:
            stars.append(f"{star.name}({star.mutagen})" if star.mutagen else star.name)

    return f"{palace.palace_name}({palace.branch}): {', '.join(stars) or EMPTY_PALACE_TEXT}."


def simplify_chart_data(chart: Optional[ZiWeiChart], include_yearly: bool = False) -> str:
    """
    命盘精简为大模型可读文本

    第一行为【命主】信息，其后每宫一行；include_yearly 时追加【流年】各宫。
    """
    if chart is None:
        return NO_CHART_TEXT

    gender_text = GENDER_TEXT.get(chart.gender, '未知')
    parts = [
        f"【命主】{gender_text} {chart.five_elements or '未知局'} "
        f"命主:{chart.life_owner or '未知'} 身主:{chart.body_owner or '未知'}"
    ]
    parts.extend(_format_palace(p) for p in chart.palaces)

    if include_yearly and chart.yearly:
        parts.append(f"【流年】{chart.flow_year}")
        parts.extend(_format_palace(p) for p in chart.yearly)

    return "\n".join(parts)


def build_system_prompt(chart: Optional[ZiWeiChart], mode: str = "chat") -> str:
    """
    构建系统提示词

    Args:
        chart: 命盘
        mode: chat（对话）或 report（年度报告，附带流年宫位）
    """
    if mode not in PROMPT_MODES:
        raise InvalidInputError(f"提示词模式必须为 chat 或 report，收到: {mode!r}", field="mode")

    if mode == "report":
        context = simplify_chart_data(chart, include_yearly=True)
        flow_year = chart.flow_year if chart is not None else ''
        return REPORT_SYSTEM_PROMPT_TEMPLATE.format(chart_context=context, flow_year=flow_year).strip()

    return CHAT_SYSTEM_PROMPT_TEMPLATE.format(chart_context=simplify_chart_data(chart)).strip()
