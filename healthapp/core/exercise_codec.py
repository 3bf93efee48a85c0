"""
运动明细文本（exercises）的解析

记录中的 exercises 字段是一段原样保存的文本，例如：
    "Pushups: reps 20 count, Run: distance 5 km"
这里把它解析成按动作名分组的 (metric, value, unit) 列表，
并提供持久化为 Exercise 行、以及从 Exercise 行还原分组的辅助函数。
"""

import logging
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

ENTRY_SEPARATOR = ", "
NAME_SEPARATOR = ": "


class ExerciseEntry(NamedTuple):
    metric: str
    value: str
    unit: str


def decode_exercises(text: Optional[str]) -> Dict[str, List[ExerciseEntry]]:
    """解析运动明细文本，返回 {动作名: [ExerciseEntry, ...]}

    条目之间以 ", " 分隔，每条形如 "<动作名>: <metric> <value> <unit>"。
    按 ": " 拆分后不是恰好两段、或剩余部分不足三个以空格分隔的词，该条被丢弃；
    第三个词之后的内容忽略。动作名按首次出现的顺序排列，同名条目保持输入顺序。

    没有转义规则，动作名或数值中含有 ", " / ": " 时会被错误拆分。
    """
    decoded: Dict[str, List[ExerciseEntry]] = {}
    if not text:
        return decoded
    for raw in text.split(ENTRY_SEPARATOR):
        parts = raw.split(NAME_SEPARATOR)
        if len(parts) != 2:
            logger.debug("[exercise-codec][skip] entry=%r", raw)
            continue
        name, rest = parts
        tokens = rest.strip().split(" ")
        if len(tokens) < 3:
            logger.debug("[exercise-codec][skip] entry=%r", raw)
            continue
        decoded.setdefault(name.strip(), []).append(ExerciseEntry(*tokens[:3]))
    return decoded


def flatten_exercises(decoded: Dict[str, List[ExerciseEntry]]) -> List[Tuple[str, ExerciseEntry]]:
    """展开为有序的 (动作名, 条目) 行，即写入 exercises 表的形式"""
    return [(name, entry) for name, entries in decoded.items() for entry in entries]


def group_exercise_rows(rows: Iterable) -> Dict[str, List[ExerciseEntry]]:
    """从已保存的 Exercise 行（含 exercise_name / metric / value / unit）还原分组"""
    grouped: Dict[str, List[ExerciseEntry]] = {}
    for row in rows:
        grouped.setdefault(row.exercise_name, []).append(
            ExerciseEntry(row.metric, row.value, row.unit)
        )
    return grouped
