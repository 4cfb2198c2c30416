"""
问卷提交统计工具
"""
import numpy as np
import pandas as pd
from typing import Any, Dict, List, Optional


def convert_numpy_types(obj):
    """递归转换numpy类型为Python原生类型"""
    if isinstance(obj, dict):
        return {key: convert_numpy_types(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [convert_numpy_types(item) for item in obj]
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    else:
        return obj


def _numeric_or_none(value: Any) -> Any:
    # bool 是 int 的子类，不计入分数
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float, str)):
        return value
    return None


def _column(df: pd.DataFrame, name: str) -> pd.Series:
    if name in df.columns:
        return df[name]
    return pd.Series([], dtype=object)


def describe_scores(series: pd.Series) -> Dict[str, Optional[float]]:
    """
    计算数值列的均值/最小值/最大值

    Args:
        series: 原始列，非数值项会被忽略

    Returns:
        {'average', 'min', 'max'}，没有有效数值时均为None
    """
    values = pd.to_numeric(series.map(_numeric_or_none), errors='coerce').dropna()
    if values.empty:
        return {'average': None, 'min': None, 'max': None}
    return {
        'average': round(float(values.mean()), 2),
        'min': values.min(),
        'max': values.max(),
    }


def _latest_timestamp(series: pd.Series) -> Optional[str]:
    strings = series.map(lambda v: v if isinstance(v, str) else None)
    parsed = pd.to_datetime(strings, errors='coerce', utc=True, format='ISO8601').dropna()
    if parsed.empty:
        return None
    return parsed.max().isoformat()


def _employee_ids(series: pd.Series) -> pd.Series:
    ids = series.map(lambda u: u.get('employeeId') if isinstance(u, dict) else None)
    return ids.dropna().astype(str)


def get_basic_statistics(questions: List[Any], responses: List[Any]) -> Dict[str, Any]:
    """
    获取题目和提交记录的基本统计信息

    Args:
        questions: 题目列表
        responses: 提交记录列表

    Returns:
        统计信息字典
    """
    records = [r for r in responses if isinstance(r, dict)]
    df = pd.DataFrame(records)

    stats = {
        'total_questions': len(questions),
        'total_responses': len(responses),
        'unique_employees': int(_employee_ids(_column(df, 'userData')).nunique()),
        'total_score': describe_scores(_column(df, 'totalScore')),
        'percentage': describe_scores(_column(df, 'percentage')),
        'latest_submission': _latest_timestamp(_column(df, 'timestamp')),
    }
    # 转换numpy类型为Python原生类型
    return convert_numpy_types(stats)
