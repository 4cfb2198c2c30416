"""
时间格式工具
"""
from datetime import datetime, timezone


def utc_iso_now() -> str:
    """当前UTC时间，毫秒精度并以 Z 结尾，如 2026-01-02T03:04:05.678Z"""
    return datetime.now(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')
