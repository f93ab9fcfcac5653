"""
設定関連のパッケージ
"""
from .metric_mapping import METRIC_MAPPING, METRIC_PRIORITY, get_metric
from .settings import Settings, get_settings

__all__ = [
    'METRIC_MAPPING',
    'METRIC_PRIORITY',
    'Settings',
    'get_metric',
    'get_settings'
]
