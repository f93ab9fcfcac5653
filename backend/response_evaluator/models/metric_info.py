"""
評価メトリクスの情報を定義するモデル
"""
from dataclasses import dataclass
from typing import Optional

@dataclass
class MetricInfo:
    """評価メトリクスの情報を保持するクラス"""
    id: str
    display_name: str
    description: str  # 判定モデルに渡す評価基準
    priority: int
    requires_expected: bool = True
    threshold: Optional[float] = None  # 未指定の場合は EVALUATION_THRESHOLD
    expected_label: str = "Expected output"  # プロンプト上での expected の見出し

    def __post_init__(self):
        if self.threshold is not None and not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"thresholdは0から1の範囲である必要があります: {self.threshold}")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "description": self.description,
            "priority": self.priority,
            "requires_expected": self.requires_expected,
            "threshold": self.threshold,
            "expected_label": self.expected_label
        }
