"""
スコア計算を管理するサービス
"""
import math
from typing import Any

class ScoreCalculator:
    def __init__(self):
        self.MAX_SCORE = 1.0
        self.MIN_SCORE = 0.0

    def normalize_score(self, raw_score: Any) -> float:
        """
        判定モデルのスコアを0-1の範囲に正規化する

        0-10 や 0-100 のスケールで返されたスコアも受け付ける
        """
        if isinstance(raw_score, bool):
            raise ValueError(f"スコアが数値ではありません: {raw_score!r}")
        try:
            score = float(raw_score)
        except (TypeError, ValueError):
            raise ValueError(f"スコアが数値ではありません: {raw_score!r}")

        if math.isnan(score) or score < self.MIN_SCORE or score > 100:
            raise ValueError(f"スコアが範囲外です: {raw_score!r}")

        if score > 10:
            score = score / 100
        elif score > self.MAX_SCORE:
            score = score / 10

        return round(score, 4)

    def is_success(self, score: float, threshold: float) -> bool:
        """
        スコアが合格ラインに達しているか判定する
        """
        if not self.MIN_SCORE <= threshold <= self.MAX_SCORE:
            raise ValueError(f"thresholdは0から1の範囲である必要があります: {threshold}")
        return score >= threshold
