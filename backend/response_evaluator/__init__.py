"""
生成テキストの評価サービス
"""
__version__ = "0.1.0"
