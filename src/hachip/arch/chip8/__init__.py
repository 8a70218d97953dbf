"""
CHIP-8アーキテクチャの実装パッケージ。
"""
