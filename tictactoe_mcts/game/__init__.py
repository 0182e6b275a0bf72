"""
ゲームモジュール

探索エンジンが依存する抽象ゲーム状態と、その具象実装（三目並べ）を提供
"""

from .base import GameState
from .tictactoe import TicTacToe

__all__ = [
    "GameState",
    "TicTacToe",
]
