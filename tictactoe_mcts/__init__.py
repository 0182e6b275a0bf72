"""
tictactoe-mcts

UCTベースのモンテカルロ木探索エンジンと三目並べの実装
"""

from .game import GameState, TicTacToe
from .mcts import MCTS, Node

__all__ = [
    "GameState",
    "TicTacToe",
    "MCTS",
    "Node",
]
