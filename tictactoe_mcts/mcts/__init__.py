"""
Monte Carlo Tree Search モジュール

UCT方式・ランダムプレイアウトによるMCTS実装を提供
"""

from .mcts import MCTS
from .node import Node

__all__ = [
    "MCTS",
    "Node",
]
