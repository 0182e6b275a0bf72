"""
評価システムモジュール

探索エンジンの強さを測定するための対戦・評価機能を提供
"""

from .players import (
    Player,
    RandomPlayer,
    MCTSPlayer,
    HumanPlayer,
    parse_move,
    spawn_seeds,
)
from .arena import Arena, MatchResult, evaluate_player, summarize_results

__all__ = [
    "Player",
    "RandomPlayer",
    "MCTSPlayer",
    "HumanPlayer",
    "parse_move",
    "spawn_seeds",
    "Arena",
    "MatchResult",
    "evaluate_player",
    "summarize_results",
]
