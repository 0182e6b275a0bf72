"""探索エンジンのベンチマーク

ランダムプレイアウトの速度（games/sec）と、
MCTSの探索速度（iterations/sec）を計測する。

使用方法:
    python benchmark.py
"""

import time
from typing import Tuple

import numpy as np

from tictactoe_mcts.game.tictactoe import TicTacToe
from tictactoe_mcts.mcts.mcts import MCTS


def play_random_game(rng: np.random.Generator) -> Tuple[int, int]:
    """ランダムプレイヤー同士で1局対戦

    Returns:
        (勝者, 手数): 勝者は1=先手勝ち, -1=後手勝ち, 0=引き分け
    """
    game = TicTacToe()

    while not game.is_terminal():
        legal_moves = game.get_legal_moves()
        game.make_move(legal_moves[rng.integers(len(legal_moves))])

    return game.get_winner(), game.move_count


def benchmark_games(num_games: int = 10000, seed: int = 0) -> None:
    """ランダム対局のベンチマーク

    Args:
        num_games: 対局数
        seed: シード値
    """
    rng = np.random.default_rng(seed)

    print("=== 三目並べ ランダム対局 ベンチマーク ===")
    print(f"対局数: {num_games:,}")

    wins = {1: 0, -1: 0, 0: 0}
    total_moves = 0

    start_time = time.perf_counter()
    for _ in range(num_games):
        winner, moves = play_random_game(rng)
        wins[winner] += 1
        total_moves += moves
    elapsed_time = time.perf_counter() - start_time

    print()
    print("=== 結果 ===")
    print(f"経過時間:     {elapsed_time:.2f} 秒")
    print(f"対局速度:     {num_games / elapsed_time:,.0f} games/sec")
    print(f"平均手数:     {total_moves / num_games:.1f}")
    print(f"先手勝ち:     {wins[1]:,} ({wins[1] / num_games * 100:.1f}%)")
    print(f"後手勝ち:     {wins[-1]:,} ({wins[-1] / num_games * 100:.1f}%)")
    print(f"引き分け:     {wins[0]:,} ({wins[0] / num_games * 100:.1f}%)")


def benchmark_search(iterations: int = 10000, seed: int = 0) -> None:
    """初期局面からのMCTS探索ベンチマーク

    Args:
        iterations: 探索回数
        seed: シード値
    """
    print()
    print("=== MCTS 探索ベンチマーク ===")
    print(f"探索回数: {iterations:,}")

    mcts = MCTS(TicTacToe(), seed=seed)

    start_time = time.perf_counter()
    best_move = mcts.get_best_move(iterations)
    elapsed_time = time.perf_counter() - start_time

    print()
    print("=== 結果 ===")
    print(f"最善手:       {best_move}")
    print(f"ノード数:     {len(mcts):,}")
    print(f"経過時間:     {elapsed_time:.2f} 秒")
    print(f"探索速度:     {mcts.nodes[mcts.root].visits / elapsed_time:,.0f} iterations/sec")


if __name__ == "__main__":
    benchmark_games()
    benchmark_search()
