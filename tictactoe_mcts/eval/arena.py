"""
対戦管理システム (Arena)

2つのプレイヤーを対戦させ、結果を記録する
"""

from collections import Counter
from dataclasses import dataclass
from typing import Callable, List
import time

from ..game.base import GameState
from ..game.tictactoe import TicTacToe
from .players import Player


@dataclass
class MatchResult:
    """
    対戦結果

    Attributes:
        player1_name: プレイヤー1の名前
        player2_name: プレイヤー2の名前
        winner: 勝者 (1: player1, -1: player2, 0: 引き分け)
        num_moves: 総手数
        duration: 対戦時間（秒）
    """
    player1_name: str
    player2_name: str
    winner: int
    num_moves: int
    duration: float

    def __str__(self) -> str:
        """結果の文字列表現"""
        if self.winner == 1:
            result = f"{self.player1_name} wins"
        elif self.winner == -1:
            result = f"{self.player2_name} wins"
        else:
            result = "Draw"

        return (
            f"{result} | "
            f"Moves: {self.num_moves} | "
            f"Time: {self.duration:.2f}s"
        )


class Arena:
    """
    対戦管理システム

    任意のGameStateに対して2つのプレイヤーを対戦させる
    """

    def __init__(
        self,
        game_factory: Callable[[], GameState] = TicTacToe,
        verbose: bool = True,
    ):
        """
        Args:
            game_factory: 初期局面を生成する関数
            verbose: 詳細な出力を行うか
        """
        self.game_factory = game_factory
        self.verbose = verbose

    def play_game(
        self,
        player1: Player,
        player2: Player,
        starting_player: int = 1,
    ) -> MatchResult:
        """
        1ゲームを実行

        Args:
            player1: プレイヤー1
            player2: プレイヤー2
            starting_player: 先手 (1: player1, -1: player2)

        Returns:
            MatchResult: 対戦結果
        """
        state = self.game_factory()

        player1.reset()
        player2.reset()

        # 先手・後手の割り当て
        if starting_player == 1:
            current_player, next_player = player1, player2
        else:
            current_player, next_player = player2, player1

        num_moves = 0
        start_time = time.time()

        # ゲームループ
        while not state.is_terminal():
            action = current_player.get_action(state)

            if self.verbose:
                print(f"{current_player.name} plays: {action} (legal: {state.get_legal_moves()})")

            state.make_move(action)
            num_moves += 1

            # 手番交代
            current_player, next_player = next_player, current_player

        duration = time.time() - start_time

        # 盤面の勝者（1: 先手, -1: 後手）をプレイヤー視点に変換
        winner = state.get_winner() * starting_player

        result = MatchResult(
            player1_name=player1.name,
            player2_name=player2.name,
            winner=winner,
            num_moves=num_moves,
            duration=duration,
        )

        if self.verbose:
            print(f"\n{result}\n")

        return result

    def play_matches(
        self,
        player1: Player,
        player2: Player,
        num_games: int = 10,
        alternate_colors: bool = True,
    ) -> List[MatchResult]:
        """
        複数ゲームを実行

        Args:
            player1: プレイヤー1
            player2: プレイヤー2
            num_games: ゲーム数
            alternate_colors: 先後を交代するか

        Returns:
            List[MatchResult]: 対戦結果のリスト
        """
        results = []
        for game_idx in range(num_games):
            # 交代ありなら2局目ごとにplayer2が先手
            starting_player = -1 if alternate_colors and game_idx % 2 == 1 else 1
            if self.verbose:
                print(f"--- Game {game_idx + 1}/{num_games} (first: "
                      f"{player1.name if starting_player == 1 else player2.name}) ---")
            results.append(self.play_game(player1, player2, starting_player))

        if self.verbose:
            self._print_summary(results, player1.name, player2.name)

        return results

    def _print_summary(
        self,
        results: List[MatchResult],
        player1_name: str,
        player2_name: str,
    ):
        """対戦結果のサマリーを表示（player1視点の勝率・引き分け率・負け率）"""
        summary = summarize_results(results)

        print("=" * 70)
        print(f"{player1_name} vs {player2_name}: {len(results)} games")
        print(f"  Win:  {summary['win_rate'] * 100:5.1f}%")
        print(f"  Draw: {summary['draw_rate'] * 100:5.1f}%")
        print(f"  Loss: {summary['loss_rate'] * 100:5.1f}%")
        print(f"  Avg Moves: {summary['avg_moves']:.1f}")
        print("=" * 70 + "\n")


def summarize_results(results: List[MatchResult]) -> dict:
    """
    対戦結果をplayer1視点で集計

    Returns:
        dict: win_rate / draw_rate / loss_rate / avg_moves（対戦なしなら全て0）
    """
    total = len(results)
    if total == 0:
        return {"win_rate": 0.0, "draw_rate": 0.0, "loss_rate": 0.0, "avg_moves": 0.0}

    outcomes = Counter(r.winner for r in results)
    return {
        "win_rate": outcomes[1] / total,
        "draw_rate": outcomes[0] / total,
        "loss_rate": outcomes[-1] / total,
        "avg_moves": sum(r.num_moves for r in results) / total,
    }


def evaluate_player(
    player: Player,
    opponent: Player,
    num_games: int = 10,
    alternate_colors: bool = False,
    game_factory: Callable[[], GameState] = TicTacToe,
    verbose: bool = True,
) -> dict:
    """
    プレイヤーを評価

    Args:
        player: 評価対象のプレイヤー
        opponent: 対戦相手
        num_games: ゲーム数
        alternate_colors: 先後を交代するか（Falseならplayerが常に先手）
        game_factory: 初期局面を生成する関数
        verbose: 詳細な出力

    Returns:
        dict: 評価結果
            - win_rate / draw_rate / loss_rate
            - avg_moves: 平均手数
            - results: 対戦結果リスト
    """
    arena = Arena(game_factory=game_factory, verbose=verbose)
    results = arena.play_matches(
        player, opponent,
        num_games=num_games,
        alternate_colors=alternate_colors,
    )

    summary = summarize_results(results)
    summary["results"] = results
    return summary
