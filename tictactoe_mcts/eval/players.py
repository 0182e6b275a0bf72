"""
プレイヤークラス

評価・対戦用の様々なプレイヤーを実装:
- RandomPlayer: ランダムに着手
- MCTSPlayer: UCT方式のMCTSで着手
- HumanPlayer: 標準入力から "<row>-<column>" 形式で着手
"""

import numpy as np
from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Union

from ..errors import MalformedInputError, NoLegalMovesError
from ..game.base import GameState
from ..mcts.mcts import MCTS


Seed = Union[int, np.random.SeedSequence, None]


def spawn_seeds(seed: Optional[int], count: int) -> List[np.random.SeedSequence]:
    """
    1つのシードから互いに独立した乱数列用のシードを作る

    同じシードを複数のプレイヤーに渡すと乱数列が一致してしまうため、
    対戦させるプレイヤーにはこれで分けたシードを渡す。

    Args:
        seed: 元のシード値（Noneならエントロピーから生成）
        count: 必要なシードの数

    Returns:
        List[np.random.SeedSequence]: default_rng に渡せるシード列
    """
    return np.random.SeedSequence(seed).spawn(count)


def parse_move(text: str, size: int = 3) -> int:
    """
    "<row>-<column>" 形式（1始まり）の入力を着手位置に変換

    Args:
        text: 入力文字列 (例: "2-3")
        size: 盤面の一辺のマス数

    Returns:
        int: 着手位置 (row - 1) * size + (column - 1)

    Raises:
        MalformedInputError: 形式不正・範囲外の場合
    """
    parts = text.strip().split("-")
    if len(parts) != 2:
        raise MalformedInputError(f"Expected <row>-<column>, got {text!r}")

    try:
        row, column = (int(part) for part in parts)
    except ValueError:
        raise MalformedInputError(f"Row and column must be integers: {text!r}") from None

    if not (1 <= row <= size and 1 <= column <= size):
        raise MalformedInputError(
            f"Row and column must be between 1 and {size}: {text!r}"
        )

    return (row - 1) * size + (column - 1)


class Player(ABC):
    """
    プレイヤーの基底クラス
    """

    def __init__(self, name: str):
        """
        Args:
            name: プレイヤー名
        """
        self.name = name

    @abstractmethod
    def get_action(self, state: GameState) -> int:
        """
        着手を選択

        Args:
            state: 現在の盤面

        Returns:
            int: 着手位置
        """
        pass

    def reset(self):
        """ゲーム開始時の初期化（必要に応じてオーバーライド）"""
        pass


class RandomPlayer(Player):
    """
    ランダムプレイヤー

    合法手の中から一様ランダムに選択
    """

    def __init__(self, name: str = "Random", seed: Seed = None):
        super().__init__(name)
        self.rng = np.random.default_rng(seed)

    def get_action(self, state: GameState) -> int:
        """ランダムに着手を選択"""
        legal_moves = state.get_legal_moves()

        if len(legal_moves) == 0:
            raise NoLegalMovesError("No legal moves available")

        return legal_moves[self.rng.integers(len(legal_moves))]


class MCTSPlayer(Player):
    """
    MCTSベースのAIプレイヤー

    着手ごとに新しい探索木を作る（木の再利用はしない）。
    報酬は先手視点で固定されているため、先手番で使うことを想定している。
    """

    def __init__(
        self,
        iterations: int = 10000,
        name: Optional[str] = None,
        seed: Seed = None,
    ):
        """
        Args:
            iterations: 1手あたりの探索回数
            name: プレイヤー名
            seed: プレイアウト用乱数のシード値
        """
        if name is None:
            name = f"MCTS-{iterations}it"
        super().__init__(name)

        self.iterations = iterations
        self.rng = np.random.default_rng(seed)
        self.last_search: Optional[MCTS] = None

    def get_action(self, state: GameState) -> int:
        """MCTSで最良の手を選択"""
        mcts = MCTS(state, rng=self.rng)
        action = mcts.get_best_move(self.iterations)
        self.last_search = mcts
        return action

    def reset(self):
        self.last_search = None


class HumanPlayer(Player):
    """
    人間プレイヤー（CLI用）

    標準入力から "<row>-<column>" 形式の着手を受け付ける
    """

    def __init__(
        self,
        name: str = "Human",
        input_func: Callable[[str], str] = input,
        output_func: Callable[[str], None] = print,
        size: int = 3,
    ):
        super().__init__(name)
        self.input_func = input_func
        self.output_func = output_func
        self.size = size

    def get_action(self, state: GameState) -> int:
        """正しい合法手が入力されるまで受け付ける"""
        legal_moves = state.get_legal_moves()

        while True:
            text = self.input_func("Enter your action (<row>-<column>): ")
            try:
                action = parse_move(text, size=self.size)
            except MalformedInputError as e:
                self.output_func(f"Invalid input: {e}")
                continue

            if action in legal_moves:
                return action
            self.output_func(f"Cell {text.strip()} is not available")
