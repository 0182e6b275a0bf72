"""
モンテカルロ木探索 (Monte Carlo Tree Search)

UCT方式のMCTS実装:
1. Select: UCT値が最大の子ノードを辿り、未展開のノードに到達したらそのノードを選択
2. Expand: 未試行の手を1つ選び、子ノードを作成
3. Simulate: 新しいノードからランダムプレイアウトを行い、報酬を得る
4. Backpropagate: 報酬をルートノードまで伝播し、勝利回数と訪問回数を更新

ノードはフラットなリスト（アリーナ）に追加していき、インデックスで参照する。
1回の着手決定ごとに新しいMCTSインスタンスを作る（木の再利用はしない）。
"""

import numpy as np
from typing import Dict, List, Optional

from ..errors import InvalidGameStateError, NoLegalMovesError
from ..game.base import GameState
from .node import Node


# 勝者 -> 報酬（先手視点で固定。手番による符号反転はしない）
REWARDS = {
    1: 1.0,
    0: 0.5,
    -1: 0.0,
}


class MCTS:
    """
    モンテカルロ木探索

    Attributes:
        nodes (List[Node]): ノードのアリーナ（追加のみ）
        root (int): ルートノードのインデックス（常に0）
        rng (np.random.Generator): プレイアウト用の乱数生成器
    """

    def __init__(
        self,
        state: GameState,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        """
        Args:
            state (GameState): 探索開始局面（コピーして保持する）
            rng (np.random.Generator, optional): プレイアウトに使う乱数生成器
            seed (int, optional): rng未指定時のシード値
        """
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.root = 0
        self.nodes: List[Node] = [Node(state.clone())]

    def __len__(self) -> int:
        """アリーナ内のノード数"""
        return len(self.nodes)

    def select(self, node_index: int) -> int:
        """
        引数のノードからUCT値に従って降りていき、到達したノードを返す

        未試行の手が残っているノード、または子を持たないノードで停止する。

        Args:
            node_index (int): 探索開始ノード

        Returns:
            int: 選択されたノードのインデックス
        """
        current = node_index
        while True:
            node = self.nodes[current]
            # 未展開のノードなのでそのノードを返す
            if not node.is_fully_expanded():
                return current

            # 子を持たない終局ノード
            if node.is_leaf():
                return current
            current = self._best_uct_child(current)

    def expand(self, node_index: int) -> int:
        """
        未試行の手を1つ展開して子ノードを作成する

        未試行の手がない場合はUCT値最大の子を返し、子もなければ
        引数のノードをそのまま返す（展開不能の合図）。

        Args:
            node_index (int): 展開するノード

        Returns:
            int: 新しい子ノード（またはフォールバック先）のインデックス
        """
        node = self.nodes[node_index]

        if node.is_fully_expanded():
            if node.is_leaf():
                return node_index
            return self._best_uct_child(node_index)

        # 合法手リストの末尾から順に展開する
        action = node.untried_actions.pop()
        state = node.state.clone()
        state.make_move(action)

        child_index = len(self.nodes)
        self.nodes.append(Node(state, parent=node_index, last_action=action))
        node.children.append(child_index)

        return child_index

    def simulate(self, node_index: int, rng: Optional[np.random.Generator] = None) -> float:
        """
        ランダムプレイアウトを行い、報酬を返す

        Args:
            node_index (int): プレイアウト開始ノード
            rng (np.random.Generator, optional): 乱数生成器（省略時はself.rng）

        Returns:
            float: 先手勝ち 1.0, 引き分け 0.5, 後手勝ち 0.0
        """
        rng = rng if rng is not None else self.rng
        state = self.nodes[node_index].state.clone()

        while not state.is_terminal():
            legal_moves = state.get_legal_moves()
            if len(legal_moves) == 0:
                raise InvalidGameStateError(
                    "Non-terminal position has no legal moves"
                )
            state.make_move(legal_moves[rng.integers(len(legal_moves))])

        winner = state.get_winner()
        try:
            return REWARDS[winner]
        except (KeyError, TypeError):
            raise InvalidGameStateError(f"Unexpected winner: {winner!r}") from None

    def backpropagate(self, node_index: int, reward: float):
        """
        報酬をルートノードまで伝播する

        Args:
            node_index (int): 報酬を得たノード
            reward (float): simulate の結果（全ノードで同じ値を加算）
        """
        current: Optional[int] = node_index
        while current is not None:
            node = self.nodes[current]
            node.update(reward)
            current = node.parent

    def get_best_move(self, iterations: int) -> int:
        """
        指定された回数の探索を行い、最も訪問された子ノードの手を返す

        Args:
            iterations (int): 探索回数の上限

        Returns:
            int: 最良の手

        Raises:
            NoLegalMovesError: ルートに子ノードが1つもない場合
        """
        for _ in range(iterations):
            selected = self.select(self.root)
            expanded = self.expand(selected)
            if expanded == selected:
                # これ以上展開できるノードがない
                break
            reward = self.simulate(expanded)
            self.backpropagate(expanded, reward)

        best_child = None
        best_visits = -1.0
        for child_index in self.nodes[self.root].children:
            child = self.nodes[child_index]
            if child.visits > best_visits:
                best_visits = child.visits
                best_child = child

        if best_child is None:
            raise NoLegalMovesError("Failed to get best move: root has no children")

        return best_child.last_action

    def get_visit_counts(self) -> Dict[int, float]:
        """
        ルートの子ノードの訪問回数を取得

        Returns:
            Dict[int, float]: {action: visits}
        """
        return {
            self.nodes[child].last_action: self.nodes[child].visits
            for child in self.nodes[self.root].children
        }

    def _best_uct_child(self, node_index: int) -> Optional[int]:
        """UCT値が最大の子ノードのインデックス（子がなければNone）"""
        node = self.nodes[node_index]

        best_score = -float('inf')
        best_child = None
        for child_index in node.children:
            score = self.nodes[child_index].uct_value(node.visits)
            if score > best_score:
                best_score = score
                best_child = child_index

        return best_child
