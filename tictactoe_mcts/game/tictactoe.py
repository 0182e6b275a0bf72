"""
三目並べ (Tic-Tac-Toe)

3x3盤面をnumpy配列で保持するGameState実装
- 盤面: 0=空, 1=X（先手）, -1=O（後手）
- 着手位置: 0-8 (row * 3 + col)
"""

import numpy as np
from typing import List, Optional, Sequence

from .base import GameState


BOARD_SIZE = 3
NUM_CELLS = BOARD_SIZE * BOARD_SIZE

# 勝ちライン（横・縦・斜めの順に判定する）
LINES = (
    # 横
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    # 縦
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    # 斜め
    (0, 4, 8),
    (2, 4, 6),
)

SYMBOLS = {1: "X", -1: "O", 0: "-"}


class TicTacToe(GameState):
    """
    三目並べの盤面

    合法手は空きマス全体。ラインが揃った後も空きマスは合法手として返す
    （終局判定は is_terminal / get_winner が担う）。
    """

    def __init__(self):
        self.board = np.zeros(NUM_CELLS, dtype=np.int8)
        self.current_player = 1  # 1=X, -1=O
        self.move_count = 0

    @classmethod
    def from_cells(cls, cells: Sequence[int], player: Optional[int] = None) -> "TicTacToe":
        """
        任意の盤面から状態を作成

        Args:
            cells: 長さ9の盤面 (1=X, -1=O, 0=空)
            player: 手番 (1 or -1)。省略時は石数から推定（同数ならX）

        Returns:
            TicTacToe: 新しい盤面
        """
        board = np.asarray(cells, dtype=np.int8)
        if board.shape != (NUM_CELLS,) or not np.isin(board, (-1, 0, 1)).all():
            raise ValueError(f"cells must be {NUM_CELLS} values in {{-1, 0, 1}}: {cells}")

        x_count = int(np.sum(board == 1))
        o_count = int(np.sum(board == -1))
        if player is None:
            player = 1 if x_count == o_count else -1
        if player not in (1, -1):
            raise ValueError(f"player must be 1 or -1: {player}")

        state = cls()
        state.board = board.copy()
        state.current_player = player
        state.move_count = x_count + o_count
        return state

    def reset(self):
        """初期状態に戻す"""
        self.board[:] = 0
        self.current_player = 1
        self.move_count = 0

    def get_legal_moves(self) -> List[int]:
        return [int(i) for i in np.flatnonzero(self.board == 0)]

    def make_move(self, action: int) -> None:
        if not 0 <= action < NUM_CELLS:
            raise ValueError(f"Invalid move: position {action} is out of range")
        if self.board[action] != 0:
            raise ValueError(f"Invalid move: position {action} is occupied")

        self.board[action] = self.current_player
        self.current_player = -self.current_player
        self.move_count += 1

    def is_terminal(self) -> bool:
        return self.get_winner() is not None

    def get_winner(self) -> Optional[int]:
        for line in LINES:
            owner = int(self.board[line[0]])
            if owner != 0 and all(self.board[i] == owner for i in line):
                return owner

        # 盤面が埋まっていればライン無しで引き分け
        if np.all(self.board != 0):
            return 0
        return None

    def clone(self) -> "TicTacToe":
        state = TicTacToe()
        state.board = self.board.copy()
        state.current_player = self.current_player
        state.move_count = self.move_count
        return state

    def render(self) -> str:
        """
        盤面を文字列化（行・列は1始まり）

        例:
              1 2 3
            1 X - -
            2 - O -
            3 - - -
        """
        lines = ["  " + " ".join(str(c + 1) for c in range(BOARD_SIZE))]
        for row in range(BOARD_SIZE):
            cells = self.board[row * BOARD_SIZE:(row + 1) * BOARD_SIZE]
            lines.append(f"{row + 1} " + " ".join(SYMBOLS[int(v)] for v in cells))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (f"TicTacToe(board={self.board.tolist()}, "
                f"player={self.current_player}, "
                f"moves={self.move_count})")
