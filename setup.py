"""tictactoe-mcts のパッケージ定義

使用方法:
    pip install -e .[test]
"""

from setuptools import find_packages, setup

setup(
    name="tictactoe-mcts",
    version="0.1.0",
    description="UCT Monte Carlo Tree Search engine with a tic-tac-toe front end",
    packages=find_packages(include=["tictactoe_mcts", "tictactoe_mcts.*"]),
    py_modules=["main", "benchmark"],
    python_requires=">=3.8",
    install_requires=[
        "numpy",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        "console_scripts": [
            "tictactoe-mcts=main:main",
        ],
    },
)
