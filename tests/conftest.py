import os
import sys

import pytest


# Ensure the repository's src/ is on sys.path for `tumblestone` imports
REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
SRC_PATH = os.path.abspath(os.path.join(REPO_ROOT, "src"))
if SRC_PATH not in sys.path:
    sys.path.insert(0, SRC_PATH)

from tumblestone.engine.board import Board  # noqa: E402


# a # a     two triplets; the survivor clears with the last "a"
# b b a
# . . b
SURVIVOR_TSB = """\
width = 3
---
a # a
b b a
. . b
"""


@pytest.fixture
def survivor_board() -> Board:
    return Board.from_tsb(SURVIVOR_TSB)
