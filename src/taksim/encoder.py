import numpy as np
import torch

from taksim.core import PieceKind


PLANE_NAMES = (
    "own stones",
    "own standing",
    "own capstones",
    "opponent stones",
    "opponent standing",
    "opponent capstones",
    "height",
    "reserve",
    "size",
)
PLANES = len(PLANE_NAMES)
MAX_HEIGHT = 8


def encode_board(board, player, pad=8):
    """Encode ``board`` from ``player``'s side as ``(PLANES, pad, pad)``
    float32 planes.

    0-2 own stone/standing/capstone tops, 3-5 the opponent's, 6 stack height,
    7 own reserve, 8 board size.
    """
    n = board.size
    if n > pad:
        raise ValueError(f"Board size {n} does not fit padding {pad}")
    x = np.zeros((PLANES, pad, pad), dtype=np.float32)

    for (row, col), stack in board.items():
        if stack.is_empty():
            continue
        top = stack.top
        base = 0 if top.color == player else 3
        x[base + int(top.kind), row, col] = 1.0
        x[6, row, col] = min(len(stack), MAX_HEIGHT) / MAX_HEIGHT

    stash = board.stashes[player]
    x[7, :n, :n] = (stash.stones + stash.caps) / 60.0
    x[8, :n, :n] = n / 8.0
    return x


def encode_board_tensor(board, player, pad=8, device="cpu"):
    return torch.from_numpy(encode_board(board, player, pad=pad)).to(device)


def encode_batch(boards, player, pad=8, device="cpu"):
    planes = np.stack([encode_board(b, player, pad=pad) for b in boards])
    return torch.from_numpy(planes).to(device)


def road_cells(board, player):
    """Boolean ``(size, size)`` mask of squares whose top counts toward a
    road for ``player``."""
    mask = np.zeros((board.size, board.size), dtype=bool)
    for (row, col), stack in board.items():
        mask[row, col] = stack.is_road() and stack.color() == player
    return mask


def kind_counts(board):
    """Per-colour counts of visible tops, shape ``(2, 3)``."""
    counts = np.zeros((2, len(PieceKind)), dtype=np.int64)
    for _, stack in board.items():
        if not stack.is_empty():
            counts[int(stack.top.color), int(stack.top.kind)] += 1
    return counts
