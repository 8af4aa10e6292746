# tetris_layout.py
from dataclasses import dataclass
from tetris_config import CONFIG
from tetris_containers import QUEUE_CAPACITY, STACK_CAPACITY

@dataclass
class Dims:
    cell: int
    margin: int
    slot: int
    panel_w: int
    queue_x: int
    queue_y: int
    stack_x: int
    stack_y: int
    panel_x: int
    panel_y: int
    total_w: int
    total_h: int

def compute_dims() -> Dims:
    cell = int(CONFIG["CELL_SIZE"])
    margin = 16
    slot = cell * 4 + 12          # one 4x4 preview plus frame padding
    panel_w = 300
    label_h = 28

    queue_x = margin
    queue_y = margin + label_h
    queue_w = QUEUE_CAPACITY * (slot + 8) - 8

    stack_x = margin
    stack_y = queue_y + slot + margin + label_h
    stack_h = STACK_CAPACITY * (slot + 8) - 8

    panel_x = queue_x + queue_w + margin
    panel_y = margin

    total_w = panel_x + panel_w + margin
    total_h = max(stack_y + stack_h + margin, 560)

    return Dims(
        cell=cell, margin=margin, slot=slot, panel_w=panel_w,
        queue_x=queue_x, queue_y=queue_y,
        stack_x=stack_x, stack_y=stack_y,
        panel_x=panel_x, panel_y=panel_y,
        total_w=total_w, total_h=total_h,
    )
