"""
Rendering helpers for the queue/reserve viewer.

- Pre-render the static background (slot frames + panel) once per Dims.
- Pre-render one preview Surface per piece type and blit it into slots.
- Cache HUD text surfaces; re-render a line only when its text changes.
"""
from __future__ import annotations
import pygame
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple
from tetris_layout import Dims
from tetris_containers import QUEUE_CAPACITY, STACK_CAPACITY
from tetris_engine import StatsSnapshot
from tetris_piece import Piece, SHAPES

# Colors per tetromino type
COLORS: Dict[str, Tuple[int,int,int]] = {
    "I": (102,224,255),
    "J": (106,119,255),
    "L": (255,158,94),
    "O": (255,224,102),
    "S": (94,224,142),
    "T": (200,119,255),
    "Z": (255,102,119),
}

TEXT = (200,210,240)
DIM_TEXT = (165,175,215)
ACCENT = (255,224,102)

CONTROLS = [
    "Q  Play from queue",
    "W  Play from reserve",
    "T  Transfer to reserve",
    "G  Generate pieces",
    "O  Optimize",
    "F1 Report",
    "R  Reset   Esc Quit",
]

@dataclass
class HudCache:
    lines: Dict[str, str] = field(default_factory=dict)
    surfaces: Dict[str, pygame.Surface] = field(default_factory=dict)
    title: Optional[pygame.Surface] = None
    controls: Optional[list] = None

def stat_lines(snap: StatsSnapshot) -> List[Tuple[str, str]]:
    counts = "  ".join(f"{k}:{v}" for k, v in snap.kind_counts.items())
    ach = ", ".join(a.name.title() for a in sorted(snap.achievements, key=lambda a: a.level)) or "-"
    return [
        ("score", f"Score: {snap.total_score}   Best: {snap.personal_best}"),
        ("level", f"Level: {snap.level}   Next in: {snap.points_to_next_level}"),
        ("mult", f"Multiplier: x{snap.score_multiplier:.1f}   Difficulty: {snap.difficulty_factor:.1f}"),
        ("combo", f"Combo: {snap.current_combo}   Best combo: {snap.best_combo}"),
        ("streak", f"Streak: {snap.type_streak} ({snap.last_kind or '-'})   Combos: {snap.total_combos}"),
        ("plays", f"Plays: {snap.total_plays}  queue {snap.plays_from_queue}  reserve {snap.plays_from_stack}"),
        ("eff", f"Reserve use: {snap.reserve_efficiency:.1f}%"),
        ("counts", counts),
        ("most", f"Most played: {snap.most_played_kind or '-'}   Milestones: {snap.milestones_reached}"),
        ("ach", f"Achievements: {ach}"),
    ]

class RenderAssets:
    """Holds all pre-rendered assets for fast blitting."""
    def __init__(self, dims: Dims, font: pygame.font.Font):
        self.dims = dims
        self.font = font
        self._make_static()
        self._make_previews()
        self.hud = HudCache()

    # ---------- Static background (slot frames + panel) ----------
    def _make_static(self):
        d = self.dims
        self.bg = pygame.Surface((d.total_w, d.total_h))
        self.bg.fill((10,13,34))
        self.queue_slots = [pygame.Rect(d.queue_x + i*(d.slot+8), d.queue_y, d.slot, d.slot) for i in range(QUEUE_CAPACITY)]
        self.stack_slots = [pygame.Rect(d.stack_x, d.stack_y + i*(d.slot+8), d.slot, d.slot) for i in range(STACK_CAPACITY)]
        for r in self.queue_slots + self.stack_slots:
            pygame.draw.rect(self.bg, (15,18,40), r)
            pygame.draw.rect(self.bg, (55,65,110), r, 1)
        panel_rect = pygame.Rect(d.panel_x, d.panel_y, d.panel_w, d.total_h - 2*d.margin)
        pygame.draw.rect(self.bg, (21,25,53), panel_rect)
        pygame.draw.rect(self.bg, (50,60,100), panel_rect, 1)
        self.bg.blit(self.font.render("Queue (front → back)", True, TEXT), (d.queue_x, d.queue_y - 22))
        self.bg.blit(self.font.render("Reserve (top ↓)", True, TEXT), (d.stack_x, d.stack_y - 22))

    # ---------- One 4x4 preview per type ----------
    def _make_previews(self):
        c = self.dims.cell
        self.preview: Dict[str, pygame.Surface] = {}
        for t, shape in SHAPES.items():
            s = pygame.Surface((c*4, c*4), pygame.SRCALPHA)
            offx = (4 - len(shape[0])) // 2
            offy = max(0, (4 - len(shape)) // 2)
            for y, row in enumerate(shape):
                for x, v in enumerate(row):
                    if v:
                        block = pygame.Surface((c-2, c-2))
                        block.fill(COLORS[t])
                        s.blit(block, ((x+offx)*c + 1, (y+offy)*c + 1))
            self.preview[t] = s

    def redraw_static(self, screen: pygame.Surface):
        screen.blit(self.bg, (0,0))

    def _text(self, key: str, txt: str, col=TEXT) -> pygame.Surface:
        if self.hud.lines.get(key) != txt:
            self.hud.lines[key] = txt
            self.hud.surfaces[key] = self.font.render(txt, True, col)
        return self.hud.surfaces[key]

    # ---------- Containers ----------
    def _draw_slots(self, screen: pygame.Surface, slots: Sequence[pygame.Rect], pieces: Sequence[Piece]):
        for rect, p in zip(slots, pieces):
            screen.blit(self.preview[p.kind], (rect.x + 6, rect.y + 6))
            screen.blit(self.font.render(f"#{p.id}", True, DIM_TEXT), (rect.x + 4, rect.bottom - 18))

    def draw_containers(self, screen: pygame.Surface, queue: Sequence[Piece], stack: Sequence[Piece]):
        self._draw_slots(screen, self.queue_slots, queue)
        self._draw_slots(screen, self.stack_slots, stack)

    # ---------- HUD / Panel ----------
    def draw_panel_hud(self, screen: pygame.Surface, snap: StatsSnapshot, status: str, tip: str):
        d = self.dims
        f = self.font
        x = d.panel_x + 12
        if self.hud.title is None:
            self.hud.title = f.render("Tetris Reserve", True, (197,202,233))
        screen.blit(self.hud.title, (x, d.panel_y + 12))
        y = d.panel_y + 44
        for key, txt in stat_lines(snap):
            screen.blit(self._text(key, txt), (x, y)); y += 22
        # level progress bar
        bar = pygame.Rect(x, y + 4, d.panel_w - 24, 10)
        pygame.draw.rect(screen, (40,50,90), bar)
        pygame.draw.rect(screen, ACCENT, (bar.x, bar.y, int(bar.w * snap.level_progress), bar.h))
        y += 26
        if status:
            screen.blit(self._text("status", status, ACCENT), (x, y))
        y += 22
        screen.blit(self._text("tip", tip, DIM_TEXT), (x, y))
        if not self.hud.controls:
            self.hud.controls = [f.render("Controls:", True, TEXT)] + [f.render(c, True, DIM_TEXT) for c in CONTROLS]
        y = d.total_h - d.margin - 12 - 20*len(self.hud.controls)
        for surf in self.hud.controls:
            screen.blit(surf, (x, y)); y += 20
