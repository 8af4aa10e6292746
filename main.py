import pygame, sys
from loguru import logger
from tetris_config import CONFIG
from tetris_layout import compute_dims
from tetris_overlay import Overlay
from tetris_render import RenderAssets
from tetris_scoring import rules_from_config
from tetris_session import Session


def recreate_window(dims, flags=pygame.DOUBLEBUF):
    try:
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags, vsync=1)
    except TypeError:
        return pygame.display.set_mode((dims.total_w, dims.total_h), flags)


def describe(report):
    if report is None:
        return None
    msg = f"{report.piece} +{report.score_gained}"
    if report.combo:
        msg += f"  combo x{report.combo_multiplier:.1f}"
    if report.leveled_up:
        msg += f"  LEVEL {report.level}!"
    for ach in report.unlocked:
        msg += f"  {ach.name.title()} unlocked"
    return msg


def main():
    logger.remove()
    logger.add(sys.stderr, level=CONFIG["LOG_LEVEL"])

    pygame.init()
    pygame.event.set_allowed([pygame.QUIT, pygame.KEYDOWN])

    dims = compute_dims()
    screen = recreate_window(dims)
    pygame.display.set_caption("Tetris Reserve")
    font = pygame.font.SysFont(None, 22)

    render = RenderAssets(dims, font)
    clock = pygame.time.Clock()
    overlay = Overlay()

    session = Session()
    status = ""
    tip = session.tip()

    def refresh_assets_if_cell_changed():
        nonlocal dims, screen, render
        new_dims = compute_dims()
        if new_dims.cell != dims.cell:
            dims = new_dims
            screen = recreate_window(dims)
            render = RenderAssets(dims, font)

    while True:
        clock.tick(30)

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                pygame.quit(); sys.exit()
            if e.type != pygame.KEYDOWN:
                continue
            if e.key == pygame.K_F1:
                overlay.toggle(); continue
            if overlay.active:
                overlay.handle(e); continue
            acted = True
            if e.key == pygame.K_q:
                status = describe(session.play_from_queue()) or "Queue is empty: generate pieces first"
            elif e.key == pygame.K_w:
                status = describe(session.play_from_stack()) or "Reserve is empty"
            elif e.key == pygame.K_t:
                moved = session.transfer()
                status = f"{moved} moved to reserve" if moved else "Cannot transfer (queue empty or reserve full)"
            elif e.key == pygame.K_g:
                n = session.refill()
                status = f"{n} new pieces queued" if n else "Queue already full"
            elif e.key == pygame.K_o:
                status = "Engine optimized" if session.optimize() else "Engine already optimal"
            elif e.key == pygame.K_r:
                session.reset(rules_from_config())
                status = f"Reset ({session.rules.name} scoring)"
            elif e.key == pygame.K_ESCAPE:
                snap = session.snapshot()
                logger.info("final score {} at level {}, best combo {}", snap.total_score, snap.level, snap.best_combo)
                pygame.quit(); sys.exit()
            else:
                acted = False
            if acted:
                tip = session.tip()

        refresh_assets_if_cell_changed()

        render.redraw_static(screen)
        render.draw_containers(screen, session.queue.peek_all(), session.stack.peek_all())
        render.draw_panel_hud(screen, session.snapshot(), status, tip)
        overlay.draw(screen, font, dims.total_w, dims.total_h, session.report())
        pygame.display.flip()


if __name__ == '__main__':
    main()
