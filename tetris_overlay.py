import pygame
from tetris_config import CONFIG
from tetris_engine import PerformanceReport
from tetris_scoring import PRESETS

class Overlay:
    """Report screen plus a couple of live settings (F1)."""
    def __init__(self):
        self.active=False
        self.items=[
            ("CELL_SIZE","Cell size",16,40,2),
            ("SCORING_PRESET","Scoring (on reset)",sorted(PRESETS),None,None),
        ]
        self.index=0

    def toggle(self): self.active=not self.active

    def handle(self,e):
        if e.key in (pygame.K_ESCAPE,pygame.K_F1): self.toggle(); return
        if e.key==pygame.K_UP: self.index=(self.index-1)%len(self.items); return
        if e.key==pygame.K_DOWN: self.index=(self.index+1)%len(self.items); return
        key,label,lo,hi,step=self.items[self.index]
        val=CONFIG[key]
        if isinstance(lo,list):
            d={pygame.K_LEFT:-1,pygame.K_RIGHT:1,pygame.K_RETURN:1}.get(e.key)
            if d: CONFIG[key]=lo[(lo.index(val)+d)%len(lo)]
        else:
            if e.key==pygame.K_LEFT: CONFIG[key]=max(lo,val-step)
            if e.key==pygame.K_RIGHT: CONFIG[key]=min(hi,val+step)

    def draw(self,screen,font,w,h,report: PerformanceReport):
        if not self.active: return
        s=pygame.Surface((w-80,h-80),pygame.SRCALPHA); s.fill((20,25,40,230))
        screen.blit(s,(40,40))
        lines=[
            "Performance report",
            f"Average per play: {report.average_per_play:.1f}",
            f"Reserve usage: {report.reserve_usage_pct:.1f}%",
            f"Levels gained: {report.levels_gained}",
            f"Points to next level: {report.points_to_next_level}",
            f"Score with best combo: {report.combo_potential}",
            "",
        ]+[f"- {r}" for r in report.recommendations]
        y=60
        for txt in lines:
            screen.blit(font.render(txt,True,(200,210,235)),(60,y)); y+=24
        y+=16
        for i,(key,label,lo,hi,step) in enumerate(self.items):
            col=(255,255,255) if i==self.index else (200,210,235)
            screen.blit(font.render(f"{label}: {CONFIG[key]}",True,col),(60,y)); y+=30
