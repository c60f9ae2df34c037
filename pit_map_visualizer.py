"""
Pit Map Visualizer - pygame rendering of pit assignments
========================================================
plan_pits.py의 --render 옵션으로 사용됩니다.
Draws every pit colored by its assigned scout, completed pits outlined,
and each scout's walking route as a polyline. Renders to an off-screen
surface so it works without a display.
"""

import pygame
from typing import Dict, Iterable, Mapping, Optional, Sequence, Tuple

from pitplan.assignment import assignments_by_scouter
from pitplan.constants import (
    SCOUTER_COLORS,
    UNASSIGNED_PIT_COLOR,
    COMPLETED_OUTLINE_COLOR,
)
from pitplan.extractor import as_number, normalize_pit_coordinates, pit_team_number
from pitplan.records import Assignment, TeamPosition


def scouter_color_map(scouter_names: Sequence[str]) -> Dict[str, Tuple[tuple, tuple]]:
    """(fill, border) per scout, palette wrapping by roster index."""
    return {
        name: SCOUTER_COLORS[i % len(SCOUTER_COLORS)]
        for i, name in enumerate(scouter_names)
    }


def _pit_size(pit: Mapping) -> Optional[Tuple[float, float]]:
    size = pit.get("size")
    if isinstance(size, Mapping):
        w, h = as_number(size.get("x")), as_number(size.get("y"))
    else:
        w, h = as_number(pit.get("width")), as_number(pit.get("height"))
    if w is None or h is None or w <= 0 or h <= 0:
        return None
    return w, h


class PitMapVisualizer:
    """Renders pit assignments onto a pygame surface."""

    def __init__(self, width: int = 1200, height: int = 900, margin: int = 60):
        pygame.font.init()
        self.width = width
        self.height = height
        self.margin = margin
        self.surface = pygame.Surface((width, height))

        # 폰트
        self.font_medium = pygame.font.SysFont("consolas", 16, bold=True)
        self.font_small = pygame.font.SysFont("consolas", 12)

        # 뷰포트 (pit map 좌표 → 화면 좌표)
        self.min_x = 0.0
        self.min_y = 0.0
        self.scale = 1.0

        # 색상
        self.COLOR_BG = (15, 15, 25)
        self.COLOR_TEXT = (220, 220, 240)
        self.COLOR_PIT_EMPTY = (45, 45, 60)

    def fit_view(self, points: Iterable[Tuple[float, float]]) -> None:
        """Scale and offset so every point fits inside the margins."""
        points = list(points)
        if not points:
            return
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        self.min_x, self.min_y = min(xs), min(ys)
        span_x = max(max(xs) - self.min_x, 1.0)
        span_y = max(max(ys) - self.min_y, 1.0)
        self.scale = min(
            (self.width - self.margin * 2) / span_x,
            (self.height - self.margin * 2) / span_y,
        )

    def world_to_screen(self, x: float, y: float) -> Tuple[int, int]:
        """Pit map coordinates → screen (pit maps already use y-down)."""
        sx = self.margin + (x - self.min_x) * self.scale
        sy = self.margin + (y - self.min_y) * self.scale
        return (int(round(sx)), int(round(sy)))

    def render(
        self,
        assignments: Sequence[Assignment],
        scouter_names: Sequence[str],
        pit_map_data: Optional[Mapping] = None,
        team_positions: Optional[Sequence[TeamPosition]] = None,
        title: str = "",
    ) -> pygame.Surface:
        """
        Draw one frame.

        Args:
            assignments: records to show; list order is the route order
            scouter_names: roster, decides colors
            pit_map_data: provider pit map; every pit is drawn if given
            team_positions: positions of assigned teams
            title: caption for the info panel
        """
        colors = scouter_color_map(scouter_names)
        by_team = {a.team_number: a for a in assignments}
        positions: Dict[int, Tuple[float, float]] = {
            p.team_number: (p.x, p.y) for p in (team_positions or [])
        }

        # 모든 pit 수집
        pits = []  # (xy, size, team)
        raw_pits = (pit_map_data or {}).get("pits")
        if not isinstance(raw_pits, Mapping):
            raw_pits = {}
        for pit in raw_pits.values():
            xy = normalize_pit_coordinates(pit)
            if xy is None:
                continue
            team = pit_team_number(pit)
            pits.append((xy, _pit_size(pit), team))
            if team is not None and team not in positions:
                positions[team] = xy

        self.fit_view([xy for xy, _, _ in pits] + list(positions.values()))
        self.surface.fill(self.COLOR_BG)

        # Routes under the pits
        grouped = assignments_by_scouter(assignments, scouter_names)
        for name, route in grouped.items():
            points = [self.world_to_screen(*positions[a.team_number])
                      for a in route if a.team_number in positions]
            if len(points) >= 2:
                color = colors.get(name, (UNASSIGNED_PIT_COLOR, UNASSIGNED_PIT_COLOR))[1]
                pygame.draw.lines(self.surface, color, False, points, 2)

        # Pits from the map
        drawn = set()
        for xy, size, team in pits:
            self._draw_pit(xy, size, by_team.get(team) if team is not None else None,
                           team, colors)
            if team is not None:
                drawn.add(team)

        # Assigned teams placed only through team_positions
        for team, a in by_team.items():
            if team not in drawn and team in positions:
                self._draw_pit(positions[team], None, a, team, colors)

        self._draw_info_panel(assignments, scouter_names, colors, title)
        return self.surface

    def _draw_pit(self, xy, size, assignment: Optional[Assignment], team, colors):
        """Pit marker: rectangle when the size is known, circle otherwise."""
        if assignment is not None and assignment.scouter_name in colors:
            fill, border = colors[assignment.scouter_name]
        elif team is not None:
            fill, border = UNASSIGNED_PIT_COLOR, UNASSIGNED_PIT_COLOR
        else:
            fill, border = self.COLOR_PIT_EMPTY, self.COLOR_PIT_EMPTY

        cx, cy = self.world_to_screen(*xy)
        if size is not None:
            w = max(int(size[0] * self.scale), 6)
            h = max(int(size[1] * self.scale), 6)
            rect = pygame.Rect(cx - w // 2, cy - h // 2, w, h)
            pygame.draw.rect(self.surface, fill, rect)
            pygame.draw.rect(self.surface, border, rect, 2)
            if assignment is not None and assignment.completed:
                pygame.draw.rect(self.surface, COMPLETED_OUTLINE_COLOR, rect.inflate(4, 4), 2)
        else:
            pygame.draw.circle(self.surface, fill, (cx, cy), 8)
            pygame.draw.circle(self.surface, border, (cx, cy), 8, 2)
            if assignment is not None and assignment.completed:
                pygame.draw.circle(self.surface, COMPLETED_OUTLINE_COLOR, (cx, cy), 11, 2)

        if team is not None:
            label = self.font_small.render(str(team), True, self.COLOR_TEXT)
            self.surface.blit(label, (cx - label.get_width() // 2, cy + 10))

    def _draw_info_panel(self, assignments, scouter_names, colors, title):
        """범례 패널"""
        panel_w = 260
        panel_h = 40 + 20 * len(scouter_names)
        panel_x = 10
        panel_y = 10

        # 반투명 배경
        surf = pygame.Surface((panel_w, panel_h), pygame.SRCALPHA)
        surf.fill((25, 25, 40, 200))
        pygame.draw.rect(surf, (60, 90, 60), (0, 0, panel_w, panel_h), 2)
        self.surface.blit(surf, (panel_x, panel_y))

        y = panel_y + 8
        caption = self.font_medium.render(title or "Pit Assignments", True, (100, 255, 150))
        self.surface.blit(caption, (panel_x + 12, y))
        y += 26

        for name in scouter_names:
            mine = [a for a in assignments if a.scouter_name == name]
            done = sum(1 for a in mine if a.completed)
            pygame.draw.rect(self.surface, colors[name][0], (panel_x + 12, y + 3, 10, 10))
            text = self.font_small.render(f"{name}: {done}/{len(mine)}", True, self.COLOR_TEXT)
            self.surface.blit(text, (panel_x + 30, y))
            y += 20

    def save(self, path: str) -> None:
        pygame.image.save(self.surface, path)

    def quit(self):
        """pygame 종료"""
        pygame.font.quit()
