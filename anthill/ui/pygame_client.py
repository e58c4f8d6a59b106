"""Pygame front end for the Anthill game.

Draws the tunnel map, ants, enemies and particles from engine
snapshots, and turns keyboard and mouse input into engine actions.
The simulation advances at the configured tick rate while the display
refreshes at the Pygame frame rate.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

import pygame

if TYPE_CHECKING:
    from anthill.simulation.engine import SimulationEngine
    from anthill.simulation.snapshot import EntityView, Snapshot

# Colour palette
_BG = (44, 24, 16)
_DIRT = (139, 69, 19)
_PANEL_TEXT = (244, 228, 188)
_HP_BACK = (255, 0, 0)
_HP_FRONT = (0, 255, 0)
_PAUSE_VEIL = (0, 0, 0, 128)

_NUDGES: dict[int, tuple[int, int]] = {
    pygame.K_UP: (0, -1),
    pygame.K_w: (0, -1),
    pygame.K_DOWN: (0, 1),
    pygame.K_s: (0, 1),
    pygame.K_LEFT: (-1, 0),
    pygame.K_a: (-1, 0),
    pygame.K_RIGHT: (1, 0),
    pygame.K_d: (1, 0),
}


class PygameRenderer:
    """Renders a SimulationEngine into a Pygame window.

    Attributes:
        engine: The game engine to drive and display.
        screen: The Pygame display surface.
    """

    _CONTROLS: ClassVar[list[str]] = [
        "--- Controls ---",
        "WASD/arrows: move ant",
        "click: move / attack",
        "SPACE/F: gather food",
        "H: gather water",
        "T: dig tunnel",
        "N: spawn ant",
        "U: buy upgrades",
        "P: pause",
        "K: save  X: reset",
        "C: enter code",
        "ESC: quit",
    ]

    def __init__(self, engine: SimulationEngine) -> None:
        """Initialise the renderer.

        Args:
            engine: The game engine to render.
        """
        self.engine = engine
        self.ticks_per_second = float(engine.config.tick_rate)
        self._tick_accumulator = 0.0
        self._code_entry: str | None = None

        self._arena_w = int(engine.config.arena_width)
        self._arena_h = int(engine.config.arena_height)
        self._panel_width = 260

        pygame.init()
        self.screen = pygame.display.set_mode(
            (self._arena_w + self._panel_width, self._arena_h),
        )
        pygame.display.set_caption("Anthill")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True

    def run(self, fps: int = 60) -> None:
        """Main loop: handle events, step the game, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0
            self._handle_events()
            self._tick_accumulator += self.ticks_per_second * dt
            steps = int(self._tick_accumulator)
            self._tick_accumulator -= steps
            for _ in range(steps):
                self.engine.step()
            self._draw(self.engine.snapshot())

        pygame.quit()

    def _handle_events(self) -> None:
        """Translate Pygame input events into engine actions."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if self._code_entry is not None:
                    self._handle_code_key(event)
                else:
                    self._handle_key(event.key)
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                x, y = event.pos
                if x < self._arena_w:
                    self.engine.command_at(float(x), float(y))

    def _handle_key(self, key: int) -> None:
        engine = self.engine
        if key == pygame.K_ESCAPE:
            self.running = False
        elif key in _NUDGES:
            engine.nudge_ant_target(*_NUDGES[key])
        elif key in (pygame.K_SPACE, pygame.K_f):
            engine.gather_food()
        elif key == pygame.K_h:
            engine.gather_water()
        elif key == pygame.K_t:
            engine.dig()
        elif key == pygame.K_n:
            engine.spawn_ant()
        elif key == pygame.K_u:
            engine.purchase_upgrades()
        elif key == pygame.K_p:
            engine.toggle_pause()
        elif key == pygame.K_k:
            engine.save_game()
        elif key == pygame.K_x:
            engine.reset()
        elif key == pygame.K_c:
            self._code_entry = ""

    def _handle_code_key(self, event: pygame.event.Event) -> None:
        if event.key == pygame.K_ESCAPE:
            self._code_entry = None
        elif event.key == pygame.K_RETURN:
            self.engine.redeem_code(self._code_entry or "")
            self._code_entry = None
        elif event.key == pygame.K_BACKSPACE:
            self._code_entry = (self._code_entry or "")[:-1]
        elif event.unicode and event.unicode.isprintable():
            self._code_entry = (self._code_entry or "") + event.unicode

    def _draw(self, snap: Snapshot) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_map(snap)
        for ant in snap.ants:
            self._draw_entity(ant, glow=ant.rarity != "common" or ant.shiny)
        for enemy in snap.enemies:
            self._draw_entity(enemy, glow=enemy.boss == "large")
        for particle in snap.particles:
            pygame.draw.circle(
                self.screen,
                pygame.Color(particle.color),
                (int(particle.x), int(particle.y)),
                max(1, int(particle.radius)),
            )
        if snap.paused:
            self._draw_pause_veil()
        self._draw_info_panel(snap)
        pygame.display.flip()

    def _draw_map(self, snap: Snapshot) -> None:
        """Draw dirt cells; dug tunnels show the background through."""
        cs = snap.cell_size
        rows, cols = snap.grid.shape
        for y in range(rows):
            for x in range(cols):
                if snap.grid[y, x]:
                    pygame.draw.rect(
                        self.screen,
                        _DIRT,
                        (int(x * cs), int(y * cs), int(cs), int(cs)),
                    )

    def _draw_entity(self, view: EntityView, *, glow: bool) -> None:
        """Draw a body with an optional glow ring and an HP bar."""
        colour = pygame.Color(view.color)
        centre = (int(view.x), int(view.y))
        radius = int(view.radius)
        if glow:
            pygame.draw.circle(self.screen, colour, centre, radius + 3, width=1)
        pygame.draw.circle(self.screen, colour, centre, radius)

        bar_w = 30 if view.boss else 20
        bar_x = int(view.x - bar_w / 2)
        bar_y = int(view.y - radius - 8)
        pygame.draw.rect(self.screen, _HP_BACK, (bar_x, bar_y, bar_w, 3))
        pygame.draw.rect(
            self.screen,
            _HP_FRONT,
            (bar_x, bar_y, int(bar_w * view.health_ratio), 3),
        )

    def _draw_pause_veil(self) -> None:
        veil = pygame.Surface((self._arena_w, self._arena_h), pygame.SRCALPHA)
        veil.fill(_PAUSE_VEIL)
        self.screen.blit(veil, (0, 0))
        label = self.font.render("PAUSED", True, _PANEL_TEXT)
        rect = label.get_rect(center=(self._arena_w // 2, self._arena_h // 2))
        self.screen.blit(label, rect)

    def _draw_info_panel(self, snap: Snapshot) -> None:
        """Draw resources, counters, controls and messages on the right."""
        panel_x = self._arena_w + 10
        y = 10
        res = snap.resources

        lines = [
            f"Level: {snap.level}",
            f"Kills: {snap.enemies_killed}",
            f"Time: {int(snap.game_time)}s",
            f"{'PAUSED' if snap.paused else 'RUNNING'}",
            "",
            "--- Resources ---",
            f"Coins: {res['coins']}",
            f"Food:  {res['food']}",
            f"Water: {res['water']:.1f}",
            f"Ants:  {res['ants']}/{snap.max_ants}",
            f"Dirt:  {res['dirt']}",
            f"Tunnels: {snap.tunnels_dug}/{snap.max_tunnels}",
            "",
            *self._CONTROLS,
            "",
        ]
        if self._code_entry is not None:
            lines.append(f"Code: {self._code_entry}_")
        lines += list(snap.messages)

        for line in lines:
            surf = self.font.render(line, True, _PANEL_TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18
