"""Pygame front end: window, drawing and the session loop.

This module owns everything pygame-specific. The simulation in
:mod:`wrist_pong.physics` only talks to a :class:`RenderSink`, and
:class:`PygameRenderSink` is the implementation that paints onto a pygame
surface. :class:`Game` wires the pose sampler and the physics tick onto a
:class:`CooperativeScheduler` and pumps pygame events in between.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import pygame

from wrist_pong.config import GameConfig
from wrist_pong.control_types import PoseSource
from wrist_pong.game_state import GameState
from wrist_pong.geometry import Field
from wrist_pong.physics import STRATEGIES, ComputerStrategy, PhysicsTick, TickEvent
from wrist_pong.pose_filter import PoseSampler
from wrist_pong.scheduler import CooperativeScheduler


logger = logging.getLogger(__name__)

# On/off lengths of the center divider, in pixels.
DASH_PATTERN = (5, 15)


class PygameRenderSink:
    """Draws game primitives onto a pygame surface."""

    def __init__(self, surface: pygame.Surface, config: GameConfig) -> None:
        self.surface = surface
        self.config = config
        # VT323 matches the arcade look when installed; SysFont falls back to the default font.
        self.font = pygame.font.SysFont("vt323", config.score_font_size)

    def clear(self) -> None:
        self.surface.fill(self.config.background_color)

    def draw_center_line(self) -> None:
        width, height = self.surface.get_size()
        x = width // 2
        dash, gap = DASH_PATTERN
        y = 0
        while y < height:
            pygame.draw.line(self.surface, self.config.scores_color, (x, y), (x, min(height, y + dash)))
            y += dash + gap

    def draw_scores(self, computer: int, player: int) -> None:
        width = self.surface.get_width()
        for value, center_x in ((computer, width // 4), (player, width // 4 * 3)):
            text = self.font.render(str(value), True, self.config.scores_color)
            self.surface.blit(text, text.get_rect(midbottom=(center_x, self.config.score_top_px)))

    def draw_ball(self, center: Tuple[int, int], radius: int) -> None:
        pygame.draw.circle(self.surface, self.config.ball_color, center, radius)

    def draw_paddle(self, left: float, top: float, width: float, height: float) -> None:
        pygame.draw.rect(self.surface, self.config.paddle_color, pygame.Rect(int(left), int(top), int(width), int(height)))


class Game:
    """One play session: creates the state, schedules both tasks, runs until quit."""

    def __init__(
        self,
        pose_source: PoseSource,
        config: Optional[GameConfig] = None,
        strategy: Optional[ComputerStrategy] = None,
    ) -> None:
        self.config = (config or GameConfig()).validate()
        pygame.init()
        pygame.display.set_caption("Wrist Pong")
        self.screen = pygame.display.set_mode((self.config.field_width, self.config.field_height))
        self.field = Field(*self.screen.get_size())

        self.state = GameState.new_session(self.config.initial_direction)
        self.pose_source = pose_source
        self.sampler = PoseSampler.from_config(self.state, pose_source, self.config)
        self.physics = PhysicsTick(
            self.state,
            self.field,
            self.config,
            PygameRenderSink(self.screen, self.config),
            strategy=strategy or STRATEGIES["track"],
        )
        self.scheduler = CooperativeScheduler(clock=pygame.time.get_ticks)
        self.scheduler.add("pose-sampler", self.config.pose_interval_ms, self.sampler.sample)
        self.scheduler.add("physics-tick", self.config.tick_interval_ms, self._physics_tick)
        self.running = False

    def _physics_tick(self) -> TickEvent:
        event = self.physics.tick()
        pygame.display.flip()
        return event

    def _handle_events(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                self.running = False

    def run(self) -> None:
        """Interleave event handling with the scheduled tasks until the player quits."""

        self.running = True
        logger.info("Session started (%dx%d)", self.field.width, self.field.height)
        try:
            while self.running:
                self._handle_events()
                self.scheduler.run_pending()
                wait_ms = self.scheduler.time_until_next()
                if wait_ms:
                    pygame.time.wait(wait_ms)
        finally:
            logger.info(
                "Session ended, final score computer %d - player %d",
                self.state.points_computer,
                self.state.points_player,
            )
            pygame.quit()
