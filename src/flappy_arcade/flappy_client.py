#!/usr/bin/env python3
"""
flappy_client.py

Pygame front-end. Forwards input into the GameLoop / GameSession and draws
GameSession.snapshot() every frame; it holds no game state of its own.
"""

import argparse
from typing import Optional

import pygame

from .config import GameConfig, load_config
from .data_models import Difficulty, Phase
from .errors import FlappyError
from .game_loop import GameLoop
from .log import get_logger, setup_logging
from .session import GameSession, SessionSnapshot

logger = get_logger("client")

# RENDER_FPS matches the tick rate; the loop catches up if frames run long
RENDER_FPS = 60

SKY = (0, 191, 255)
WHITE = (255, 255, 255)
GREY = (200, 200, 200)
PIPE_GREEN = (0, 150, 0)
ENTITY_YELLOW = (255, 220, 0)
PANEL = (0, 0, 0, 200)
DIFFICULTY_COLORS = {
    Difficulty.EASY: (0, 200, 0),
    Difficulty.MEDIUM: (255, 255, 0),
    Difficulty.HARD: (255, 165, 0),
    Difficulty.EXTREME: (255, 40, 40),
}
FOOTERS = {
    Phase.IDLE: "Enter = Start | Esc = Quit",
    Phase.COUNTDOWN: "Esc = Quit",
    Phase.RUNNING: "Space / Click = Flap | Esc = Quit",
    Phase.GAME_OVER: "Enter = Submit | Esc = Close",
}


class FlappyClient:
    def __init__(self, config: GameConfig):
        pygame.init()
        self.config = config
        self.screen = pygame.display.set_mode((int(config.screen_width), int(config.screen_height)))
        pygame.display.set_caption("Flappy Arcade")

        self.session = GameSession(config)
        self.loop = GameLoop(self.session)

        # Leaderboard panel input
        self.name_text = ""
        self.message: Optional[str] = None

        self.clock = pygame.time.Clock()
        self.large_font = pygame.font.Font(None, 48)
        self.huge_font = pygame.font.Font(None, 140)
        self.font = pygame.font.Font(None, 26)

    def run(self):
        """The main client execution loop."""
        pygame.key.start_text_input()
        running = True
        while running:
            dt = self.clock.tick(RENDER_FPS) / 1000.0

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                else:
                    running = self._handle_event(event)
                if not running:
                    break

            self.loop.advance(dt)
            self._draw(self.session.snapshot())

        self.session.store.close()
        pygame.quit()

    # -------- Input --------

    def _handle_event(self, event) -> bool:
        """Routes one pygame event to the core. Returns False to quit."""
        phase = self.session.phase

        if phase is Phase.GAME_OVER:
            return self._handle_leaderboard_event(event)

        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return False

        start = (event.type == pygame.KEYDOWN and event.key in (pygame.K_RETURN, pygame.K_SPACE)) \
            or event.type == pygame.MOUSEBUTTONDOWN
        if phase is Phase.IDLE and start:
            self.loop.post_start()
        elif phase is Phase.RUNNING:
            if (event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE) \
                    or event.type == pygame.MOUSEBUTTONDOWN:
                self.loop.post_flap()
        return True

    def _handle_leaderboard_event(self, event) -> bool:
        submitted = self.session.snapshot().submitted
        if event.type == pygame.TEXTINPUT and not submitted:
            self.name_text += event.text
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_BACKSPACE:
                self.name_text = self.name_text[:-1]
            elif event.key == pygame.K_RETURN and not submitted:
                self._submit()
            elif event.key == pygame.K_ESCAPE:
                self.session.dismiss_leaderboard()
                self.message = None
        return True

    def _submit(self):
        try:
            self.session.submit(self.name_text)
            self.message = None
        except FlappyError as e:
            self.message = str(e)
            logger.info("Submission rejected: %s", e)

    # -------- Drawing --------

    def _draw(self, snap: SessionSnapshot):
        screen = self.screen
        screen.fill(SKY)

        for pipe in snap.obstacles:
            pygame.draw.rect(screen, PIPE_GREEN, (pipe["x"], 0, pipe["w"], pipe["top_height"]))
            bottom_height = self.config.screen_height - pipe["bottom_y"]
            pygame.draw.rect(screen, PIPE_GREEN, (pipe["x"], pipe["bottom_y"], pipe["w"], bottom_height))

        if snap.entity is not None:
            e = snap.entity
            pygame.draw.ellipse(screen, ENTITY_YELLOW,
                                (e["x"] - e["w"] / 2, e["y"] - e["h"] / 2, e["w"], e["h"]))

        if snap.phase is Phase.IDLE:
            self._center_text("Press Enter to start", self.large_font, WHITE, self.config.screen_height / 2)
        elif snap.phase is Phase.COUNTDOWN:
            self._center_text(str(snap.countdown), self.huge_font, WHITE, self.config.screen_height / 2)
        elif snap.phase is Phase.RUNNING:
            self._draw_hud(snap)
        else:
            self._draw_hud(snap)
            self._draw_leaderboard(snap)

        instr = self.font.render(FOOTERS[snap.phase], True, GREY)
        screen.blit(instr, (10, self.config.screen_height - 30))
        pygame.display.flip()

    def _draw_hud(self, snap: SessionSnapshot):
        score_color = (255, 80, 80) if snap.at_minimum_gap else WHITE
        score_text = self.large_font.render(f"Score: {snap.score}", True, score_color)
        self.screen.blit(score_text, (self.config.screen_width // 2 - score_text.get_width() // 2, 20))

        diff = self.font.render(f"Gap: {snap.difficulty.value}", True, DIFFICULTY_COLORS[snap.difficulty])
        self.screen.blit(diff, (self.config.screen_width - diff.get_width() - 10, 70))

    def _draw_leaderboard(self, snap: SessionSnapshot):
        panel_w, panel_h = 300, 420
        left = (self.config.screen_width - panel_w) // 2
        top = (self.config.screen_height - panel_h) // 2
        panel = pygame.Surface((panel_w, panel_h), pygame.SRCALPHA)
        panel.fill(PANEL)
        self.screen.blit(panel, (left, top))

        self._center_text("Game Over!", self.large_font, (255, 50, 50), top - 40)
        lines = ["LEADERBOARD", f"Your Score: {snap.final_score}"]
        if snap.submitted:
            lines.append("Saved! Esc to close")
        else:
            lines.append(f"Name: {self.name_text}_")
        if self.message:
            lines.append(self.message)

        y = top + 15
        for line in lines:
            surf = self.font.render(line, True, WHITE)
            self.screen.blit(surf, (left + 20, y))
            y += 30

        for i, entry in enumerate(snap.leaderboard):
            color = (0, 255, 0) if i == snap.highlight_row else WHITE
            txt = self.font.render(f"{i + 1}. {entry.name}: {entry.score}", True, color)
            self.screen.blit(txt, (left + 20, y + 10 + i * 26))

    def _center_text(self, text: str, font, color, y: float):
        surf = font.render(text, True, color)
        self.screen.blit(surf, (self.config.screen_width // 2 - surf.get_width() // 2, y - surf.get_height() // 2))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Flappy Arcade")
    parser.add_argument("--config", help="YAML file overriding the default game settings")
    parser.add_argument("--log-level", default="info")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    client = FlappyClient(load_config(args.config))
    client.run()


if __name__ == "__main__":
    main()
