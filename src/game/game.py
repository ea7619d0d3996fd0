# src/game/game.py
import sys, argparse, logging
import pygame
from pygame import K_ESCAPE
from .config import GameConfig, SEED_DEFAULT
from .clock import FixedStepScheduler
from .loop import GameLoop
from .render import FrameBuffer, PygameRenderer
from .world import World

logger = logging.getLogger(__name__)

DISPLAY_FPS = 60


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Box Runner: W jump, S fast-fall, any key restarts after a crash.")
    p.add_argument("--seed", type=int, default=SEED_DEFAULT,
                   help="Obstacle RNG seed. Omit for a random layout each launch.")
    p.add_argument("--debug", action="store_true", help="Verbose logging (obstacle spawns, tick thread).")
    return p.parse_args(argv)


def setup_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S"
    )


def run(argv=None):
    args = parse_args(argv)
    setup_logging(args.debug)

    config = GameConfig()
    pygame.init()
    pygame.display.set_caption("Box Runner")
    screen = pygame.display.set_mode((config.width, config.height))
    display_clock = pygame.time.Clock()
    renderer = PygameRenderer(screen)

    # Ticks run on their own thread at a fixed rate and only publish snapshots;
    # all pygame drawing stays on this (main) thread.
    frames = FrameBuffer()
    world = World(config, seed=args.seed)
    loop = GameLoop(world, FixedStepScheduler(config.fps), sink=frames)
    logger.info("Starting run (seed=%s)", world.level.seed)
    loop.start()

    try:
        while True:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    return
                if event.type == pygame.KEYDOWN:
                    if event.key == K_ESCAPE:
                        return
                    loop.key_down(pygame.key.name(event.key))
                if event.type == pygame.KEYUP:
                    loop.key_up(pygame.key.name(event.key))

            snap = frames.latest
            if snap is None:
                snap = world.snapshot()
            renderer.draw(snap)
            pygame.display.flip()
            display_clock.tick(DISPLAY_FPS)
    finally:
        loop.stop()
        pygame.quit()


if __name__ == "__main__":
    run()
    sys.exit(0)
