import argparse
import logging
import time

import imageio.v2 as imageio
import numpy as np
import pygame

from .config import COLORS, ConfigError, Settings
from .engine import Universe
from .presets import DEFAULT_SEED, Mulberry32, explore, random_rules, random_setup

FPS = 60
OUTPUT_FILE = "simulation.mp4"
ATOM_SIZE = 1
BACKGROUND = "black"


def build_settings(args):
    if args.settings:
        settings = Settings.load(args.settings)
    elif args.random_setup:
        settings = random_setup(args.seed, args.width, args.height, args.symmetric)
    else:
        rules, radii = random_rules(args.colors, args.seed, args.symmetric)
        settings = Settings(
            width=args.width,
            height=args.height,
            num_colors=args.colors,
            atoms_per_color=args.atoms,
            rules=rules,
            radii=radii,
            seed=args.seed,
        )
    if args.walls:
        settings.toroid = False
        settings.walls = args.walls
    if args.simple_forces:
        settings.real_forces = False
    return settings


def screenshot_name(seed):
    return f"particle_life_{seed}.png"


def new_rules(universe, rng, symmetric=False):
    """
    Swap in fresh random rules drawn from where ``rng`` left off.
    Returns the seed that reproduces them.
    """
    seed = rng.state
    rules, radii = random_rules(
        universe.settings.num_colors,
        symmetric=symmetric,
        rng=rng,
    )
    universe.set_rules(rules)
    universe.set_radii(radii)
    return seed


def draw_atoms(screen, view, atom_size=ATOM_SIZE):
    records = view.records
    colors = view.colors
    for (x, y, _vx, _vy, _c), color in zip(records, colors):
        pygame.draw.circle(screen, COLORS[color % len(COLORS)], (x, y), atom_size)


def run(
    universe,
    fps=FPS,
    frame_limit=None,
    record=None,
    seed=DEFAULT_SEED,
    symmetric=False,
    explore_every=0,
    atom_size=ATOM_SIZE,
    background=BACKGROUND,
):
    """
    Drive ``universe`` once per frame until the window closes.
    With ``explore_every`` set, one rule or radius is mutated every that many seconds.

    Keys: r new rules, s toggle symmetric rules, o reset, p save a screenshot.
    """
    pygame.init()
    screen = pygame.display.set_mode((universe.width(), universe.height()))
    pygame.display.set_caption(f"Life #{seed}")
    clock = pygame.time.Clock()

    # continue the stream past the draws that made the starting rules
    rng = Mulberry32(seed)
    random_rules(universe.settings.num_colors, rng=rng)

    frames = [] if record else None
    time_tick, time_draw = 0, 0
    count = 0
    last_explore = time.time()
    running = True

    while running:
        count += 1
        if frame_limit and count > frame_limit:
            running = False

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_r:
                    seed = new_rules(universe, rng, symmetric)
                    pygame.display.set_caption(f"Life #{seed}")
                elif event.key == pygame.K_s:
                    symmetric = not symmetric
                elif event.key == pygame.K_o:
                    universe.reset()
                elif event.key == pygame.K_p:
                    pygame.image.save(screen, screenshot_name(seed))

        start_time = time.time()
        universe.tick()
        time_tick += time.time() - start_time

        start_time = time.time()
        screen.fill(background)
        draw_atoms(screen, universe.particle_view(), atom_size)
        pygame.display.flip()
        time_draw += time.time() - start_time

        if frames is not None:
            frame_data = pygame.surfarray.array3d(screen)
            frames.append(np.transpose(frame_data, (1, 0, 2)))

        if explore_every and time.time() - last_explore >= explore_every:
            s = universe.settings
            rules, radii = explore(s.rules, s.radii, s.num_colors, rng)
            universe.set_rules(rules)
            universe.set_radii(radii)
            last_explore = time.time()

        clock.tick(fps)

    if frames:
        imageio.mimsave(record, frames, fps=fps)

    pygame.quit()
    print(f"Frames: {count - 1}, atoms: {universe.particle_count()}")
    print(f"Time taken for ticks: {time_tick} seconds")
    print(f"Time taken for drawing: {time_draw} seconds")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Particle life")
    parser.add_argument("--settings", help="JSON settings file")
    parser.add_argument("--width", type=int, default=1280)
    parser.add_argument("--height", type=int, default=720)
    parser.add_argument("--colors", type=int, default=4)
    parser.add_argument("--atoms", type=int, default=200, help="atoms per color")
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED)
    parser.add_argument("--random-setup", action="store_true")
    parser.add_argument("--symmetric", action="store_true")
    parser.add_argument(
        "--walls", choices=("bounce", "clamp"), help="disable wrap-around"
    )
    parser.add_argument("--simple-forces", action="store_true")
    parser.add_argument(
        "--explore", type=float, default=0, help="seconds between rule mutations"
    )
    parser.add_argument("--atom-size", type=float, default=ATOM_SIZE)
    parser.add_argument("--background", default=BACKGROUND)
    parser.add_argument("--fps", type=int, default=FPS)
    parser.add_argument(
        "--frames", type=int, default=0, help="stop after this many frames"
    )
    parser.add_argument("--record", nargs="?", const=OUTPUT_FILE, help="save an mp4")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    try:
        universe = Universe(build_settings(args))
    except ConfigError as exc:
        parser.error(str(exc))

    run(
        universe,
        args.fps,
        args.frames,
        args.record,
        args.seed,
        args.symmetric,
        args.explore,
        args.atom_size,
        args.background,
    )


if __name__ == "__main__":
    main()
