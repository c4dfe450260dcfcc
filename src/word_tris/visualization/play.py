from __future__ import annotations

import argparse
import asyncio
import logging
from typing import Dict, List, Optional, Tuple

import pygame

from word_tris.dictionary_link import open_definition
from word_tris.game import CellsRemoved, GameConfig, GameSnapshot, GameStatus, Piece, WordsFormed, WordTrisGame
from word_tris.lexicon import JsonAssetLoader, Lexicon

# fonts that carry Hangul on common desktops; pygame picks the first installed
HANGUL_FONTS = "malgungothic,applegothic,applesdgothicneo,nanumgothic,notosanscjkkr,notosanskr,unifont"

BACKGROUND = (15, 15, 20)
EMPTY_CELL = (40, 40, 48)
TEXT = (230, 230, 230)
FLASH_FRAMES = 20


def _hex_color(tag: str) -> Tuple[int, int, int]:
    tag = tag.lstrip("#")
    if len(tag) != 6:
        return (200, 200, 200)
    return int(tag[0:2], 16), int(tag[2:4], 16), int(tag[4:6], 16)


def draw_board(screen: pygame.Surface, game: WordTrisGame, font: pygame.font.Font, cell_size: int, margin: int,
               flashes: Dict[Tuple[int, int], int]) -> None:
    board = game.state.board
    screen.fill(BACKGROUND)
    for y in range(board.height):
        for x in range(board.width):
            rect = pygame.Rect(margin + x * cell_size, margin + y * cell_size, cell_size - 1, cell_size - 1)
            letter = board.letter_at(x, y)
            if letter is None:
                color = (250, 220, 90) if (x, y) in flashes else EMPTY_CELL
                pygame.draw.rect(screen, color, rect)
                continue
            pygame.draw.rect(screen, _hex_color(board.tags[y, x]), rect)
            img = font.render(letter, True, TEXT)
            screen.blit(img, img.get_rect(center=rect.center))


def draw_piece(screen: pygame.Surface, piece: Piece, font: pygame.font.Font, x0: int, y0: int, cell_size: int) -> None:
    for col, row in piece.relative_cells():
        rect = pygame.Rect(x0 + col * cell_size, y0 + row * cell_size, cell_size - 1, cell_size - 1)
        pygame.draw.rect(screen, _hex_color(piece.tag), rect)
        img = font.render(piece.letter_at(col, row) or "", True, TEXT)
        screen.blit(img, img.get_rect(center=rect.center))


def draw_tray(screen: pygame.Surface, snap: GameSnapshot, font: pygame.font.Font, cell_size: int, margin: int,
              x0: int, selected_piece: int) -> None:
    small = cell_size * 2 // 3
    for idx, piece in enumerate(snap.tray):
        off_y = margin + idx * (small * 5)
        draw_piece(screen, piece, font, x0, off_y, small)
        if idx == selected_piece:
            outline = pygame.Rect(x0 - 2, off_y - 2, piece.width * small + 4, piece.height * small + 4)
            pygame.draw.rect(screen, (255, 255, 255), outline, 2)


def draw_ghost(screen: pygame.Surface, game: WordTrisGame, piece: Piece, grid_x: int, grid_y: int,
               cell_size: int, margin: int) -> None:
    is_valid = game.state.board.is_valid_placement(piece.cells_at(grid_x, grid_y))
    color = (120, 220, 140) if is_valid else (220, 120, 120)
    for x, y in piece.cells_at(grid_x, grid_y):
        if game.state.board.is_inside(x, y):
            rect = pygame.Rect(margin + x * cell_size, margin + y * cell_size, cell_size - 1, cell_size - 1)
            pygame.draw.rect(screen, color, rect, 2)


def draw_sidebar(screen: pygame.Surface, snap: GameSnapshot, font: pygame.font.Font, x0: int, y0: int) -> None:
    lines: List[str] = [
        f"Score: {snap.score}   Level: {snap.level}",
        f"Streak: {snap.clear_streak}" + ("   bomb armed" if snap.bomb_armed else ""),
        "Select: 1-5  Rotate: R  Pause: P",
        "Restart: N  Definition: D  Place: click",
        "Target words:",
    ]
    lines.extend(
        f"  {word} x{snap.usage_counts.get(word, 0)}" for word in snap.active_words[-8:]
    )
    if snap.formed_words:
        lines.append("Formed: " + ", ".join(snap.formed_words[-5:]))
    for i, txt in enumerate(lines):
        screen.blit(font.render(txt, True, TEXT), (x0, y0 + i * 22))


def run(dictionary_dir: Optional[str] = None, seed: Optional[int] = None) -> None:
    loader = JsonAssetLoader(dictionary_dir) if dictionary_dir else None
    game = WordTrisGame(GameConfig(random_seed=seed), lexicon=Lexicon(loader), definition_lookup=open_definition)
    loop = asyncio.new_event_loop()
    flashes: Dict[Tuple[int, int], int] = {}
    banner: List[str] = []

    def on_event(event) -> None:
        if isinstance(event, CellsRemoved):
            for cell in event.cells:
                flashes[cell.position] = FLASH_FRAMES
        elif isinstance(event, WordsFormed):
            banner[:] = [f"{', '.join(w.text for w in event.words)}  +{event.gained}"]

    game.subscribe(on_event)
    pygame.init()
    try:
        loop.run_until_complete(game.start())
        cell_size = 44
        margin = 20
        board_px_w = game.config.width * cell_size
        board_px_h = game.config.height * cell_size
        tray_w = 4 * cell_size
        side_panel_w = 9 * cell_size
        width = margin * 4 + board_px_w + tray_w + side_panel_w
        height = margin * 2 + board_px_h
        screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Word Tris (10x10)")
        font = pygame.font.SysFont(HANGUL_FONTS, 22)
        tray_x = margin * 2 + board_px_w
        side_x = tray_x + tray_w + margin

        selected_piece = 0
        key_to_index = {
            pygame.K_1: 0, pygame.K_2: 1, pygame.K_3: 2, pygame.K_4: 3, pygame.K_5: 4,
            pygame.K_KP1: 0, pygame.K_KP2: 1, pygame.K_KP3: 2, pygame.K_KP4: 3, pygame.K_KP5: 4,
        }

        running = True
        clock = pygame.time.Clock()
        while running:
            snap = game.snapshot()
            selected_piece = min(selected_piece, max(0, len(snap.tray) - 1))
            piece = snap.tray[selected_piece] if snap.tray else None
            mx, my = pygame.mouse.get_pos()
            grid_x = (mx - margin) // cell_size
            grid_y = (my - margin) // cell_size

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in key_to_index and key_to_index[event.key] < len(snap.tray):
                        selected_piece = key_to_index[event.key]
                    elif event.key == pygame.K_r and piece is not None:
                        game.rotate_piece(piece.id)
                    elif event.key == pygame.K_p:
                        if not game.pause():
                            game.resume()
                    elif event.key == pygame.K_n:
                        loop.run_until_complete(game.restart())
                        banner.clear()
                    elif event.key == pygame.K_d and snap.formed_words:
                        game.lookup_word(snap.formed_words[-1])
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1 and piece is not None:
                    if snap.status is GameStatus.PLAYING:
                        outcome = loop.run_until_complete(game.place_piece(piece.id, piece.cells_at(grid_x, grid_y)))
                        if outcome.ok:
                            selected_piece = 0

            draw_board(screen, game, font, cell_size, margin, flashes)
            if piece is not None and snap.status is GameStatus.PLAYING:
                draw_ghost(screen, game, piece, grid_x, grid_y, cell_size, margin)
            snap = game.snapshot()
            draw_tray(screen, snap, font, cell_size, margin, tray_x, selected_piece)
            draw_sidebar(screen, snap, font, side_x, margin)
            if banner:
                screen.blit(font.render(banner[0], True, (250, 220, 90)), (side_x, height - margin - 24))
            if snap.status is GameStatus.PAUSED:
                screen.blit(font.render("Paused - press P", True, (255, 200, 100)), (margin, 0))
            elif snap.game_over:
                screen.blit(font.render("Game Over - press N to restart", True, (255, 100, 100)), (margin, 0))

            for cell in list(flashes):
                flashes[cell] -= 1
                if flashes[cell] <= 0:
                    del flashes[cell]

            pygame.display.flip()
            clock.tick(60)
    finally:
        pygame.quit()
        loop.close()


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play Word Tris with mouse and keyboard")
    p.add_argument("--dict-dir", type=str, default=None, help="Directory holding the korean_words_*.json assets")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--verbose", action="store_true")
    return p


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    run(args.dict_dir, args.seed)


if __name__ == "__main__":  # pragma: no cover
    main()
