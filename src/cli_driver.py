# cli_driver.py
# This file is intended to be run to play the 2048 game on the CLI

import argparse
from typing import List, Optional

import game_engine
from best_score import FileBestScoreStore
from game_engine import DIRECTION
from game_state import GameState, GameStatus
from settings import configure_logging, load_settings
from tiles import RandomTileSource


KEY_BINDINGS = {
    'W': DIRECTION.UP, 'UP': DIRECTION.UP,
    'A': DIRECTION.LEFT, 'LEFT': DIRECTION.LEFT,
    'S': DIRECTION.DOWN, 'DOWN': DIRECTION.DOWN,
    'D': DIRECTION.RIGHT, 'RIGHT': DIRECTION.RIGHT,
}

PROMPT = "Enter move (W/A/S/D for Up/Left/Down/Right, N new game, C continue, Q quit): "

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    settings = load_settings()
    parser = argparse.ArgumentParser(description="Play 2048 in the terminal.")
    parser.add_argument("--seed", type=int, default=settings.seed,
                        help="Seed for tile placement, for reproducible games.")
    parser.add_argument("--best-score-file", default=settings.best_score_file,
                        help="File the best score is kept in.")
    parser.add_argument("--log-level", default=settings.log_level,
                        help="Logging level (DEBUG shows every move).")
    return parser.parse_args(argv)

def play(argv: Optional[List[str]] = None, input_fn=input, state: Optional[GameState] = None) -> GameState:
    """
    Runs one interactive session and returns the final game state.
    A state passed in is played as it stands instead of starting a new game.
    """
    args = parse_args(argv)
    configure_logging(args.log_level.upper())

    # 1. Initialize game
    if state is None:
        state = GameState(
            tile_source=RandomTileSource(args.seed),
            best_score_store=FileBestScoreStore(args.best_score_file),
        )
        state.reset()
    display_board_state(state)

    # 2. Game Loop
    while True:
        try:
            move_input = input_fn(PROMPT).strip().upper()
        except EOFError:
            move_input = 'Q'

        if move_input == 'Q':
            print("Quitting game.")
            break

        if move_input == 'N':
            state.reset()
            display_board_state(state)
            continue

        if move_input == 'C':
            if not state.continue_game():
                print("You can only continue after reaching 2048.")
            display_board_state(state)
            continue

        if state.get_game_status() == GameStatus.LOST:
            print("No more moves possible. Press N for a new game or Q to quit.")
            continue

        if state.get_game_status() == GameStatus.WON:
            print("You reached 2048! Press C to keep playing, N for a new game or Q to quit.")
            continue

        chosen_direction = KEY_BINDINGS.get(move_input)
        if chosen_direction is None:
            print("Invalid input. Use W, A, S, D.")
            continue

        # 3. Process the move
        if not game_engine.move(state, chosen_direction):
            print("Move did not change the board. Try a different direction.")
            continue

        display_board_state(state)
        if state.get_game_status() == GameStatus.WON:
            print("Congratulations! You reached the 2048 tile!")
        elif state.get_game_status() == GameStatus.LOST:
            print("No more moves possible. Better luck next time!")

    # 4. Game Ended
    print("\n--- Final Board State ---")
    display_board_state(state)
    return state

def main(argv: Optional[List[str]] = None) -> None:
    play(argv)

# --- Display Function ---
def display_board_state(state: GameState):
    """Prints the board, score, best score, moves and game status to the console."""
    stats = state.get_stats()
    print(f"\nScore: {stats['score']}  Best: {stats['best_score']}  Moves: {stats['move_count']}")
    status_message = {
        GameStatus.PLAYING: f"Status: {stats['status'].name}",
        GameStatus.WON: "YOU WON!",
        GameStatus.LOST: "GAME OVER!"
    }
    print(status_message[stats['status']])

    for row in state.get_grid():
        print("\t".join(map(str, row)))
    print("-" * (len(state.get_grid()) * 6))

if __name__ == "__main__":
    main()
