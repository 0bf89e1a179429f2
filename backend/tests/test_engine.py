import pytest

from colorlock.services.puzzles import Difficulty, GameStatus, MoveEngine, PuzzleDefinition


def _almost_red():
    grid = [['red'] * 5 for _ in range(5)]
    grid[3][4] = 'blue'
    return grid


def test_initial_lock_is_largest_region(stripes):
    engine = MoveEngine(stripes, 'red', loss_threshold=18)
    assert engine.locked == {(0, 0)}
    assert engine.status is GameStatus.IN_PROGRESS
    assert engine.move_count == 0


def test_locked_and_same_color_moves_are_noops(stripes):
    engine = MoveEngine(stripes, 'red', loss_threshold=18)
    assert engine.move(0, 0, 'blue') is False
    assert engine.move(0, 2, 'blue') is False
    assert engine.move_count == 0
    assert engine.grid == stripes


def test_lock_only_grows(stripes):
    engine = MoveEngine(stripes, 'red', loss_threshold=18)
    assert engine.move(0, 1, 'red')
    assert engine.locked == {(0, 0), (0, 1)}
    # a new region of equal size does not take the lock
    assert engine.move(0, 4, 'orange')
    assert engine.locked == {(0, 0), (0, 1)}
    assert engine.move(1, 0, 'red')
    assert engine.locked == {(0, 0), (0, 1), (1, 0)}
    assert engine.move_count == 3


def test_unified_target_board_solves_and_clears_lock():
    engine = MoveEngine(_almost_red(), 'red', loss_threshold=18)
    assert engine.locked_color == 'red'
    assert engine.move(3, 4, 'red')
    assert engine.status is GameStatus.SOLVED
    assert engine.locked == set()
    assert engine.move(0, 0, 'blue') is False


def test_unified_other_color_loses():
    engine = MoveEngine(_almost_red(), 'blue', loss_threshold=30)
    assert engine.status is GameStatus.IN_PROGRESS
    engine.move(3, 4, 'red')
    assert engine.status is GameStatus.LOST


def test_large_lock_of_wrong_color_loses(stripes):
    engine = MoveEngine(stripes, 'blue', loss_threshold=3)
    engine.move(0, 1, 'red')
    assert engine.status is GameStatus.IN_PROGRESS
    engine.move(1, 0, 'red')
    assert engine.status is GameStatus.LOST
    assert engine.move(2, 2, 'green') is False
    assert engine.move_count == 2


def test_large_lock_of_target_color_keeps_playing(stripes):
    engine = MoveEngine(stripes, 'red', loss_threshold=3)
    engine.move(0, 1, 'red')
    engine.move(1, 0, 'red')
    assert len(engine.locked) == 3
    assert engine.status is GameStatus.IN_PROGRESS


def test_already_solved_board_at_move_zero():
    engine = MoveEngine([['green'] * 5 for _ in range(5)], 'green', loss_threshold=18)
    assert engine.status is GameStatus.SOLVED
    assert engine.move_count == 0


def test_invalid_moves_raise(stripes):
    engine = MoveEngine(stripes, 'red', loss_threshold=18)
    with pytest.raises(ValueError):
        engine.move(5, 0, 'red')
    with pytest.raises(ValueError):
        engine.move(0, 1, 'pink')
    with pytest.raises(ValueError):
        MoveEngine(stripes, 'pink', loss_threshold=18)


def test_medium_starts_one_action_in(puzzle_definition):
    engine = MoveEngine.for_puzzle(puzzle_definition, Difficulty.MEDIUM)
    assert engine.start_index == 1
    assert engine.grid[0][1] == 'red'
    assert engine.locked == {(0, 0), (0, 1)}
    assert engine.loss_threshold == 13
    assert engine.move_count == 0


def test_easy_starts_three_actions_in(puzzle_definition):
    engine = MoveEngine.for_puzzle(puzzle_definition, 'easy', {Difficulty.EASY: 5})
    assert engine.start_index == 3
    assert engine.locked == {(0, 0), (0, 1), (1, 0), (1, 1)}
    assert engine.loss_threshold == 5


def test_short_trace_applies_what_it_has(puzzle_definition):
    short = PuzzleDefinition(
        date=puzzle_definition.date,
        initial_grid=puzzle_definition.initial_grid,
        target_color='red',
        actions=[126],
        optimal_move_count=1,
    )
    grid, applied = short.starting_state(Difficulty.EASY)
    assert applied == 1
    assert grid[0][1] == 'red'
    assert short.starting_state(Difficulty.HARD) == (short.initial_grid, 0)


def test_definition_from_legacy_export(stripes):
    record = {
        'states': [{str(i): line for i, line in enumerate(stripes)}],
        'actions': [126, 90],
        'targetColor': 'red',
        'algoScore': 2,
        'colorMap': [0, 1, 2, 3, 4, 5],
    }
    definition = PuzzleDefinition.from_dict('2025-02-01', record)
    assert definition.initial_grid == stripes
    assert definition.optimal_move_count == 2
    assert definition.actions == [126, 90]

    with pytest.raises(ValueError):
        PuzzleDefinition.from_dict('2025-02-01', {'actions': [1]})


def test_to_dict_reports_sorted_lock(stripes):
    engine = MoveEngine(stripes, 'red', loss_threshold=18)
    engine.move(0, 1, 'red')
    state = engine.to_dict()
    assert state['locked_cells'] == [[0, 0], [0, 1]]
    assert state['locked_color'] == 'red'
    assert state['status'] == 'in_progress'
