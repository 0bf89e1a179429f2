from flask import Blueprint, jsonify, request, current_app

from colorlock.api import get_puzzle_or_404
from colorlock.errors import ApiError, parse_payload
from colorlock.models import DailyDifficultyStats
from colorlock.schemas import DailyStatsQuery, HintRequest, ReplayRequest
from colorlock.services.ledger.daily_stats import summarize_scores
from colorlock.services.puzzles import Difficulty, HintEngine, MoveEngine


puzzles = Blueprint('puzzles', __name__)


def _loss_thresholds():
    cfg = current_app.config
    return {
        Difficulty.EASY: cfg.get('LOSS_THRESHOLD_EASY', 8),
        Difficulty.MEDIUM: cfg.get('LOSS_THRESHOLD_MEDIUM', 13),
        Difficulty.HARD: cfg.get('LOSS_THRESHOLD_HARD', 18),
    }


@puzzles.route('/<puzzle_id>', methods=['GET'])
def get_puzzle(puzzle_id):
    puzzle = get_puzzle_or_404(puzzle_id)
    return jsonify(puzzle.to_dict())


@puzzles.route('/<puzzle_id>/hint', methods=['POST'])
def get_hint(puzzle_id):
    payload = parse_payload(HintRequest, request.get_json(silent=True))
    puzzle = get_puzzle_or_404(puzzle_id)
    definition = puzzle.to_definition()
    if payload.grid is not None and len(payload.grid) != definition.grid_size:
        raise ApiError('invalid-argument', f'grid must be {definition.grid_size}x{definition.grid_size}')
    hint = HintEngine(definition, payload.difficulty).hint(payload.moves_played, payload.grid)
    return jsonify({'hint': hint.to_dict() if hint is not None else None})


@puzzles.route('/<puzzle_id>/replay', methods=['POST'])
def replay(puzzle_id):
    """Replay a move list from the difficulty's starting board."""
    payload = parse_payload(ReplayRequest, request.get_json(silent=True))
    puzzle = get_puzzle_or_404(puzzle_id)
    engine = MoveEngine.for_puzzle(puzzle.to_definition(), payload.difficulty, _loss_thresholds())
    rejected = 0
    for position, (row, col, color) in enumerate(payload.moves):
        try:
            accepted = engine.move(row, col, color)
        except ValueError as exc:
            raise ApiError('invalid-argument', f'moves.{position}: {exc}') from exc
        if not accepted:
            rejected += 1
    state = engine.to_dict()
    state['rejected_moves'] = rejected
    return jsonify(state)


@puzzles.route('/<puzzle_id>/daily-stats', methods=['GET'])
def daily_stats(puzzle_id):
    query = parse_payload(DailyStatsQuery, request.args.to_dict())
    get_puzzle_or_404(puzzle_id)
    level = query.difficulty.value
    stats = DailyDifficultyStats.query.filter_by(puzzle_id=puzzle_id, difficulty=level).first()
    body = stats.to_dict() if stats is not None else summarize_scores({})
    return jsonify({'puzzle_id': puzzle_id, 'difficulty': level, **body})
