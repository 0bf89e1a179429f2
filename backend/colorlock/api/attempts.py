from flask import Blueprint, jsonify, request, current_app
from flask_login import current_user, login_required
from sqlalchemy.exc import SQLAlchemyError

from colorlock import db
from colorlock.api import get_puzzle_or_404
from colorlock.errors import ApiError, parse_payload
from colorlock.schemas import LeaderboardQuery, SubmitAttemptRequest
from colorlock.services.ledger import Attempt, AttemptLedger, LedgerContentionError
from colorlock.services.ledger.daily_stats import schedule_daily_stats_refresh
from colorlock.services.ledger.leaderboard import get_leaderboard, get_personal_stats
from colorlock.services.ledger.sql_store import SqlLedgerStore
from colorlock.services.puzzles import Difficulty


attempts = Blueprint('attempts', __name__)


@attempts.route('/attempts', methods=['POST'])
@login_required
def submit_attempt():
    payload = parse_payload(SubmitAttemptRequest, request.get_json(silent=True))
    if payload.user_id is not None and payload.user_id != current_user.id:
        raise ApiError('permission-denied', 'Cannot submit attempts for another user')

    puzzle = get_puzzle_or_404(payload.puzzle_id)
    if payload.bot_move_count != puzzle.optimal_move_count:
        raise ApiError(
            'invalid-argument',
            f'bot_move_count {payload.bot_move_count} does not match puzzle {puzzle.date}',
        )

    attempt = Attempt(
        user_id=current_user.id,
        puzzle_id=puzzle.date,
        difficulty=payload.difficulty,
        move_count=payload.move_count,
        hint_used=payload.hint_used,
        bot_move_count=payload.bot_move_count,
        outcome=payload.outcome,
        client_attempt_number=payload.attempt_number,
    )
    ledger = AttemptLedger(
        SqlLedgerStore(db.session),
        max_retries=current_app.config.get('LEDGER_MAX_RETRIES', 3),
        logger=current_app.logger,
    )
    try:
        result = ledger.submit(attempt)
    except (LedgerContentionError, SQLAlchemyError):
        db.session.rollback()
        current_app.logger.exception(
            f"[submit-failed] user={attempt.user_id} puzzle={attempt.puzzle_id} "
            f"difficulty={attempt.difficulty.value}"
        )
        raise ApiError('internal', 'Could not record attempt')

    if result.attempt_index != attempt.client_attempt_number:
        current_app.logger.info(
            f"[attempt-drift] user={attempt.user_id} puzzle={attempt.puzzle_id} "
            f"client={attempt.client_attempt_number} server={result.attempt_index}"
        )
    if result.improved:
        schedule_daily_stats_refresh(current_app._get_current_object(), attempt.puzzle_id, attempt.difficulty.value)
    return jsonify(result.to_dict())


@attempts.route('/stats/<puzzle_id>/<difficulty>', methods=['GET'])
@login_required
def personal_stats(puzzle_id, difficulty):
    get_puzzle_or_404(puzzle_id)
    try:
        level = Difficulty(difficulty)
    except ValueError:
        raise ApiError('invalid-argument', f'unknown difficulty {difficulty!r}')
    return jsonify(get_personal_stats(current_user.id, puzzle_id, level.value))


@attempts.route('/leaderboard', methods=['GET'])
@login_required
def leaderboard():
    query = parse_payload(LeaderboardQuery, request.args.to_dict())
    return jsonify(get_leaderboard(
        query.category,
        query.subcategory,
        query.difficulty.value,
        current_user.id,
        size=current_app.config.get('LEADERBOARD_SIZE', 10),
    ))
