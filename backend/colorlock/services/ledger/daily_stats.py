from typing import Mapping, Optional

from colorlock import db, socketio
from colorlock.models import DailyDifficultyScores, DailyDifficultyStats


def summarize_scores(scores: Mapping[str, int]) -> dict:
    """Lowest, average and head counts over a user -> best moves map."""
    values = [v for v in scores.values() if isinstance(v, int) and not isinstance(v, bool)]
    if not values:
        return {
            'lowest_score': None,
            'average_score': None,
            'total_players': 0,
            'players_with_lowest_score': 0,
        }
    lowest = min(values)
    return {
        'lowest_score': lowest,
        'average_score': sum(values) / len(values),
        'total_players': len(values),
        'players_with_lowest_score': sum(1 for v in values if v == lowest),
    }


def refresh_daily_stats(puzzle_id: str, difficulty: str) -> Optional[DailyDifficultyStats]:
    scores = DailyDifficultyScores.query.filter_by(puzzle_id=puzzle_id, difficulty=difficulty).first()
    if scores is None:
        return None
    summary = summarize_scores(scores.scores or {})
    stats = DailyDifficultyStats.query.filter_by(puzzle_id=puzzle_id, difficulty=difficulty).first()
    if stats is None:
        stats = DailyDifficultyStats(puzzle_id=puzzle_id, difficulty=difficulty)
    for key, value in summary.items():
        setattr(stats, key, value)
    db.session.add(stats)
    db.session.commit()
    return stats


def schedule_daily_stats_refresh(app, puzzle_id: str, difficulty: str) -> None:
    """Recompute derived daily statistics after a ledger commit.

    Runs outside the submission's transaction. Failures are logged and
    dropped; the next personal best at this difficulty recomputes the row.
    Inline under TESTING, otherwise on a Socket.IO background task.
    """

    def _worker(pid: str, level: str):
        with app.app_context():
            try:
                stats = refresh_daily_stats(pid, level)
                if stats is None:
                    return
                app.logger.info(
                    f"[daily-stats] puzzle={pid} difficulty={level} players={stats.total_players} "
                    f"lowest={stats.lowest_score}"
                )
                payload = {'puzzle_id': pid, 'difficulty': level, **stats.to_dict()}
                socketio.emit('daily_stats_update', payload, to=f"puzzle:{pid}", namespace='/ws')
            except Exception:
                db.session.rollback()
                app.logger.exception(f"[daily-stats-failed] puzzle={pid} difficulty={level}")

    if app.config.get('TESTING'):
        _worker(puzzle_id, difficulty)
    else:
        socketio.start_background_task(_worker, puzzle_id, difficulty)
