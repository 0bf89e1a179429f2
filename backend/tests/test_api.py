from conftest import PUZZLE_DATE, login
from colorlock.services.puzzles import Difficulty, calculate_score


def _submission(**overrides):
    body = {
        'puzzle_id': PUZZLE_DATE,
        'difficulty': 'hard',
        'attempt_number': 1,
        'move_count': 4,
        'hint_used': False,
        'bot_move_count': 4,
        'outcome': 'won',
    }
    body.update(overrides)
    return body


def test_get_puzzle(client, puzzle):
    res = client.get(f'/api/puzzles/{PUZZLE_DATE}')
    assert res.status_code == 200
    data = res.get_json()
    assert data['date'] == PUZZLE_DATE
    assert data['optimal_move_count'] == 4
    assert data['optimal_action_trace'] == [126, 90, 96, 132]


def test_unknown_puzzle_is_not_found(client, puzzle):
    res = client.get('/api/puzzles/2030-01-01')
    assert res.status_code == 404
    assert res.get_json()['code'] == 'not-found'


def test_hint(client, puzzle):
    res = client.post(f'/api/puzzles/{PUZZLE_DATE}/hint', json={'difficulty': 'medium', 'moves_played': 0})
    assert res.status_code == 200
    hint = res.get_json()['hint']
    assert (hint['row'], hint['col'], hint['color']) == (1, 0, 'red')

    res = client.post(f'/api/puzzles/{PUZZLE_DATE}/hint', json={'difficulty': 'hard', 'moves_played': 10})
    assert res.get_json()['hint'] is None


def test_hint_rejects_bad_payload(client, puzzle):
    res = client.post(f'/api/puzzles/{PUZZLE_DATE}/hint', json={'difficulty': 'hard', 'moves_played': -1})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'invalid-argument'
    res = client.post(f'/api/puzzles/{PUZZLE_DATE}/hint', json={'difficulty': 'insane', 'moves_played': 0})
    assert res.status_code == 400


def test_replay_counts_rejected_moves(client, puzzle):
    res = client.post(
        f'/api/puzzles/{PUZZLE_DATE}/replay',
        json={'difficulty': 'hard', 'moves': [[0, 1, 'red'], [0, 0, 'blue'], [0, 2, 'blue']]},
    )
    assert res.status_code == 200
    state = res.get_json()
    assert state['move_count'] == 1
    assert state['rejected_moves'] == 2
    assert state['locked_cells'] == [[0, 0], [0, 1]]
    assert state['status'] == 'in_progress'


def test_replay_off_board_move(client, puzzle):
    res = client.post(f'/api/puzzles/{PUZZLE_DATE}/replay', json={'difficulty': 'hard', 'moves': [[7, 0, 'red']]})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'invalid-argument'


def test_submit_requires_login(client, puzzle):
    res = client.post('/api/attempts', json=_submission())
    assert res.status_code == 401
    assert res.get_json()['code'] == 'unauthenticated'


def test_submit_attempt(client, puzzle, make_user):
    make_user('alice')
    login(client, 'alice')
    res = client.post('/api/attempts', json=_submission())
    assert res.status_code == 200
    assert res.get_json() == {
        'attempt_index': 1,
        'first_try': True,
        'first_to_beat_bot': False,
        'elo_score': calculate_score(Difficulty.HARD, 4, 4, 1, 1),
    }

    res = client.post('/api/attempts', json=_submission(attempt_number=2, move_count=6))
    data = res.get_json()
    assert data['attempt_index'] == 2
    assert data['first_try'] is False
    assert data['elo_score'] == 400


def test_submit_for_another_user_is_denied(client, puzzle, make_user):
    alice = make_user('alice')
    bob = make_user('bob')
    login(client, 'alice')
    res = client.post('/api/attempts', json=_submission(user_id=bob.id))
    assert res.status_code == 403
    assert res.get_json()['code'] == 'permission-denied'
    res = client.post('/api/attempts', json=_submission(user_id=alice.id))
    assert res.status_code == 200


def test_submit_validation(client, puzzle, make_user):
    make_user('alice')
    login(client, 'alice')
    res = client.post('/api/attempts', json=_submission(bot_move_count=5))
    assert res.status_code == 400
    res = client.post('/api/attempts', json=_submission(hint_used='yes'))
    assert res.status_code == 400
    res = client.post('/api/attempts', json=_submission(puzzle_id='not-a-date'))
    assert res.status_code == 400
    res = client.post('/api/attempts', json=_submission(outcome='draw'))
    assert res.status_code == 400
    res = client.post('/api/attempts', json=_submission(puzzle_id='2030-01-01'))
    assert res.status_code == 404


def test_daily_stats_refreshed_after_submit(client, puzzle, make_user):
    make_user('alice')
    make_user('bob')
    res = client.get(f'/api/puzzles/{PUZZLE_DATE}/daily-stats?difficulty=hard')
    assert res.get_json()['total_players'] == 0

    login(client, 'alice')
    client.post('/api/attempts', json=_submission(move_count=4))
    client.post('/logout')
    login(client, 'bob')
    client.post('/api/attempts', json=_submission(move_count=6))

    stats = client.get(f'/api/puzzles/{PUZZLE_DATE}/daily-stats?difficulty=hard').get_json()
    assert stats['lowest_score'] == 4
    assert stats['average_score'] == 5
    assert stats['total_players'] == 2
    assert stats['players_with_lowest_score'] == 1


def test_personal_stats(client, puzzle, make_user):
    make_user('alice')
    login(client, 'alice')
    client.post('/api/attempts', json=_submission(outcome='lost', move_count=9))
    client.post('/api/attempts', json=_submission(attempt_number=2, move_count=5))

    res = client.get(f'/api/stats/{PUZZLE_DATE}/hard')
    assert res.status_code == 200
    stats = res.get_json()
    assert stats['today']['attempts'] == 2
    assert stats['today']['completed'] is True
    assert stats['today']['best']['move_count'] == 5
    assert stats['today']['best']['attempt_to_win'] == 2
    assert stats['all_time']['games_played'] == 1
    assert stats['all_time']['total_wins'] == 1
    assert stats['difficulty_totals']['wins'] == 1
    assert stats['daily']['lowest_score'] == 5

    assert client.get(f'/api/stats/{PUZZLE_DATE}/brutal').status_code == 400


def test_leaderboard_ranks_and_requester(client, puzzle, make_user):
    make_user('alice')
    make_user('bob')
    login(client, 'alice')
    client.post('/api/attempts', json=_submission(move_count=3))
    client.post('/logout')
    login(client, 'bob')
    client.post('/api/attempts', json=_submission(outcome='lost', move_count=9))

    board = client.get('/api/leaderboard?category=score&subcategory=all_time').get_json()
    assert [e['username'] for e in board['entries']] == ['alice', 'bob']
    assert [e['rank'] for e in board['entries']] == [1, 2]
    assert board['user_rank'] == 2
    assert board['user_value'] == 0

    goals = client.get('/api/leaderboard?category=goals&subcategory=beaten&difficulty=hard').get_json()
    assert goals['entries'][0]['username'] == 'alice'
    assert goals['entries'][0]['value'] == 1

    streaks = client.get('/api/leaderboard?category=streaks&subcategory=puzzle_completed').get_json()
    top = streaks['entries'][0]
    assert (top['username'], top['value'], top['longest'], top['is_current_longest']) == ('alice', 1, 1, True)
    assert streaks['difficulty'] is None


def test_leaderboard_rejects_unknown_board(client, make_user):
    make_user('alice')
    login(client, 'alice')
    res = client.get('/api/leaderboard?category=score&subcategory=beaten')
    assert res.status_code == 400
    assert client.get('/api/leaderboard?category=fame').status_code == 400


def test_user_lifecycle(client):
    res = client.post('/users/add', json={'username': 'carol', 'password': 'pw'})
    assert res.status_code == 201
    assert client.post('/users/add', json={'username': 'carol', 'password': 'pw'}).status_code == 400
    assert client.post('/login', json={'username': 'carol', 'password': 'nope'}).status_code == 401
    login(client, 'carol', 'pw')
    assert client.get('/check_login').status_code == 200
    assert client.post('/logout').status_code == 200
    assert client.get('/check_login').status_code == 401


def test_hint_rejects_ragged_or_wrong_size_grid(client, puzzle):
    ragged = [['red'] * 5] + [['red']] * 4
    res = client.post(f'/api/puzzles/{PUZZLE_DATE}/hint',
                      json={'difficulty': 'hard', 'moves_played': 0, 'grid': ragged})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'invalid-argument'

    small = [['red'] * 3 for _ in range(3)]
    res = client.post(f'/api/puzzles/{PUZZLE_DATE}/hint',
                      json={'difficulty': 'hard', 'moves_played': 0, 'grid': small})
    assert res.status_code == 400
    assert res.get_json()['code'] == 'invalid-argument'


def test_hint_lists_region_for_full_grid(client, puzzle):
    grid = [['red'] * 5 for _ in range(5)]
    res = client.post(f'/api/puzzles/{PUZZLE_DATE}/hint',
                      json={'difficulty': 'hard', 'moves_played': 0, 'grid': grid})
    assert res.status_code == 200
    assert len(res.get_json()['hint']['cells']) == 25


def test_personal_stats_unknown_puzzle(client, puzzle, make_user):
    make_user('alice')
    login(client, 'alice')
    res = client.get('/api/stats/2030-01-01/hard')
    assert res.status_code == 404
    assert res.get_json()['code'] == 'not-found'
    assert client.get('/api/stats/yesterday/hard').status_code == 404


def test_daily_stats_failure_does_not_fail_submission(client, puzzle, make_user, monkeypatch):
    from colorlock.models import UserPuzzleHistory, UserPuzzleRecord
    from colorlock.services.ledger import daily_stats

    def broken(puzzle_id, difficulty):
        raise RuntimeError('stats store unavailable')

    monkeypatch.setattr(daily_stats, 'refresh_daily_stats', broken)
    make_user('alice')
    login(client, 'alice')
    res = client.post('/api/attempts', json=_submission())
    assert res.status_code == 200
    assert res.get_json()['attempt_index'] == 1

    history = UserPuzzleHistory.query.one()
    assert history.attempt_count == 1
    assert UserPuzzleRecord.query.one().move_count == 4
    stats = client.get(f'/api/puzzles/{PUZZLE_DATE}/daily-stats?difficulty=hard').get_json()
    assert stats['total_players'] == 0
