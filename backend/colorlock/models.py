from colorlock import db, bcrypt
from flask_login import UserMixin

from colorlock.services.puzzles.engine import PuzzleDefinition


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class Puzzle(db.Model):
    __tablename__ = 'puzzle'
    id = db.Column(db.Integer, primary_key=True)
    date = db.Column(db.String(10), unique=True, nullable=False, index=True)  # ISO yyyy-mm-dd
    initial_grid = db.Column(db.JSON, nullable=False)
    target_color = db.Column(db.String(16), nullable=False)
    actions = db.Column(db.JSON, nullable=False)
    optimal_move_count = db.Column(db.Integer, nullable=False)
    color_map = db.Column(db.JSON, nullable=True)

    @classmethod
    def from_definition(cls, definition: PuzzleDefinition) -> 'Puzzle':
        return cls(
            date=definition.date,
            initial_grid=definition.initial_grid,
            target_color=definition.target_color,
            actions=definition.actions,
            optimal_move_count=definition.optimal_move_count,
            color_map=definition.color_map,
        )

    def to_definition(self) -> PuzzleDefinition:
        return PuzzleDefinition(
            date=self.date,
            initial_grid=[list(line) for line in self.initial_grid],
            target_color=self.target_color,
            actions=list(self.actions or []),
            optimal_move_count=self.optimal_move_count,
            color_map=list(self.color_map) if self.color_map else None,
        )

    def to_dict(self):
        return {
            'date': self.date,
            'initial_grid': self.initial_grid,
            'target_color': self.target_color,
            'optimal_action_trace': self.actions,
            'optimal_move_count': self.optimal_move_count,
            'color_permutation': self.color_map,
        }


# Ledger documents. ``version`` is the optimistic-concurrency token: every
# UPDATE is guarded by the version read in the same transaction.

class UserPuzzleHistory(db.Model):
    __tablename__ = 'user_puzzle_history'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    puzzle_id = db.Column(db.String(10), db.ForeignKey('puzzle.date'), nullable=False)
    attempt_count = db.Column(db.Integer, nullable=False, default=0)
    hint_ever_used = db.Column(db.Boolean, nullable=False, default=False)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    total_moves = db.Column(db.Integer, nullable=False, default=0)
    version = db.Column(db.Integer, nullable=False)

    __table_args__ = (db.UniqueConstraint('user_id', 'puzzle_id', name='uq_history_user_puzzle'),)
    __mapper_args__ = {'version_id_col': version}


class UserPuzzleRecord(db.Model):
    __tablename__ = 'user_puzzle_record'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    puzzle_id = db.Column(db.String(10), db.ForeignKey('puzzle.date'), nullable=False)
    difficulty = db.Column(db.String(8), nullable=False)
    move_count = db.Column(db.Integer, nullable=True)
    elo_score = db.Column(db.Integer, nullable=True)
    first_try = db.Column(db.Boolean, nullable=False, default=False)
    hint_used = db.Column(db.Boolean, nullable=False, default=False)
    attempt_to_win = db.Column(db.Integer, nullable=True)
    attempt_to_tie = db.Column(db.Integer, nullable=True)
    attempt_to_beat = db.Column(db.Integer, nullable=True)
    first_to_beat_bot = db.Column(db.Boolean, nullable=False, default=False)
    version = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('user_id', 'puzzle_id', 'difficulty', name='uq_record_user_puzzle_difficulty'),
    )
    __mapper_args__ = {'version_id_col': version}

class DailyDifficultyScores(db.Model):
    """user id -> best move count for one puzzle and difficulty.

    One row shared by every player of the day, so it is written by every
    personal best at that difficulty.
    """
    __tablename__ = 'daily_difficulty_scores'
    id = db.Column(db.Integer, primary_key=True)
    puzzle_id = db.Column(db.String(10), db.ForeignKey('puzzle.date'), nullable=False)
    difficulty = db.Column(db.String(8), nullable=False)
    scores = db.Column(db.JSON, nullable=False, default=dict)
    version = db.Column(db.Integer, nullable=False)

    __table_args__ = (db.UniqueConstraint('puzzle_id', 'difficulty', name='uq_daily_scores_puzzle_difficulty'),)
    __mapper_args__ = {'version_id_col': version}


class DailyDifficultyStats(db.Model):
    __tablename__ = 'daily_difficulty_stats'
    id = db.Column(db.Integer, primary_key=True)
    puzzle_id = db.Column(db.String(10), db.ForeignKey('puzzle.date'), nullable=False)
    difficulty = db.Column(db.String(8), nullable=False)
    lowest_score = db.Column(db.Integer, nullable=True)
    average_score = db.Column(db.Float, nullable=True)
    total_players = db.Column(db.Integer, nullable=False, default=0)
    players_with_lowest_score = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (db.UniqueConstraint('puzzle_id', 'difficulty', name='uq_daily_stats_puzzle_difficulty'),)

    def to_dict(self):
        return {
            'lowest_score': self.lowest_score,
            'average_score': self.average_score,
            'total_players': self.total_players,
            'players_with_lowest_score': self.players_with_lowest_score,
        }


class LeaderboardAggregate(db.Model):
    __tablename__ = 'leaderboard_aggregate'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, unique=True)
    games_played = db.Column(db.Integer, nullable=False, default=0)
    total_attempts = db.Column(db.Integer, nullable=False, default=0)
    total_moves = db.Column(db.Integer, nullable=False, default=0)
    total_wins = db.Column(db.Integer, nullable=False, default=0)
    puzzles_completed = db.Column(db.Integer, nullable=False, default=0)
    current_completed_streak = db.Column(db.Integer, nullable=False, default=0)
    longest_completed_streak = db.Column(db.Integer, nullable=False, default=0)
    last_completed_date = db.Column(db.String(10), nullable=True)
    elo_by_day = db.Column(db.JSON, nullable=False, default=dict)
    elo_total_all_time = db.Column(db.Integer, nullable=False, default=0)
    elo_total_last30 = db.Column(db.Integer, nullable=False, default=0)
    elo_total_last7 = db.Column(db.Integer, nullable=False, default=0)
    version = db.Column(db.Integer, nullable=False)

    user = db.relationship('User')

    __mapper_args__ = {'version_id_col': version}

class DifficultyAggregate(db.Model):
    __tablename__ = 'difficulty_aggregate'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    difficulty = db.Column(db.String(8), nullable=False)
    wins = db.Column(db.Integer, nullable=False, default=0)
    goals_achieved = db.Column(db.Integer, nullable=False, default=0)
    goals_beaten = db.Column(db.Integer, nullable=False, default=0)
    current_tie_bot_streak = db.Column(db.Integer, nullable=False, default=0)
    longest_tie_bot_streak = db.Column(db.Integer, nullable=False, default=0)
    last_tie_bot_date = db.Column(db.String(10), nullable=True)
    current_first_try_streak = db.Column(db.Integer, nullable=False, default=0)
    longest_first_try_streak = db.Column(db.Integer, nullable=False, default=0)
    last_first_try_date = db.Column(db.String(10), nullable=True)
    version = db.Column(db.Integer, nullable=False)

    user = db.relationship('User')

    __table_args__ = (db.UniqueConstraint('user_id', 'difficulty', name='uq_difficulty_aggregate_user'),)
    __mapper_args__ = {'version_id_col': version}

