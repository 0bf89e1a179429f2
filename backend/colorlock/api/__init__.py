from colorlock.errors import ApiError
from colorlock.models import Puzzle


def get_puzzle_or_404(puzzle_id: str) -> Puzzle:
    puzzle = Puzzle.query.filter_by(date=puzzle_id).first()
    if puzzle is None:
        raise ApiError('not-found', f'No puzzle for {puzzle_id}')
    return puzzle
