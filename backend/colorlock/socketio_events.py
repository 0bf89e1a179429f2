from flask_socketio import join_room, leave_room, emit
from colorlock import socketio


def puzzle_room(puzzle_id: str) -> str:
    return f"puzzle:{puzzle_id}"


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_puzzle(data):
    puzzle_id = (data or {}).get('puzzle_id')
    if not puzzle_id:
        emit('error', {'message': 'puzzle_id is required'})
        return
    room = puzzle_room(puzzle_id)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_puzzle(data):
    puzzle_id = (data or {}).get('puzzle_id')
    if not puzzle_id:
        emit('error', {'message': 'puzzle_id is required'})
        return
    room = puzzle_room(puzzle_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('join_puzzle', handle_join_puzzle, namespace=namespace)
        socketio.on_event('leave_puzzle', handle_leave_puzzle, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
