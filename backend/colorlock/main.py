from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from colorlock import db
from colorlock.errors import ApiError
from colorlock.models import User

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the ColorLock server!'})

@main.route('/users/add', methods=['POST'])
def add_user():
    data = request.get_json(silent=True)
    if not data or 'username' not in data or 'password' not in data:
        raise ApiError('invalid-argument', 'Missing username or password')

    if User.query.filter_by(username=data['username']).first():
        raise ApiError('invalid-argument', 'Username already exists')

    user = User(username=data['username'])
    user.set_password(data['password'])
    db.session.add(user)
    db.session.commit()

    return jsonify({'message': 'User created successfully', 'user': user.to_dict()}), 201

@main.route('/login', methods=['POST'])
def login():
    data = request.get_json(silent=True) or {}
    user = User.query.filter_by(username=data.get('username')).first()
    if user and user.check_password(data.get('password') or ''):
        login_user(user, remember=True)
        return jsonify({'message': 'Logged in successfully.', 'user': user.to_dict()})
    raise ApiError('unauthenticated', 'Invalid username or password')

@main.route('/check_login', methods=['GET'])
@login_required
def check_login():
    return jsonify({'user': current_user.to_dict()})

@main.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'message': 'Logged out successfully.'})
