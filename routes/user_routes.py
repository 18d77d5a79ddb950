from flask import Blueprint, request, jsonify

from functions import user_functions, participation_functions
from utils.backends import get_store

user_bp = Blueprint('users', __name__)


@user_bp.route('/users', methods=['POST'])
def create_user():
    data = request.get_json(silent=True) or {}
    created, result = user_functions.create_user(get_store(), data)
    return jsonify(result), 201 if created else 200

@user_bp.route('/users/<email>', methods=['GET'])
def get_user(email):
    return jsonify(user_functions.get_user(get_store(), email)), 200

@user_bp.route('/users/<email>', methods=['PUT'])
def update_user(email):
    data = request.get_json(silent=True) or {}
    user = user_functions.update_profile(get_store(), request.user.email, email, data)
    return jsonify(user), 200

@user_bp.route('/participated-contests/<email>', methods=['GET'])
def participated_contests(email):
    return jsonify(participation_functions.list_participated(get_store(), email)), 200

@user_bp.route('/winning-contests/<email>', methods=['GET'])
def winning_contests(email):
    return jsonify(participation_functions.list_won(get_store(), email)), 200
