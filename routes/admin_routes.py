from flask import Blueprint, request, jsonify

from functions import contest_functions, user_functions
from utils.backends import get_store

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/contests', methods=['GET'])
def all_contests():
    return jsonify(contest_functions.list_all(get_store())), 200

@admin_bp.route('/contests/<contest_id>', methods=['PATCH'])
def update_contest_status(contest_id):
    data = request.get_json(silent=True) or {}
    contest = contest_functions.set_status(get_store(), contest_id, data.get('status'))
    return jsonify({"message": f"Contest status set to {contest['status']}", "contest": contest}), 200

@admin_bp.route('/contests/<contest_id>', methods=['DELETE'])
def delete_contest(contest_id):
    contest_functions.admin_delete(get_store(), contest_id)
    return jsonify({"message": "Contest deleted"}), 200

@admin_bp.route('/users', methods=['GET'])
def all_users():
    return jsonify(user_functions.list_users(get_store())), 200

@admin_bp.route('/users/role/<user_id>', methods=['PATCH'])
def update_user_role(user_id):
    data = request.get_json(silent=True) or {}
    user = user_functions.set_role(get_store(), user_id, data.get('role'))
    return jsonify({"message": f"Role updated to {user['role']}", "user": user}), 200
