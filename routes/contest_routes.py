from flask import Blueprint, current_app, request, jsonify

from functions import contest_functions, participation_functions
from utils.backends import get_store
from utils.exceptions import ValidationError

contest_bp = Blueprint('contests', __name__)


@contest_bp.route('', methods=['POST'])
def create_contest():
    data = request.get_json(silent=True) or {}
    contest = contest_functions.create_contest(get_store(), request.user, data)
    return jsonify({
        "message": "Contest created and awaiting approval",
        "contestId": contest['id'],
        "contest": contest
    }), 201

@contest_bp.route('', methods=['GET'])
def approved_contests():
    return jsonify(contest_functions.list_approved(get_store())), 200

@contest_bp.route('/popular', methods=['GET'])
def popular_contests():
    try:
        limit = int(request.args.get('limit', current_app.config.get('POPULAR_LIMIT', 5)))
    except ValueError:
        raise ValidationError("limit must be an integer")
    if limit < 1:
        raise ValidationError("limit must be positive")
    return jsonify(contest_functions.list_popular(get_store(), limit)), 200

@contest_bp.route('/search', methods=['GET'])
def search_contests():
    return jsonify(contest_functions.search(get_store(), request.args.get('type', ''))), 200

@contest_bp.route('/creator/<email>', methods=['GET'])
def creator_contests(email):
    return jsonify(contest_functions.list_by_creator(get_store(), email)), 200

@contest_bp.route('/<contest_id>', methods=['GET'])
def get_contest(contest_id):
    return jsonify(contest_functions.get_contest(get_store(), contest_id)), 200

@contest_bp.route('/<contest_id>', methods=['PATCH'])
def edit_contest(contest_id):
    data = request.get_json(silent=True) or {}
    contest = contest_functions.edit_contest(get_store(), request.user.email, contest_id, data)
    return jsonify({"message": "Contest updated", "contest": contest}), 200

@contest_bp.route('/<contest_id>', methods=['DELETE'])
def delete_contest(contest_id):
    contest_functions.delete_contest(get_store(), request.user.email, contest_id)
    return jsonify({"message": "Contest deleted"}), 200

@contest_bp.route('/register/<contest_id>', methods=['PATCH'])
def register(contest_id):
    participation_functions.register(get_store(), request.user.email, contest_id)
    return jsonify({"message": "Registered successfully"}), 200

@contest_bp.route('/<contest_id>/submit-task', methods=['POST'])
def submit_task(contest_id):
    data = request.get_json(silent=True) or {}
    submission = participation_functions.submit_task(get_store(), request.user, contest_id, data.get('taskLink'))
    return jsonify({"message": "Task submitted", "submission": submission}), 201

@contest_bp.route('/submissions/<contest_id>', methods=['GET'])
def contest_submissions(contest_id):
    submissions = participation_functions.list_submissions(
        get_store(), request.user.email, request.user_role, contest_id
    )
    return jsonify(submissions), 200

@contest_bp.route('/declare-winner/<contest_id>', methods=['PATCH'])
def declare_winner(contest_id):
    data = request.get_json(silent=True) or {}
    contest = participation_functions.declare_winner(
        get_store(), request.user.email, contest_id, data.get('winnerEmail')
    )
    return jsonify({
        "message": "Winner declared",
        "winnerEmail": contest['winnerEmail'],
        "winnerName": contest['winnerName'],
        "winnerImage": contest['winnerImage']
    }), 200
