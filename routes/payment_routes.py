from flask import Blueprint, request, jsonify

from functions import payment_functions
from utils.backends import get_store, get_payments

payment_bp = Blueprint('payments', __name__)


@payment_bp.route('/create-checkout-session', methods=['POST'])
def create_checkout_session():
    data = request.get_json(silent=True) or {}
    result = payment_functions.create_checkout(
        get_store(), get_payments(), request.user.email, data.get('contestId')
    )
    return jsonify(result), 200

@payment_bp.route('/payments/confirm', methods=['POST'])
def confirm_payment():
    data = request.get_json(silent=True) or {}
    payment = payment_functions.confirm_payment(get_store(), get_payments(), data.get('sessionId'))
    return jsonify({
        "message": "Payment confirmed",
        "contestId": payment['contestId'],
        "status": payment['status']
    }), 200

@payment_bp.route('/payments/webhook', methods=['POST'])
def stripe_webhook():
    payment_functions.handle_webhook(
        get_store(),
        get_payments(),
        request.get_data(),
        request.headers.get('Stripe-Signature', '')
    )
    return jsonify({"received": True}), 200

@payment_bp.route('/payments/history', methods=['GET'])
def payment_history():
    return jsonify(payment_functions.payment_history(get_store(), request.user.email)), 200
