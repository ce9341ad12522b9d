from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the duel session server!'})


@main.route('/health')
def health():
    store = current_app.extensions['duel.sessions']
    return jsonify({'status': 'ok', 'sessions': len(store)})
