from flask import Blueprint, current_app, jsonify

sessions = Blueprint('sessions', __name__)


@sessions.route('/<string:room_id>', methods=['GET'])
def get_session(room_id):
    """
    Read-only snapshot of a live session. Channel ids are never exposed.
    """
    session = current_app.extensions['duel.sessions'].get(room_id)
    if session is None:
        return jsonify({'error': 'Session not found'}), 404
    return jsonify(session.to_dict())
