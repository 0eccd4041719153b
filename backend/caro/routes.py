from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Caro room server!'})

@main.route('/api/room/state')
def room_state():
    """Read-only snapshot of the room, for health checks and debugging."""
    return jsonify(current_app.extensions['caro_session'].snapshot())
