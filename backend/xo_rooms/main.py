from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


@main.route('/')
def index():
    return jsonify({
        'message': 'Welcome to the XO rooms server!',
        'rooms': len(current_app.extensions['rooms']),
    })


@main.route('/api/rooms/<string:code>')
def room_state(code):
    registry = current_app.extensions['rooms']
    with registry.lock:
        room = registry.get(code)
        if room is None:
            return jsonify({'error': 'Room not found'}), 404
        return jsonify(room.to_dict())
