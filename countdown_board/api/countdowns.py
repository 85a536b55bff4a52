from flask import Blueprint, jsonify
from countdown_board.services.countdowns import board

countdowns = Blueprint('countdowns', __name__)


@countdowns.route('', methods=['GET'])
def list_countdowns():
    """
    Returns the countdowns that have not expired yet, in creation order.
    """
    return jsonify([item.to_dict() for item in board.active_items()]), 200


@countdowns.route('/<int:item_id>', methods=['GET'])
def get_countdown(item_id):
    """
    Returns one countdown by id, including ones expired but not yet swept.
    """
    item = board.registry.get(item_id)
    if not item:
        return jsonify({'error': 'Countdown not found'}), 404
    payload = item.to_dict()
    payload['remainingMs'] = item.remaining_ms(board.now())
    return jsonify(payload), 200
