from datetime import datetime, timezone
from flask import Blueprint, current_app, jsonify, render_template
from countdown_board.services.countdowns import board
import time

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return render_template('index.html', title=current_app.config.get('BOARD_TITLE', 'Shared Countdown Board'))

@main.route('/health')
def health():
    payload = {
        'status': 'ok',
        'time': datetime.now(timezone.utc).isoformat(),
    }
    payload.update(board.status())
    return jsonify(payload)

@main.route('/test')
def test():
    return jsonify({'message': 'Server is running', 'timestamp': int(time.time() * 1000)})
