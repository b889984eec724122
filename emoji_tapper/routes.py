from flask import Blueprint, jsonify
from emoji_tapper.services.games import GameMode
from emoji_tapper.services.games.levels import LEVELS

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({
        'message': 'Welcome to the Emoji Tapper leaderboard!',
        'modes': [{'name': m.display_name, 'description': m.description} for m in GameMode],
        'levels': sorted(level().name for level in LEVELS.values()),
    })
