from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)

@main.route('/')
def index():
    engine = current_app.extensions['trivia']
    return jsonify({
        'message': 'Welcome to the trivia game server!',
        'sessions': len(engine.registry),
    })
