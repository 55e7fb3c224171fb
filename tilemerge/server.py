import argparse
import logging
import random

from flask import Flask, request, jsonify
from flask_cors import CORS

from tilemerge import game
from tilemerge.session import Session, init, request_move
from tilemerge.share import share_text

logger = logging.getLogger(__name__)

app = Flask(__name__)
CORS(app, resources={r"/*": {"origins": "*"}})
app.config.setdefault('SHARE_URL', None)

rng = random.Random()


def _get_payload():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")
    return payload


@app.route('/new-game', methods=['POST'])
def new_game():
    """Endpoint for starting a game with two spawned tiles."""
    try:
        session = init(rng)
        return jsonify({'session': session.to_dict()})
    except Exception as e:
        logger.exception("Failed to start a new game")
        return jsonify({'error': str(e)}), 500


@app.route('/move', methods=['POST'])
def move():
    """Endpoint for applying a move to a client-held session."""
    try:
        payload = _get_payload()
        session = Session.from_dict(payload.get('session'))
        updated = request_move(session, payload.get('direction'), rng)
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.exception("Failed to apply move")
        return jsonify({'error': str(e)}), 500

    response = {'session': updated.to_dict(), 'changed': updated is not session}
    if updated.is_over:
        response['share'] = share_text(updated.score, app.config['SHARE_URL'])
    return jsonify(response)


@app.route('/game-over', methods=['POST'])
def game_over():
    """Endpoint for checking whether any move remains on a board."""
    try:
        board = game.to_grid(_get_payload().get('board'))
        return jsonify({'game_over': game.is_game_over(board)})
    except ValueError as e:
        return jsonify({'error': str(e)}), 400
    except Exception as e:
        logger.exception("Failed to evaluate board")
        return jsonify({'error': str(e)}), 500


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="2048 rule engine server")
    parser.add_argument("--host", type=str, default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=5000, help="Port to bind to")
    parser.add_argument("--seed", type=int, default=None, help="Seed for tile spawns (random if omitted)")
    parser.add_argument("--share-url", type=str, default=None, help="URL appended to the game-over share text")
    parser.add_argument("--debug", action="store_true", help="Run Flask in debug mode")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    rng.seed(args.seed)
    app.config['SHARE_URL'] = args.share_url

    logger.info("Server starting on http://%s:%d", args.host, args.port)
    app.run(host=args.host, port=args.port, debug=args.debug)


if __name__ == '__main__':
    main()
