"""
Word-Guess Room Server - Main Entry Point

This is the main entry point for the room server.
It initializes all services, restores saved rooms and starts the
Flask-SocketIO application.
"""

import threading
import time
from wordle_rooms import create_app
from wordle_rooms.config import Config, validate_word_lists
from wordle_rooms.services.commentary_service import initialize_commentary_service
from wordle_rooms.services.lobby_service import initialize_lobby_service, get_lobby_service
from wordle_rooms.utils.game_logger import game_logger
from wordle_rooms.websocket.handlers import run_effects


def room_cleanup_worker(socketio, interval):
    """
    Background worker that periodically drops stale players, evicts idle
    rooms and flushes a room snapshot to disk.
    """
    game_logger.logger.info(f"Room cleanup worker started - checking every {interval} seconds")
    while True:
        try:
            registry = get_lobby_service()
            if registry:
                for room_id, effects in registry.expire_players().items():
                    run_effects(socketio, room_id, None, effects)
                evicted = registry.evict_idle_rooms()
                if evicted:
                    game_logger.logger.info(f"Room cleanup: evicted {len(evicted)} idle room(s): {evicted}")
                registry.save()
        except Exception as e:
            game_logger.logger.error(f"Error in room cleanup worker: {e}")

        time.sleep(interval)


def main():
    """Main function to initialize services and start the server."""
    try:
        validate_word_lists()

        registry = initialize_lobby_service(Config)
        restored = registry.load()
        initialize_commentary_service(Config)

        app, socketio = create_app(Config)

        cleanup_thread = threading.Thread(
            target=room_cleanup_worker, args=(socketio, Config.CLEANUP_INTERVAL_SECONDS), daemon=True
        )
        cleanup_thread.start()

        game_logger.logger.info(
            f"Room server starting on {Config.HOST}:{Config.PORT} "
            f"(restored rooms: {restored}, AI commentary: {Config.COMMENTARY_AI_ENABLED})"
        )

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG,
                     allow_unsafe_werkzeug=True)

    except KeyboardInterrupt:
        game_logger.logger.info("Room server shutting down (KeyboardInterrupt)")
    except Exception as e:
        game_logger.logger.error(f"Error starting server: {e}")
        raise
    finally:
        registry = get_lobby_service()
        if registry:
            registry.save()


if __name__ == '__main__':
    main()
