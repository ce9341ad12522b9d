from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config['CORS_ALLOWED_ORIGINS']
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(
        flask_app,
        cors_allowed_origins=allowed_origins,
        async_mode=flask_app.config.get('SOCKETIO_ASYNC_MODE'),
    )

    # One store per application; sessions die with the process
    from duel.store import SessionStore
    from duel.services import Coordinator
    from duel.socketio_events import SocketIOChannel, register_socketio_handlers

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')
    store = SessionStore()
    flask_app.extensions['duel.sessions'] = store
    flask_app.extensions['duel.coordinator'] = Coordinator(
        store, SocketIOChannel(namespace), logger=flask_app.logger
    )
    register_socketio_handlers(namespace)

    from duel.routes import main
    flask_app.register_blueprint(main)

    from duel.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    @click.command('serve')
    @click.option('--host', default=None, help='Interface to bind (defaults to HOST).')
    @click.option('--port', type=int, default=None, help='Port to listen on (defaults to PORT).')
    def serve_command(host, port):
        """Runs the Socket.IO server."""
        socketio.run(
            flask_app,
            host=host or flask_app.config['HOST'],
            port=port or flask_app.config['PORT'],
            allow_unsafe_werkzeug=True,
        )
        store.clear()

    flask_app.cli.add_command(serve_command)

    return flask_app
