import logging
import os
import sys
from flask import Flask
from .request import SAJARequest
from .response import SAJAResponse
from .json_encoder import SAJAJSONProvider
import saja
import flask.app
from flask_sqlalchemy import SQLAlchemy


class SAJA:
    """This class configures the Flask application to serve JSON:API documents for SQLAlchemy models
    :param app: a Flask application.
    :param prefix: URL prefix of the api routes, e.g. '/api'
    :param LOGLEVEL: loglevel configuration variable, values from logging module (0: trace, .. 50: critical)
    """

    # Configuration settings are stored as class variables
    JSONAPI_VERSION = "1.1"
    LOGLEVEL = logging.WARNING
    # Honour X-Forwarded-Proto and X-Forwarded-Prefix when building links
    TRUST_FORWARDED_HEADERS = True
    # query string argument that suppresses relationships, included and links
    SIMPLE_ARG = "simple"
    #
    db = None

    def __init__(self, app: flask.app.Flask, *args, **kwargs) -> None:
        """
        Constructor
        """
        self.app = app
        if app is not None:
            self.init_app(app, *args, **kwargs)

    def init_app(self, app: flask.app.Flask, app_db: SQLAlchemy = None, **kwargs) -> None:
        """
        Application initialization:
        - the request and response classes are replaced by the JSON:API aware subclasses
        - the sqlalchemy session is removed when the app context is torn down
        """
        if not isinstance(app, Flask):  # pragma: no cover
            raise TypeError("'app' should be Flask.")

        if app_db is None:
            app_db = app.extensions["sqlalchemy"]

        saja.DB = SAJA.db = self.db = app_db

        app.request_class = SAJARequest
        app.response_class = SAJAResponse
        app.json = SAJAJSONProvider(app)
        app.url_map.strict_slashes = False

        if app.config.get("DEBUG", False):
            log.setLevel(logging.DEBUG)

        for conf_name, conf_val in kwargs.items():
            setattr(SAJA, conf_name, conf_val)

        # pylint: disable=unused-argument,unused-variable
        @app.teardown_appcontext
        def shutdown_session(exception=None):
            """cfr. http://flask.pocoo.org/docs/0.12/patterns/sqlalchemy/"""
            self.db.session.remove()

    @staticmethod
    def init_logging(loglevel: int = logging.WARNING) -> logging.Logger:
        """
        Specify the log format used in the webserver logs
        """
        log = logging.getLogger("saja")
        if log.level == logging.NOTSET:
            handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter("[%(asctime)s] %(levelname)s: %(message)s")
            handler.setFormatter(formatter)
            log.setLevel(loglevel)
            log.addHandler(handler)
        return log


#
# DB and logging initialization
#
DB = SQLAlchemy()

try:
    DEBUG = os.getenv("DEBUG", logging.WARNING)
    LOGLEVEL = int(DEBUG)
except ValueError:  # pragma: no cover
    print(f'Invalid LogLevel in DEBUG Environment Variable! "{DEBUG}"')
    LOGLEVEL = logging.INFO

log = SAJA.init_logging(LOGLEVEL)
