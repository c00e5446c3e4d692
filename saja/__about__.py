__version__ = "0.1.0"
__description__ = "saja : SqlAlchemy JSON:API, expose SQLAlchemy models as JSON:API resources with Flask"
