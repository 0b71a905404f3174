"""Detect the optional `database` extra (SQLAlchemy 2.x and python-dotenv)."""

MIN_SQLALCHEMY_MAJOR = 2

DATABASE_AVAILABLE = False
DATABASE_IMPORT_ERROR = None

try:
    import dotenv  # noqa: F401
    import sqlalchemy
except ImportError as e:
    DATABASE_IMPORT_ERROR = f"{e}. Install with: pip install 'cgnbench[database]'"
else:
    if int(sqlalchemy.__version__.split(".")[0]) < MIN_SQLALCHEMY_MAJOR:
        DATABASE_IMPORT_ERROR = (
            f"SQLAlchemy {sqlalchemy.__version__} found, "
            f"{MIN_SQLALCHEMY_MAJOR}.0 or newer is required"
        )
    else:
        DATABASE_AVAILABLE = True
