from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker

from flowtask.config import PROJECT_ROOT, SETTINGS

MIGRATIONS_DIR = PROJECT_ROOT / "migrations"

engine = create_engine(SETTINGS.database_url, pool_pre_ping=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def init_db() -> None:
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))
    command.upgrade(_alembic_config(), "head")


def _alembic_config() -> Config:
    config = Config()
    config.set_main_option("script_location", str(MIGRATIONS_DIR))
    # ConfigParser interpolation treats "%" specially
    config.set_main_option("sqlalchemy.url", SETTINGS.database_url.replace("%", "%%"))
    return config
