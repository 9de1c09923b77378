from logging.config import fileConfig
import os
import sys

from alembic import context

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app import create_app            # noqa: E402
from extensions import db             # noqa: E402
import models                         # noqa: E402,F401

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

app = create_app()
app.app_context().push()

if not config.get_main_option("sqlalchemy.url"):
    url = db.engine.url.render_as_string(hide_password=False)
    config.set_main_option("sqlalchemy.url", url.replace("%", "%%"))


def _configure(**kwargs):
    # batch mode lets SQLite recreate tables for constraint changes
    context.configure(target_metadata=db.metadata, render_as_batch=True, **kwargs)
    with context.begin_transaction():
        context.run_migrations()


if context.is_offline_mode():
    _configure(url=config.get_main_option("sqlalchemy.url"), literal_binds=True,
               dialect_opts={"paramstyle": "named"})
else:
    with db.engine.connect() as connection:
        _configure(connection=connection)
