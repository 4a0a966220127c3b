import click

from mindleaf_backend.database import get_engine
from mindleaf_backend.model.base import Base

@click.command()
def init_db():
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=get_engine())
    click.echo(f"Tables created on {get_engine().url.render_as_string(hide_password=True)}")

@click.group()
def db():
    pass

db.add_command(init_db, "init")
