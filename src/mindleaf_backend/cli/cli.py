import click
from dotenv import load_dotenv

# settings and the engine read the environment on import
load_dotenv()

from .admin import admin
from .db import db

@click.group()
def cli():
    pass

cli.add_command(db, "db")
cli.add_command(admin, "admin")

if __name__ == '__main__':
    cli()
