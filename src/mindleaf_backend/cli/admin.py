import click

from mindleaf_backend.api.exceptions import ApiException
from mindleaf_backend.database import get_db
from mindleaf_backend.services.user_service import ensure_admin_user, get_user_by_email, upgrade_to_creator

@click.command()
@click.option("--email", "-e", "email", prompt=True)
@click.option("--password", "-p", "password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--name", "-n", "name", default="Admin")
def create_admin(email, password, name):

  with next(get_db()) as db:
    user = ensure_admin_user(db, email, password, name=name)

  click.echo(f"Admin ready: {user.email} (id {user.id})")

@click.command()
@click.option("--email", "-e", "email", prompt=True)
def upgrade(email):

  with next(get_db()) as db:
    user = get_user_by_email(db, email)
    if user is None:
      raise click.ClickException(f"No user with email {email}")
    try:
      user = upgrade_to_creator(db, user)
    except ApiException as e:
      raise click.ClickException(str(e.detail))

  click.echo(f"{user.email} is now {user.role.value}")

@click.group()
def admin():
    pass

admin.add_command(create_admin, "create")
admin.add_command(upgrade, "upgrade")
