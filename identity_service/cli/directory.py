"""Flask CLI commands for provisioning principals, roles and permissions."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from identity_service.models import Permission, Role, User
from identity_service.uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)


@click.group("directory")
def directory_cli() -> None:
    """Manage the user/role directory consulted at authentication."""


@directory_cli.command("create-permission")
@click.argument("name")
@click.option("--description", default=None, help="Free-form description.")
@with_appcontext
def create_permission_command(name: str, description: str | None) -> None:
    """Create a permission NAME (no-op if it already exists)."""
    try:
        with SQLAlchemyUnitOfWork() as uow:
            if uow.permissions.get_by_name(name) is not None:
                click.echo(f"Permission {name!r} already exists.")
                return
            uow.permissions.add(Permission(name=name, description=description))
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="NAME") from exc
    LOGGER.info("permission created", extra={"subject": name})
    click.echo(f"Created permission {name!r}.")


@directory_cli.command("create-role")
@click.argument("name")
@click.option(
    "--permission",
    "permissions",
    multiple=True,
    help="Permission granted by the role (repeatable). Created when missing.",
)
@click.option("--description", default=None, help="Free-form description.")
@with_appcontext
def create_role_command(name: str, permissions: tuple[str, ...], description: str | None) -> None:
    """Create role NAME or extend it with the given permissions."""
    try:
        with SQLAlchemyUnitOfWork() as uow:
            role = uow.roles.get_by_name(name)
            created = role is None
            if role is None:
                role = uow.roles.add(Role(name=name, description=description))
            for perm_name in permissions:
                perm = uow.permissions.get_by_name(perm_name)
                if perm is None:
                    perm = uow.permissions.add(Permission(name=perm_name))
                if perm not in role.permissions:
                    role.permissions.append(perm)
            granted = sorted(p.name for p in role.permissions)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    LOGGER.info("role saved", extra={"subject": name})
    verb = "Created" if created else "Updated"
    click.echo(f"{verb} role {name!r} with permissions: {', '.join(granted) or '(none)'}.")


@directory_cli.command("create-user")
@click.argument("username")
@click.option(
    "--password",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Plain password; prompted when omitted.",
)
@click.option("--role", "roles", multiple=True, help="Existing role to assign (repeatable).")
@with_appcontext
def create_user_command(username: str, password: str, roles: tuple[str, ...]) -> None:
    """Create a user USERNAME with the given roles."""
    try:
        with SQLAlchemyUnitOfWork() as uow:
            if uow.users.exists_by_username(username):
                raise click.ClickException(f"User {username!r} already exists.")
            assigned: list[Role] = []
            for role_name in roles:
                role = uow.roles.get_by_name(role_name)
                if role is None:
                    raise click.ClickException(f"Role {role_name!r} does not exist.")
                assigned.append(role)
            user = User(username=username)
            user.password = password
            user.roles = assigned
            uow.users.add(user)
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    LOGGER.info("user created", extra={"subject": username})
    click.echo(f"Created user {username!r}.")
