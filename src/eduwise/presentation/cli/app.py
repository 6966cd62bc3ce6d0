"""EduWise CLI application using Typer.

This module provides command-line utilities for the EduWise backend:
secret generation for deployment configuration and bootstrapping the
first administrator account.
"""

import asyncio
import secrets

import typer
from rich.console import Console

from eduwise.domain.shared import DomainException
from eduwise_auth import PasswordHashingService
from eduwise_identity import User, UserRole
from eduwise_identity.application.commands import CreateUserCommand
from eduwise_identity.infrastructure.persistence.sqlalchemy import (
    UserRepositorySQLAlchemy,
    create_tables,
)

app = typer.Typer(
    name="eduwise",
    help="EduWise - identity service CLI",
    no_args_is_help=True,
)
console = Console()


secrets_app = typer.Typer(
    name="secrets",
    help="Secret generation utilities",
    no_args_is_help=True,
)
app.add_typer(secrets_app)

users_app = typer.Typer(
    name="users",
    help="User administration",
    no_args_is_help=True,
)
app.add_typer(users_app)


@secrets_app.command("generate")
def generate_secrets() -> None:
    """Generate secure secrets for EduWise configuration.

    Generates three required secrets:
    - JWT_ACCESS_SECRET: Secret for signing access tokens
    - JWT_REFRESH_SECRET: Secret for signing refresh tokens (must differ)
    - POSTGRES_PASSWORD: Database password

    Copy the output to your .env file.
    """
    console.print("\n[bold green]EduWise Secret Generation[/bold green]")
    console.print("=" * 60)
    console.print(
        "\nGenerated secrets for your [bold].env[/bold] configuration file:\n"
    )

    console.print(f"[cyan]JWT_ACCESS_SECRET[/cyan]={secrets.token_urlsafe(64)}")
    console.print(f"[cyan]JWT_REFRESH_SECRET[/cyan]={secrets.token_urlsafe(64)}")
    console.print(f"[cyan]POSTGRES_PASSWORD[/cyan]={secrets.token_urlsafe(32)}")

    console.print("\n" + "=" * 60)
    console.print(
        "[yellow]Keep these secrets secure and never commit them "
        "to version control![/yellow]"
    )
    console.print(
        "[dim]Copy the above values to your config/.env (Docker) or "
        "config/.env.dev (local) file.[/dim]\n"
    )


async def _create_admin(full_name: str, email: str, password: str) -> User:
    # Imported here so `secrets generate` works before any .env exists
    from eduwise.presentation.api.dependencies import get_engine, get_session_maker

    engine = get_engine()
    try:
        await create_tables(engine)
        async with get_session_maker()() as session:
            command = CreateUserCommand(
                user_repository=UserRepositorySQLAlchemy(session),
                password_service=PasswordHashingService(),
            )
            try:
                user = await command.execute(
                    full_name=full_name,
                    email=email,
                    password=password,
                    role=UserRole.ADMIN,
                )
                await session.commit()
            except DomainException:
                await session.rollback()
                raise
        return user
    finally:
        await engine.dispose()


@users_app.command("create-admin")
def create_admin(
    email: str = typer.Option(..., "--email", "-e", help="Admin email address"),
    full_name: str = typer.Option(..., "--name", "-n", help="Admin full name"),
    password: str = typer.Option(
        ...,
        "--password",
        "-p",
        prompt=True,
        hide_input=True,
        confirmation_prompt=True,
        help="Admin password (prompted when omitted)",
    ),
) -> None:
    """Create a verified administrator account.

    Self-service registration only ever creates learners, so the first
    admin of a fresh deployment is created here.
    """
    try:
        user = asyncio.run(_create_admin(full_name, email, password))
    except DomainException as e:
        console.print(f"[red]Error:[/red] {e.message} ({e.code.value})")
        raise typer.Exit(code=1) from e

    console.print(
        f"[green]Created admin[/green] [bold]{user.email}[/bold] (id: {user.id})"
    )


def cli() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    cli()
