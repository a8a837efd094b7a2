import click
from tqdm import tqdm

from banco.errors import InvalidConfigurationError, RepositoryError
from banco.files import storage_for_path
from banco.models import Cliente
from banco.observability import setup_logging
from banco.rest import UserApiClient, UserRemoteRepository
from banco.storage.config import StorageConfig
from banco.storage.factory import create_repository


def format_cliente(cliente: Cliente) -> str:
    usuario = cliente.usuario
    line = f"{cliente.id}. {usuario.nombre} ({usuario.user_name}, {usuario.email})"
    for tarjeta in cliente.tarjetas:
        status = " [expired]" if tarjeta.is_expired() else ""
        line += f"\n     card {tarjeta.numero_tarjeta[-4:].rjust(len(tarjeta.numero_tarjeta), '*')}"
        line += f" exp {tarjeta.fecha_caducidad.isoformat()}{status}"
    return line


def _repository(ctx):
    try:
        repository = create_repository(ctx.obj['config'])
    except InvalidConfigurationError as e:
        raise click.ClickException(str(e))
    ctx.call_on_close(repository.close)
    return repository


def _remote_repository(ctx) -> UserRemoteRepository:
    config = ctx.obj['config']
    return UserRemoteRepository(UserApiClient(config.api_base_url, timeout=config.api_timeout))


@click.group()
@click.option('--log-level', default=None, help='Log level (defaults to LOG_LEVEL or INFO)')
@click.pass_context
def cli(ctx, log_level):
    """Bank client records: local database and remote user API"""
    try:
        config = StorageConfig.from_env()
    except InvalidConfigurationError as e:
        raise click.ClickException(str(e))
    setup_logging(log_level or config.log_level)
    ctx.ensure_object(dict)
    ctx.obj['config'] = config


@cli.command(name='list')
@click.pass_context
def list_clientes(ctx):
    """Lists every client with its cards."""
    clientes = _repository(ctx).get_all()
    if not clientes:
        click.echo("No clients found.")
        return
    for cliente in clientes:
        click.echo(format_cliente(cliente))


@cli.command()
@click.argument('cliente_id', type=int)
@click.pass_context
def get(ctx, cliente_id):
    """Shows one client."""
    cliente = _repository(ctx).get_by_id(cliente_id)
    if cliente is None:
        click.echo(f"No client with id {cliente_id}.")
        ctx.exit(1)
    click.echo(format_cliente(cliente))


@cli.command()
@click.argument('cliente_id', type=int)
@click.pass_context
def delete(ctx, cliente_id):
    """Deletes one client and its cards."""
    if _repository(ctx).delete(cliente_id):
        click.echo(f"Deleted client {cliente_id}.")
    else:
        click.echo(f"No client deleted for id {cliente_id}.")
        ctx.exit(1)


@cli.command(name='delete-all')
@click.confirmation_option(prompt='Delete every client?')
@click.pass_context
def delete_all(ctx):
    """Deletes every client."""
    if _repository(ctx).delete_all():
        click.echo("Deleted all clients.")
    else:
        click.echo("No clients to delete.")


@cli.command(name='import')
@click.argument('input_file', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def import_clientes(ctx, input_file):
    """Imports clients from a .csv or .json file into the database."""
    try:
        file_storage = storage_for_path(input_file)
        clientes = list(file_storage.import_file(input_file))
    except ValueError as e:
        raise click.ClickException(str(e))

    repository = _repository(ctx)
    created = 0
    failed = 0
    for cliente in tqdm(clientes, desc="Importing clients"):
        try:
            repository.create(cliente)
            created += 1
        except RepositoryError as e:
            tqdm.write(f"  Failed to import {cliente.usuario.user_name}: {e}")
            failed += 1

    click.echo(f"✓ Imported {created} client(s), {failed} failed")


@cli.command(name='export')
@click.argument('output_file', type=click.Path(dir_okay=False))
@click.pass_context
def export_clientes(ctx, output_file):
    """Exports every client to a .csv or .json file."""
    try:
        file_storage = storage_for_path(output_file)
    except ValueError as e:
        raise click.ClickException(str(e))

    written = file_storage.export_file(output_file, _repository(ctx).get_all())
    click.echo(f"✓ Exported {written} client(s) to {output_file}")


@cli.command(name='remote-users')
@click.pass_context
def remote_users(ctx):
    """Lists users from the remote API."""
    usuarios = _remote_repository(ctx).get_all()
    if not usuarios:
        click.echo("No remote users found.")
        return
    for usuario in usuarios:
        click.echo(f"{usuario.id}. {usuario.nombre} ({usuario.user_name}, {usuario.email})")


@cli.command(name='remote-user')
@click.argument('user_id', type=int)
@click.pass_context
def remote_user(ctx, user_id):
    """Shows one user from the remote API."""
    usuario = _remote_repository(ctx).get_by_id(user_id)
    if usuario is None:
        click.echo(f"No remote user with id {user_id}.")
        ctx.exit(1)
    click.echo(f"{usuario.id}. {usuario.nombre} ({usuario.user_name}, {usuario.email})")


if __name__ == '__main__':
    cli()
