import asyncio
import json
import logging

import click

from quodyssey import create_client
from quodyssey.config import Config
from quodyssey.errors import QuizClientError
from quodyssey.models import answer_from_dict


def _run(ctx, action):
    """Run ``action(client)`` on a fresh client and print its JSON result."""
    async def runner():
        client = create_client(ctx.obj['config'], **ctx.obj['overrides'])
        try:
            return await action(client)
        finally:
            await client.close()

    try:
        result = asyncio.run(runner())
    except QuizClientError as exc:
        raise click.ClickException(str(exc))
    if hasattr(result, 'to_dict'):
        result = result.to_dict()
    click.echo(json.dumps(result))


@click.group()
@click.option('--host', default=None, help='Game server host (defaults to QUIZ_HOST).')
@click.option('--port', default=None, help='Game server port (defaults to QUIZ_PORT).')
@click.option('--game', 'game_id', default=None, help='Game id (defaults to QUIZ_GAME_ID).')
@click.pass_context
def cli(ctx, host, port, game_id):
    """Play a quodyssey game from the terminal."""
    logging.basicConfig(level=Config.LOG_LEVEL)
    overrides = {}
    if host:
        overrides['hostname'] = host
    if port:
        overrides['port'] = port
    if game_id:
        overrides['game_id'] = game_id
    ctx.obj = {'config': Config, 'overrides': overrides}


@cli.command('start')
@click.pass_context
def start_command(ctx):
    """Start a game (or restart the configured one)."""
    _run(ctx, lambda client: client.start())


@cli.command('join')
@click.argument('username')
@click.pass_context
def join_command(ctx, username):
    _run(ctx, lambda client: client.join(username))


@cli.command('question')
@click.pass_context
def question_command(ctx):
    """Show the question currently being played."""
    async def action(client):
        question = await client.get_question()
        return question.to_dict() if question else None

    _run(ctx, action)


@cli.command('answer')
@click.argument('answer_type', type=click.Choice(['choice', 'estimate', 'open']))
@click.argument('value')
@click.option('--username', required=True, help='Name the player joined with.')
@click.pass_context
def answer_command(ctx, answer_type, value, username):
    """Answer the current question and wait for the round result."""
    try:
        if answer_type == 'choice':
            payload = {'type': 'choice', 'idx': int(value)}
        elif answer_type == 'estimate':
            payload = {'type': 'estimate', 'estimate': float(value)}
        else:
            payload = {'type': 'open', 'answer': value}
    except ValueError:
        raise click.BadParameter(f'{value!r} is not a valid {answer_type} answer', param_hint='VALUE')

    async def action(client):
        client.session.username = username
        await client.get_question()
        return await client.answer(answer_from_dict(payload))

    _run(ctx, action)


@cli.command('scoreboard')
@click.pass_context
def scoreboard_command(ctx):
    _run(ctx, lambda client: client.get_scoreboard())


def main():
    cli()


if __name__ == '__main__':
    main()
