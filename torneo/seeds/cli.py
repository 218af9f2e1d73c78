import random

import click
from flask.cli import AppGroup

from torneo.models.tournament import Tournament
from torneo.seeds.data import DEMO_TOURNAMENT, DEMO_DATES
from torneo.services.tournament_service import create_tournament
from torneo.services.date_service import add_tournament_date, generate_date_fixture
from torneo.services.match_service import apply_result

seed_cli = AppGroup("seed", help="Seed database commands.")


@seed_cli.command("demo")
@click.option("--seed", "rng_seed", default=42, show_default=True, help="Random seed for scores.")
@click.option("--play/--no-play", default=True, help="Enter random results for the first date.")
def seed_demo(rng_seed, play):
    """Create a demo tournament with two dates and their fixtures."""
    if Tournament.query.filter_by(name=DEMO_TOURNAMENT).first():
        click.echo("Demo tournament already exists.")
        return

    rng = random.Random(rng_seed)
    tournament = create_tournament(DEMO_TOURNAMENT)

    for index, entry in enumerate(DEMO_DATES):
        date = add_tournament_date(tournament.id, entry["name"], entry["teams"], entry["config"])
        matches = generate_date_fixture(date.id)
        click.echo(f"{date.name}: {len(matches)} matches generated")

        if play and index == 0:
            for match in matches:
                apply_result(match.id, rng.randint(0, 4), rng.randint(0, 4))
            click.echo(f"{date.name}: results entered")

    click.echo(f"Seeded demo tournament '{DEMO_TOURNAMENT}' (id={tournament.id}).")
