import click
import logging
import pandas as pd

from fairodds.config import settings
from fairodds.display import format_bet, format_point
from fairodds.normalize import filter_market_category
from fairodds.repository import QuoteRepository
from fairodds.schemas import BetKey
from fairodds.sources import DataSourceError
from fairodds.stakes import solve_stakes
from fairodds.stats import summarize
from fairodds.views import bookmakers_for_bet, game_player_map, over_under_ladder, point_detail

logger = logging.getLogger(__name__)


def _frame(records, columns=None) -> pd.DataFrame:
    return pd.DataFrame([r.model_dump() for r in records], columns=columns)


def _echo_summary(title, summary):
    click.echo(f"\n--- {title} ---")
    if summary.count == 0:
        click.echo("No prices.")
        return
    click.echo(f"Count: {summary.count}  Mean: {summary.mean:.2f}  Std: {summary.std:.2f}  "
               f"Min: {summary.min:.2f}  Max: {summary.max:.2f}")
    for price, count in summary.histogram.items():
        click.echo(f"{price:>8} {'#' * count} ({count})")


@click.group()
@click.option('--raw', 'raw_path', default=None, help='Raw quotes CSV (path or URL)')
@click.option('--top-bets', 'top_bets_path', default=None, help='Precomputed top bets CSV; pass "" to disable')
@click.option('--log-level', default=None, help='Logging level (defaults to LOG_LEVEL)')
@click.pass_context
def cli(ctx, raw_path, top_bets_path, log_level):
    """FairOdds player-prop value and arbitrage scanner"""
    logging.getLogger().setLevel((log_level or settings.LOG_LEVEL).upper())

    config = settings.model_copy()
    if raw_path is not None:
        config.RAW_DATA_PATH = raw_path
    if top_bets_path is not None:
        config.TOP_BETS_PATH = top_bets_path
    ctx.obj = QuoteRepository.from_settings(config)


def _run(fn):
    try:
        return fn()
    except DataSourceError as e:
        logger.error(f"Data load failed: {e}", exc_info=True)
        raise click.ClickException(str(e))


local_only_option = click.option(
    '--local-only/--all-books', default=settings.LOCAL_ONLY,
    help='Restrict to the configured local bookmakers',
)


@cli.command('top-bets')
@local_only_option
@click.pass_obj
def top_bets(repo, local_only):
    """Bets where one bookmaker prices well above the market consensus."""
    results = _run(lambda: repo.top_bets(local_only=local_only))
    if not results:
        click.echo("No value bets found.")
        return

    df = _frame(results)
    df.insert(0, 'bet', [format_bet(r.key) for r in results])
    df = df.drop(columns=['key'])
    click.echo(df[['bet', 'max_price', 'bookmaker', 'mean_price', 'threshold', 'sample_size', 'prob_diff']].to_string(index=False))


@cli.command()
@click.argument('bet_key')
@click.pass_obj
def bet(repo, bet_key):
    """Summary and bookmaker prices for one bet (key as player_label_market_point)."""
    try:
        key = BetKey.parse(bet_key)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='BET_KEY')

    summary = next((r for r in _run(repo.top_bets) if r.key == key), None)
    books = bookmakers_for_bet(_run(repo.quotes), key)
    if summary is None and not books:
        raise click.ClickException(f"Bet not found: {bet_key}")

    click.echo(f"\n=== {format_bet(key)} ===")
    if summary is not None:
        for field, value in summary.model_dump(exclude={'key'}).items():
            click.echo(f"{field:>16}: {value}")
        click.echo(f"{'std':>16}: {round(summary.threshold - summary.mean_price, 2)}")

    if books:
        click.echo("\n" + pd.DataFrame(books, columns=['bookmaker', 'price'])
                   .sort_values('price', ascending=False, kind='stable').to_string(index=False))
        _echo_summary("Price distribution", summarize(price for _, price in books))


@cli.command()
@local_only_option
@click.pass_obj
def arbitrage(repo, local_only):
    """Over/under pairs that together price under 100%."""
    pairs = _run(lambda: repo.arbitrage_pairs(local_only=local_only))
    if not pairs:
        click.echo("No arbitrage bets found. Adjust filters to broaden the search.")
        return
    df = _frame(pairs)
    click.echo(df[['game', 'player', 'market_display', 'point_display', 'over_bookmaker', 'over_price',
                   'under_bookmaker', 'under_price', 'implied_total_pct', 'edge_pct']].to_string(index=False))


@cli.command()
@click.argument('price_over', type=float)
@click.argument('price_under', type=float)
@click.argument('target', type=float)
def stakes(price_over, price_under, target):
    """Stakes on each side so either winning side pays TARGET."""
    solution = solve_stakes(price_over, price_under, target)
    if solution is None:
        raise click.ClickException("Invalid input: prices and target must be positive.")
    if 1 / price_over + 1 / price_under >= 1.0:
        click.echo("Warning: these prices are not an arbitrage; the profit below is not guaranteed.")
    for field, value in solution.model_dump().items():
        click.echo(f"{field:>13}: {value:.2f}")


@cli.command()
@click.option('--game', default=None, help='Only list players in this game')
@local_only_option
@click.pass_obj
def games(repo, game, local_only):
    """Games and the players quoted in each."""
    mapping = game_player_map(_run(lambda: repo.quotes(local_only=local_only)))
    for name in sorted(mapping):
        if game is not None and name != game:
            continue
        click.echo(name)
        for player in mapping[name]:
            click.echo(f"  {player}")


@cli.command()
@click.option('--game', required=True)
@click.option('--player', required=True)
@click.option('--category', default='points', type=click.Choice(['points', 'rebounds', 'assists']))
@click.option('--point', type=float, default=None, help='Single line; omit to list every line')
@local_only_option
@click.pass_obj
def point(repo, game, player, category, point, local_only):
    """Over/under prices per bookmaker for one player's lines."""
    quotes = _run(lambda: repo.quotes(local_only=local_only))

    if point is None:
        selected = [q for q in filter_market_category(quotes, category) if q.game == game and q.player == player]
        ladder = over_under_ladder(selected)
        if not ladder:
            raise click.ClickException("No data found for this selection.")
        for step in ladder:
            click.echo(f"\n--- {step.point_display} ---")
            click.echo(pd.DataFrame([vars(r) for r in step.rows]).to_string(index=False))
        return

    detail = point_detail(quotes, game, player, category, point)
    if detail is None:
        raise click.ClickException("No data found for this selection.")
    click.echo(f"\n=== {player} | {category.capitalize()} | {format_point(point)} ===")
    for side, side_quotes, summary in (('Over', detail.over, detail.over_summary),
                                       ('Under', detail.under, detail.under_summary)):
        _echo_summary(side, summary)
        for q in side_quotes:
            click.echo(f"  {q.bookmaker:<20} {q.price:.2f}")


if __name__ == '__main__':
    cli()
