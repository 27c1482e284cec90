from __future__ import annotations
import logging
import sys
from pathlib import Path

import click

from .keywords import RankConfig, run_pipeline
from .lexicon import Lexicon, LexiconError
from .prepare import prepare_lexicon


def _load_lexicon(path: Path) -> Lexicon:
    try:
        return Lexicon.load(path)
    except (OSError, LexiconError) as e:
        raise click.ClickException(f"Cannot load lexicon {path}: {e}") from e


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Debug logging on stderr")
def cli(verbose: bool):
    """TextRank keyword extraction driven by a POS/lemma lexicon."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@cli.command()
@click.argument("lexicon_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("input_file", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--window-size", "-w", type=int, default=RankConfig.window_size, show_default=True,
              help="Co-occurrence window, in non-stop words")
@click.option("--num-keywords", "-n", type=int, default=RankConfig.num_keywords, show_default=True,
              help="Number of keywords to output")
@click.option("--iterations", "-i", type=int, default=RankConfig.num_iterations, show_default=True,
              help="TextRank iterations")
@click.option("--damping", "-d", type=float, default=RankConfig.damping, show_default=True,
              help="Damping factor")
@click.option("--dump-graph", is_flag=True, help="Print the scored graph on stderr")
def rank(lexicon_path: Path, input_file, window_size: int, num_keywords: int,
         iterations: int, damping: float, dump_graph: bool):
    """Print the keywords of INPUT_FILE (stdin by default), one `phrase<TAB>score` per line."""
    try:
        config = RankConfig(window_size=window_size, num_keywords=num_keywords,
                            num_iterations=iterations, damping=damping)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e

    lexicon = _load_lexicon(lexicon_path)
    try:
        text = input_file.read()
    except UnicodeDecodeError as e:
        raise click.ClickException(f"Cannot read {input_file.name}: {e}") from e

    graph, results = run_pipeline(text, lexicon, config)
    if dump_graph:
        graph.dump(sys.stderr)
    for result in results:
        click.echo(f"{result.phrase}\t{result.score:g}")


@cli.command()
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("target", type=click.Path(dir_okay=False, path_type=Path))
def prepare(source: Path, target: Path):
    """Build a binary lexicon from a tab-separated frequency list."""
    try:
        count = prepare_lexicon(source, target)
    except (OSError, LexiconError) as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Wrote {count} entries to {target}")


@cli.command("dump-lexicon")
@click.argument("lexicon_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def dump_lexicon(lexicon_path: Path):
    """Print every lexicon entry as `word<TAB>(POS,lemma)`."""
    lexicon = _load_lexicon(lexicon_path)
    lexicon.dump(sys.stdout)


if __name__ == "__main__":
    cli()
