"""CLI interface for docoracle"""

import click
import json
import shutil
from pathlib import Path
from typing import Optional
import logging

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

from docoracle import __version__
from docoracle.config import get_config, load_config
from docoracle.exceptions import DocOracleError
from docoracle.extraction.condition_extractor import EXTRACTION_STRATEGIES
from docoracle.extraction.equivalence_detector import EquivalenceDetector
from docoracle.loader import load_model
from docoracle.matching.candidates import ModelCandidateEnumerator
from docoracle.synthesis.validation import get_validator
from docoracle.translation.free_text_translator import FreeTextTranslator, translate_members


def _setup(config_path: Optional[str], verbose: bool) -> dict:
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    if config_path:
        return load_config(Path(config_path))
    return get_config()


@click.group()
@click.version_option(version=__version__)
def main():
    """docoracle - Equivalence oracles from free-text documentation

    Detects statements such as "Equivalent to isEmpty()" in method comments
    and turns them into boolean assertions over the method's result.
    """
    pass


@main.command()
@click.argument("model", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML configuration overriding the defaults")
@click.option("--validator", type=click.Choice(["structural", "javac"]),
              help="Oracle validator (default from configuration: structural)")
@click.option("--classpath", help="Classpath for the javac validator")
@click.option("--output", type=click.Path(dir_okay=False), help="Write JSON results to this file")
@click.option("--only-resolved", is_flag=True, default=False,
              help="Only report sentences that produced an oracle")
@click.option("--verbose", is_flag=True, default=False, help="Debug logging")
def translate(model: str, config_path: Optional[str], validator: Optional[str],
              classpath: Optional[str], output: Optional[str], only_resolved: bool, verbose: bool):
    """Translate the comments of every documented member in MODEL"""
    try:
        config = _setup(config_path, verbose)
        types, members = load_model(Path(model))
        oracle_validator = get_validator(validator, classpath=classpath, config=config)
    except DocOracleError as e:
        click.echo(f"[ERROR] {e}", err=True)
        raise SystemExit(1)

    translator = FreeTextTranslator(
        ModelCandidateEnumerator(types),
        validator=oracle_validator,
        config=config,
    )
    results = translate_members(members, translator, progress=output is not None)

    payload = []
    for result in results:
        entry = result.to_dict()
        if only_resolved:
            entry["matches"] = [m for m in entry["matches"] if m["oracle"]]
        payload.append(entry)

    text = json.dumps(payload, indent=2)
    if output:
        Path(output).parent.mkdir(parents=True, exist_ok=True)
        Path(output).write_text(text, encoding="utf-8")
        total = sum(len(r.oracles) for r in results)
        failed = sum(1 for r in results if r.error)
        click.echo(f"[OK] {total} oracles from {len(results)} members ({failed} failed) -> {output}")
    else:
        click.echo(text)


@main.command()
@click.argument("sentence")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="YAML configuration overriding the defaults")
def detect(sentence: str, config_path: Optional[str]):
    """Run equivalence detection on a single SENTENCE"""
    config = _setup(config_path, False)
    match = EquivalenceDetector(config).detect(sentence)
    click.echo(json.dumps(match.to_dict(), indent=2))


@main.command(name="extract-condition")
@click.argument("sentence")
@click.option("--strategy", type=click.Choice(sorted(EXTRACTION_STRATEGIES)), default="comma",
              help="Guard clause delimiting strategy")
def extract_condition(sentence: str, strategy: str):
    """Extract the guard clause ("if ..."/"when ...") from SENTENCE"""
    keywords = get_config()["equivalence"]["guard_keywords"]
    condition = EXTRACTION_STRATEGIES[strategy](keywords).extract(sentence)
    if condition is None:
        click.echo("[NONE] No condition found")
    else:
        click.echo(condition)


@main.command(name="validate-setup")
def validate_setup():
    """Check that optional toolchains are available"""
    click.echo("Checking docoracle setup...")

    javac = shutil.which(get_config()["validation"]["javac_path"])
    if javac:
        click.echo(f"  [OK] javac: {javac}")
    else:
        click.echo("  [WARNING] javac not found: only the structural validator is available")

    try:
        from nltk.stem import PorterStemmer
        PorterStemmer().stem("contains")
        click.echo("  [OK] nltk stemmer")
    except Exception as e:
        click.echo(f"  [ERROR] nltk stemmer unavailable: {e}")


if __name__ == "__main__":
    main()
