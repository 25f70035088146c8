#!/usr/bin/env python3
"""
CLI Application Module

This module provides a command-line interface for the OCR application using Click.
It recognizes a list of images, applies the exclusion dictionary and prints,
saves or copies the aggregated text.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .batch import BatchProgress, BatchResult, BatchMessage, run_batch
from .clipboard import copy_to_clipboard
from .config import Config
from .dictionary import ExclusionSet, load_exclusion_set
from .exceptions import DictionaryLoadError, OCREngineNotAvailableError, describe_error
from .images import SelectedImage
from .ocr_engine import ENGINE_CHOICES, RECOGNITION_MODES, get_available_engines

logger = logging.getLogger(__name__)


def save_output(content: str, output_path: Optional[Path]):
    """Save content to file or print to stdout."""
    if output_path:
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(content)
            logger.info(f"Results saved to {output_path}")
        except PermissionError:
            logger.error(f"Permission denied writing to {output_path}. Please check directory permissions.")
            raise
        except OSError as e:
            logger.error(f"OS error writing to {output_path}: {e}. This may be due to disk space or file system issues.")
            raise
    else:
        click.echo(content, nl=False)


def load_dictionary_option(dictionary: Optional[Path]) -> ExclusionSet:
    """Load the dictionary given on the command line; failures fall back to an empty set."""
    if dictionary is None:
        return ExclusionSet.empty()
    try:
        exclusion_set = load_exclusion_set(dictionary)
    except DictionaryLoadError as e:
        click.echo(f"Warning: {describe_error(e)}", err=True)
        click.echo("Continuing without an exclusion dictionary.", err=True)
        return ExclusionSet.empty()
    click.echo(f"Dictionary: {exclusion_set.status}", err=True)
    return exclusion_set


# Click CLI Definition

@click.group()
@click.version_option(__version__)
@click.option('--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Configuration file (defaults to the per-user config.ini)')
@click.pass_context
def cli(ctx, config_path):
    """WikiOCR - Recognize Japanese text in images and bracket unknown words."""
    config = Config(config_path)
    logging.basicConfig(level=config.log_level, format='%(levelname)s: %(message)s')
    ctx.obj = config


@cli.command()
@click.argument('images', nargs=-1, type=click.Path(dir_okay=False, path_type=Path))
@click.option('--dictionary', '-d', type=click.Path(dir_okay=False, path_type=Path),
              help='Exclusion dictionary: UTF-8 text file, one word per line')
@click.option('--languages', '-l', multiple=True,
              help='OCR languages (can be specified multiple times)')
@click.option('--mode', type=click.Choice(RECOGNITION_MODES),
              help='Recognition mode')
@click.option('--engine', type=click.Choice(ENGINE_CHOICES),
              help='Force specific OCR engine')
@click.option('--output', '-o', type=click.Path(dir_okay=False, path_type=Path),
              help='Output file path')
@click.option('--copy', 'copy_result', is_flag=True,
              help='Copy the result to the clipboard')
@click.option('--preprocess/--no-preprocess', default=None,
              help='Apply image preprocessing before OCR')
@click.option('--use-gpu/--no-gpu', default=None,
              help='Enable GPU acceleration for OCR')
@click.pass_obj
def run(config, images, dictionary, languages, mode, engine, output, copy_result, preprocess, use_gpu):
    """Recognize IMAGES in order and print the formatted text."""
    if dictionary is None:
        dictionary = config.dictionary_path
    exclusion_set = load_dictionary_option(dictionary)

    try:
        recognizer = config.build_engine(
            languages=list(languages) or None,
            mode=mode,
            engine=engine,
            preprocess_images=preprocess,
            use_gpu=use_gpu,
        )
    except ValueError as e:
        raise click.ClickException(f"{e}. Fix the value or pass it as an option.")

    if images and not recognizer.is_available():
        error = OCREngineNotAvailableError([recognizer.engine])
        click.echo(f"Error: {describe_error(error)}", err=True)
        sys.exit(1)

    selected = [SelectedImage.from_path(path) for path in images]

    text = None
    with click.progressbar(length=len(selected), label='Recognizing', file=sys.stderr) as bar:
        for event in run_batch(selected, exclusion_set, recognizer):
            if isinstance(event, BatchProgress):
                bar.update(1)
            elif isinstance(event, BatchResult):
                text = event.text
            elif isinstance(event, BatchMessage):
                click.echo(event.text, err=True)

    if text is None:
        sys.exit(1)

    save_output(text, output)

    if copy_result and not copy_to_clipboard(text):
        click.echo("Warning: could not copy the result to the clipboard.", err=True)


@cli.command('check-dictionary')
@click.argument('dictionary', type=click.Path(dir_okay=False, path_type=Path))
@click.option('--list', 'list_words', is_flag=True, help='Print the loaded words')
def check_dictionary(dictionary, list_words):
    """Load DICTIONARY and report how many words it excludes."""
    try:
        exclusion_set = load_exclusion_set(dictionary)
    except DictionaryLoadError as e:
        click.echo(f"Error: {describe_error(e)}", err=True)
        sys.exit(1)

    click.echo(exclusion_set.status)
    if list_words:
        for word in sorted(exclusion_set):
            click.echo(word)


@cli.command()
def engines():
    """List available OCR engines."""
    available = get_available_engines()
    if available:
        click.echo("Available OCR engines:")
        for engine in available:
            click.echo(f"  - {engine}")
    else:
        click.echo("No OCR engines available. Install easyocr or pytesseract.")
        sys.exit(1)


if __name__ == '__main__':
    cli()
