"""Command-line interface for receipt text extraction."""

import json
import logging
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
from tqdm import tqdm

from .classify import CategoryClassifier
from .models import LANGUAGE_CURRENCY, Language
from .parse import ReceiptParser
from .review import ReviewQueue
from .sources import (
    DIGITAL_TEXT_CONFIDENCE,
    RecognitionResult,
    extract_pdf_text,
    is_pdf,
)

logger = logging.getLogger(__name__)

RECEIPT_PATTERNS = ['*.txt', '*.TXT', '*.pdf', '*.PDF']


def _language_option(ctx, param, value) -> Language:
    try:
        return Language.from_tag(value)
    except ValueError as e:
        raise click.BadParameter(str(e))


def _today_option(ctx, param, value) -> Optional[date]:
    return value.date() if value else None


def load_recognition(source: Path, confidence: Optional[float] = None) -> Optional[RecognitionResult]:
    """
    Read receipt text from a text file, a PDF text layer or stdin ('-').

    Returns:
        RecognitionResult, or None for a PDF without a usable text layer

    Raises:
        OSError, UnicodeDecodeError: if a text file cannot be read
    """
    if str(source) == '-':
        text = click.get_text_stream('stdin').read()
    elif is_pdf(source):
        result = extract_pdf_text(source).to_recognition()
        if result is not None and confidence is not None:
            result = RecognitionResult(text=result.text, confidence=confidence)
        return result
    else:
        text = Path(source).read_text(encoding='utf-8')
    return RecognitionResult(
        text=text,
        confidence=DIGITAL_TEXT_CONFIDENCE if confidence is None else confidence,
    )


def find_receipt_files(input_dir: Path) -> List[Path]:
    """Find all text and PDF receipts under input_dir, recursively."""
    receipt_files = set()
    for pattern in RECEIPT_PATTERNS:
        receipt_files.update(input_dir.glob(f'**/{pattern}'))
    receipt_files = sorted(receipt_files)
    logger.info(f"Found {len(receipt_files)} receipt files (TXT/PDF) in {input_dir}")
    return receipt_files


class BatchProcessor:
    """Parse every receipt file in a folder."""

    def __init__(self,
                 language: Language,
                 parser: Optional[ReceiptParser] = None,
                 max_workers: int = 4,
                 review_threshold: float = 60.0,
                 today: Optional[date] = None):
        self.language = language
        self.parser = parser or ReceiptParser()
        self.max_workers = max_workers
        self.today = today
        self.review_queue = ReviewQueue(confidence_threshold=review_threshold)
        self.stats = {'total_files': 0, 'processed': 0, 'failed': 0}

    def process_single_file(self, receipt_path: Path) -> Dict[str, Any]:
        """Parse one file; unreadable files become upstream-failure receipts."""
        try:
            recognition = load_recognition(receipt_path)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to read {receipt_path}: {e}")
            recognition = None

        if recognition is None:
            self.stats['failed'] += 1
            receipt = self.parser.parse_failure(self.language, today=self.today)
        else:
            self.stats['processed'] += 1
            receipt = self.parser.parse_recognition(recognition, self.language, today=self.today)

        review_item = self.review_queue.add_from_receipt(receipt_path.name, receipt)
        result = {'file_path': str(receipt_path)}
        result.update(receipt.to_dict())
        result['needs_review'] = review_item is not None
        return result

    def process_batch(self, input_dir: Path) -> List[Dict[str, Any]]:
        """
        Process all receipt files in the input directory.

        Args:
            input_dir: Directory containing .txt / .pdf receipts

        Returns:
            List of result dictionaries sorted by file path
        """
        receipt_files = find_receipt_files(input_dir)
        self.stats['total_files'] = len(receipt_files)
        if not receipt_files:
            logger.warning("No receipt files found!")
            return []

        results = []
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_file = {
                executor.submit(self.process_single_file, receipt_file): receipt_file
                for receipt_file in receipt_files
            }
            with tqdm(total=len(receipt_files), desc="Parsing receipts") as pbar:
                for future in as_completed(future_to_file):
                    results.append(future.result())
                    pbar.update(1)

        logger.info(f"Batch complete. Processed: {self.stats['processed']}, "
                    f"Failed: {self.stats['failed']}, Review items: {len(self.review_queue.items)}")
        return sorted(results, key=lambda r: r['file_path'])


@click.group()
@click.option('--debug', is_flag=True, help='Enable debug output')
def cli(debug: bool):
    """Receipt text extraction - amount, date, description and category."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    if debug:
        logging.getLogger().setLevel(logging.DEBUG)


@cli.command()
@click.argument('source', type=click.Path(exists=True, dir_okay=False, allow_dash=True, path_type=Path))
@click.option('--lang', 'language', default='eng', callback=_language_option,
              help='Receipt language: eng, chi_sim or deu')
@click.option('--confidence', type=click.FloatRange(0, 100), default=None,
              help='Recognition confidence of the text (default 95)')
@click.option('--today', type=click.DateTime(formats=['%Y-%m-%d']), default=None, callback=_today_option,
              help='Reference date for date fallback (YYYY-MM-DD)')
@click.option('--rules', type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None,
              help='Alternative category rules file')
def parse(source: Path, language: Language, confidence: Optional[float],
          today: Optional[date], rules: Optional[Path]):
    """
    Parse one receipt (text file, PDF with a text layer, or '-' for stdin).

    Example:
        billscan parse receipt.txt --lang deu
    """
    parser = ReceiptParser(classifier=CategoryClassifier(rules) if rules else None)
    try:
        recognition = load_recognition(source, confidence)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Failed to read {source}: {e}")
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if recognition is None:
        click.echo(f"Warning: no text layer in {source}; run OCR first", err=True)
    receipt = parser.parse_recognition(recognition, language, today=today)
    click.echo(json.dumps(receipt.to_dict(), ensure_ascii=False, indent=2))


@cli.command()
@click.option('--in', 'input_dir', required=True, type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Input directory containing .txt / .pdf receipts')
@click.option('--out', 'output_path', required=True, type=click.Path(dir_okay=False, path_type=Path),
              help='Output JSON file')
@click.option('--lang', 'language', default='eng', callback=_language_option,
              help='Receipt language: eng, chi_sim or deu')
@click.option('--max-workers', default=4, type=click.IntRange(min=1),
              help='Maximum number of parallel workers')
@click.option('--review-threshold', default=60.0, type=click.FloatRange(0, 100),
              help='Flag receipts with confidence below this value')
@click.option('--today', type=click.DateTime(formats=['%Y-%m-%d']), default=None, callback=_today_option,
              help='Reference date for date fallback (YYYY-MM-DD)')
@click.option('--rules', type=click.Path(exists=True, dir_okay=False, path_type=Path), default=None,
              help='Alternative category rules file')
def batch(input_dir: Path, output_path: Path, language: Language, max_workers: int,
          review_threshold: float, today: Optional[date], rules: Optional[Path]):
    """
    Parse a folder of receipts and write the results as JSON.

    Example:
        billscan batch --in ./receipts --out ./out/receipts.json --lang chi_sim
    """
    processor = BatchProcessor(
        language=language,
        parser=ReceiptParser(classifier=CategoryClassifier(rules) if rules else None),
        max_workers=max_workers,
        review_threshold=review_threshold,
        today=today,
    )
    results = processor.process_batch(input_dir)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(results, f, ensure_ascii=False, indent=2)

    click.echo("=" * 50)
    click.echo("PROCESSING SUMMARY")
    click.echo("=" * 50)
    click.echo(f"Total files found: {processor.stats['total_files']}")
    click.echo(f"Parsed: {processor.stats['processed']}")
    click.echo(f"No usable text: {processor.stats['failed']}")
    click.echo(f"Items needing review: {len(processor.review_queue.items)}")
    click.echo(f"Output: {output_path}")

    summary = processor.review_queue.get_summary()
    for reason, count in sorted(summary.get('reason_breakdown', {}).items()):
        click.echo(f"  {reason}: {count}")


@cli.command()
def languages():
    """List supported language codes and their currencies."""
    for language in Language:
        currency = LANGUAGE_CURRENCY[language]
        click.echo(f"{language.value}\t{language.name.lower()}\t{currency.code} {currency.symbol}")


if __name__ == '__main__':
    cli()
