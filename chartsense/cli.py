"""
Command-line interface for chartsense.

Provides commands for:
- Classifying a dataset file and listing chart recommendations
- Describing the columns of a dataset file
"""

import json
import sys
import time
from pathlib import Path

import click

from chartsense import __version__
from chartsense.core.config import ClassifierConfig
from chartsense.core.exceptions import ChartSenseException
from chartsense.core.logging_config import setup_logging, get_logger
from chartsense.core.pretty_output import PrettyOutput as po
from chartsense.loaders import load_dataframe
from chartsense.profiler.classifier import DatasetClassifier
from chartsense.profiler.column_stats import describe_dataframe
from chartsense.profiler.patterns import to_title_case

logger = get_logger(__name__)

LOG_LEVELS = click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False)


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    chartsense - Automatic chart recommendations for tabular data.

    Scores every column as a metric and as a dimension, pairs them by mutual
    information, and proposes bar, line, area, pie and histogram charts.
    """
    pass


def _load(file_path, delimiter, sample):
    df = load_dataframe(file_path, delimiter=delimiter, sample=sample)
    dataset = describe_dataframe(df, file_name=Path(file_path).name, file_size=Path(file_path).stat().st_size)
    return df, dataset


def _print_classification(result, dataset, duration):
    roles = result.column_roles

    po.header(f"chartsense: {dataset.file_name}")
    po.key_value("Rows", f"{dataset.row_count:,}")
    po.key_value("Columns", dataset.column_count)
    po.key_value("Dataset type", f"{result.label} ({result.type})", value_color=po.PRIMARY)
    po.key_value("Confidence", po.confidence_indicator(result.confidence))
    if result.description:
        po.key_value("About", result.description)

    po.section("Column roles")
    po.key_value("Target", roles.target_column or "none", value_color=po.SUCCESS)
    po.key_value("Metrics", ", ".join(roles.numeric_columns) or "none")
    po.key_value("Dimensions", ", ".join(roles.categorical_columns) or "none")
    po.key_value("Dates", ", ".join(roles.date_columns) or "none")

    po.section(f"Recommended charts ({len(result.recommendations)})")
    if not result.recommendations:
        po.warning("No chart recommendations for this dataset")
    for rank, rec in enumerate(result.recommendations, start=1):
        po.recommendation(rank, rec)

    po.blank_line()
    po.task_complete("Classification complete", duration)


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json'], case_sensitive=False),
              default='text', help='Output format')
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write JSON result to this path')
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True, dir_okay=False),
              help='YAML file with classifier settings')
@click.option('--sample', '-s', type=click.IntRange(min=1), default=None,
              help='Classify only the first N rows')
@click.option('--delimiter', '-d', default=None, help='Column delimiter for CSV files (default: auto-detect)')
@click.option('--log-level', type=LOG_LEVELS, default='WARNING', help='Logging level')
@click.option('--log-file', type=click.Path(), help='Optional log file path')
def classify(file_path, output_format, output, config_path, sample, delimiter, log_level, log_file):
    """
    Classify a dataset file and recommend charts.

    FILE_PATH: CSV, Excel or JSON data file

    Examples:

    \b
    # Colored summary
    chartsense classify sales.csv

    \b
    # JSON result written to a file
    chartsense classify sales.csv --format json -o result.json

    \b
    # Custom thresholds
    chartsense classify survey.xlsx -c chartsense.yaml
    """
    setup_logging(level=log_level, log_file=log_file)
    logger.info(f"Classifying {file_path}")

    try:
        config = ClassifierConfig.from_yaml(config_path) if config_path else ClassifierConfig()
        start = time.time()
        df, dataset = _load(file_path, delimiter, sample)
        result = DatasetClassifier(config=config).classify(dataset, df)
        duration = time.time() - start

        payload = result.to_dict()
        payload["dataset"] = {
            "file_name": dataset.file_name,
            "row_count": dataset.row_count,
            "column_count": dataset.column_count,
        }

        if output:
            Path(output).parent.mkdir(parents=True, exist_ok=True)
            with open(output, 'w', encoding='utf-8') as f:
                json.dump(payload, f, indent=2)

        if output_format.lower() == 'json':
            click.echo(json.dumps(payload, indent=2))
        else:
            _print_classification(result, dataset, duration)
            if output:
                po.output_file("JSON", output)
        sys.exit(0)

    except ChartSenseException as e:
        logger.error(f"Classification failed: {e}")
        po.error(str(e))
        sys.exit(1)


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json'], case_sensitive=False),
              default='text', help='Output format')
@click.option('--sample', '-s', type=click.IntRange(min=1), default=None,
              help='Describe only the first N rows')
@click.option('--delimiter', '-d', default=None, help='Column delimiter for CSV files (default: auto-detect)')
@click.option('--log-level', type=LOG_LEVELS, default='WARNING', help='Logging level')
def describe(file_path, output_format, sample, delimiter, log_level):
    """
    Print the column descriptors the classifier works from.

    FILE_PATH: CSV, Excel or JSON data file
    """
    setup_logging(level=log_level)

    try:
        _, dataset = _load(file_path, delimiter, sample)
    except ChartSenseException as e:
        po.error(str(e))
        sys.exit(1)

    if output_format.lower() == 'json':
        click.echo(json.dumps(dataset.to_dict(), indent=2))
        sys.exit(0)

    po.header(f"chartsense: {dataset.file_name}")
    po.key_value("Rows", f"{dataset.row_count:,}")
    po.key_value("Columns", dataset.column_count)
    po.blank_line()

    table = []
    for col in dataset.columns:
        summary = ""
        if col.min is not None:
            summary = f"{col.min:g} .. {col.max:g} (mean {col.mean:g})"
        table.append((to_title_case(col.name), col.type, col.unique_count, col.null_count, summary))
    po.compact_table(["Column", "Type", "Distinct", "Nulls", "Range"], table)
    sys.exit(0)


def main():
    cli()


if __name__ == '__main__':
    main()
