"""
Text renderings of a ComparisonResult: the exportable SQL report and the
console plan printed by the CLI.
"""

from datetime import datetime, timezone
from typing import Iterable, Optional

from sqompare.comparator import ComparisonResult

GREEN = '\033[92m'
YELLOW = '\033[93m'
RESET = '\033[0m'


def join_queries(queries: Iterable[str]) -> str:
    """Joins statements with a blank line between them."""
    return "\n\n".join(q for q in queries if q)


def generate_report(
    result: ComparisonResult,
    source_name: str,
    target_name: str,
    generated_at: Optional[datetime] = None
) -> str:
    """
    Builds the exportable report: a commented summary followed by the
    generated statements, ready to be saved as a .sql file.

    Args:
        result: The comparison to report on
        source_name: Display name of the first input (e.g. its file name)
        target_name: Display name of the second input
        generated_at: Report timestamp, defaults to now (UTC)

    Returns:
        The report text
    """
    generated_at = generated_at or datetime.now(timezone.utc)

    report = "-- SQompare Database Structure Comparison Report\n"
    report += f"-- Generated on: {generated_at.isoformat()}\n"
    report += f"-- {result.source_label}: {source_name}\n"
    report += f"-- {result.target_label}: {target_name}\n\n"

    report += "-- SUMMARY:\n"
    report += f"-- Missing Tables: {len(result.missing_tables)}\n"
    report += f"-- Missing Columns: {len(result.missing_columns)}\n"
    report += f"-- Different Columns: {len(result.different_columns)}\n"
    report += f"-- Matching Tables: {len(result.matching_tables)}\n\n"

    if result.create_table_queries:
        report += "-- CREATE TABLE QUERIES FOR MISSING TABLES:\n"
        report += "-- Execute these queries to create missing tables\n\n"
        report += join_queries(result.create_table_queries)
        report += "\n\n"

    if result.alter_queries:
        report += "-- ALTER TABLE QUERIES TO ADD MISSING COLUMNS:\n"
        report += "-- Execute these queries to add missing columns\n\n"
        report += join_queries(result.alter_queries)
        report += "\n"
    elif not result.modify_queries:
        report += "-- No ALTER TABLE queries needed.\n"
        report += "-- All column structures are in sync!\n"

    if result.modify_queries:
        report += "\n-- ALTER TABLE QUERIES TO MODIFY DIFFERENT COLUMNS:\n"
        report += f"-- Column definitions are taken from {result.source_label}\n\n"
        report += join_queries(result.modify_queries)
        report += "\n"

    return report


def format_plan(result: ComparisonResult, use_color: bool = True) -> str:
    """Human readable summary of a comparison for the console."""
    if use_color:
        green, yellow, reset = GREEN, YELLOW, RESET
    else:
        green = yellow = reset = ''

    output_content = f"Comparison Plan ({result.source_label} vs {result.target_label}):\n"

    for missing in result.missing_tables:
        output_content += f"{green}  + Create Table: {missing.table_name} (missing from {missing.missing_from}){reset}\n"
        for col in missing.table.columns:
            output_content += f"{green}    + Column: {col.name} ({col.data_type}){reset}\n"

    for missing in result.missing_columns:
        output_content += (
            f"{green}  + Add Column: {missing.table_name}.{missing.column_name} "
            f"({missing.data_type}) missing from {missing.missing_from}{reset}\n"
        )

    for diff in result.different_columns:
        output_content += f"{yellow}  ~ Modify Column: {diff.table_name}.{diff.column_name}{reset}\n"
        for change in diff.differences:
            output_content += f"{yellow}      ~ {change}{reset}\n"

    if result.matching_tables:
        output_content += f"  = Matching Tables: {len(result.matching_tables)}\n"

    if not result.has_differences:
        output_content += "No differences detected.\n"

    return output_content
