"""
Loading and saving temporal networks as delimited text.

Input files have a header row naming the columns ``node1`` (source),
``node2`` (target) and optionally ``time``; other columns are ignored. The
delimiter is detected from the header: the first of
``CANDIDATE_DELIMITERS`` whose split of the header contains both node
columns wins. Without a ``time`` column the i-th data row (1-based) is
placed at time step i.

Files are written as ``time node1 node2`` with single spaces, which the
loader reads back into an equal log.
"""

import os
from pathlib import Path
from typing import Optional

import polars as pl

from .edge_log import TemporalEdgeLog
from ..common.exceptions import DataFormatError
from ..common.logging_config import get_logger, log_function_entry, LoggingTimer

logger = get_logger(__name__)

# Order matters: the first delimiter producing both node columns is used
CANDIDATE_DELIMITERS = (" ", "\t", ";", ",")

SOURCE_COLUMN = "node1"
TARGET_COLUMN = "node2"
TIME_COLUMN = "time"
ROW_COLUMN = "__row"


def detect_delimiter(header: str) -> Optional[str]:
    """
    Detect the column delimiter of a header line.

    Parameters
    ----------
    header : str
        First line of the file, without the line terminator

    Returns
    -------
    str or None
        The first candidate delimiter whose split contains ``node1`` and
        ``node2``, None if there is none

    Examples
    --------
    >>> detect_delimiter("time;node1;node2")
    ';'
    >>> detect_delimiter("source,target") is None
    True
    """
    for delimiter in CANDIDATE_DELIMITERS:
        columns = header.split(delimiter)
        if SOURCE_COLUMN in columns and TARGET_COLUMN in columns:
            return delimiter
    return None


def load_temporal_network(
    file_path: str,
    undirected: bool = False,
    **options
) -> TemporalEdgeLog:
    """
    Load a temporal network from a delimited text file.

    Parameters
    ----------
    file_path : str
        Path to the file
    undirected : bool, default False
        Also add the reverse of every edge at the same time step
    **options
        Extraction options of the returned ``TemporalEdgeLog``
        (``reverse_time``, ``exact_time_adjacency``, ``prune``)

    Returns
    -------
    TemporalEdgeLog
        The loaded log. A file that is empty or lacks the node columns
        yields an empty log and a logged warning.

    Raises
    ------
    DataFormatError
        If the file does not exist, cannot be parsed, or has a time value
        that is not an integer

    Examples
    --------
    >>> log = load_temporal_network("network.tedges")
    >>> log = load_temporal_network("contacts.csv", undirected=True)
    """
    log_function_entry("load_temporal_network", file_path=file_path, undirected=undirected)

    path = Path(file_path)
    if not path.exists():
        raise DataFormatError(
            f"Temporal network file not found: {file_path}",
            format_type="edge sequence",
            file_path=str(file_path)
        )

    log = TemporalEdgeLog(**options)

    with open(path, "r", encoding="utf-8") as f:
        header = f.readline().rstrip("\r\n")

    if not header:
        logger.warning(f"Temporal network file is empty: {file_path}")
        return log

    delimiter = detect_delimiter(header)
    if delimiter is None:
        logger.warning(
            f"No '{SOURCE_COLUMN}'/'{TARGET_COLUMN}' columns found in header of {file_path}; "
            f"returning empty temporal network"
        )
        return log

    with LoggingTimer("load_temporal_network", {"file": str(path)}):
        edges = _read_edge_table(path, delimiter)
        for time, source, target in edges.iter_rows():
            log.add_edge(time, source, target)
            if undirected:
                log.add_edge(time, target, source)

    logger.info(f"Loaded temporal network from {file_path}: "
                f"{log.length} time steps, {log.edge_count} edges")
    return log


def _read_edge_table(path: Path, delimiter: str) -> pl.DataFrame:
    """Read the (time, node1, node2) table, dropping rows with empty endpoints."""
    try:
        # Fields beyond the header are ignored, e.g. a trailing delimiter
        df = pl.read_csv(path, separator=delimiter, infer_schema_length=0,
                         truncate_ragged_lines=True)
    except pl.exceptions.NoDataError:
        return pl.DataFrame(schema={TIME_COLUMN: pl.Int64, SOURCE_COLUMN: pl.Utf8, TARGET_COLUMN: pl.Utf8})
    except pl.exceptions.ComputeError as e:
        raise DataFormatError(
            f"Failed to parse temporal network file: {str(e)}",
            format_type="edge sequence",
            file_path=str(path),
            cause=e
        )

    # Row numbers are assigned before filtering, matching the file's data lines
    df = df.with_row_index(ROW_COLUMN, offset=1)
    if TIME_COLUMN not in df.columns:
        df = df.with_columns(pl.col(ROW_COLUMN).cast(pl.Int64).alias(TIME_COLUMN))

    df = df.filter(
        pl.col(SOURCE_COLUMN).is_not_null() & (pl.col(SOURCE_COLUMN) != "")
        & pl.col(TARGET_COLUMN).is_not_null() & (pl.col(TARGET_COLUMN) != "")
    )

    try:
        return df.select(
            pl.col(TIME_COLUMN).cast(pl.Int64, strict=True),
            pl.col(SOURCE_COLUMN),
            pl.col(TARGET_COLUMN)
        ).filter(pl.col(TIME_COLUMN).is_not_null())
    except (pl.exceptions.ComputeError, pl.exceptions.InvalidOperationError) as e:
        raise DataFormatError(
            f"Time column contains non-integer values: {str(e)}",
            format_type="edge sequence",
            file_path=str(path),
            cause=e
        )


def save_temporal_network(log: TemporalEdgeLog, file_path: str) -> None:
    """
    Save a temporal network as ``time node1 node2`` lines.

    Existing files are overwritten. Node identifiers are written with
    ``str()`` and must not contain spaces.

    Parameters
    ----------
    log : TemporalEdgeLog
        Temporal network to save
    file_path : str
        Output path; parent directories are created
    """
    log_function_entry("save_temporal_network", file_path=file_path, edges=log.edge_count)

    path = Path(file_path)
    os.makedirs(path.parent, exist_ok=True)

    times, sources, targets = [], [], []
    for time, source, target in log.iter_edges():
        times.append(time)
        sources.append(str(source))
        targets.append(str(target))

    df = pl.DataFrame(
        {TIME_COLUMN: times, SOURCE_COLUMN: sources, TARGET_COLUMN: targets},
        schema={TIME_COLUMN: pl.Int64, SOURCE_COLUMN: pl.Utf8, TARGET_COLUMN: pl.Utf8}
    )
    df.write_csv(str(path), separator=" ", quote_style="never")

    logger.info(f"Saved temporal network with {log.edge_count} edges to {file_path}")


def aggregates_match(log_a: TemporalEdgeLog, log_b: TemporalEdgeLog) -> bool:
    """
    Check whether two temporal networks have identical weighted aggregate networks.

    This is the property preserved by both null models of
    ``NullModelSampler``.
    """
    match = log_a.aggregate_network == log_b.aggregate_network
    logger.info("Aggregate networks are identical" if match else "Aggregate networks differ")
    return match
