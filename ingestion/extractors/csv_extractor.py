"""
CSV decoding into row dictionaries
"""

import csv
import io
import pandas as pd
from typing import List
from schemas.ingestion import Row
from core.exceptions import MalformedInputError
import logging

logger = logging.getLogger(__name__)


class CSVDecoder:
    """
    Decode delimited text into rows keyed by the header.

    Handles:
    - First non-blank line as header
    - Quoted fields containing the delimiter or line breaks
    - Whitespace trimming of headers and values
    - Blank line skipping

    Every record must have exactly as many fields as the header, and header
    names must be unique and non-empty.

    Values are kept as text; typing is decided later against the table schema.
    """

    def __init__(self, encoding: str = "utf-8-sig"):
        self.encoding = encoding

    def decode_bytes(self, raw: bytes) -> List[Row]:
        """Decode an object body with the configured encoding, then parse it"""
        try:
            text = raw.decode(self.encoding)
        except UnicodeDecodeError as e:
            raise MalformedInputError(
                f"Source is not valid {self.encoding} text",
                context={"encoding": self.encoding, "position": e.start},
                original_exception=e
            )
        return self.decode(text)

    def decode(self, raw_text: str) -> List[Row]:
        """
        Parse CSV text into a fully materialized list of rows.

        Raises:
            MalformedInputError: If the text cannot be tokenized against the
                header (unterminated quote, too many or too few fields,
                duplicate or empty header names)
        """
        if not raw_text.strip():
            logger.info("Source text is empty, nothing to decode")
            return []

        try:
            df = pd.read_csv(
                io.StringIO(raw_text),
                dtype=str,
                na_filter=False,
                skip_blank_lines=True,
                skipinitialspace=True,
                quotechar='"',
            )
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise MalformedInputError(
                "Failed to parse CSV content",
                context={"parser_error": str(e)},
                original_exception=e
            )

        # pandas turns the first column into an index when the first record
        # has one field more than the header
        if len(df) and not isinstance(df.index, pd.RangeIndex):
            raise MalformedInputError(
                "Record has more fields than the header",
                context={"header_width": len(df.columns), "line_number": 2}
            )

        # pandas renames duplicate/empty headers and pads short records, so
        # both are checked against the raw records
        columns = self._check_record_widths(raw_text)

        rows: List[Row] = []
        for values in df.itertuples(index=False, name=None):
            rows.append({
                column: value.strip() if isinstance(value, str) else ""
                for column, value in zip(columns, values)
            })

        logger.info(f"Decoded {len(rows)} rows with columns {columns}")
        return rows

    @staticmethod
    def _check_record_widths(raw_text: str) -> List[str]:
        """Validate header names and record widths, returning the trimmed header"""
        reader = csv.reader(io.StringIO(raw_text), quotechar='"', skipinitialspace=True)

        header = None
        for record in reader:
            if not record or (len(record) == 1 and not record[0].strip()):
                continue

            if header is None:
                header = [name.strip() for name in record]
                duplicates = sorted({name for name in header if header.count(name) > 1})
                if "" in header or duplicates:
                    raise MalformedInputError(
                        "Header names must be unique and non-empty",
                        context={"header": header, "duplicates": duplicates}
                    )
                continue

            if len(record) != len(header):
                raise MalformedInputError(
                    f"Record has {len(record)} fields, header has {len(header)}",
                    context={
                        "header_width": len(header),
                        "record_width": len(record),
                        "line_number": reader.line_num
                    }
                )

        return header or []
