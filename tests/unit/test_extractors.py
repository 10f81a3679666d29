"""
Unit tests for source extraction and CSV decoding
"""

import pytest
from unittest.mock import Mock
from botocore.exceptions import ClientError, EndpointConnectionError
from ingestion.extractors.csv_extractor import CSVDecoder
from ingestion.extractors.s3_extractor import S3ObjectSource
from core.exceptions import MalformedInputError, SourceUnavailableError


class TestCSVDecoder:
    """Test CSV decoding"""

    def test_decode_rows_keyed_by_header(self):
        """One row per data line, keys equal to the header"""
        decoder = CSVDecoder()

        rows = decoder.decode("id,name,price\n1,Product A,10.99\n2,Product B,20.99\n3,Product C,30.99\n")

        assert len(rows) == 3
        assert all(set(row) == {"id", "name", "price"} for row in rows)
        assert rows[0] == {"id": "1", "name": "Product A", "price": "10.99"}
        assert rows[2]["price"] == "30.99"

    def test_values_stay_text(self):
        """No type inference: leading zeros and NA markers are preserved"""
        decoder = CSVDecoder()

        rows = decoder.decode("id,code,note\n007,NA,null\n")

        assert rows == [{"id": "007", "code": "NA", "note": "null"}]

    def test_blank_lines_skipped(self):
        decoder = CSVDecoder()

        rows = decoder.decode("\nid,name\n1,Alice\n\n2,Bob\n\n")

        assert [r["name"] for r in rows] == ["Alice", "Bob"]

    def test_values_and_headers_trimmed(self):
        decoder = CSVDecoder()

        rows = decoder.decode(" id , name \n 1 ,  Alice  \n")

        assert rows == [{"id": "1", "name": "Alice"}]

    def test_quoted_field_with_delimiter_and_newline(self):
        decoder = CSVDecoder()

        rows = decoder.decode('id,address\n1,"12 Main St, Springfield"\n2,"line one\nline two"\n')

        assert len(rows) == 2
        assert rows[0]["address"] == "12 Main St, Springfield"
        assert rows[1]["address"] == "line one\nline two"

    def test_empty_values_kept_as_empty_strings(self):
        decoder = CSVDecoder()

        rows = decoder.decode("id,name\n1,Alice\n2,\n,Charlie\n")

        assert rows == [
            {"id": "1", "name": "Alice"},
            {"id": "2", "name": ""},
            {"id": "", "name": "Charlie"},
        ]

    def test_too_few_fields_raises(self):
        decoder = CSVDecoder()

        with pytest.raises(MalformedInputError) as exc_info:
            decoder.decode("id,name,email\n1,Alice,a@example.com\n2,Bob\n")

        assert exc_info.value.context["record_width"] == 2
        assert exc_info.value.context["header_width"] == 3
        assert exc_info.value.context["line_number"] == 3

    def test_only_record_too_short_raises(self):
        decoder = CSVDecoder()

        with pytest.raises(MalformedInputError):
            decoder.decode("id,name,email\n1,Alice\n")

    def test_trailing_empty_field_is_not_short(self):
        decoder = CSVDecoder()

        rows = decoder.decode("id,name,email\n2,Bob,\n")

        assert rows == [{"id": "2", "name": "Bob", "email": ""}]

    def test_duplicate_header_raises(self):
        decoder = CSVDecoder()

        with pytest.raises(MalformedInputError) as exc_info:
            decoder.decode("id,id\n1,2\n")

        assert exc_info.value.context["duplicates"] == ["id"]

    def test_empty_header_name_raises(self):
        decoder = CSVDecoder()

        with pytest.raises(MalformedInputError):
            decoder.decode("id,,name\n1,2,3\n")

    def test_empty_text_decodes_to_no_rows(self):
        decoder = CSVDecoder()

        assert decoder.decode("") == []
        assert decoder.decode("  \n\n") == []

    def test_header_only_decodes_to_no_rows(self):
        decoder = CSVDecoder()

        assert decoder.decode("id,name\n") == []

    def test_unterminated_quote_raises(self):
        decoder = CSVDecoder()

        with pytest.raises(MalformedInputError) as exc_info:
            decoder.decode('id,name\n1,"Alice\n2,Bob\n')

        assert "parser_error" in exc_info.value.context

    def test_too_many_fields_raises(self):
        decoder = CSVDecoder()

        with pytest.raises(MalformedInputError):
            decoder.decode("id,name\n1,Alice\n2,Bob,extra\n")

    def test_extra_field_on_first_record_raises(self):
        decoder = CSVDecoder()

        with pytest.raises(MalformedInputError):
            decoder.decode("id,name\n1,Alice,extra\n2,Bob\n")

    def test_decode_bytes_strips_bom(self):
        decoder = CSVDecoder()

        rows = decoder.decode_bytes("\ufeffid,name\n1,Zoë\n".encode("utf-8"))

        assert rows == [{"id": "1", "name": "Zoë"}]

    def test_decode_bytes_invalid_encoding_raises(self):
        decoder = CSVDecoder(encoding="utf-8")

        with pytest.raises(MalformedInputError) as exc_info:
            decoder.decode_bytes(b"id,name\n1,\xff\xfe\n")

        assert exc_info.value.context["encoding"] == "utf-8"


class TestS3ObjectSource:
    """Test S3 object fetch"""

    @pytest.mark.asyncio
    async def test_fetch_returns_body(self, locator):
        s3_client = Mock()
        s3_client.get_object.return_value = {"Body": Mock(read=Mock(return_value=b"id\n1\n"))}

        source = S3ObjectSource(s3_client)
        body = await source.fetch(locator)

        assert body == b"id\n1\n"
        s3_client.get_object.assert_called_once_with(
            Bucket="import-bucket", Key="uploads/customers.csv"
        )

    @pytest.mark.asyncio
    async def test_missing_object_raises_source_unavailable(self, locator):
        s3_client = Mock()
        s3_client.get_object.side_effect = ClientError(
            {"Error": {"Code": "NoSuchKey", "Message": "Not found"}}, "GetObject"
        )

        source = S3ObjectSource(s3_client)

        with pytest.raises(SourceUnavailableError) as exc_info:
            await source.fetch(locator)

        assert exc_info.value.context["error_code"] == "NoSuchKey"
        assert exc_info.value.context["key"] == "uploads/customers.csv"

    @pytest.mark.asyncio
    async def test_connection_error_raises_source_unavailable(self, locator):
        s3_client = Mock()
        s3_client.get_object.side_effect = EndpointConnectionError(endpoint_url="https://s3.example")

        source = S3ObjectSource(s3_client)

        with pytest.raises(SourceUnavailableError):
            await source.fetch(locator)
