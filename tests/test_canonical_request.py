"""
Test suite for canonical request construction
"""

from datetime import datetime, timezone

from solarnetwork_sdk.net import HttpHeaders
from solarnetwork_sdk.signing import (
    CanonicalRequestBuilder,
    EMPTY_STRING_SHA256_HEX,
    RequestDescriptor,
    canonical_content_sha256,
    canonical_header_names,
    canonical_headers,
    canonical_query_parameters,
    canonical_signed_header_names,
    compute_signature_data,
    sha256,
    to_hex,
)
from solarnetwork_sdk.util import MultiMap

TEST_DATE = datetime(2017, 4, 25, 14, 30, 0, tzinfo=timezone.utc)


def simple_request(**kwargs) -> RequestDescriptor:
    request = RequestDescriptor(path="/api/test", request_date=TEST_DATE, **kwargs)
    request.headers.put(HttpHeaders.HOST, "localhost")
    return request


class TestCanonicalHeaderNames:
    """Test selection of signed header names"""

    def test_minimal(self):
        headers = HttpHeaders({"Host": "localhost"})
        assert canonical_header_names(headers) == ["date", "host"]

    def test_sn_date_from_header(self):
        headers = HttpHeaders({"Host": "localhost", "X-SN-Date": "x"})
        assert canonical_header_names(headers) == ["host", "x-sn-date"]

    def test_sn_date_from_signed_names(self):
        headers = HttpHeaders({"Host": "localhost"})
        assert canonical_header_names(headers, ["x-sn-date"]) == ["host", "x-sn-date"]

    def test_sn_date_override(self):
        headers = HttpHeaders({"Host": "localhost", "X-SN-Date": "x"})
        assert canonical_header_names(headers, use_sn_date=False) == ["date", "host"]

    def test_content_headers_when_present(self):
        """Test that content headers are signed only when present"""
        headers = HttpHeaders({
            "Host": "localhost",
            "Digest": "sha-256=abc",
            "Content-Type": "text/plain",
            "Content-MD5": "foobar",
            "Accept": "text/plain",
        })
        assert canonical_header_names(headers) == ["content-md5", "content-type", "date", "digest", "host"]

    def test_extra_names_deduplicated(self):
        headers = HttpHeaders({"Host": "localhost"})
        assert canonical_header_names(headers, ["HOST", "X-Foo", "x-foo", "Date"]) == ["date", "host", "x-foo"]


class TestCanonicalParts:
    """Test the individual canonical request parts"""

    def test_query_parameters_sorted(self):
        params = MultiMap({"foo": "bar", "bim": "bam", "a": ["2", "1"]})
        assert canonical_query_parameters(params) == "a=2&a=1&bim=bam&foo=bar"

    def test_query_parameters_empty(self):
        assert canonical_query_parameters(MultiMap()) == ""

    def test_query_parameters_escaped(self):
        """Test that RFC 3986 reserved characters are all escaped"""
        params = MultiMap({"q": "a b!'()*~", "é": True})
        assert canonical_query_parameters(params) == "q=a%20b%21%27%28%29%2A~&%C3%A9=true"

    def test_headers(self):
        headers = HttpHeaders({"Host": " localhost ", "Date": "ignored"})
        assert canonical_headers(["date", "host"], headers, TEST_DATE) == (
            "date:Tue, 25 Apr 2017 14:30:00 GMT\nhost:localhost\n"
        )

    def test_headers_missing_value(self):
        assert canonical_headers(["x-foo"], HttpHeaders(), TEST_DATE) == "x-foo:\n"

    def test_signed_header_names(self):
        assert canonical_signed_header_names(["date", "host"]) == "date;host"

    def test_content_sha256(self):
        assert canonical_content_sha256(None) == EMPTY_STRING_SHA256_HEX
        assert canonical_content_sha256(sha256("")) == EMPTY_STRING_SHA256_HEX
        assert canonical_content_sha256(sha256("Hello.")) == (
            "2d8bd7d9bb5f85ba643f0110d50cb506a1fe439e769a22503193ea6046bb87f7"
        )


class TestCanonicalRequestBuilder:
    """Test building the complete canonical request"""

    def test_build(self):
        builder = CanonicalRequestBuilder(simple_request())

        assert builder.header_names() == ["date", "host"]
        assert builder.build() == (
            "GET\n/api/test\n\ndate:Tue, 25 Apr 2017 14:30:00 GMT\nhost:localhost\ndate;host\n"
            + EMPTY_STRING_SHA256_HEX
        )

    def test_build_with_names(self):
        request = simple_request(signed_header_names=["X-SN-Date"])
        canonical = CanonicalRequestBuilder(request).build(["host", "x-sn-date"])

        assert canonical == (
            "GET\n/api/test\n\nhost:localhost\nx-sn-date:Tue, 25 Apr 2017 14:30:00 GMT\nhost;x-sn-date\n"
            + EMPTY_STRING_SHA256_HEX
        )

    def test_signature_data(self):
        builder = CanonicalRequestBuilder(simple_request())
        canonical = builder.build()

        assert builder.signature_data() == (
            "SNWS2-HMAC-SHA256\n20170425T143000Z\n" + to_hex(sha256(canonical))
        )
        assert builder.signature_data(canonical) == compute_signature_data(canonical, TEST_DATE)
