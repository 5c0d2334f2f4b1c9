import unittest

from vaultpreview.services.content_proxy.errors import ContentFetchError, InvalidRequest, Unauthorized, UpstreamError
from vaultpreview.services.content_proxy.gateway import ContentProxyGateway, GatewayOptions
from vaultpreview.services.content_proxy.headers import (
    inline_content_disposition,
    private_cache_control,
    sanitize_filename,
)
from vaultpreview.services.content_proxy.models import CallerCredentials
from vaultpreview.services.grant_http_client import GrantHttpClient, GrantHttpClientConfig
from vaultpreview.tests._fakes_http import SIGNED_URL, _FakeResponse, _FakeSession, connection_error, grant_payload

CREDS = CallerCredentials(cookie="sessionid=abc")
PDF_BYTES = b"%PDF-1.4 hello world"


def _gateway(grant_session, content_session, **options):
    client = GrantHttpClient(GrantHttpClientConfig(base_url="http://grants.local"), session=grant_session)
    return ContentProxyGateway(client, options=GatewayOptions(chunk_size=4, **options), session=content_session)


def _storage(content=PDF_BYTES, status=200, headers=None):
    if headers is None:
        headers = {"Content-Type": "application/pdf"}
    return _FakeResponse(status, content=content, headers=headers)


class TestContentGatewayUnit(unittest.TestCase):
    def test_empty_document_id_makes_no_calls(self):
        grant_session, content_session = _FakeSession(), _FakeSession()
        gateway = _gateway(grant_session, content_session)
        for doc_id in ("", "   ", None):
            with self.subTest(doc_id=doc_id):
                with self.assertRaises(InvalidRequest) as ctx:
                    gateway.handle(doc_id, CREDS)
                self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(grant_session.calls, [])
        self.assertEqual(content_session.calls, [])

    def test_unauthorized_session_never_fetches_content(self):
        for status in (401, 403):
            with self.subTest(status=status):
                grant_session = _FakeSession(_FakeResponse(status, json_data={"detail": "Invalid session"}))
                content_session = _FakeSession()
                with self.assertRaises(Unauthorized) as ctx:
                    _gateway(grant_session, content_session).handle("doc-1", CREDS)
                self.assertEqual(ctx.exception.status_code, 401)
                self.assertEqual(len(grant_session.calls), 1)
                self.assertEqual(content_session.calls, [])

    def test_grant_failure_passes_status_through(self):
        for status in (404, 500, 503):
            with self.subTest(status=status):
                content_session = _FakeSession()
                grant_session = _FakeSession(_FakeResponse(status, json_data={"detail": "internal trace"}))
                with self.assertRaises(UpstreamError) as ctx:
                    _gateway(grant_session, content_session).handle("doc-1", CREDS)
                self.assertEqual(ctx.exception.status_code, status)
                self.assertEqual(content_session.calls, [])

    def test_grant_transport_failure_is_bad_gateway(self):
        with self.assertRaises(UpstreamError) as ctx:
            _gateway(_FakeSession(connection_error()), _FakeSession()).handle("doc-1", CREDS)
        self.assertEqual(ctx.exception.status_code, 502)

    def test_content_fetch_failure_passes_status_through(self):
        storage = _storage(status=404, content=b"<Error>NoSuchKey</Error>")
        gateway = _gateway(_FakeSession(_FakeResponse(200, json_data=grant_payload())), _FakeSession(storage))
        with self.assertLogs("vaultpreview.services.content_proxy.gateway", level="WARNING") as logs:
            with self.assertRaises(ContentFetchError) as ctx:
                gateway.handle("doc-1", CREDS)
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertTrue(storage.closed)
        self.assertNotIn("s3cr3tsig", "\n".join(logs.output))
        self.assertNotIn("/bucket/", "\n".join(logs.output))

    def test_content_transport_failure_is_bad_gateway(self):
        gateway = _gateway(_FakeSession(_FakeResponse(200, json_data=grant_payload())), _FakeSession(connection_error()))
        with self.assertRaises(ContentFetchError) as ctx:
            gateway.handle("doc-1", CREDS)
        self.assertEqual(ctx.exception.status_code, 502)

    def test_success_streams_bytes_verbatim(self):
        storage = _storage()
        grant_session = _FakeSession(_FakeResponse(200, json_data=grant_payload()))
        content_session = _FakeSession(storage)

        out = _gateway(grant_session, content_session).handle("doc-1", CREDS)
        self.assertFalse(storage.closed)
        body = b"".join(out.body)

        self.assertEqual(body, PDF_BYTES)
        self.assertEqual(out.media_type, "application/pdf")
        self.assertEqual(out.headers["Content-Disposition"], 'inline; filename="report.pdf"')
        self.assertEqual(out.headers["Cache-Control"], "private, max-age=300")
        self.assertTrue(storage.closed)

        url, kwargs = content_session.calls[0]
        self.assertEqual(url, SIGNED_URL)
        self.assertTrue(kwargs["stream"])
        self.assertNotIn("headers", kwargs)
        self.assertEqual(grant_session.calls[0][1]["params"], {"expires": 5, "disposition": "inline"})

        rendered = repr(out.headers) + out.media_type
        self.assertNotIn("storage.example.com", rendered)
        self.assertNotIn("s3cr3tsig", rendered)

    def test_any_2xx_upstream_reply_is_success(self):
        storage = _storage(status=206)
        grant_session = _FakeSession(_FakeResponse(201, json_data=grant_payload()))
        out = _gateway(grant_session, _FakeSession(storage)).handle("doc-1", CREDS)
        self.assertEqual(b"".join(out.body), PDF_BYTES)
        self.assertTrue(storage.closed)

    def test_empty_2xx_grant_reply_is_bad_gateway(self):
        content_session = _FakeSession()
        with self.assertRaises(UpstreamError) as ctx:
            _gateway(_FakeSession(_FakeResponse(204)), content_session).handle("doc-1", CREDS)
        self.assertEqual(ctx.exception.status_code, 502)
        self.assertEqual(content_session.calls, [])

    def test_cache_lifetime_bounded_by_grant(self):
        grant_session = _FakeSession(_FakeResponse(200, json_data=grant_payload(expires_in_seconds=120)))
        out = _gateway(grant_session, _FakeSession(_storage())).handle("doc-1", CREDS)
        self.assertEqual(out.headers["Cache-Control"], "private, max-age=120")

    def test_configured_cache_lifetime_used_when_shorter(self):
        grant_session = _FakeSession(_FakeResponse(200, json_data=grant_payload()))
        out = _gateway(grant_session, _FakeSession(_storage()), cache_max_age_s=60).handle("doc-1", CREDS)
        self.assertEqual(out.headers["Cache-Control"], "private, max-age=60")

    def test_content_type_falls_back_to_storage_then_octet_stream(self):
        grant_session = _FakeSession(
            _FakeResponse(200, json_data=grant_payload(content_type=None)),
            _FakeResponse(200, json_data=grant_payload(content_type="")),
        )
        gateway = _gateway(grant_session, _FakeSession(_storage(headers={"Content-Type": "image/png"}), _storage(headers={})))
        self.assertEqual(gateway.handle("doc-1", CREDS).media_type, "image/png")
        self.assertEqual(gateway.handle("doc-1", CREDS).media_type, "application/octet-stream")

    def test_content_length_only_for_unencoded_bodies(self):
        grant_session = _FakeSession(
            _FakeResponse(200, json_data=grant_payload()),
            _FakeResponse(200, json_data=grant_payload()),
        )
        content_session = _FakeSession(
            _storage(headers={"Content-Type": "application/pdf", "Content-Length": str(len(PDF_BYTES))}),
            _storage(headers={"Content-Type": "application/pdf", "Content-Length": "7", "Content-Encoding": "gzip"}),
        )
        gateway = _gateway(grant_session, content_session)
        self.assertEqual(gateway.handle("doc-1", CREDS).headers["Content-Length"], str(len(PDF_BYTES)))
        self.assertNotIn("Content-Length", gateway.handle("doc-1", CREDS).headers)

    def test_missing_filename_uses_document_id(self):
        grant_session = _FakeSession(_FakeResponse(200, json_data=grant_payload(filename="")))
        out = _gateway(grant_session, _FakeSession(_storage())).handle("doc-9", CREDS)
        self.assertEqual(out.headers["Content-Disposition"], 'inline; filename="document_doc-9"')


class TestContentHeadersUnit(unittest.TestCase):
    def test_sanitize_filename(self):
        self.assertEqual(sanitize_filename("report.pdf"), "report.pdf")
        self.assertEqual(sanitize_filename('a"b.pdf'), "ab.pdf")
        self.assertEqual(sanitize_filename("../../etc/passwd"), "passwd")
        self.assertEqual(sanitize_filename("C:\\temp\\scan.png"), "scan.png")
        self.assertEqual(sanitize_filename("evil\r\nSet-Cookie: x.pdf"), "evilSet-Cookie: x.pdf")
        self.assertEqual(sanitize_filename("..", document_id="d1"), "document_d1")
        self.assertEqual(sanitize_filename(None), "document")

    def test_non_ascii_filename_gets_rfc5987_param(self):
        value = inline_content_disposition("报告.pdf")
        self.assertTrue(value.startswith('inline; filename="??.pdf"'))
        self.assertIn("filename*=UTF-8''%E6%8A%A5%E5%91%8A.pdf", value)

    def test_cache_control_never_negative(self):
        self.assertEqual(private_cache_control(300, 0), "private, max-age=0")
        self.assertEqual(private_cache_control(300, -5), "private, max-age=0")
        self.assertEqual(private_cache_control(300, 3600), "private, max-age=300")


if __name__ == "__main__":
    unittest.main()
