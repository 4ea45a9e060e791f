"""Unit tests for the source-link-status aspect payload."""

from sleuther.domain.linkcheck.model import (
    LinkCheckResult,
    LinkStatus,
    LinkStatusAspect,
)


class TestLinkStatusAspect:
    def test_payload_is_the_url_mapping(self):
        aspect = LinkStatusAspect.from_results(
            {
                "https://a.example.org/x": LinkCheckResult(
                    url="https://a.example.org/x",
                    status=LinkStatus.SUCCESS,
                    attempts=1,
                    http_status_code=200,
                ),
                "ftp://b.example.org/y": LinkCheckResult(
                    url="ftp://b.example.org/y",
                    status=LinkStatus.ERROR,
                    attempts=3,
                    error="ConnectionRefusedError: refused",
                ),
            }
        )

        payload = aspect.to_payload()

        assert list(payload) == ["https://a.example.org/x", "ftp://b.example.org/y"]
        assert payload["https://a.example.org/x"] == {
            "status": "success",
            "attempts": 1,
            "deferrals": 0,
            "httpStatusCode": 200,
        }
        assert payload["ftp://b.example.org/y"]["errorDetails"] == (
            "ConnectionRefusedError: refused"
        )

    def test_reads_back_from_payload(self):
        payload = {"https://a.example.org/x": {"status": "notfound", "attempts": 1}}

        aspect = LinkStatusAspect.from_payload(payload)

        assert aspect.status_of("https://a.example.org/x") is LinkStatus.NOTFOUND
        assert aspect.to_payload() == {
            "https://a.example.org/x": {"status": "notfound", "attempts": 1, "deferrals": 0}
        }

    def test_canonical_json_is_stable(self):
        payload = {
            "https://b.example.org": {"status": "success", "attempts": 1},
            "https://a.example.org": {"status": "error", "attempts": 3},
        }
        assert (
            LinkStatusAspect.from_payload(payload).canonical_json()
            == LinkStatusAspect.from_payload(dict(reversed(payload.items()))).canonical_json()
        )
