import logging

from docintel.logging.logger import RedactingFormatter


def _render(message: str) -> str:
    record = logging.LogRecord("docintel", logging.INFO, __file__, 1, message, None, None)
    return RedactingFormatter("%(message)s").format(record)


class TestRedactingFormatter:
    def test_masks_bearer_token(self) -> None:
        assert _render("Authorization: Bearer ya29.a0AfH6SM") == "Authorization: Bearer [redacted]"

    def test_masks_credential_fields(self) -> None:
        rendered = _render('{"access_token": "ya29.abc", "expires_in": 3599}')

        assert "ya29.abc" not in rendered
        assert '"expires_in": 3599' in rendered

    def test_masks_form_encoded_secret(self) -> None:
        rendered = _render("grant_type=client_credentials&client_secret=s3cr3t&scope=x")

        assert "s3cr3t" not in rendered
        assert "scope=x" in rendered

    def test_plain_messages_are_unchanged(self) -> None:
        assert _render("Stored document doc_1 (lease.pdf, 10 bytes)") == (
            "Stored document doc_1 (lease.pdf, 10 bytes)"
        )
