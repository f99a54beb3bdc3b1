from __future__ import annotations

from scoop.auth import errors
from scoop.auth.pages import render_bootstrap_page, render_error_page


def test_bootstrap_page_stores_token_then_navigates() -> None:
    page = render_bootstrap_page("aaa.bbb.ccc", "https://app.example.com/onboarding")
    assert "localStorage.setItem('authToken', jwtToken)" in page
    assert 'var jwtToken = "aaa.bbb.ccc";' in page
    assert 'var redirectUrl = "https://app.example.com/onboarding";' in page
    assert "}, 500);" in page


def test_bootstrap_page_cannot_break_out_of_script() -> None:
    page = render_bootstrap_page('x</script><script>alert("1")</script>', "https://app.example.com/?a=1&b=2")
    assert "</script><script>" not in page
    assert "\\u003c/script\\u003e" in page
    assert "a=1\\u0026b=2" in page


def test_error_page_escapes_message_and_redirects_to_signin() -> None:
    page = render_error_page(errors.NETWORK_ERROR, "<b>Network</b> error")
    assert "&lt;b&gt;Network&lt;/b&gt; error" in page
    assert '"/signin?error=network_error"' in page
    assert "}, 5000);" in page


def test_callback_error_kinds() -> None:
    assert errors.CallbackError(errors.NO_CODE).redirects_to_signin is True
    assert errors.CallbackError(errors.TOKEN_EXCHANGE_FAILED).redirects_to_signin is True
    assert errors.CallbackError(errors.USER_INFO_FAILED).redirects_to_signin is True
    assert errors.CallbackError(errors.NETWORK_ERROR).redirects_to_signin is False
    assert errors.CallbackError(errors.REDIRECT_ERROR).user_message == "Redirect configuration error"
    assert errors.CallbackError("something_else").user_message == "Authentication failed"
