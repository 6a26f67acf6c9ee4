"""Tests for crumbs.private — encrypted child view sharing the parent jar."""

from crumbs.cookie import Cookie
from crumbs.cookies import Cookies
from crumbs.key import Key
from crumbs.private import decrypt_value, encrypt_value


class TestPrivateCookies:
    def test_get_absent(self) -> None:
        assert Cookies().private.get(Key.generate(), "foo") is None

    def test_add_get_roundtrip(self) -> None:
        key = Key.generate()
        cookies = Cookies()
        cookie = Cookie("foo", "bar", httponly=True)
        cookies.private.add(key, cookie)
        assert cookies.private.get(key, "foo") == cookie

    def test_raw_value_hides_plaintext(self) -> None:
        key = Key.generate()
        cookies = Cookies()
        cookies.private.add(key, Cookie("foo", "secret-value"))
        raw = cookies.get("foo")
        assert raw is not None
        assert raw.value != "secret-value"
        assert "secret-value" not in raw.value

    def test_plain_cookie_does_not_decrypt(self) -> None:
        key = Key.generate()
        cookies = Cookies()
        cookies.add(Cookie("foo", "bar"))
        assert cookies.private.get(key, "foo") is None

    def test_wrong_key(self) -> None:
        cookies = Cookies()
        cookies.private.add(Key.generate(), Cookie("foo", "bar"))
        assert cookies.private.get(Key.generate(), "foo") is None

    def test_signed_and_private_keys_do_not_mix(self) -> None:
        key = Key.generate()
        cookies = Cookies()
        cookies.signed.add(key, Cookie("foo", "bar"))
        assert cookies.private.get(key, "foo") is None

    def test_private_cookie_from_request(self) -> None:
        key = Key.generate()
        outgoing = Cookies()
        outgoing.private.add(key, Cookie("cart", "3 items"))
        (header,) = outgoing.set_cookie_headers()

        incoming = Cookies([header])
        assert incoming.private.get(key, "cart") == Cookie("cart", "3 items")

    def test_remove(self) -> None:
        key = Key.generate()
        cookies = Cookies()
        private = cookies.private
        cookie = Cookie("foo", "bar")
        private.add(key, cookie)
        assert private.get(key, "foo") is not None
        private.remove(cookie)
        assert private.get(key, "foo") is None

    def test_remove_by_name(self) -> None:
        key = Key.generate()
        outgoing = Cookies()
        outgoing.private.add(key, Cookie("foo", "bar"))
        (header,) = outgoing.set_cookie_headers()
        cookies = Cookies([header])
        assert cookies.private.get(key, "foo") == Cookie("foo", "bar")
        cookies.private.remove("foo")
        assert cookies.private.get(key, "foo") is None


class TestValueEncryption:
    def test_fresh_nonce_per_value(self) -> None:
        key = Key.generate()
        assert encrypt_value(key, "a", "same") != encrypt_value(key, "a", "same")

    def test_bound_to_name(self) -> None:
        key = Key.generate()
        sealed = encrypt_value(key, "a", "value")
        assert decrypt_value(key, "a", sealed) == "value"
        assert decrypt_value(key, "b", sealed) is None

    def test_garbage_is_rejected(self) -> None:
        key = Key.generate()
        assert decrypt_value(key, "a", "not base64 at all!") is None
        assert decrypt_value(key, "a", "") is None
        assert decrypt_value(key, "a", "é") is None

    def test_truncated_is_rejected(self) -> None:
        key = Key.generate()
        sealed = encrypt_value(key, "a", "value")
        assert decrypt_value(key, "a", sealed[:10]) is None

    def test_unicode_plaintext(self) -> None:
        key = Key.generate()
        sealed = encrypt_value(key, "greeting", "héllo wörld")
        assert sealed.isascii()
        assert decrypt_value(key, "greeting", sealed) == "héllo wörld"
