import base64
import pytest
from passfile import config
from passfile.config import settings
from passfile.lib import crypto
from passfile.lib.errors import BadCrypt, BadUtf8, EncryptError

BASE_SALT = b"no seriously it's just random :P"
IV = b'this is the iv!!'

@pytest.fixture
def key():
    return crypto.hash_key_argon2('randomsaltstring', 'a temporary key for testing')

def test_production_argon2_costs():
    assert (config.ARGON2_TIME_COST, config.ARGON2_MEMORY_COST, config.ARGON2_PARALLELISM) == (5, 1_000_000, 1)

def test_fixed_vectors_are_sane():
    assert len(BASE_SALT) == settings.SALT_MAX_LENGTH and len(IV) == settings.IV_LENGTH

def test_argon2_key_deterministic(key):
    assert len(key) == 32
    assert key == crypto.hash_key_argon2('randomsaltstring', 'a temporary key for testing')
    assert key != crypto.hash_key_argon2('anothersaltstrin', 'a temporary key for testing')
    assert key != crypto.hash_key_argon2('randomsaltstring', 'a temporary key for testinG')

def test_sha256_key():
    assert crypto.hash_key_sha256('pw').hex() == '30c952fab122c3f9759f02a6d95c3758b246b4fee239957b2d4fee46e26170c4'

def test_kdf_salt_format():
    s = crypto.generate_kdf_salt()
    assert '=' not in s
    assert len(crypto.decode_kdf_salt(s)) == settings.KDF_SALT_BYTES
    assert s != crypto.generate_kdf_salt()

def test_encrypt_decrypt_various_sizes(key):
    for payload in [b'', b'a', b'hello world', b'x'*16, b'y'*4096]:
        blob = crypto.encrypt(payload, IV, key)
        assert len(blob) % 16 == 0 and blob != payload
        assert crypto.decrypt(blob, IV, key) == payload

def test_decrypt_bad_length(key):
    assert crypto.decrypt(b'', IV, key) is None
    assert crypto.decrypt(b'x'*17, IV, key) is None

def test_decrypt_bad_padding(key):
    # last block decrypts to a byte that is not valid PKCS7 padding
    raw = crypto._cipher(IV, key).encryptor()
    blob = raw.update(b'a'*15 + b'\x00') + raw.finalize()
    assert crypto.decrypt(blob, IV, key) is None

def test_bad_key_or_iv_length():
    with pytest.raises(EncryptError):
        crypto.encrypt(b'data', IV, b'short')
    with pytest.raises(EncryptError):
        crypto.encrypt(b'data', b'short', b'k'*32)

@pytest.mark.parametrize('val,salt_len', [
    ('', 32),
    ('longer password so that we have minimum length', 17),
] + [('foobarbaz', n) for n in range(24, 33)])
def test_salted_fixed_vectors(key, val, salt_len):
    data = val.encode()
    assert len(data) + salt_len >= settings.SALT_MAX_LENGTH
    blob = crypto.encrypt_with_salt(data, BASE_SALT[:salt_len], IV, key)
    assert crypto.decrypt_salted(blob, IV, key) == data
    inner = crypto.decrypt(blob, IV, key)
    assert inner[0] & 0x0F == salt_len - settings.SALT_MIN_LENGTH
    assert inner[0] & 0xF0 == BASE_SALT[0] & 0xF0
    assert inner[1:salt_len] == BASE_SALT[1:salt_len]

def test_salt_length_out_of_range(key):
    with pytest.raises(ValueError):
        crypto.encrypt_with_salt(b'x', BASE_SALT[:16], IV, key)
    with pytest.raises(ValueError):
        crypto.encrypt_with_salt(b'x', BASE_SALT + b'!', IV, key)

def test_salt_length_reaches_floor():
    for n in range(0, 48):
        for _ in range(20):
            s = crypto.salt_length_for(n)
            assert settings.SALT_MIN_LENGTH <= s <= settings.SALT_MAX_LENGTH
            assert s + n >= settings.SALT_MAX_LENGTH

def test_salted_hides_short_lengths(key):
    short = {len(crypto.encrypt_salted(v, IV, key)) for v in [b'', b'1', b'1234', b'x'*14]}
    assert short == {48}

def test_salted_round_trip_random(key):
    for v in [b'', b'1234', 'pässwörd'.encode(), b'z'*100]:
        assert crypto.decrypt_salted(crypto.encrypt_salted(v, IV, key), IV, key) == v

def test_wrong_key_never_yields_token():
    iv = crypto.generate_iv()
    blob = crypto.encrypt(settings.ENCRYPT_TOKEN, iv, crypto.hash_key_sha256('pw1'))
    assert crypto.decrypt(blob, iv, crypto.hash_key_sha256('wrong')) != settings.ENCRYPT_TOKEN

def test_to_text():
    assert crypto.to_text('☺'.encode()) == '☺'
    with pytest.raises(BadCrypt):
        crypto.to_text(None)
    with pytest.raises(BadUtf8):
        crypto.to_text(b'\xff\xfe')

def test_salted_short_payload_is_failure(key):
    # salt length nibble claims 32 bytes but only 6 follow
    assert crypto.decrypt_salted(crypto.encrypt(b'\x0f' + b'x'*5, IV, key), IV, key) is None
