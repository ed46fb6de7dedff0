import pytest, yaml
from passfile.lib import version
from passfile.lib.errors import ParseError
from passfile.lib.version import v0_2, v0_3, v0_4, parse

def test_registry():
    assert set(version.VERSIONS) == {'v0.2', 'v0.3', 'v0.4'}
    assert version.CurrentStore is v0_4.Store and version.CURRENT_VERSION == 'v0.4'

@pytest.mark.parametrize('cls', [v0_2.Store, v0_3.Store, v0_4.Store])
def test_new_store_layout(cls):
    raw = yaml.safe_load(cls.make_new('pw').write())
    keys = ['version', 'token', 'iv', 'salt', 'last_update', 'inner']
    if cls is v0_2.Store: keys.remove('salt')
    assert list(raw) == keys
    assert raw['version'] == cls.VERSION and raw['inner'] == []
    assert set(raw['last_update']) == {'secs_since_epoch', 'nanos_since_epoch'}

def test_parse_round_trip_is_locked():
    s = v0_4.Store.make_new('pw')
    assert s.decrypted()
    loaded, warning = parse(s.write())
    assert isinstance(loaded, v0_4.Store) and warning is None
    assert not loaded.decrypted()
    assert loaded.write() == s.write()

def test_v02_warns():
    loaded, warning = parse(v0_2.Store.make_new('pw').write())
    assert isinstance(loaded, v0_2.Store)
    assert 'v0.2 is deprecated for security reasons' in str(warning)
    assert 'passfile update' in str(warning)

def test_v03_has_no_warning():
    _s, warning = parse(v0_3.Store.make_new('pw').write())
    assert warning is None

def good_v04():
    return yaml.safe_load(v0_4.Store.make_new('pw').write())

def with_field(raw, value):
    raw['inner'] = [{'name': 'e', 'tags': [], 'fields': [{'name': 'f', 'value': value}],
                     'first_added': raw['last_update'], 'last_update': raw['last_update']}]
    return raw

@pytest.mark.parametrize('mutate', [
    lambda r: r.pop('version'),
    lambda r: r.update(version='v9.9'),
    lambda r: r.update(iv='AAAA'),
    lambda r: r.update(iv='not base64!'),
    lambda r: r.pop('salt'),
    lambda r: r.update(salt='AA'),
    lambda r: r.pop('inner'),
    lambda r: r.update(last_update='yesterday'),
    lambda r: with_field(r, {'Basic': 'capitalised tags belong to older files'}),
    lambda r: with_field(r, {'basic': 'x', 'protected': 'AAAA'}),
    lambda r: with_field(r, {'totp': {'issuer': 'x'}}),
])
def test_parse_rejects(mutate):
    raw = good_v04(); mutate(raw)
    with pytest.raises(ParseError):
        parse(yaml.safe_dump(raw))

@pytest.mark.parametrize('text', ['a: [', '- 1', 'just text', ''])
def test_parse_rejects_non_mappings(text):
    with pytest.raises(ParseError):
        parse(text)

def test_old_tags_rejected_by_v02():
    raw = yaml.safe_load(v0_2.Store.make_new('pw').write())
    with_field(raw, {'totp': {'issuer': 'x', 'secret': 'AAAA'}})
    with pytest.raises(ParseError):
        parse(yaml.safe_dump(raw))

def test_value_tags_on_disk():
    raw3 = with_field(yaml.safe_load(v0_3.Store.make_new('pw').write()), {'Protected': 'AAAAAAAAAAAAAAAAAAAAAA=='})
    s3, _ = parse(yaml.safe_dump(raw3))
    assert yaml.safe_load(s3.write())['inner'][0]['fields'][0]['value'] == {'Protected': 'AAAAAAAAAAAAAAAAAAAAAA=='}
    raw4 = with_field(good_v04(), {'basic': 'hello'})
    s4, _ = parse(yaml.safe_dump(raw4))
    assert s4.entry(0).field(0).value() == 'hello'

def test_nanosecond_timestamps_survive():
    stamp = {'secs_since_epoch': 1614834367, 'nanos_since_epoch': 123456789}
    raw = good_v04(); raw['last_update'] = stamp
    with_field(raw, {'basic': 'hello'})
    s, _ = parse(yaml.safe_dump(raw))
    out = yaml.safe_load(s.to_current('pw').write())
    assert out['last_update'] == stamp
    assert out['inner'][0]['first_added'] == stamp and out['inner'][0]['last_update'] == stamp

def test_nanosecond_timestamps_survive_migration():
    stamp = {'secs_since_epoch': 1614834367, 'nanos_since_epoch': 987654321}
    raw = yaml.safe_load(v0_2.Store.make_new('pw').write()); raw['last_update'] = stamp
    with_field(raw, {'Basic': 'hello'})
    s, _ = parse(yaml.safe_dump(raw))
    out = yaml.safe_load(s.to_current('pw').write())
    assert out['version'] == 'v0.4'
    assert out['last_update'] == stamp and out['inner'][0]['first_added'] == stamp

def test_keyed_hooks_are_abstract():
    from passfile.lib.version.common import Keyed
    class Partial(Keyed):
        VERSION = 'v0.x'
        hash_key = staticmethod(lambda salt, password: b'')
    with pytest.raises(TypeError):
        Keyed(None)
    with pytest.raises(TypeError):
        Partial(None)
