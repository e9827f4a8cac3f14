import ipaddress

import pytest

from ginweb.proxies import TrustedProxies, parse_ip


def net(text):
    return ipaddress.ip_network(text, strict=False)


def test_default_trusts_everything():
    proxies = TrustedProxies()
    assert proxies.cidrs == [net("0.0.0.0/0"), net("::/0")]
    assert proxies.is_unsafe() is True


def test_valid_ipv4_cidr():
    proxies = TrustedProxies()
    proxies.set(["0.0.0.0/0"])
    assert proxies.cidrs == [net("0.0.0.0/0")]


def test_invalid_ipv4_cidr():
    with pytest.raises(ValueError):
        TrustedProxies().set(["192.168.1.33/33"])


def test_valid_ipv4_address():
    proxies = TrustedProxies()
    proxies.set(["192.168.1.33"])
    assert proxies.cidrs == [net("192.168.1.33/32")]


def test_invalid_ipv4_address():
    with pytest.raises(ValueError):
        TrustedProxies().set(["192.168.1.256"])


def test_valid_ipv6_address():
    proxies = TrustedProxies()
    proxies.set(["2002:0000:0000:1234:abcd:ffff:c0a8:0101"])
    assert proxies.cidrs == [net("2002:0000:0000:1234:abcd:ffff:c0a8:0101/128")]


def test_invalid_ipv6_address():
    with pytest.raises(ValueError):
        TrustedProxies().set(["gggg:0000:0000:1234:abcd:ffff:c0a8:0101"])


def test_valid_ipv6_cidr():
    proxies = TrustedProxies()
    proxies.set(["::/0"])
    assert proxies.cidrs == [net("::/0")]


def test_invalid_ipv6_cidr():
    with pytest.raises(ValueError):
        TrustedProxies().set(["gggg:0000:0000:1234:abcd:ffff:c0a8:0101/129"])


def test_valid_combination():
    proxies = TrustedProxies()
    proxies.set(["::/0", "192.168.0.0/16", "172.16.0.1"])
    assert proxies.cidrs == [net("::/0"), net("192.168.0.0/16"), net("172.16.0.1/32")]


def test_invalid_combination():
    with pytest.raises(ValueError):
        TrustedProxies().set(["::/0", "192.168.0.0/16", "172.16.0.256"])


def test_none_trusts_nothing():
    proxies = TrustedProxies()
    proxies.set(None)
    assert proxies.cidrs is None
    assert proxies.is_trusted("10.0.0.1") is False
    assert proxies.is_unsafe() is False


def test_is_trusted_and_safe():
    proxies = TrustedProxies(["10.0.0.0/8"])
    assert proxies.is_trusted("10.1.2.3") is True
    assert proxies.is_trusted("11.1.2.3") is False
    assert proxies.is_trusted("::ffff:10.1.2.3") is True
    assert proxies.is_unsafe() is False


def test_parse_ip():
    assert parse_ip("::ffff:192.168.0.1") == ipaddress.IPv4Address("192.168.0.1")
    assert parse_ip("2002::1") == ipaddress.IPv6Address("2002::1")
    assert parse_ip("192.168.1.256") is None


def test_validate_header_all_trusted_returns_leftmost():
    proxies = TrustedProxies()
    assert proxies.validate_header("1.1.1.1, 2.2.2.2") == "1.1.1.1"


def test_validate_header_stops_at_untrusted():
    proxies = TrustedProxies(["2.2.2.2"])
    assert proxies.validate_header("1.1.1.1, 2.2.2.2") == "1.1.1.1"
    assert proxies.validate_header("1.1.1.1, 3.3.3.3") == "3.3.3.3"


def test_validate_header_invalid():
    proxies = TrustedProxies()
    assert proxies.validate_header("") is None
    assert proxies.validate_header("1.1.1.1, garbage") is None


def test_validate_header_single_entry():
    proxies = TrustedProxies(None)
    assert proxies.validate_header(" 20.20.20.20 ") == "20.20.20.20"