from condeval.network import EmailAddress, ip_matches, normalize_patterns


def test_normalize_patterns():
    assert normalize_patterns([" 10.0.0.1 ", "", "  "]) == ["10.0.0.1"]
    assert normalize_patterns("10.0.0.1") == ["10.0.0.1"]
    assert normalize_patterns(None) == []


def test_ip_exact_cidr_and_wildcard():
    assert ip_matches("203.0.113.7", ["203.0.113.7"]) is True
    assert ip_matches("192.168.1.55", ["192.168.1.0/24"]) is True
    assert ip_matches("192.168.2.55", ["192.168.1.0/24"]) is False
    assert ip_matches("10.0.0.9", ["10.0.0.*"]) is True
    assert ip_matches("10.0.1.5", ["10.0.0.*"]) is False
    assert ip_matches("172.16.4.2", ["172.16.*"]) is True
    assert ip_matches("10.9.0.1", ["10.*.0.1"]) is True


def test_wildcard_longer_than_address_never_matches():
    assert ip_matches("10.0.0.5", ["10.0.0.5.*"]) is False
    assert ip_matches("10.0.0.5", ["10.0.0.*.*"]) is False
    assert ip_matches("2001:db8::1", ["2001:db8:0:0:0:0:0:1:*"]) is False


def test_ipv6_patterns():
    assert ip_matches("2001:db8::1", ["2001:db8::/32"]) is True
    assert ip_matches("2001:db8::1", ["2001:0db8:0000:0000:0000:0000:0000:0001"]) is True
    assert ip_matches("2001:db8::1", ["2001:db8:*"]) is True
    assert ip_matches("2001:db8::1", ["10.0.0.0/8"]) is False


def test_ip_bad_input_never_matches():
    assert ip_matches("garbage", ["0.0.0.0/0"]) is False
    assert ip_matches("10.0.0.1", ["10.0.0.0/99", "not-an-ip"]) is False
    assert ip_matches("10.0.0.1", ["10.0.0.0/99", "10.0.0.1"]) is True


def test_email_parse():
    email = EmailAddress.parse(" Jane.Doe@Example.COM ")
    assert email == EmailAddress(local="jane.doe", domain="example.com")
    assert email.address == "jane.doe@example.com"
    assert EmailAddress.parse("no-at-sign") is None
    assert EmailAddress.parse("a@localhost") is None
    assert EmailAddress.parse(None) is None


def test_email_pattern_kinds():
    email = EmailAddress.parse("bob@shop.example.co.uk")
    assert email.matches("BOB@shop.example.co.uk") is True
    assert email.matches("@shop.example.co.uk") is True
    assert email.matches("@example.co.uk") is False
    assert email.matches(".uk") is True
    assert email.matches("example") is True
    assert email.matches("") is False
    assert email.matches_any(["@other.io", ".co.uk"]) is True
