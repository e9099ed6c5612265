from logsearcher.lines import (
    LineClassifier,
    build_exclusion_pattern,
    decode_line,
    extract_address,
)


def test_decode_line_percent_and_plus():
    assert decode_line("GET /search?q=a%2Fb+c") == "GET /search?q=a/b c"
    assert decode_line("q=%C3%A4") == "q=ä"


def test_decode_line_is_permissive():
    # malformed escapes stay, invalid UTF-8 bytes are dropped
    assert decode_line("100%zz done") == "100%zz done"
    assert decode_line("a%ffb") == "ab"
    assert decode_line("trailing %") == "trailing %"


def test_default_classifier_skips_static_assets():
    classifier = LineClassifier()

    assert classifier.is_eligible("10.0.0.1 GET /index.html")
    assert not classifier.is_eligible("10.0.0.1 GET /logo.png")
    assert not classifier.is_eligible("10.0.0.1 GET /style.css?v=2")
    assert not classifier.is_eligible("10.0.0.1 GET /feed.rss")
    assert not classifier.is_eligible("10.0.0.1 GET /app.js HTTP/1.1")


def test_simple_classifier_has_smaller_exclusion_set_and_no_decoding():
    classifier = LineClassifier.simple()

    assert not classifier.decode
    assert classifier.is_eligible("GET /app.js")
    assert classifier.is_eligible("GET /feed.rss")
    assert not classifier.is_eligible("GET /logo.png")
    assert classifier.prepare("GET /a%20b") == "GET /a%20b"


def test_prepare_classifies_decoded_line():
    line = "10.0.0.1 GET /logo%2Epng"

    assert LineClassifier().prepare(line) is None
    assert LineClassifier(decode=False).prepare(line) == line
    assert LineClassifier().prepare("10.0.0.1 GET /a%20b") == "10.0.0.1 GET /a b"


def test_empty_exclusion_set_accepts_everything():
    assert build_exclusion_pattern([]) is None
    assert LineClassifier(excluded_extensions=[]).is_eligible("GET /logo.png")


def test_exclusion_extensions_accept_leading_dot():
    classifier = LineClassifier(excluded_extensions=[".gif"])

    assert classifier.excluded_extensions == (".gif",)
    assert not classifier.is_eligible("GET /spinner.gif")
    assert classifier.is_eligible("GET /logo.png")


def test_extract_address():
    assert extract_address("10.0.0.1 GET /") == "10.0.0.1"
    assert extract_address("192.168.1.20\t- - [01/Jan/2024]") == "192.168.1.20"
    # no range or length validation
    assert extract_address("1.2.3.4.5 GET /") == "1.2.3.4.5"
    assert extract_address("999.1 GET /") == "999.1"


def test_extract_address_requires_dotted_digits_at_line_start():
    assert extract_address("- 10.0.0.1 GET /") is None
    assert extract_address("localhost GET /") is None
    assert extract_address("10 GET /") is None
    assert extract_address("10.0.0.1") is None
