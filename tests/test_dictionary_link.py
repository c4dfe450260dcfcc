from word_tris import dictionary_link


def test_definition_url_quotes_word():
    assert dictionary_link.definition_url("사과") == (
        "https://stdict.korean.go.kr/search/searchResult.do?searchKeyword=%EC%82%AC%EA%B3%BC"
    )


def test_open_definition_uses_browser(monkeypatch):
    opened = []
    monkeypatch.setattr(dictionary_link.webbrowser, "open", lambda url: opened.append(url) or True)
    assert dictionary_link.open_definition(" 사과 ")
    assert opened == [dictionary_link.definition_url("사과")]
