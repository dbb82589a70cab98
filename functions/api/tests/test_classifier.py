import pytest

from api.classifier import QueryIntent, classify_query, is_weather_query, needs_search
from api.config import SearchPolicy


@pytest.mark.parametrize("prompt", [
    "İstanbul'da hava durumu nasıl?",
    "Bugün HAVA nasıl olacak",
    "Erfurt'ta sıcaklık kaç derece?",
    "Yarın yağmur yağacak mı?",
    "Rüzgar çok sert mi?",
    "Kar yağıyor mu?",
    "What's the weather like in Berlin?",
    "Will it snow tomorrow?",
    "Is it windy in Hamburg?",
    "Yarın hava bulutlu mu?",
])
def test_weather_prompts(prompt):
    assert classify_query(prompt) == QueryIntent.WEATHER


@pytest.mark.parametrize("prompt", [
    "Karar vermeme yardım et",
    "sunucu kuruldu",
    "Havalimanına nasıl giderim?",
    "Windows 11 nedir?",
    "Cloudflare nedir?",
    "Snowflake kimin şirketi?",
    "Bulut bilişim nedir?",
    "Rainbow Six oyunu",
])
def test_weather_words_need_word_boundaries(prompt):
    assert not is_weather_query(prompt)


@pytest.mark.parametrize("prompt", [
    "Kimdir Mustafa Kemal Atatürk?",
    "Löwentech nedir?",
    "who founded the company",
    "Bana yapay zekayı anlat",
    "tell me about quantum computing",
    "bugünkü haberler",
    "2024 seçim sonuçları",
    "şirketin BMW ile ortaklığı",
    "bana biraz Löwentech'ten bahset",
    "Windows 11 nedir?",
    "Cloudflare nedir?",
    "Snowflake kimin şirketi?",
    "Bulut bilişim nedir?",
])
def test_search_prompts(prompt):
    assert classify_query(prompt) == QueryIntent.SEARCH


@pytest.mark.parametrize("prompt", [
    "merhaba",
    "teşekkürler, görüşürüz",
    "selam dostum",
])
def test_plain_prompts(prompt):
    assert classify_query(prompt) == QueryIntent.NONE


def test_first_word_capitalization_is_not_a_proper_noun():
    assert not needs_search("Merhaba dostum")


def test_always_policy_searches_everything():
    assert classify_query("merhaba", SearchPolicy.ALWAYS) == QueryIntent.SEARCH


def test_never_policy_disables_search():
    assert classify_query("Kimdir Mustafa Kemal Atatürk?", SearchPolicy.NEVER) == QueryIntent.NONE


def test_weather_wins_over_policy():
    assert classify_query("hava nasıl", SearchPolicy.NEVER) == QueryIntent.WEATHER
    assert classify_query("hava nasıl", SearchPolicy.ALWAYS) == QueryIntent.WEATHER
