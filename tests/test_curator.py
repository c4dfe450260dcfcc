import asyncio
import random

from word_tris.game.curator import WordSetCurator
from word_tris.lexicon import Lexicon, MemoryAssetLoader
from word_tris.lexicon.fallback import COMMON_SYLLABLES, DEMO_WORDS

WORDS = [f"{s}나무" for s in "가나다라마바사아자차카타파하개내대래매배새애재채캐태패해거너"]


def _curator(seed: int = 1) -> WordSetCurator:
    lexicon = Lexicon(MemoryAssetLoader(WORDS))
    asyncio.run(lexicon.warm())
    return WordSetCurator(lexicon, random.Random(seed))


def test_initial_selection():
    curator = _curator()
    active = curator.select_initial()
    assert len(active) == 10
    assert len(set(active)) == 10
    assert set(active) <= set(WORDS)
    assert all(count == 0 for count in curator.usage_counts.values())
    letters = {ch for word in active for ch in word}
    assert curator.available_letters == letters


def test_replenishes_when_seventy_percent_used():
    curator = _curator()
    initial = curator.select_initial()
    for word in initial[:6]:
        assert curator.record_usage(word) is False
    assert len(curator.active_words) == 10
    assert curator.record_usage(initial[6]) is True
    active = curator.active_words
    assert len(active) == 20
    assert active[:10] == initial
    assert all(curator.usage_counts[w] == 0 for w in active[10:])


def test_oldest_words_evicted_past_twenty():
    curator = _curator()
    initial = curator.select_initial()
    for word in initial[:7]:
        curator.record_usage(word)
    grew = False
    for word in curator.active_words:
        if curator.record_usage(word):
            grew = True
            break
    assert grew
    active = curator.active_words
    assert len(active) == 20
    assert not set(initial) & set(active)


def test_unknown_word_is_ignored():
    curator = _curator()
    curator.select_initial()
    assert curator.record_usage("없는말") is False
    assert "없는말" not in curator.usage_counts


def test_sampled_letters_come_from_active_words():
    curator = _curator(seed=4)
    active = curator.select_initial()
    allowed = {ch for word in active for ch in word} | set(COMMON_SYLLABLES[:10])
    for _ in range(40):
        assert curator.sample_letter() in allowed
        assert curator.available_letters


def test_small_word_set_is_topped_up_with_common_syllables():
    lexicon = Lexicon(MemoryAssetLoader(["가나다"]))
    asyncio.run(lexicon.warm())
    curator = WordSetCurator(lexicon, random.Random(0))
    assert curator.select_initial() == ["가나다"]
    assert curator.available_letters == set(COMMON_SYLLABLES[:10])


def test_empty_lexicon_uses_demonstration_words():
    curator = WordSetCurator(Lexicon(fallback_words=()), random.Random(0))
    assert curator.select_initial() == list(DEMO_WORDS)
    assert curator.sample_letter()
