import random
from collections import Counter

from app.services.games.deck import Tile, build_deck


SYMBOLS = ['🍒', '🍋', '🍇', '🍉', '🥝', '🍑', '🍓', '🍍']


def test_two_tiles_per_symbol():
    for n in range(1, len(SYMBOLS) + 1):
        deck = build_deck(SYMBOLS[:n])
        assert len(deck) == 2 * n
        counts = Counter(t.symbol for t in deck)
        assert set(counts) == set(SYMBOLS[:n])
        assert all(c == 2 for c in counts.values())


def test_ids_are_unique():
    deck = build_deck(SYMBOLS)
    assert len({t.id for t in deck}) == len(deck)


def test_seeded_source_is_reproducible():
    first = build_deck(SYMBOLS, random.Random(42))
    second = build_deck(SYMBOLS, random.Random(42))
    assert first == second


def test_unseeded_orders_differ():
    orders = {tuple(t.symbol for t in build_deck(SYMBOLS)) for _ in range(5)}
    assert len(orders) > 1


def test_duplicate_symbols_collapse():
    deck = build_deck(['A', 'A', 'B'], random.Random(1))
    assert Counter(t.symbol for t in deck) == {'A': 2, 'B': 2}


def test_empty_symbol_set_gives_empty_deck():
    assert build_deck([]) == []


def test_face_down_tile_hides_symbol():
    tile = Tile(id='t1', symbol='A')
    assert tile.to_dict(face_up=False) == {'id': 't1', 'symbol': None}
    assert tile.to_dict()['symbol'] == 'A'
